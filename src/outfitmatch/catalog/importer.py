"""CSV catalog import.

Reads product rows exported from a merchant feed::

    id,brand,name,category,price_range,image_url,style_tags,colors,in_stock,product_url,embedding
    sku-1,Nike,Air Max 90,shoes,$$,https://...,casual;athletic,white;red,true,,"[0.01,...]"

Only ``brand``, ``name`` and ``image_url`` are required. List columns are
semicolon separated and ``embedding`` holds a serialized vector. Rows
without an embedding can be embedded afterwards with ``embed_missing``.
"""

import csv
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from outfitmatch.core.embedding_parser import parse_embedding
from outfitmatch.core.embedding_text import build_catalog_embedding_text
from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.entities.embedding import Embedding, EmbeddingSource
from outfitmatch.domain.interfaces.embedding_provider_interface import EmbeddingProviderInterface
from outfitmatch.infrastructure.database.models import split_list
from outfitmatch.utils.exceptions import CatalogImportError, EmbeddingError
from outfitmatch.utils.logger import get_logger

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("brand", "name", "image_url")

_TRUE_VALUES = {"true", "1", "yes", "y"}
_FALSE_VALUES = {"false", "0", "no", "n"}


@dataclass
class CatalogImportReport:
    """Items parsed from a CSV and the rows that were skipped."""

    items: List[CatalogItem] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.items)

    @property
    def failed_count(self) -> int:
        return len(self.errors)

    @property
    def missing_embeddings(self) -> List[CatalogItem]:
        return [item for item in self.items if item.embedding is None]


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if not normalized or normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"in_stock must be true/false, got {value!r}")


def _derive_id(brand: str, name: str) -> str:
    # Stable across re-imports of the same feed
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"{brand.strip().lower()}|{name.strip().lower()}"))


def _row_to_item(row: dict, expected_dim: Optional[int]) -> CatalogItem:
    missing = [column for column in REQUIRED_COLUMNS if not (row.get(column) or "").strip()]
    if missing:
        raise ValueError(f"missing required value(s): {', '.join(missing)}")

    brand = row["brand"].strip()
    name = row["name"].strip()

    embedding = None
    raw_embedding = (row.get("embedding") or "").strip()
    if raw_embedding:
        vector = parse_embedding(raw_embedding, expected_dim=expected_dim)
        embedding = Embedding.from_list(vector.tolist(), EmbeddingSource.CATALOG_ITEM)

    return CatalogItem(
        id=(row.get("id") or "").strip() or _derive_id(brand, name),
        name=name,
        brand=brand,
        category=(row.get("category") or "").strip() or None,
        price_range=(row.get("price_range") or "").strip() or None,
        image_url=row["image_url"].strip(),
        description=(row.get("description") or "").strip() or None,
        style_tags=split_list(row.get("style_tags") or ""),
        colors=split_list(row.get("colors") or ""),
        in_stock=_parse_bool(row.get("in_stock") or ""),
        product_url=(row.get("product_url") or "").strip() or None,
        embedding=embedding,
    )


def load_catalog_csv(
    path: Path | str,
    expected_dim: Optional[int] = None,
    strict: bool = False,
) -> CatalogImportReport:
    """
    Parse a catalog CSV file into CatalogItems.

    Args:
        path: CSV file to read.
        expected_dim: Required embedding dimension, if known.
        strict: Raise on the first bad row instead of skipping it.

    Returns:
        CatalogImportReport with parsed items and per-row errors.

    Raises:
        CatalogImportError: If the file is missing, has no header with the
            required columns, or (in strict mode) a row is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise CatalogImportError(f"Catalog file not found: {path}", path=str(path))

    report = CatalogImportReport()
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.DictReader(f)
        header = [column.strip() for column in reader.fieldnames or []]
        absent = [column for column in REQUIRED_COLUMNS if column not in header]
        if absent:
            raise CatalogImportError(
                f"Catalog file is missing column(s): {', '.join(absent)}",
                path=str(path),
            )

        # Row numbers count the header as line 1
        for line_number, raw in enumerate(reader, start=2):
            row = {(key or "").strip(): value for key, value in raw.items()}
            try:
                report.items.append(_row_to_item(row, expected_dim))
            except (ValueError, EmbeddingError) as e:
                message = f"Row {line_number} ({row.get('name') or 'unnamed'}): {e}"
                if strict:
                    raise CatalogImportError(message, path=str(path), row=line_number) from e
                logger.warning(f"Skipping catalog row: {message}")
                report.errors.append(message)

    logger.info(
        f"Parsed {report.success_count} catalog items from {path.name} "
        f"({report.failed_count} skipped, {len(report.missing_embeddings)} without embedding)"
    )
    return report


async def embed_missing(
    items: List[CatalogItem],
    provider: EmbeddingProviderInterface,
) -> List[str]:
    """
    Fill in embeddings for items imported without one.

    Each item is embedded once from its catalog text. Failures are
    collected and the item keeps ``embedding=None``.

    Returns:
        Error messages for items that could not be embedded.
    """
    errors = []
    for item in items:
        if item.embedding is not None:
            continue
        try:
            vector = await provider.embed_text(build_catalog_embedding_text(item))
            parsed = parse_embedding(vector, expected_dim=provider.embedding_dim)
            item.embedding = Embedding.from_list(parsed.tolist(), EmbeddingSource.CATALOG_ITEM)
        except Exception as e:
            message = f"Failed to embed \"{item.name}\": {e}"
            logger.error(message)
            errors.append(message)
    return errors
