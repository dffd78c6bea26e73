"""ChromaDB catalog store.

Keeps catalog item embeddings in a single cosine-space collection with
the item attributes as metadata. ChromaDB's client is synchronous, so
every read used by the recommendation pipeline runs in a worker thread.

Example:
    >>> repo = ChromaCatalogRepository(config.database, embedding_dim=1536)
    >>> repo.add_items(items)
    >>> candidates = await repo.find_candidates(query, threshold=0.5, limit=12)
"""

import asyncio
import time
from pathlib import Path
from typing import Iterable, List, Optional

import chromadb
import numpy as np
from chromadb.config import Settings
from tqdm import tqdm

from outfitmatch.core.scoring.similarity import distance_to_similarity
from outfitmatch.domain.entities.catalog_item import CatalogItem
from outfitmatch.domain.interfaces.repository_interface import (
    CandidateMatch,
    CatalogRepositoryInterface,
)
from outfitmatch.utils.config import DatabaseConfig
from outfitmatch.utils.exceptions import CatalogError, DimensionMismatch
from outfitmatch.utils.logger import get_logger, log_exception, log_execution_time

from .models import BatchInsertResult, catalog_item_to_metadata, row_to_catalog_item

logger = get_logger(__name__)


class ChromaCatalogRepository(CatalogRepositoryInterface):
    """Catalog embeddings stored in a ChromaDB collection."""

    def __init__(
        self,
        config: DatabaseConfig,
        embedding_dim: Optional[int] = None,
    ):
        """Initialize the store and its collection.

        Args:
            config: Database configuration
            embedding_dim: Expected embedding dimension (None accepts the
                dimension of the first inserted item)
        """
        self.config = config
        self.embedding_dim = embedding_dim

        try:
            if config.persist_directory == ":memory:":
                self.client = chromadb.EphemeralClient(
                    settings=Settings(anonymized_telemetry=False, allow_reset=True)
                )
                logger.info("Initialized in-memory ChromaDB client")
            else:
                persist_dir = Path(config.persist_directory)
                persist_dir.mkdir(parents=True, exist_ok=True)
                self.client = chromadb.PersistentClient(
                    path=str(persist_dir),
                    settings=Settings(anonymized_telemetry=False, allow_reset=True),
                )
                logger.info(f"Initialized ChromaDB client at {persist_dir}")
        except Exception as e:
            raise CatalogError(f"Failed to initialize ChromaDB client: {e}") from e

        self.collection_name = config.collection_name

        try:
            self.collection = self.client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": config.distance_metric},
            )
            logger.info(
                f"Collection initialized: {self.collection_name} ({self.collection.count()} items)"
            )
        except Exception as e:
            raise CatalogError(f"Failed to create/access collection: {e}") from e

    def add_items(
        self,
        items: Iterable[CatalogItem],
        batch_size: Optional[int] = None,
    ) -> BatchInsertResult:
        """Add (or overwrite) catalog items with their embeddings.

        Args:
            items: CatalogItems carrying ingestion-time embeddings
            batch_size: Batch size for insertion (uses config default if None)

        Returns:
            BatchInsertResult with insertion statistics

        Raises:
            CatalogError: If an item has no embedding
            DimensionMismatch: If an embedding has the wrong dimension
        """
        items = list(items)
        if not items:
            return BatchInsertResult(success_count=0, failed_ids=[], total_time=0.0)

        batch_size = batch_size or self.config.batch_size
        start_time = time.time()

        for item in items:
            self._validate_item(item)

        ids = [item.id for item in items]
        embeddings = [item.embedding.to_list() for item in items]
        metadatas = [catalog_item_to_metadata(item) for item in items]

        failed_ids: List[str] = []
        num_batches = (len(ids) + batch_size - 1) // batch_size
        iterator = range(0, len(ids), batch_size)
        if num_batches > 1:
            iterator = tqdm(iterator, total=num_batches, desc=f"Inserting to {self.collection_name}")

        with log_execution_time(logger, f"batch insert of {len(items)} items"):
            for start_idx in iterator:
                end_idx = min(start_idx + batch_size, len(ids))
                try:
                    self.collection.upsert(
                        ids=ids[start_idx:end_idx],
                        embeddings=embeddings[start_idx:end_idx],
                        metadatas=metadatas[start_idx:end_idx],
                    )
                except Exception as e:
                    logger.error(f"Failed to insert batch {start_idx}-{end_idx}: {e}")
                    failed_ids.extend(ids[start_idx:end_idx])

        total_time = time.time() - start_time
        result = BatchInsertResult(
            success_count=len(items) - len(failed_ids),
            failed_ids=failed_ids,
            total_time=total_time,
        )
        logger.info(
            f"Batch insert complete: {result.success_count}/{len(items)} successful, "
            f"{len(failed_ids)} failed, {total_time:.2f}s"
        )
        return result

    def get_by_ids(self, item_ids: List[str]) -> List[CatalogItem]:
        """Retrieve catalog items by ID, skipping IDs that do not exist.

        Args:
            item_ids: Item IDs to retrieve

        Returns:
            Items in the order requested
        """
        if not item_ids:
            return []

        try:
            data = self.collection.get(ids=item_ids, include=['metadatas', 'embeddings'])
        except Exception as e:
            log_exception(logger, "get items by IDs", e)
            raise CatalogError(f"Failed to retrieve items: {e}") from e

        by_id = {
            item_id: row_to_catalog_item(item_id, data['metadatas'][i], data['embeddings'][i])
            for i, item_id in enumerate(data['ids'])
        }
        missing = [item_id for item_id in item_ids if item_id not in by_id]
        if missing:
            logger.warning(f"Skipping {len(missing)} missing items: {missing[:5]}")
        return [by_id[item_id] for item_id in item_ids if item_id in by_id]

    def delete_items(self, item_ids: List[str]) -> int:
        """Delete items and return how many were actually removed."""
        if not item_ids:
            return 0

        try:
            count_before = self.collection.count()
            self.collection.delete(ids=item_ids)
            deleted = count_before - self.collection.count()
        except Exception as e:
            log_exception(logger, f"delete {len(item_ids)} items", e)
            raise CatalogError(f"Failed to delete items: {e}") from e

        logger.info(f"Deleted {deleted} items")
        return deleted

    async def find_candidates(
        self,
        query: np.ndarray,
        threshold: float,
        limit: int,
    ) -> List[CandidateMatch]:
        return await asyncio.to_thread(self._query, np.asarray(query, dtype=np.float64))

    async def list_in_stock(self, limit: int) -> List[CatalogItem]:
        return await asyncio.to_thread(self._list_in_stock, limit)

    async def count(self) -> int:
        return await asyncio.to_thread(self.collection.count)

    def _query(self, query: np.ndarray) -> List[CandidateMatch]:
        # The whole collection is scored so ties at the limit are cut by the
        # ranker's (score, id) order rather than by HNSW traversal order.
        total = self.collection.count()
        if total == 0:
            return []

        results = self.collection.query(
            query_embeddings=[query.tolist()],
            n_results=total,
            include=['metadatas', 'distances', 'embeddings'],
        )

        ids = results['ids'][0]
        distances = results['distances'][0]
        metadatas = results['metadatas'][0]
        embeddings = results['embeddings'][0]

        return [
            CandidateMatch(
                item=row_to_catalog_item(item_id, metadatas[i], embeddings[i]),
                similarity=distance_to_similarity(float(distances[i])),
            )
            for i, item_id in enumerate(ids)
        ]

    def _list_in_stock(self, limit: int) -> List[CatalogItem]:
        # Only ids are scanned; metadata is read for the first ``limit`` ids.
        matching = self.collection.get(where={"in_stock": True}, include=[])
        selected = sorted(matching['ids'])[:limit]
        if not selected:
            return []

        data = self.collection.get(ids=selected, include=['metadatas'])
        by_id = dict(zip(data['ids'], data['metadatas']))
        return [row_to_catalog_item(item_id, by_id[item_id]) for item_id in selected if item_id in by_id]

    def _validate_item(self, item: CatalogItem) -> None:
        if item.embedding is None:
            raise CatalogError(f"Item {item.id} has no embedding", context={"item_id": item.id})

        if self.embedding_dim is None:
            self.embedding_dim = item.embedding.dimension
        elif item.embedding.dimension != self.embedding_dim:
            raise DimensionMismatch(
                f"Item {item.id} embedding has {item.embedding.dimension} dimensions, "
                f"expected {self.embedding_dim}",
                expected=self.embedding_dim,
                actual=item.embedding.dimension,
            )
