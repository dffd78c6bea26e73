"""Command-line interface for OutfitMatch.

Usage:
    python -m outfitmatch.cli import-catalog data/catalog.csv
    python -m outfitmatch.cli recommend outfits.json --threshold 0.6 --limit 8
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import List, Optional

from outfitmatch.catalog import load_catalog_csv
from outfitmatch.core.use_cases.get_recommendations import RecommendationResult
from outfitmatch.service_factory import build_catalog_repository, build_recommendation_service
from outfitmatch.utils import AppConfig, get_logger, load_config, log_execution_time, set_log_level
from outfitmatch.utils.exceptions import (
    AppException,
    CatalogImportError,
    ConfigFileNotFoundError,
    ConfigurationError,
)

logger = get_logger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog="outfitmatch",
        description="Embedding-based outfit to catalog recommendations",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Load a catalog export into the configured store
  python -m outfitmatch.cli import-catalog data/catalog.csv

  # Recommend from a JSON list of outfit embeddings
  python -m outfitmatch.cli recommend outfits.json --limit 5

  # In-memory store: load the catalog and recommend in one go
  python -m outfitmatch.cli recommend outfits.json --catalog data/catalog.csv
        """
    )

    parser.add_argument(
        '--config',
        type=Path,
        default=None,
        help='Path to configuration file (default: auto-detect)'
    )

    parser.add_argument(
        '--log-level',
        type=str,
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default=None,
        help='Override log level'
    )

    subparsers = parser.add_subparsers(dest='command', required=True)

    import_parser = subparsers.add_parser('import-catalog', help='Import catalog items from a CSV file')
    import_parser.add_argument('csv_path', type=Path, help='Catalog CSV file')
    import_parser.add_argument(
        '--strict',
        action='store_true',
        help='Abort on the first invalid row instead of skipping it'
    )

    recommend_parser = subparsers.add_parser('recommend', help='Recommend items for outfit embeddings')
    recommend_parser.add_argument('embeddings_json', type=Path, help='JSON file with a list of embeddings')
    recommend_parser.add_argument('--threshold', type=float, default=None, help='Minimum similarity in [0, 1]')
    recommend_parser.add_argument('--limit', type=int, default=None, help='Maximum number of items')
    recommend_parser.add_argument(
        '--catalog',
        type=Path,
        default=None,
        help='Catalog CSV to load into the store before ranking'
    )

    return parser.parse_args(argv)


def _load_app_config(config_path: Optional[Path]) -> AppConfig:
    try:
        return load_config(config_path)
    except ConfigFileNotFoundError:
        if config_path is not None:
            raise
        logger.warning("No config/config.yaml found; using default configuration")
        return AppConfig()


def _import_catalog(repository, csv_path: Path, config: AppConfig, strict: bool = False):
    report = load_catalog_csv(csv_path, expected_dim=config.recommendation.embedding_dim, strict=strict)

    unembedded = report.missing_embeddings
    if unembedded:
        names = ", ".join(item.name for item in unembedded[:5])
        raise CatalogImportError(
            f"{len(unembedded)} item(s) have no embedding ({names})",
            path=str(csv_path),
        )

    repository.add_items(report.items)
    return report


def _read_embeddings(path: Path) -> list:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON list of embeddings")
    return data


def _print_result(result: RecommendationResult) -> None:
    print("\n" + "=" * 60)
    print("RECOMMENDATIONS" + (" (fallback)" if result.used_fallback else ""))
    print("=" * 60)
    print(result.message)
    if result.fallback_reason is not None:
        print(f"Reason: {result.fallback_reason.value}")
    if result.profile is not None:
        print(f"Profile built from {result.profile.source_count} embedding(s), "
              f"{result.profile.skipped_count} skipped")

    for i, entry in enumerate(result.items, 1):
        score = f"{entry.score:.4f}" if entry.score is not None else "-"
        print(f"  {i:2d}. [{score}] {entry.item.brand} {entry.item.name} ({entry.item.id})")
    print("=" * 60)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    args = parse_args(argv)

    try:
        config = _load_app_config(args.config)
        set_log_level(logger, args.log_level or config.log_level)

        if args.command == 'import-catalog':
            if config.database.backend == 'memory':
                raise ConfigurationError(
                    "import-catalog needs a persistent backend (chroma or supabase); "
                    "the memory store is discarded when the command exits",
                    context={"backend": config.database.backend},
                )
            repository = build_catalog_repository(config)
            with log_execution_time(logger, "catalog import"):
                report = _import_catalog(repository, args.csv_path, config, strict=args.strict)

            print("\n" + "=" * 60)
            print("IMPORT SUMMARY")
            print("=" * 60)
            print(f"Imported: {report.success_count}")
            print(f"Skipped: {report.failed_count}")
            for error in report.errors:
                print(f"  - {error}")
            print(f"Store now holds {await repository.count()} items")
            print("=" * 60)
            return 0

        service = build_recommendation_service(config)
        if args.catalog is not None:
            _import_catalog(service.catalog_repository, args.catalog, config)

        embeddings = _read_embeddings(args.embeddings_json)
        result = await service.recommend(embeddings, threshold=args.threshold, limit=args.limit)
        _print_result(result)
        return 0

    except KeyboardInterrupt:
        logger.warning("Interrupted by user")
        print("\n✗ Cancelled by user")
        return 1

    except (AppException, OSError, ValueError) as e:
        logger.error(f"Command failed: {e}", exc_info=True)
        print(f"\n✗ {args.command} failed: {e}")
        return 1


def run() -> None:
    """Console-script entry point."""
    sys.exit(asyncio.run(main()))


if __name__ == '__main__':
    run()
