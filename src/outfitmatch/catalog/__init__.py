"""Catalog ingestion."""

from .importer import CatalogImportReport, embed_missing, load_catalog_csv

__all__ = ["CatalogImportReport", "embed_missing", "load_catalog_csv"]
