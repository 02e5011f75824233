# Infrastructure Catalog Adapters Package
from .file_catalog import FileItemCatalog, InMemoryItemCatalog

__all__ = ["FileItemCatalog", "InMemoryItemCatalog"]
