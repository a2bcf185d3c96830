from .catalog import CatalogClient, CatalogItem

__all__ = ["CatalogClient", "CatalogItem"]
