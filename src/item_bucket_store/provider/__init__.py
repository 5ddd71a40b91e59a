"""Item providers that supply records to the store."""

from .client import DEFAULT_CATALOG, InMemoryItemProvider, ItemProvider, ProviderConfig

__all__ = ["DEFAULT_CATALOG", "InMemoryItemProvider", "ItemProvider", "ProviderConfig"]
