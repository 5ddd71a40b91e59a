"""item-bucket-store: a two-level bucketed container for two-word keyed items."""

from .audit_logger import AuditLogger, get_audit_logger
from .errors import (
    DuplicateIdentifier,
    InvalidIdentifier,
    ItemNotFound,
    ItemStoreError,
    ProviderError,
)
from .identifier import Address, parse_identifier, try_parse_identifier
from .models import Item
from .provider import DEFAULT_CATALOG, InMemoryItemProvider, ItemProvider, ProviderConfig
from .store import BucketedItemStore, StoreConfig

__version__ = "0.1.0"
__all__ = [
    "Address",
    "AuditLogger",
    "BucketedItemStore",
    "DEFAULT_CATALOG",
    "DuplicateIdentifier",
    "InMemoryItemProvider",
    "InvalidIdentifier",
    "Item",
    "ItemNotFound",
    "ItemProvider",
    "ItemStoreError",
    "ProviderConfig",
    "ProviderError",
    "StoreConfig",
    "get_audit_logger",
    "parse_identifier",
    "try_parse_identifier",
]
