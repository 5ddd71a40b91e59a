"""Example: fill a store from the provider, then look up and remove items."""

import sys

from item_bucket_store import (
    BucketedItemStore,
    DuplicateIdentifier,
    InMemoryItemProvider,
    ItemNotFound,
    ProviderConfig,
    ProviderError,
    StoreConfig,
)

provider = InMemoryItemProvider(config=ProviderConfig(seed=2024))
store = BucketedItemStore(StoreConfig(log_events=False))

# Fetch random items; the provider may hand out the same one twice.
for _ in range(15):
    try:
        store.insert(provider.fetch_item())
    except DuplicateIdentifier as exc:
        print(f"skipped: {exc}")

# A specific item, and one the provider does not know.
for identifier in ("Cafe Noir", "Dark Chocolate"):
    try:
        store.insert(provider.fetch_item(identifier))
    except (DuplicateIdentifier, ProviderError) as exc:
        print(f"skipped: {exc}")

print(f"\n{store.count()} item(s) stored:")
store.write_to(sys.stdout)

item = store.find("Cafe Noir")
print(f"\nCafe Noir -> code {item.code}, time {item.timestamp}")

store.remove("Cafe Noir")
try:
    store.remove("Cafe Noir")
except ItemNotFound as exc:
    print(f"second remove failed: {exc}")

print(f"\nSummary: {store.summary()}")
