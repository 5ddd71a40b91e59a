"""Two-level bucketed container for :class:`~item_bucket_store.models.Item`.

Items are addressed by their identifier (``"FirstWord SecondWord"``):

- Level 1: a dict keyed by the first letter of the first word (``A``-``Z``).
- Level 2: a list of 26 chains per bucket, indexed by the first letter of
  the second word (``A`` = 0 ... ``Z`` = 25).

``"Cafe Noir"`` therefore lives in ``buckets["C"][13]``.

Each chain keeps its most recently inserted item first.  Buckets and chains
are created on first insert and are never pruned, even once empty.

The store is not thread-safe; callers sharing one across threads must
serialize access themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, TextIO

from .audit_logger import get_audit_logger
from .errors import DuplicateIdentifier, InvalidIdentifier, ItemNotFound
from .identifier import CHAINS_PER_BUCKET, Address, parse_identifier, try_parse_identifier
from .models import Item

Bucket = List[List[Item]]

_log = get_audit_logger()


@dataclass
class StoreConfig:
    """Configuration for :class:`BucketedItemStore`.

    Parameters
    ----------
    log_events : bool
        When *True* (default), inserts and removals (successful or
        rejected) are written to the audit log.
    """

    log_events: bool = True


def _new_bucket() -> Bucket:
    return [[] for _ in range(CHAINS_PER_BUCKET)]


def _index_of(chain: List[Item], identifier: str) -> int:
    for i, item in enumerate(chain):
        if item.identifier == identifier:
            return i
    return -1


class BucketedItemStore:
    """Stores items with globally unique identifiers in a two-level index.

    Parameters
    ----------
    config : StoreConfig, optional
        Store configuration.  Defaults to logging every mutation.
    """

    def __init__(self, config: Optional[StoreConfig] = None) -> None:
        self._config = config or StoreConfig()
        self._buckets: Dict[str, Bucket] = {}

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def count(self) -> int:
        """Return the total number of stored items."""
        return sum(len(chain) for bucket in self._buckets.values() for chain in bucket)

    def __len__(self) -> int:
        return self.count()

    def find(self, identifier: Optional[str]) -> Optional[Item]:
        """Return the stored item with *identifier*, or ``None``.

        A malformed identifier is reported as ``None`` too, since no chain
        can exist for it.  The returned item is the stored instance and is
        only valid until the next insert or remove.
        """
        address = try_parse_identifier(identifier)
        if address is None:
            return None

        bucket = self._buckets.get(address.first_level_key)
        if bucket is None:
            return None

        chain = bucket[address.second_level_key]
        i = _index_of(chain, identifier)
        return chain[i] if i >= 0 else None

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.find(identifier) is not None

    def enumerate(self) -> Iterator[Item]:
        """Yield every item in address order.

        Buckets are visited by ascending first letter, chains by ascending
        index, and each chain front to back (newest first).  The iterator
        reads live storage: copy it (``list(store.enumerate())``) before
        mutating the store.
        """
        for key in sorted(self._buckets):
            for chain in self._buckets[key]:
                yield from chain

    def __iter__(self) -> Iterator[Item]:
        return self.enumerate()

    def bucket_keys(self) -> List[str]:
        """Return the first-level keys currently present, ascending."""
        return sorted(self._buckets)

    def chain(self, address: Address) -> List[Item]:
        """Return a snapshot of the chain at *address* (empty if absent)."""
        bucket = self._buckets.get(address.first_level_key)
        if bucket is None:
            return []
        return list(bucket[address.second_level_key])

    def summary(self) -> Dict[str, int]:
        """Return item, bucket and non-empty chain counts."""
        return {
            "total_items": self.count(),
            "buckets": len(self._buckets),
            "non_empty_chains": sum(
                1 for bucket in self._buckets.values() for chain in bucket if chain
            ),
        }

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, item: Item) -> None:
        """Store a copy of *item* at the front of its chain.

        Raises
        ------
        InvalidIdentifier
            If ``item.identifier`` is malformed.
        DuplicateIdentifier
            If an item with the same identifier is already stored.
        """
        try:
            address = parse_identifier(item.identifier)
        except InvalidIdentifier:
            self._log("item_insert_rejected", item.identifier, reason="invalid_identifier")
            raise

        bucket = self._buckets.get(address.first_level_key)
        chain = bucket[address.second_level_key] if bucket is not None else []
        if _index_of(chain, item.identifier) >= 0:
            self._log("item_insert_rejected", item.identifier, reason="duplicate_identifier")
            raise DuplicateIdentifier(item.identifier)

        if bucket is None:
            bucket = self._buckets[address.first_level_key] = _new_bucket()
        bucket[address.second_level_key].insert(0, item.copy())

        self._log(
            "item_inserted",
            item.identifier,
            bucket=address.first_level_key,
            chain=address.second_level_key,
        )

    def remove(self, identifier: Optional[str]) -> None:
        """Remove the item with *identifier*.

        Raises
        ------
        InvalidIdentifier
            If *identifier* is malformed.
        ItemNotFound
            If no stored item has *identifier*.
        """
        try:
            address = parse_identifier(identifier)
        except InvalidIdentifier:
            self._log("item_remove_rejected", identifier, reason="invalid_identifier")
            raise

        bucket = self._buckets.get(address.first_level_key)
        chain = bucket[address.second_level_key] if bucket is not None else []
        i = _index_of(chain, identifier)
        if i < 0:
            self._log("item_remove_rejected", identifier, reason="not_found")
            raise ItemNotFound(identifier)

        # Emptied chains and buckets are kept in place.
        del chain[i]

        self._log(
            "item_removed",
            identifier,
            bucket=address.first_level_key,
            chain=address.second_level_key,
        )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def render(self) -> str:
        """Return one identifier per line, in enumeration order."""
        return "".join(f"{item}\n" for item in self.enumerate())

    def write_to(self, stream: TextIO) -> None:
        """Write :meth:`render` output to *stream*."""
        for item in self.enumerate():
            stream.write(f"{item}\n")

    def _log(self, event: str, identifier: Optional[str], **fields) -> None:
        if self._config.log_events:
            _log.log_event(event, identifier=identifier, **fields)
