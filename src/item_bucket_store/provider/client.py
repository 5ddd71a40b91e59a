"""Item providers: the only source of items inserted into the store.

A provider hands out one freshly built :class:`Item` per call to
:meth:`ItemProvider.fetch_item`.  Without an identifier it returns an
arbitrary item; with one it returns that item or fails.  Any failure is
reported as :class:`ProviderError`; the store never catches it.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, Iterable, List, NoReturn, Optional, Tuple

from ..audit_logger import get_audit_logger
from ..errors import ProviderError
from ..models import Item

CatalogEntry = Tuple[str, int, str]

_log = get_audit_logger()

# Colour names, each with a numeric code and a time-of-day stamp.
DEFAULT_CATALOG: List[CatalogEntry] = [
    ("Absolute Zero", 1234567, "09:12:41"),
    ("Alice Blue", 3956441, "10:03:17"),
    ("Amber Gold", 2281935, "11:47:05"),
    ("Baby Pink", 4412078, "08:30:55"),
    ("Banana Yellow", 1190342, "14:21:09"),
    ("Blue Violet", 5521003, "16:02:38"),
    ("Burnt Orange", 2013667, "07:58:12"),
    ("Cafe Noir", 3008812, "12:14:26"),
    ("Cadet Grey", 4732290, "13:40:33"),
    ("Celtic Blue", 1579924, "15:55:01"),
    ("Dark Orchid", 6620157, "09:09:09"),
    ("Desert Sand", 2384110, "17:25:48"),
    ("Electric Lime", 3391846, "18:11:02"),
    ("Fern Green", 4106635, "06:44:19"),
    ("Forest Green", 5218741, "19:37:50"),
    ("Golden Brown", 1846520, "20:05:14"),
    ("Hunter Green", 2950073, "21:16:29"),
    ("Indian Red", 3671208, "22:48:36"),
    ("Lemon Chiffon", 4485519, "05:33:40"),
    ("Midnight Blue", 5793364, "23:59:59"),
    ("Navy Blue", 1327786, "04:27:03"),
    ("Olive Drab", 2669031, "03:18:57"),
    ("Persian Green", 3815492, "02:06:21"),
    ("Royal Purple", 4950387, "01:52:44"),
    ("Sea Green", 6138205, "00:41:13"),
    ("Tiffany Blue", 1708849, "12:00:00"),
    ("Tiger Eye", 2547716, "10:10:10"),
    ("Ultra Pink", 3329058, "11:11:11"),
    ("Vivid Violet", 4071673, "13:13:13"),
    ("Wild Strawberry", 5362094, "14:14:14"),
    ("Yale Blue", 6483512, "15:15:15"),
    ("Zinnwaldite Brown", 1974630, "16:16:16"),
]


@dataclass
class ProviderConfig:
    """Configuration for :class:`InMemoryItemProvider`.

    Parameters
    ----------
    seed : int, optional
        Seed for the random choice made when no identifier is given.
    max_fetches : int
        Maximum number of successful fetches before the provider reports
        itself exhausted.  ``0`` means unlimited.
    """

    seed: Optional[int] = None
    max_fetches: int = 0


class ItemProvider:
    """Base class for item providers."""

    def fetch_item(self, identifier: Optional[str] = None) -> Item:
        """Return a new item, random if *identifier* is ``None``.

        Raises
        ------
        ProviderError
            If no matching item exists or the provider is unavailable.
        """
        raise NotImplementedError


class InMemoryItemProvider(ItemProvider):
    """Serves items from an in-memory catalog.

    Parameters
    ----------
    catalog : iterable of (identifier, code, timestamp), optional
        Items the provider knows about.  Defaults to :data:`DEFAULT_CATALOG`.
        Later duplicates of an identifier replace earlier ones.
    config : ProviderConfig, optional
        Seed and fetch cap.
    """

    def __init__(
        self,
        catalog: Optional[Iterable[CatalogEntry]] = None,
        config: Optional[ProviderConfig] = None,
    ) -> None:
        self._config = config or ProviderConfig()
        self._catalog: Dict[str, CatalogEntry] = {}
        for entry in DEFAULT_CATALOG if catalog is None else catalog:
            self._catalog[entry[0]] = entry
        self._random = random.Random(self._config.seed)
        self._fetches = 0

    def fetch_item(self, identifier: Optional[str] = None) -> Item:
        if self._config.max_fetches > 0 and self._fetches >= self._config.max_fetches:
            self._fail("provider_exhausted", identifier)

        if identifier is None:
            if not self._catalog:
                self._fail("catalog_empty", identifier)
            entry = self._random.choice(list(self._catalog.values()))
        else:
            entry = self._catalog.get(identifier)
            if entry is None:
                self._fail("unknown_identifier", identifier)

        self._fetches += 1
        item = Item(identifier=entry[0], code=entry[1], timestamp=entry[2])
        _log.log_event("item_fetched", identifier=item.identifier, requested=identifier)
        return item

    def _fail(self, reason: str, identifier: Optional[str]) -> NoReturn:
        _log.log_event("item_fetch_failed", identifier=identifier, reason=reason)
        raise ProviderError(f"Failed to retrieve item from provider ({reason}): {identifier!r}")

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------

    @property
    def identifiers(self) -> List[str]:
        """Return every identifier in the catalog, sorted."""
        return sorted(self._catalog)

    @property
    def fetch_count(self) -> int:
        """Return the number of successful fetches so far."""
        return self._fetches
