"""Data models for the item store."""

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional


@dataclass(eq=False)
class Item:
    """A single stored item.

    Identity is the identifier alone: two items compare equal when their
    identifiers are equal, whatever their code or timestamp.  Two items
    without an identifier are equal to each other.  Items are mutable and
    therefore unhashable.
    """

    identifier: Optional[str]
    code: int = 0
    timestamp: Optional[str] = None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self.identifier == other.identifier

    def __str__(self) -> str:
        return self.identifier if self.identifier is not None else "(null)"

    def copy(self) -> "Item":
        """Return an independent copy of this item."""
        return replace(self)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
