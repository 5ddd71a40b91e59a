"""Exception hierarchy for the bucketed item store."""

from __future__ import annotations

from typing import Optional


class ItemStoreError(Exception):
    """Base class for every error raised by this package."""


class InvalidIdentifier(ItemStoreError, ValueError):
    """The identifier is not of the form ``"<Word> <Word>"`` with A-Z initials."""

    def __init__(self, identifier: Optional[str]) -> None:
        super().__init__(f"Invalid identifier: {identifier!r}")
        self.identifier = identifier


class DuplicateIdentifier(ItemStoreError):
    """An item with the same identifier is already stored."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Item already exists: {identifier!r}")
        self.identifier = identifier


class ItemNotFound(ItemStoreError, LookupError):
    """No stored item has the given identifier."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Item not found: {identifier!r}")
        self.identifier = identifier


class ProviderError(ItemStoreError):
    """The item provider could not supply the requested item."""
