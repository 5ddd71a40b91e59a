"""Identifier parsing: ``"<FirstWord> <SecondWord>"`` -> bucket address.

Only two characters of an identifier take part in addressing:

* the first character, which must be an uppercase ``A``-``Z`` letter and
  selects the bucket (first-level key);
* the character right after the first space, which must also be ``A``-``Z``
  and selects one of the bucket's 26 chains (second-level key, ``A`` = 0).

Nothing else about either word is validated.

Example: ``"Cafe Noir"`` -> ``Address("C", 13)``.
"""

from __future__ import annotations

from typing import NamedTuple, Optional

from .errors import InvalidIdentifier

FIRST_LETTER = "A"
LAST_LETTER = "Z"
WORD_SEPARATOR = " "
CHAINS_PER_BUCKET = ord(LAST_LETTER) - ord(FIRST_LETTER) + 1


class Address(NamedTuple):
    """Two-level bucket address of an identifier."""

    first_level_key: str
    second_level_key: int


def _is_bucket_letter(ch: str) -> bool:
    return FIRST_LETTER <= ch <= LAST_LETTER


def try_parse_identifier(identifier: Optional[str]) -> Optional[Address]:
    """Return the :class:`Address` of *identifier*, or ``None`` if malformed."""
    if not identifier or not isinstance(identifier, str):
        return None

    first = identifier[0]
    if not _is_bucket_letter(first):
        return None

    space = identifier.find(WORD_SEPARATOR)
    if space < 0 or space + 1 >= len(identifier):
        return None

    second = identifier[space + 1]
    if not _is_bucket_letter(second):
        return None

    return Address(first, ord(second) - ord(FIRST_LETTER))


def parse_identifier(identifier: Optional[str]) -> Address:
    """Return the :class:`Address` of *identifier*.

    Raises
    ------
    InvalidIdentifier
        If *identifier* is ``None``/empty, does not start with ``A``-``Z``,
        has no space, ends with the space, or its second word does not start
        with ``A``-``Z``.
    """
    address = try_parse_identifier(identifier)
    if address is None:
        raise InvalidIdentifier(identifier)
    return address
