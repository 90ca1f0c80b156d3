"""Icon identifier parsing: ``collection:name`` strings."""

from __future__ import annotations

from typing import Iterable, NamedTuple


class IconIdentifier(NamedTuple):
    """A parsed ``collection:name`` identifier."""

    collection: str
    name: str

    def __str__(self) -> str:
        return f"{self.collection}:{self.name}"


def parse_identifier(value: str) -> IconIdentifier | None:
    """Parse ``collection:name``; returns None for anything malformed.

    Exactly one ``:`` is allowed and both halves must be non-empty.
    """
    parts = value.split(":")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        return None
    return IconIdentifier(parts[0], parts[1])


def split_valid(values: Iterable[str]) -> tuple[list[IconIdentifier], list[str]]:
    """Partition raw identifiers into (parsed, malformed).

    Duplicates are dropped; first-seen order is kept in both lists.
    """
    valid: list[IconIdentifier] = []
    malformed: list[str] = []
    seen: set[str] = set()
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        parsed = parse_identifier(value)
        if parsed is None:
            malformed.append(value)
        else:
            valid.append(parsed)
    return valid, malformed
