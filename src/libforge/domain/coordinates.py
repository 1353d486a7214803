"""Dependency coordinates and library identifiers.

A coordinate is the ``group/name`` key used in a dependency manifest.
The group is the owner tag: only coordinates whose group equals the
workspace ``group_id`` refer to sibling libraries. Everything else is a
third-party dependency and never enters the dependency graph.
"""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel

# Name of a library within the workspace (its directory name).
type LibraryId = str

COORDINATE_SEPARATOR = "/"


class Coordinate(BaseModel):
    """A typed dependency coordinate with an explicit owner field."""

    model_config = {"frozen": True}

    group: str | None = None
    name: str

    @classmethod
    def parse(cls, raw: str) -> Coordinate:
        """Parse ``group/name``; an unqualified ``name`` has no group.

        Examples:
            >>> Coordinate.parse("io.github.acme/core")
            Coordinate(group='io.github.acme', name='core')
            >>> Coordinate.parse("pyyaml")
            Coordinate(group=None, name='pyyaml')
        """
        raw = raw.strip()
        if not raw:
            msg = "Empty dependency coordinate"
            raise ValueError(msg)
        group, sep, name = raw.rpartition(COORDINATE_SEPARATOR)
        if not sep:
            return cls(group=None, name=raw)
        if not group or not name:
            msg = f"Malformed dependency coordinate: {raw!r}"
            raise ValueError(msg)
        return cls(group=group, name=name)

    def is_owned_by(self, group_id: str) -> bool:
        """True when this coordinate belongs to the workspace namespace."""
        return self.group == group_id

    def __str__(self) -> str:
        if self.group is None:
            return self.name
        return f"{self.group}{COORDINATE_SEPARATOR}{self.name}"


def owned_by(coordinates: Iterable[Coordinate], group_id: str) -> set[Coordinate]:
    """Keep only the coordinates owned by *group_id*."""
    return {c for c in coordinates if c.is_owned_by(group_id)}
