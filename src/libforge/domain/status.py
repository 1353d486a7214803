"""Working-tree status entries and the publish gate rule.

The status text contract is ``git status --porcelain=v1``: each line is a
two-character code, a space, and the path. The first character is the
staged state, the second the unstaged state. Untracked files are marked
``??`` and are the only entries the gate ignores.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass

_STATUS_LINE = re.compile(r"^(.{2}) (.+)$")

UNTRACKED_MARKER = "?"


@dataclass(frozen=True)
class StatusEntry:
    """A single ``(statusCode, path)`` pair from the status provider."""

    status: str
    path: str

    @property
    def untracked(self) -> bool:
        return self.status.startswith(UNTRACKED_MARKER)


def parse_status_line(line: str) -> StatusEntry | None:
    """Parse one porcelain line. Returns None for lines that don't match."""
    match = _STATUS_LINE.match(line)
    if match is None:
        return None
    return StatusEntry(status=match.group(1), path=match.group(2))


def parse_porcelain(output: str) -> list[StatusEntry]:
    """Parse full porcelain output into ordered entries."""
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        entry = parse_status_line(line)
        if entry is not None:
            entries.append(entry)
    return entries


def tracked_changes(entries: Iterable[StatusEntry]) -> list[StatusEntry]:
    """Entries that block a publish (everything except untracked files)."""
    return [e for e in entries if not e.untracked]
