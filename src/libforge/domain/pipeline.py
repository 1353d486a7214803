"""Per-library build pipeline states and their transitions.

A pipeline run is strictly sequential::

    discovered -> synced -> gated -> cleaned -> packaged -> installed
        -> published | skipped

Any state may move to ``aborted``. Terminal states have no exits.
``gated`` is entered even when no publish was requested; the gate check
itself only runs for publishing runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class PipelineState(StrEnum):
    """States of a single library's pipeline run."""

    DISCOVERED = "discovered"
    SYNCED = "synced"
    GATED = "gated"
    CLEANED = "cleaned"
    PACKAGED = "packaged"
    INSTALLED = "installed"
    PUBLISHED = "published"
    SKIPPED = "skipped"
    ABORTED = "aborted"


TERMINAL_STATES: frozenset[PipelineState] = frozenset(
    {PipelineState.PUBLISHED, PipelineState.SKIPPED, PipelineState.ABORTED}
)

PIPELINE_TRANSITIONS: dict[PipelineState, list[PipelineState]] = {
    PipelineState.DISCOVERED: [PipelineState.SYNCED],
    PipelineState.SYNCED: [PipelineState.GATED],
    PipelineState.GATED: [PipelineState.CLEANED],
    PipelineState.CLEANED: [PipelineState.PACKAGED],
    PipelineState.PACKAGED: [PipelineState.INSTALLED],
    PipelineState.INSTALLED: [PipelineState.PUBLISHED, PipelineState.SKIPPED],
    PipelineState.PUBLISHED: [],
    PipelineState.SKIPPED: [],
    PipelineState.ABORTED: [],
}


def can_transition(current: PipelineState, target: PipelineState) -> bool:
    """Whether *current* may move to *target*."""
    if target is PipelineState.ABORTED:
        return current not in TERMINAL_STATES
    return target in PIPELINE_TRANSITIONS[current]


@dataclass
class PipelineRun:
    """Progress record for one library's pipeline run."""

    library: str
    version: str
    publish: bool = False
    state: PipelineState = PipelineState.DISCOVERED
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.DISCOVERED])
    artifact: str | None = None
    error: str | None = None

    @property
    def done(self) -> bool:
        return self.state in TERMINAL_STATES

    def advance(self, target: PipelineState) -> None:
        """Move to *target*, rejecting out-of-order steps."""
        if not can_transition(self.state, target):
            msg = f"Invalid pipeline transition for {self.library}: {self.state} -> {target}"
            raise ValueError(msg)
        self.state = target
        self.history.append(target)

    def abort(self, reason: str) -> None:
        self.error = reason
        self.advance(PipelineState.ABORTED)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "library": self.library,
            "version": self.version,
            "publish": self.publish,
            "state": str(self.state),
            "steps": [str(s) for s in self.history],
        }
        if self.artifact is not None:
            result["artifact"] = self.artifact
        if self.error is not None:
            result["error"] = self.error
        return result
