"""Timing spans for service calls and pipeline steps.

Disabled by default; ``--verbose`` switches it on for the process. A
``@traced`` service method opens a root span, every ``trace_span`` inside
it hangs a child under the innermost open span, and the finished tree is
attached to ``ServiceResult.meta["telemetry"]``. With telemetry off each
call costs one ContextVar lookup.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from libforge.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("libforge_telemetry", default=False)
_open_span: ContextVar[Span | None] = ContextVar("libforge_open_span", default=None)

_log = structlog.get_logger("libforge.telemetry")


@dataclass
class Span:
    """One timed region. Children are nested regions in start order."""

    name: str
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def end(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            out["annotations"] = dict(self.annotations)
        if self.children:
            out["children"] = [child.to_dict() for child in self.children]
        return out


@contextmanager
def _opened(span: Span) -> Iterator[Span]:
    token = _open_span.set(span)
    try:
        yield span
    finally:
        span.end()
        _open_span.reset(token)


@contextmanager
def trace_span(name: str, **annotations: Any) -> Iterator[Span | None]:
    """Child span of the innermost open span.

    Yields None when telemetry is off or no ``@traced`` call is running, so
    callers guard annotations with ``if span is not None``.
    """
    parent = _open_span.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name, annotations=dict(annotations))
    parent.children.append(child)
    with _opened(child):
        yield child


def current_span() -> Span | None:
    """Innermost open span, for annotating from deep inside a call."""
    return _open_span.get() if _enabled.get() else None


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method; attach its span tree to the returned result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        ok = False
        with _opened(Span(name=func.__qualname__)) as span:
            try:
                result = func(*args, **kwargs)
                ok = not isinstance(result, ServiceResult) or result.ok
            finally:
                span.annotate("ok", ok)
        _log.debug(
            "span.complete",
            span_name=span.name,
            duration_ms=round(span.duration_ms, 2),
            ok=ok,
            children=len(span.children),
        )
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": span.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper


def enable_telemetry() -> None:
    """Turn telemetry on for the current context (done once by the CLI)."""
    _enabled.set(True)


def disable_telemetry() -> None:
    _enabled.set(False)
