"""Timing spans for ``--verbose`` runs.

A ``@traced`` service call opens a root span.  ``trace_span`` blocks run
inside it (one per traversal level, the graph build, the row write) and
hang child spans off whichever span is active.  When the call returns,
the tree lands in ``ServiceResult.meta["telemetry"]``.

Without ``--verbose`` both entry points cost one ContextVar read.
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

from graphwalk.services.result import ServiceResult

_enabled: ContextVar[bool] = ContextVar("graphwalk_telemetry", default=False)
_active: ContextVar[Span | None] = ContextVar("graphwalk_active_span", default=None)

log = structlog.get_logger(__name__)


@dataclass
class Span:
    """One timed block and the blocks nested in it."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    children: list[Span] = field(default_factory=list)
    annotations: dict[str, Any] = field(default_factory=dict)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def annotate(self, key: str, value: Any) -> None:
        self.annotations[key] = value

    def to_dict(self) -> dict[str, Any]:
        tree: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            tree["annotations"] = dict(self.annotations)
        if self.children:
            tree["children"] = [child.to_dict() for child in self.children]
        return tree


def set_telemetry(enabled: bool) -> None:
    """Switch span collection on or off for the current context."""
    _enabled.set(enabled)


@contextmanager
def _activate(span: Span) -> Iterator[Span]:
    token = _active.set(span)
    try:
        yield span
    finally:
        span.finished = time.perf_counter()
        _active.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time the enclosed block as a child of the active span.

    Yields None when telemetry is off or no traced call is running.
    """
    parent = _active.get() if _enabled.get() else None
    if parent is None:
        yield None
        return
    child = Span(name=name)
    parent.children.append(child)
    with _activate(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Record a root span for a service method and attach it to the result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _enabled.get():
            return func(*args, **kwargs)

        root = Span(name=func.__qualname__)
        try:
            with _activate(root):
                result = func(*args, **kwargs)
        except Exception:
            log.debug("telemetry.span", span=root.name, duration_ms=root.duration_ms, ok=False)
            raise

        log.debug("telemetry.span", span=root.name, duration_ms=root.duration_ms, ok=True)
        if isinstance(result, ServiceResult):
            meta = {**(result.meta or {}), "telemetry": root.to_dict()}
            result = result.model_copy(update={"meta": meta})  # type: ignore[assignment]
        return result

    return wrapper
