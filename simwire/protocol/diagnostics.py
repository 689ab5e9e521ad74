"""Parse-failure diagnostics.

A diagnostic sink receives one :class:`ParseFailure` per rejected payload.
Sinks are advisory: the parser ignores their return value and survives
their exceptions, so callers must never route control flow through them.
Every sink may be called concurrently from many sessions.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class FailureKind(str, Enum):
    MALFORMED = "malformed"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    WRONG_KIND = "wrong_kind"
    UNKNOWN_KIND = "unknown_kind"


@dataclass(frozen=True)
class ParseFailure:
    """Why a payload was rejected."""

    kind: FailureKind
    expected: str
    """Message type the parser was asked for, or ``"message"`` for dispatch."""

    field: str | None
    """Dotted path of the first offending field, None for document-level failures."""

    detail: str
    error_count: int = 1

    def describe(self) -> str:
        where = f" at '{self.field}'" if self.field else ""
        return f"Failed to parse {self.expected}: {self.kind.value}{where}: {self.detail}"


DiagnosticSink = Callable[[ParseFailure], None]


def log_parse_failure(failure: ParseFailure) -> None:
    """Default sink: one WARNING record per failure on this module's logger.

    The standard ``logging`` handlers serialize emission with a per-handler
    lock, so their records from concurrent sessions do not interleave.
    """
    logger.warning(
        failure.describe(),
        extra={
            "failure_kind": failure.kind.value,
            "expected_type": failure.expected,
            "failure_field": failure.field,
            "error_count": failure.error_count,
        },
    )


class CollectingSink:
    """Keeps every failure it receives, in arrival order."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._failures: list[ParseFailure] = []

    def __call__(self, failure: ParseFailure) -> None:
        with self._lock:
            self._failures.append(failure)

    @property
    def failures(self) -> list[ParseFailure]:
        with self._lock:
            return list(self._failures)

    @property
    def last(self) -> ParseFailure | None:
        with self._lock:
            return self._failures[-1] if self._failures else None

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._failures)
