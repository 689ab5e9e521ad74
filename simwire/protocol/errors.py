from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simwire.protocol.session import SessionPhase


class ProtocolError(Exception):
    """Base class for protocol errors."""
    pass


class ProtocolViolationError(ProtocolError):
    """Message is not legal for the session's direction or current phase."""

    def __init__(
        self,
        message: str,
        message_type: str | None = None,
        phase: SessionPhase | None = None,
    ):
        self.message = message
        self.message_type = message_type
        self.phase = phase
        super().__init__(message)
