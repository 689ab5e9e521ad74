from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from simwire.protocol.errors import ProtocolViolationError
from simwire.protocol.models import (
    Direction,
    ErrorMessage,
    HandshakeResponse,
    MessageType,
    ProtocolMessage,
)

logger = logging.getLogger(__name__)


class SessionPhase(str, Enum):
    DISCONNECTED = "disconnected"
    HANDSHAKING = "handshaking"
    ACTIVE = "active"
    RELOADING = "reloading"


class Role(str, Enum):
    SERVER = "server"
    CLIENT = "client"


# Phases in which each kind may flow. Disconnect and error are legal everywhere.
_LEGAL_PHASES: dict[MessageType, frozenset[SessionPhase]] = {
    MessageType.HANDSHAKE: frozenset({SessionPhase.HANDSHAKING}),
    MessageType.HANDSHAKE_RESPONSE: frozenset({SessionPhase.HANDSHAKING}),
    MessageType.ACTION: frozenset({SessionPhase.ACTIVE}),
    MessageType.STATE_UPDATE: frozenset({SessionPhase.ACTIVE}),
    MessageType.RELOAD_REQUEST: frozenset({SessionPhase.ACTIVE}),
    MessageType.RELOAD_RESPONSE: frozenset({SessionPhase.RELOADING}),
}

_INBOUND: dict[Role, frozenset[Direction]] = {
    Role.SERVER: frozenset({Direction.CLIENT_TO_SERVER, Direction.BOTH}),
    Role.CLIENT: frozenset({Direction.SERVER_TO_CLIENT, Direction.BOTH}),
}
_OUTBOUND: dict[Role, frozenset[Direction]] = {
    Role.SERVER: _INBOUND[Role.CLIENT],
    Role.CLIENT: _INBOUND[Role.SERVER],
}


class SessionContract:
    """
    Lifecycle rules for one connection:
    Disconnected -> Handshaking -> Active <-> Reloading -> ... -> Disconnected.

    The contract only checks ordering and direction; it never parses or
    serializes. Owned by a single session task, so it is not synchronized.
    """

    def __init__(
        self,
        role: Role,
        fatal_error_codes: Iterable[str] = (),
    ) -> None:
        self.role = role
        self.phase = SessionPhase.DISCONNECTED
        self._fatal_error_codes = frozenset(fatal_error_codes)
        self._opened = False

    @property
    def closed(self) -> bool:
        return self._opened and self.phase == SessionPhase.DISCONNECTED

    def open(self) -> SessionPhase:
        """Transport connected; start handshaking."""
        if self._opened:
            raise ProtocolViolationError("Session was already opened", phase=self.phase)
        self._opened = True
        return self._enter(SessionPhase.HANDSHAKING)

    def receive(self, message: ProtocolMessage) -> SessionPhase:
        """Check and apply a message arriving from the peer."""
        self._check_direction(message, _INBOUND[self.role], "receive")
        return self._advance(message)

    def send(self, message: ProtocolMessage) -> SessionPhase:
        """Check and apply a message about to be sent to the peer."""
        self._check_direction(message, _OUTBOUND[self.role], "send")
        return self._advance(message)

    # ------------------------------------------------------------------ #

    def _check_direction(
        self, message: ProtocolMessage, allowed: frozenset[Direction], verb: str
    ) -> None:
        if message.direction not in allowed:
            raise ProtocolViolationError(
                f"A {self.role.value} cannot {verb} '{message.type}' messages",
                message_type=message.type,
                phase=self.phase,
            )

    def _advance(self, message: ProtocolMessage) -> SessionPhase:
        message_type = message.message_type()

        if message_type == MessageType.DISCONNECT:
            return self._enter(SessionPhase.DISCONNECTED)

        if isinstance(message, ErrorMessage):
            if message.code in self._fatal_error_codes:
                return self._enter(SessionPhase.DISCONNECTED)
            return self.phase

        if self.phase not in _LEGAL_PHASES[message_type]:
            raise ProtocolViolationError(
                f"'{message_type.value}' is not allowed while {self.phase.value}",
                message_type=message_type.value,
                phase=self.phase,
            )

        if isinstance(message, HandshakeResponse):
            if message.accepted:
                return self._enter(SessionPhase.ACTIVE)
            return self._enter(SessionPhase.DISCONNECTED)
        if message_type == MessageType.RELOAD_REQUEST:
            return self._enter(SessionPhase.RELOADING)
        if message_type == MessageType.RELOAD_RESPONSE:
            return self._enter(SessionPhase.ACTIVE)
        return self.phase

    def _enter(self, phase: SessionPhase) -> SessionPhase:
        if phase != self.phase:
            logger.debug(f"Session ({self.role.value}) {self.phase.value} -> {phase.value}")
            self.phase = phase
        return phase
