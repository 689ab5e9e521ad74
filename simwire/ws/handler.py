from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from simwire.protocol.diagnostics import FailureKind, ParseFailure
from simwire.protocol.errors import ProtocolViolationError
from simwire.protocol.models import (
    ActionMessage,
    DisconnectMessage,
    ErrorCode,
    ErrorMessage,
    HandshakeMessage,
    HandshakeResponse,
    ProtocolMessage,
    ReloadRequestMessage,
    ReloadResponseMessage,
)
from simwire.protocol.parser import parse_message
from simwire.protocol.serializer import serialize_message
from simwire.protocol.session import Role, SessionContract, SessionPhase

if TYPE_CHECKING:
    from simwire.config import Settings
    from simwire.host import SimulationHost

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_CODES: dict[FailureKind, ErrorCode] = {
    FailureKind.MALFORMED: ErrorCode.MALFORMED_MESSAGE,
    FailureKind.MISSING_FIELD: ErrorCode.MISSING_FIELD,
    FailureKind.TYPE_MISMATCH: ErrorCode.TYPE_MISMATCH,
    FailureKind.WRONG_KIND: ErrorCode.UNKNOWN_MESSAGE_TYPE,
    FailureKind.UNKNOWN_KIND: ErrorCode.UNKNOWN_MESSAGE_TYPE,
}


def error_for_failure(failure: ParseFailure) -> ErrorMessage:
    """Build the error reply for a payload the parser rejected."""
    return ErrorMessage(
        code=FAILURE_CODES[failure.kind].value,
        message=failure.describe(),
    )


class SimulationConnection:
    """
    Runs one client connection against the simulation host.

    Responsibilities:
    - Enforce the session contract on every inbound and outbound message
    - Negotiate the protocol version before the host sees a handshake
    - Route accepted messages to the host and send its replies
    - Answer malformed or out-of-order traffic with ``error`` messages
      while keeping the session alive
    """

    def __init__(self, ws: WebSocket, host: SimulationHost, settings: Settings) -> None:
        self.ws = ws
        self.host = host
        self.settings = settings
        self.contract = SessionContract(Role.SERVER, settings.fatal_error_codes)
        self.session_id: str | None = None
        self._disconnect: DisconnectMessage | None = None

    async def run(self) -> None:
        await self.ws.accept()
        self.contract.open()
        try:
            while not self.contract.closed:
                payload = await self._receive()
                await self._handle_payload(payload)
            await self.ws.close()
        except WebSocketDisconnect:
            logger.info(f"Client dropped session {self.session_id}")
        finally:
            await self._notify_disconnect()

    async def _receive(self) -> str | bytes:
        frame = await self.ws.receive()
        if frame["type"] == "websocket.disconnect":
            raise WebSocketDisconnect(frame.get("code", 1000))
        if frame.get("text") is not None:
            return frame["text"]
        return frame.get("bytes") or b""

    async def _handle_payload(self, payload: str | bytes) -> None:
        size = len(payload.encode("utf-8")) if isinstance(payload, str) else len(payload)
        if size > self.settings.max_message_bytes:
            await self.send(
                ErrorMessage(
                    code=ErrorCode.MESSAGE_TOO_LARGE.value,
                    message=f"Message of {size} bytes exceeds limit of {self.settings.max_message_bytes}",
                )
            )
            return

        result = parse_message(payload)
        if not result.ok:
            await self.send(error_for_failure(result.failure))
            return
        message = result.message

        try:
            self.contract.receive(message)
        except ProtocolViolationError as e:
            logger.warning(f"Protocol violation in session {self.session_id}: {e.message}")
            await self.send(
                ErrorMessage(
                    code=ErrorCode.PROTOCOL_VIOLATION.value,
                    message=e.message,
                    ref_type=message.type,
                )
            )
            return

        try:
            await self._dispatch(message)
        except Exception as e:
            logger.error(f"Error handling {message.type} in session {self.session_id}: {e}", exc_info=True)
            await self.send(
                ErrorMessage(
                    code=ErrorCode.INTERNAL_ERROR.value,
                    message="An internal error occurred",
                    ref_type=message.type,
                )
            )
            if self.contract.phase == SessionPhase.RELOADING:
                await self.send(ReloadResponseMessage(success=False, reason="Reload failed"))

    async def _dispatch(self, message: ProtocolMessage) -> None:
        if isinstance(message, HandshakeMessage):
            await self._handshake(message)

        elif isinstance(message, ActionMessage):
            update = await self.host.apply_action(message)
            if update is not None:
                await self.send(update)

        elif isinstance(message, ReloadRequestMessage):
            response = await self.host.reload(message)
            if response.session is not None:
                self.session_id = response.session.session_id
            await self.send(response)

        elif isinstance(message, DisconnectMessage):
            logger.info(f"Client closed session {self.session_id}: {message.reason}")
            self._disconnect = message

        elif isinstance(message, ErrorMessage):
            logger.warning(f"Client reported error in session {self.session_id}: {message.code}: {message.message}")

    async def _handshake(self, message: HandshakeMessage) -> None:
        if not self.settings.supports_version(message.protocol_version):
            logger.info(
                f"Rejecting client {message.client_id}: protocol version {message.protocol_version} unsupported"
            )
            await self.send(
                HandshakeResponse(
                    accepted=False,
                    protocol_version=self.settings.protocol_version,
                    server_capabilities=self.host.server_capabilities,
                    reason=(
                        f"{ErrorCode.UNSUPPORTED_VERSION.value}: supported versions are "
                        f"{self.settings.min_protocol_version}-{self.settings.protocol_version}"
                    ),
                )
            )
            return

        response = await self.host.accept_handshake(message)
        if response.session is not None:
            self.session_id = response.session.session_id
        await self.send(response)
        if response.accepted:
            logger.info(f"Client {message.client_id} opened session {self.session_id}")

    async def send(self, message: ProtocolMessage) -> None:
        """Check an outbound message against the contract, then write it."""
        self.contract.send(message)
        await self.ws.send_text(serialize_message(message))

    async def _notify_disconnect(self) -> None:
        try:
            await self.host.on_disconnect(self.session_id, self._disconnect)
        except Exception as e:
            logger.error(f"Error handling disconnect for session {self.session_id}: {e}", exc_info=True)


@router.websocket("/ws/sim")
async def simulation_websocket(ws: WebSocket):
    """WebSocket endpoint for simulation control clients."""
    connection = SimulationConnection(ws, ws.app.state.host, ws.app.state.settings)
    await connection.run()
