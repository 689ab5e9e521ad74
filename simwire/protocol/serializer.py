from __future__ import annotations

from typing import TypeVar

from simwire.protocol.models import (
    ActionMessage,
    DisconnectMessage,
    ErrorMessage,
    HandshakeMessage,
    HandshakeResponse,
    ProtocolMessage,
    ReloadRequestMessage,
    ReloadResponseMessage,
    StateUpdateMessage,
)

M = TypeVar("M", bound=ProtocolMessage)


def serialize_message(message: ProtocolMessage) -> str:
    """Canonical text for any message.

    Compact JSON, ``type`` first, then fields in declaration order with
    defaults included. Keys inside free-form JSON objects are sorted, so
    equal messages always produce identical text.
    """
    return message.model_dump_json()


def _serialize_as(model: type[M], message: M) -> str:
    if type(message) is not model:
        raise TypeError(
            f"Expected {model.__name__}, got {type(message).__name__}"
        )
    return serialize_message(message)


def serialize_handshake(message: HandshakeMessage) -> str:
    return _serialize_as(HandshakeMessage, message)


def serialize_handshake_response(message: HandshakeResponse) -> str:
    return _serialize_as(HandshakeResponse, message)


def serialize_action(message: ActionMessage) -> str:
    return _serialize_as(ActionMessage, message)


def serialize_state_update(message: StateUpdateMessage) -> str:
    return _serialize_as(StateUpdateMessage, message)


def serialize_reload_request(message: ReloadRequestMessage) -> str:
    return _serialize_as(ReloadRequestMessage, message)


def serialize_reload_response(message: ReloadResponseMessage) -> str:
    return _serialize_as(ReloadResponseMessage, message)


def serialize_disconnect(message: DisconnectMessage) -> str:
    return _serialize_as(DisconnectMessage, message)


def serialize_error(message: ErrorMessage) -> str:
    return _serialize_as(ErrorMessage, message)
