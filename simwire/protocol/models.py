from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, JsonValue, PlainSerializer

PROTOCOL_VERSION = 1


def _read_only(self, *args, **kwargs):
    raise TypeError(f"'{type(self).__name__}' object is read-only")


class FrozenDict(dict):
    """A dict that refuses mutation once built."""

    __setitem__ = __delitem__ = __ior__ = _read_only
    clear = pop = popitem = setdefault = update = _read_only

    def __reduce__(self):
        return (type(self), (dict(self),))


class FrozenList(list):
    """A list that refuses mutation once built."""

    __setitem__ = __delitem__ = __iadd__ = __imul__ = _read_only
    append = extend = insert = pop = remove = clear = sort = reverse = _read_only

    def __reduce__(self):
        return (type(self), (list(self),))


def utf8_text(value: str) -> str:
    """Reject strings holding lone surrogates, which cannot be written as UTF-8."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"text is not encodable as UTF-8: {e.reason} at position {e.start}") from e
    return value


def freeze(value: Any) -> Any:
    """Deep read-only copy of a JSON value; string keys and leaves must be UTF-8 encodable."""
    if isinstance(value, dict):
        return FrozenDict((utf8_text(key), freeze(item)) for key, item in value.items())
    if isinstance(value, list):
        return FrozenList(freeze(item) for item in value)
    if isinstance(value, str):
        return utf8_text(value)
    return value


def canonical_object(value: Any) -> Any:
    """Return a plain copy of a JSON value with object keys sorted at every depth."""
    if isinstance(value, dict):
        return {key: canonical_object(value[key]) for key in sorted(value)}
    if isinstance(value, (list, tuple)):
        return [canonical_object(item) for item in value]
    return value


Text = Annotated[str, AfterValidator(utf8_text)]

# Free-form JSON object, read-only after validation; keys are emitted sorted
# so equal payloads serialize identically
JsonObject = Annotated[
    dict[str, JsonValue],
    AfterValidator(freeze),
    PlainSerializer(canonical_object),
]
Capabilities = Annotated[tuple[Text, ...], Field(strict=False)]


# --- Kinds ---
class MessageType(str, Enum):
    HANDSHAKE = "handshake"
    HANDSHAKE_RESPONSE = "handshake_response"
    ACTION = "action"
    STATE_UPDATE = "state_update"
    RELOAD_REQUEST = "reload_request"
    RELOAD_RESPONSE = "reload_response"
    DISCONNECT = "disconnect"
    ERROR = "error"


class Direction(str, Enum):
    CLIENT_TO_SERVER = "client_to_server"
    SERVER_TO_CLIENT = "server_to_client"
    BOTH = "both"


class ErrorCode(str, Enum):
    MALFORMED_MESSAGE = "malformed_message"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    UNKNOWN_MESSAGE_TYPE = "unknown_message_type"
    PROTOCOL_VIOLATION = "protocol_violation"
    UNSUPPORTED_VERSION = "unsupported_version"
    MESSAGE_TOO_LARGE = "message_too_large"
    INTERNAL_ERROR = "internal_error"


# --- Base ---
class WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, strict=True, allow_inf_nan=False)


class ProtocolMessage(WireModel):
    """Base for every message kind. ``type`` is the wire discriminator."""

    direction: ClassVar[Direction]

    @classmethod
    def message_type(cls) -> MessageType:
        return MessageType(cls.model_fields["type"].default)


class SessionParameters(WireModel):
    session_id: Text
    scenario_id: Text | None = None
    seed: int | None = None
    tick_rate_hz: float | None = Field(default=None, gt=0)


# --- Handshake ---
class HandshakeMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.CLIENT_TO_SERVER

    type: Literal["handshake"] = "handshake"
    protocol_version: int = Field(ge=1)
    client_id: Text
    client_name: Text | None = None
    capabilities: Capabilities = ()


class HandshakeResponse(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.SERVER_TO_CLIENT

    type: Literal["handshake_response"] = "handshake_response"
    accepted: bool
    protocol_version: int = Field(ge=1)
    session: SessionParameters | None = None
    server_capabilities: Capabilities = ()
    reason: Text | None = None


# --- Simulation traffic ---
class ActionMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.CLIENT_TO_SERVER

    type: Literal["action"] = "action"
    agent_id: Text
    action: JsonObject
    tick: int | None = Field(default=None, ge=0)


class StateUpdateMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.SERVER_TO_CLIENT

    type: Literal["state_update"] = "state_update"
    sequence: int = Field(ge=0)
    state: JsonObject
    is_delta: bool = False


# --- Reload ---
class ReloadRequestMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.CLIENT_TO_SERVER

    type: Literal["reload_request"] = "reload_request"
    scenario_id: Text | None = None
    seed: int | None = None
    options: JsonObject = Field(default_factory=FrozenDict)


class ReloadResponseMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.SERVER_TO_CLIENT

    type: Literal["reload_response"] = "reload_response"
    success: bool
    session: SessionParameters | None = None
    reason: Text | None = None


# --- Either direction ---
class DisconnectMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.BOTH

    type: Literal["disconnect"] = "disconnect"
    reason: Text
    detail: Text | None = None


class ErrorMessage(ProtocolMessage):
    direction: ClassVar[Direction] = Direction.BOTH

    type: Literal["error"] = "error"
    code: Text
    message: Text
    ref_type: Text | None = None


AnyMessage = Annotated[
    Union[
        HandshakeMessage,
        HandshakeResponse,
        ActionMessage,
        StateUpdateMessage,
        ReloadRequestMessage,
        ReloadResponseMessage,
        DisconnectMessage,
        ErrorMessage,
    ],
    Field(discriminator="type"),
]

MESSAGE_TYPES: dict[MessageType, type[ProtocolMessage]] = {
    model.message_type(): model
    for model in (
        HandshakeMessage,
        HandshakeResponse,
        ActionMessage,
        StateUpdateMessage,
        ReloadRequestMessage,
        ReloadResponseMessage,
        DisconnectMessage,
        ErrorMessage,
    )
}
