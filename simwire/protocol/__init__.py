from simwire.protocol.diagnostics import (
    CollectingSink,
    DiagnosticSink,
    FailureKind,
    ParseFailure,
    log_parse_failure,
)
from simwire.protocol.errors import ProtocolError, ProtocolViolationError
from simwire.protocol.models import (
    MESSAGE_TYPES,
    PROTOCOL_VERSION,
    ActionMessage,
    AnyMessage,
    Direction,
    DisconnectMessage,
    ErrorCode,
    ErrorMessage,
    HandshakeMessage,
    HandshakeResponse,
    MessageType,
    ProtocolMessage,
    ReloadRequestMessage,
    ReloadResponseMessage,
    SessionParameters,
    StateUpdateMessage,
)
from simwire.protocol.parser import (
    ParseResult,
    parse_action,
    parse_disconnect,
    parse_error,
    parse_handshake,
    parse_handshake_response,
    parse_message,
    parse_reload_request,
    parse_reload_response,
    parse_result,
    parse_state_update,
)
from simwire.protocol.serializer import (
    serialize_action,
    serialize_disconnect,
    serialize_error,
    serialize_handshake,
    serialize_handshake_response,
    serialize_message,
    serialize_reload_request,
    serialize_reload_response,
    serialize_state_update,
)
from simwire.protocol.session import Role, SessionContract, SessionPhase

__all__ = [
    "ActionMessage",
    "AnyMessage",
    "CollectingSink",
    "DiagnosticSink",
    "Direction",
    "DisconnectMessage",
    "ErrorCode",
    "ErrorMessage",
    "FailureKind",
    "HandshakeMessage",
    "HandshakeResponse",
    "MESSAGE_TYPES",
    "MessageType",
    "PROTOCOL_VERSION",
    "ParseFailure",
    "ParseResult",
    "ProtocolError",
    "ProtocolMessage",
    "ProtocolViolationError",
    "ReloadRequestMessage",
    "ReloadResponseMessage",
    "Role",
    "SessionContract",
    "SessionParameters",
    "SessionPhase",
    "StateUpdateMessage",
    "log_parse_failure",
    "parse_action",
    "parse_disconnect",
    "parse_error",
    "parse_handshake",
    "parse_handshake_response",
    "parse_message",
    "parse_reload_request",
    "parse_reload_response",
    "parse_result",
    "parse_state_update",
    "serialize_action",
    "serialize_disconnect",
    "serialize_error",
    "serialize_handshake",
    "serialize_handshake_response",
    "serialize_message",
    "serialize_reload_request",
    "serialize_reload_response",
    "serialize_state_update",
]
