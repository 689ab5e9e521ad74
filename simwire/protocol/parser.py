from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from pydantic import TypeAdapter, ValidationError

from simwire.protocol.diagnostics import (
    DiagnosticSink,
    FailureKind,
    ParseFailure,
    log_parse_failure,
)
from simwire.protocol.models import (
    ActionMessage,
    AnyMessage,
    DisconnectMessage,
    ErrorMessage,
    HandshakeMessage,
    HandshakeResponse,
    ProtocolMessage,
    ReloadRequestMessage,
    ReloadResponseMessage,
    StateUpdateMessage,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=ProtocolMessage)

_any_message: TypeAdapter[ProtocolMessage] = TypeAdapter(AnyMessage)

# Error types pydantic reports when the document itself is not a JSON object
_DOCUMENT_ERRORS = {"json_invalid", "json_type", "model_type", "model_attributes_type", "dict_type"}
_TAG_ERRORS = {"union_tag_not_found", "union_tag_invalid"}


@dataclass(frozen=True)
class ParseResult(Generic[M]):
    """Outcome of a parse: exactly one of ``message`` and ``failure`` is set."""

    message: M | None = None
    failure: ParseFailure | None = None

    @property
    def ok(self) -> bool:
        return self.message is not None


def _classify(exc: ValidationError, expected: str, dispatched: bool) -> ParseFailure:
    errors = exc.errors(include_url=False)
    first = errors[0]
    loc = tuple(first["loc"])
    error_type = first["type"]

    if error_type in _TAG_ERRORS:
        return ParseFailure(FailureKind.UNKNOWN_KIND, expected, "type", first["msg"], len(errors))
    if dispatched and loc:
        # Drop the union tag pydantic prefixes onto every location
        expected, loc = str(loc[0]), loc[1:]

    field = ".".join(str(part) for part in loc) or None
    if error_type in _DOCUMENT_ERRORS and not loc:
        kind = FailureKind.MALFORMED
    elif error_type == "missing":
        kind = FailureKind.MISSING_FIELD
    elif error_type == "literal_error" and loc == ("type",):
        kind = FailureKind.WRONG_KIND
    else:
        kind = FailureKind.TYPE_MISMATCH
    return ParseFailure(kind, expected, field, first["msg"], len(errors))


def _report(failure: ParseFailure, sink: DiagnosticSink | None) -> None:
    try:
        (log_parse_failure if sink is None else sink)(failure)
    except Exception:
        logger.exception("Diagnostic sink raised while reporting: %s", failure.describe())


def _not_text(expected: str, text: object) -> ParseFailure:
    return ParseFailure(
        FailureKind.MALFORMED,
        expected,
        None,
        f"Expected str or bytes payload, got {type(text).__name__}",
    )


def parse_result(
    model: type[M],
    text: str | bytes,
    *,
    sink: DiagnosticSink | None = None,
) -> ParseResult[M]:
    """Parse ``text`` as exactly one message of kind ``model``. Never raises."""
    expected = model.message_type().value
    if not isinstance(text, (str, bytes, bytearray)):
        failure = _not_text(expected, text)
    else:
        try:
            return ParseResult(message=model.model_validate_json(text))
        except ValidationError as e:
            failure = _classify(e, expected, dispatched=False)
    _report(failure, sink)
    return ParseResult(failure=failure)


def parse_message(
    text: str | bytes,
    *,
    sink: DiagnosticSink | None = None,
) -> ParseResult[ProtocolMessage]:
    """Parse any message kind, routed by its ``type`` discriminator."""
    if not isinstance(text, (str, bytes, bytearray)):
        failure = _not_text("message", text)
    else:
        try:
            return ParseResult(message=_any_message.validate_json(text))
        except ValidationError as e:
            failure = _classify(e, "message", dispatched=True)
    _report(failure, sink)
    return ParseResult(failure=failure)


def parse_handshake(text: str | bytes, *, sink: DiagnosticSink | None = None) -> HandshakeMessage | None:
    return parse_result(HandshakeMessage, text, sink=sink).message


def parse_handshake_response(
    text: str | bytes, *, sink: DiagnosticSink | None = None
) -> HandshakeResponse | None:
    return parse_result(HandshakeResponse, text, sink=sink).message


def parse_action(text: str | bytes, *, sink: DiagnosticSink | None = None) -> ActionMessage | None:
    return parse_result(ActionMessage, text, sink=sink).message


def parse_state_update(
    text: str | bytes, *, sink: DiagnosticSink | None = None
) -> StateUpdateMessage | None:
    return parse_result(StateUpdateMessage, text, sink=sink).message


def parse_reload_request(
    text: str | bytes, *, sink: DiagnosticSink | None = None
) -> ReloadRequestMessage | None:
    return parse_result(ReloadRequestMessage, text, sink=sink).message


def parse_reload_response(
    text: str | bytes, *, sink: DiagnosticSink | None = None
) -> ReloadResponseMessage | None:
    return parse_result(ReloadResponseMessage, text, sink=sink).message


def parse_disconnect(text: str | bytes, *, sink: DiagnosticSink | None = None) -> DisconnectMessage | None:
    return parse_result(DisconnectMessage, text, sink=sink).message


def parse_error(text: str | bytes, *, sink: DiagnosticSink | None = None) -> ErrorMessage | None:
    return parse_result(ErrorMessage, text, sink=sink).message
