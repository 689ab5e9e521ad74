from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from simwire.config import Settings
from simwire.main import create_app
from simwire.protocol.models import (
    ActionMessage,
    DisconnectMessage,
    HandshakeMessage,
    HandshakeResponse,
    ReloadRequestMessage,
    ReloadResponseMessage,
    SessionParameters,
    StateUpdateMessage,
)


class FakeHost:
    """In-memory simulation host for tests (counts actions, records disconnects)."""

    server_capabilities = ("delta_state", "reload")

    def __init__(self):
        self.sequence = 0
        self.actions: list[ActionMessage] = []
        self.reloads: list[ReloadRequestMessage] = []
        self.disconnects: list[tuple[str | None, DisconnectMessage | None]] = []
        self.rejected_clients: set[str] = set()
        self.fail_actions = False
        self.fail_reloads = False

    async def accept_handshake(self, message: HandshakeMessage) -> HandshakeResponse:
        if message.client_id in self.rejected_clients:
            return HandshakeResponse(accepted=False, protocol_version=1, reason="client banned")
        return HandshakeResponse(
            accepted=True,
            protocol_version=1,
            session=SessionParameters(session_id=f"session-{message.client_id}", seed=0),
            server_capabilities=self.server_capabilities,
        )

    async def apply_action(self, message: ActionMessage) -> StateUpdateMessage | None:
        if self.fail_actions:
            raise RuntimeError("engine exploded")
        self.actions.append(message)
        if message.action.get("noop"):
            return None
        self.sequence += 1
        return StateUpdateMessage(
            sequence=self.sequence,
            state={"agent": message.agent_id, "action": message.action},
        )

    async def reload(self, message: ReloadRequestMessage) -> ReloadResponseMessage:
        if self.fail_reloads:
            raise RuntimeError("scenario missing")
        self.reloads.append(message)
        self.sequence = 0
        return ReloadResponseMessage(
            success=True,
            session=SessionParameters(
                session_id="session-reloaded",
                scenario_id=message.scenario_id,
                seed=message.seed,
            ),
        )

    async def on_disconnect(self, session_id, message) -> None:
        self.disconnects.append((session_id, message))


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def test_settings():
    return Settings(
        protocol_version=2,
        min_protocol_version=1,
        max_message_bytes=512,
        fatal_error_codes=["fatal"],
    )


@pytest.fixture
def app(host, test_settings):
    """Create a test FastAPI application around the fake host."""
    return create_app(host, test_settings)


@pytest.fixture
def client(app):
    with TestClient(app) as tc:
        yield tc
