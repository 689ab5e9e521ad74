from __future__ import annotations

from typing import Protocol, runtime_checkable

from simwire.protocol.models import (
    ActionMessage,
    DisconnectMessage,
    HandshakeMessage,
    HandshakeResponse,
    ReloadRequestMessage,
    ReloadResponseMessage,
    StateUpdateMessage,
)


@runtime_checkable
class SimulationHost(Protocol):
    """Interface the websocket session layer drives for every connection.

    The host owns the simulation. It receives only messages the session
    contract has already accepted, and answers with fully-built messages.
    """

    server_capabilities: tuple[str, ...]

    async def accept_handshake(self, message: HandshakeMessage) -> HandshakeResponse:
        """Decide whether to open a session.

        An accepted response should carry ``session`` parameters; a rejected
        one should carry a ``reason``.
        """
        ...

    async def apply_action(self, message: ActionMessage) -> StateUpdateMessage | None:
        """Apply one step of control input. Return a state update to send, if any."""
        ...

    async def reload(self, message: ReloadRequestMessage) -> ReloadResponseMessage:
        ...

    async def on_disconnect(
        self,
        session_id: str | None,
        message: DisconnectMessage | None,
    ) -> None:
        """Called once per connection. ``message`` is None when the transport dropped."""
        ...
