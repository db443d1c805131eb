from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Any, Callable, Hashable

from syncvision.errors import TransportError

logger = logging.getLogger(__name__)

UPDATE_EVENT = "update_task_list"

# deliver(connection_id, event_name, payload) pushes one event to one connection
Deliver = Callable[[Hashable, str, Any], None]


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"


class ConnectionEvent(str, Enum):
    CONNECT = "connect"
    MESSAGE = "message"
    DISCONNECT = "disconnect"


class Effect(str, Enum):
    REGISTER = "register"
    PUBLISH = "publish"
    UNREGISTER = "unregister"


_TRANSITIONS: dict[tuple[ConnectionState, ConnectionEvent], tuple[ConnectionState, tuple[Effect, ...]]] = {
    (ConnectionState.CONNECTING, ConnectionEvent.CONNECT): (ConnectionState.CONNECTED, (Effect.REGISTER,)),
    (ConnectionState.CONNECTING, ConnectionEvent.DISCONNECT): (ConnectionState.DISCONNECTED, ()),
    (ConnectionState.CONNECTED, ConnectionEvent.MESSAGE): (ConnectionState.CONNECTED, (Effect.PUBLISH,)),
    (ConnectionState.CONNECTED, ConnectionEvent.DISCONNECT): (ConnectionState.DISCONNECTED, (Effect.UNREGISTER,)),
}


def transition(
    state: ConnectionState, event: ConnectionEvent
) -> tuple[ConnectionState, tuple[Effect, ...]]:
    """Next state and side effects for one connection. Unlisted pairs are no-ops."""
    return _TRANSITIONS.get((state, event), (state, ()))


class BroadcastRelay:
    """
    In-process fan-out of task updates to every live Socket.IO connection.

    Membership is the only state kept. A publish snapshots membership under
    the lock and delivers outside it, so register/unregister running
    concurrently only decide whether a connection is in this round or the
    next. The sender is a member too and receives its own event.
    """

    def __init__(self, deliver: Deliver, *, event_name: str = UPDATE_EVENT) -> None:
        self._deliver = deliver
        self._event_name = event_name
        self._members: set[Hashable] = set()
        self._lock = threading.Lock()

    def register(self, connection_id: Hashable) -> None:
        with self._lock:
            self._members.add(connection_id)

    def unregister(self, connection_id: Hashable) -> None:
        with self._lock:
            self._members.discard(connection_id)

    def members(self) -> frozenset:
        with self._lock:
            return frozenset(self._members)

    def __len__(self) -> int:
        with self._lock:
            return len(self._members)

    def __contains__(self, connection_id: object) -> bool:
        with self._lock:
            return connection_id in self._members

    def publish(self, payload: Any) -> None:
        """Deliver ``payload`` unchanged to every current member, best-effort."""
        for connection_id in self.members():
            try:
                self._send(connection_id, payload)
            except TransportError as exc:
                logger.debug("Dropped %s for %s: %s", self._event_name, connection_id, exc)

    def _send(self, connection_id: Hashable, payload: Any) -> None:
        try:
            self._deliver(connection_id, self._event_name, payload)
        except Exception as exc:  # noqa: BLE001 - any transport failure is per-recipient
            raise TransportError(str(exc)) from exc

    def state_of(self, connection_id: Hashable) -> ConnectionState:
        if connection_id in self:
            return ConnectionState.CONNECTED
        return ConnectionState.CONNECTING

    def dispatch(
        self, connection_id: Hashable, event: ConnectionEvent, payload: Any = None
    ) -> ConnectionState:
        """Drive one lifecycle event through the state machine and apply its effects.

        The current state is read from membership, so a disconnected id looks
        like CONNECTING again: after DISCONNECT its messages are dropped, but a
        later CONNECT for the same id would register it anew. Socket.IO never
        reuses a sid, so each id goes through the lifecycle once.
        """
        new_state, effects = transition(self.state_of(connection_id), event)
        for effect in effects:
            if effect is Effect.REGISTER:
                self.register(connection_id)
            elif effect is Effect.UNREGISTER:
                self.unregister(connection_id)
            elif effect is Effect.PUBLISH:
                self.publish(payload)
        return new_state
