from __future__ import annotations

import logging

from flask import request
from flask_socketio import SocketIO

from syncvision.realtime.relay import UPDATE_EVENT, BroadcastRelay, ConnectionEvent

logger = logging.getLogger(__name__)

TASK_UPDATED_EVENT = "task_updated"


def build_relay(socketio: SocketIO) -> BroadcastRelay:
    """Relay that delivers through ``socketio`` to one session id at a time."""

    def deliver(sid, event_name, payload):
        # a one-element tuple keeps None as a real argument
        socketio.emit(event_name, (payload,), to=sid)

    return BroadcastRelay(deliver, event_name=UPDATE_EVENT)


def register_socket_handlers(socketio: SocketIO, relay: BroadcastRelay) -> None:
    @socketio.on("connect")
    def on_connect(auth=None):
        logger.info("A user connected: %s", request.sid)
        relay.dispatch(request.sid, ConnectionEvent.CONNECT)

    @socketio.on(TASK_UPDATED_EVENT)
    def on_task_updated(data=None, *_):
        logger.info("Received %s event with data: %s", TASK_UPDATED_EVENT, data)
        relay.dispatch(request.sid, ConnectionEvent.MESSAGE, data)
        logger.info("Broadcasted %s event to %d clients", UPDATE_EVENT, len(relay))

    @socketio.on("disconnect")
    def on_disconnect(reason=None):
        logger.info("A user disconnected: %s", request.sid)
        relay.dispatch(request.sid, ConnectionEvent.DISCONNECT)
