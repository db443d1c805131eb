"""Realtime infrastructure: the broadcast relay and its Socket.IO wiring."""

from syncvision.realtime.relay import BroadcastRelay, ConnectionEvent, ConnectionState

__all__ = ["BroadcastRelay", "ConnectionEvent", "ConnectionState"]
