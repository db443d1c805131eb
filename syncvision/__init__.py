"""SyncVision task backend: task CRUD over MongoDB plus a Socket.IO broadcast relay."""

__version__ = "1.0.0"
