from __future__ import annotations

import pytest

from syncvision.app import create_app

from .fakes import FakeDatabase


@pytest.fixture()
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture()
def app(fake_db: FakeDatabase):
    """
    App wired to an in-memory database instead of MongoDB.

    The relay and Socket.IO server are real, so realtime tests exercise the
    same handlers production uses.
    """
    return create_app({"TESTING": True}, db=fake_db)


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def socket_client_factory(app):
    clients = []

    def make():
        c = app.socketio.test_client(app)
        clients.append(c)
        return c

    yield make

    for c in clients:
        if c.is_connected():
            c.disconnect()
