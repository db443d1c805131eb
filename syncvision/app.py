import logging
import sys

from flask import Flask, jsonify
from flask_cors import CORS
from flask_socketio import SocketIO

from syncvision.errors import StoreConnectError, SyncVisionError
from syncvision.logging_setup import setup_logging

logger = logging.getLogger(__name__)


def create_app(config=None, *, db=None):
    """Build the Flask app, its store handle and the broadcast relay.

    ``config`` overrides values from ``syncvision.config.Config``. Passing
    ``db`` skips dialing MongoDB (tests hand in a fake database here).
    Raises StoreConnectError when the store cannot be reached.
    """
    app = Flask(__name__)
    app.config.from_object("syncvision.config.Config")
    if config:
        app.config.update(config)
    app.json.sort_keys = False

    # Core extensions
    CORS(app, origins=app.config["CORS_ORIGINS"])
    socketio = SocketIO(
        app,
        async_mode=app.config["SOCKETIO_ASYNC_MODE"],
        cors_allowed_origins=app.config["CORS_ORIGINS"],
    )

    from syncvision.utils.db import init_app as init_db

    init_db(app, db=db)

    from syncvision.realtime.events import build_relay, register_socket_handlers

    app.socketio = socketio
    app.relay = build_relay(socketio)
    register_socket_handlers(socketio, app.relay)

    # Register blueprints
    from syncvision.routes.task_routes import tasks_bp

    app.register_blueprint(tasks_bp)

    @app.get("/")
    def index():
        app.logger.info("GET / request received.")
        return "SyncVision Backend is running", 200, {"Content-Type": "text/plain; charset=utf-8"}

    @app.get("/health")
    def health():
        return jsonify(status="ok", service="SyncVision API"), 200

    @app.errorhandler(SyncVisionError)
    def handle_app_error(exc):
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(404)
    def not_found(_):
        return jsonify(error="Not Found"), 404

    @app.errorhandler(405)
    def method_not_allowed(_):
        return jsonify(error="Method Not Allowed"), 405

    @app.errorhandler(500)
    def server_error(_):
        return jsonify(error="Internal Server Error"), 500

    return app


def main():
    from syncvision.config import Config
    from syncvision.utils.db import close_db

    setup_logging(Config.LOG_LEVEL)
    try:
        app = create_app()
    except StoreConnectError as exc:
        logger.error("MongoDB connection error: %s", exc)
        sys.exit(1)

    try:
        app.socketio.run(
            app,
            host=app.config["HOST"],
            port=app.config["PORT"],
            debug=app.config["DEBUG"],
            allow_unsafe_werkzeug=True,
        )
    finally:
        close_db(app)
        app.relay = None


if __name__ == "__main__":
    # Direct run support: python -m syncvision.app
    main()
