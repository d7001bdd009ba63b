"""
Flask application factory module.

This module creates and configures the Flask application using
the factory pattern, allowing for different configurations
(development, testing, production) and for an explicitly injected
task store (a test double, or a store over a pre-built collection).
"""

import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from app.errors import TaskError
from app.store import STORE_EXTENSION, TaskStore, create_mongo_store
from config import get_config

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def register_error_handlers(app: Flask) -> None:
    """
    Register JSON error handlers on the application.

    Known task errors map to their own status codes, HTTP errors raised
    by Flask/Werkzeug keep theirs, and anything else becomes a 500 so a
    single failing request never takes the process down.
    """

    @app.errorhandler(TaskError)
    def handle_task_error(error: TaskError) -> tuple[Response, int]:
        if error.status_code >= 500:
            logger.error("Request failed: %s", error.message)
        else:
            logger.warning("Request rejected: %s", error.message)
        return jsonify({"error": error.message}), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException) -> tuple[Response, int]:
        response = jsonify({"error": error.description or error.name})
        # Keep headers such as Allow on 405 responses
        response.headers.update(
            {key: value for key, value in error.get_headers() if key != "Content-Type"}
        )
        return response, error.code or 500

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception) -> tuple[Response, int]:
        logger.exception("Internal server error: %s", error)
        return jsonify({"error": "Internal server error"}), 500


def create_app(config_name: str | None = None, store: TaskStore | None = None) -> Flask:
    """
    Create and configure the Flask application.

    Args:
        config_name: Configuration environment name.
                     If None, uses FLASK_ENV environment variable.
        store: Task store to serve from. When None, a MongoDB-backed store
               is built from the MONGO_* configuration values.

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Load configuration
    config_class = get_config(config_name)
    app.config.from_object(config_class)
    app.json.sort_keys = app.config.get("JSON_SORT_KEYS", False)

    logger.info("Creating app with config: %s", config_class.__name__)

    if store is None:
        store = create_mongo_store(
            app.config["MONGO_URI"],
            app.config["MONGO_DB_NAME"],
            app.config["MONGO_COLLECTION"],
            timeout_ms=app.config["MONGO_TIMEOUT_MS"],
        )
    app.extensions[STORE_EXTENSION] = store

    # Register blueprints
    from app.routes.api import api_bp

    app.register_blueprint(api_bp)
    register_error_handlers(app)

    return app
