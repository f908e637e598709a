import logging

from flask import Flask
from flasgger import Swagger
from flask_cors import CORS

from .config import get_config
from .errors import register_error_handlers
from models import storage  # DBStorage singleton (scoped_session)

# Minimal Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Library Catalog API",
        "version": "1.0.0",
        "description": "Administration API for authors, books and the authors they are credited to.",
    },
    "basePath": "/",
    "schemes": ["http"],
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def configure_logging(app: Flask) -> None:
    """Set up root logging once; later calls only adjust the level."""
    level = app.config.get("LOG_LEVEL", "INFO")
    logging.basicConfig(level=level, format=app.config.get("LOG_FORMAT"))
    logging.getLogger().setLevel(level)
    app.logger.setLevel(level)


def create_app(config_name: str | None = None, **overrides) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    ``overrides`` are applied on top of the selected config class
    (tests pass their own DATABASE_URL this way).
    """
    app = Flask(__name__)

    # Load configuration (reads .env via get_config)
    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    configure_logging(app)

    # Point the shared storage at this app's database and create tables
    storage.configure(app.config["DATABASE_URL"], echo=app.config.get("SQL_ECHO", False))
    storage.reload()

    # Cross-Origin Resource Sharing: enable for dev, configurable for prod
    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})

    # Swagger UI and JSON
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    register_error_handlers(app)

    from .health import bp as health_bp
    from .books import bp as books_bp, list_books
    from .authors import bp as authors_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(books_bp)
    app.register_blueprint(authors_bp)

    # Home is the book list
    app.add_url_rule("/", endpoint="home", view_func=list_books, methods=["GET"])

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    app.logger.debug("Library catalog app created (env=%s)", app.config.get("APP_ENV"))
    return app
