"""
Development server for the library catalog: python -m api

Tables are created on startup against DATABASE_URL (see api.config).
Use a WSGI server such as gunicorn for anything beyond local work.
"""
import os

from . import create_app


def _truthy(value: str) -> bool:
    return value.lower() in ("1", "true", "yes")


def main() -> None:
    app = create_app(os.getenv("APP_ENV"))
    app.run(
        host=os.getenv("FLASK_RUN_HOST", "127.0.0.1"),
        port=int(os.getenv("FLASK_RUN_PORT", "8000")),
        debug=_truthy(os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", False)))),
    )


if __name__ == "__main__":
    main()
