"""WSGI entry point for the task API."""

import os

from dotenv import load_dotenv

# Values already present in the environment take precedence over .env
load_dotenv(override=False)

from app import create_app  # noqa: E402

app = create_app(os.getenv("FLASK_ENV", "production"))


if __name__ == "__main__":
    # Local development only; production servers import `wsgi:app` directly.
    app.run(host=app.config["HOST"], port=app.config["PORT"])
