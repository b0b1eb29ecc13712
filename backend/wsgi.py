"""
wsgi.py — Process entry point.

    python -m backend.wsgi                  # serve on $PORT (default 8000)
    flask --app backend.wsgi init-db        # create the schema explicitly
    gunicorn backend.wsgi:app               # any WSGI server

FLASK_ENV selects the config class (development / testing / production).
"""

import os

from backend.app import create_app

app = create_app(os.getenv("FLASK_ENV", "development"))


if __name__ == "__main__":
    app.run(host=os.getenv("HOST", "127.0.0.1"), port=app.config["PORT"])
