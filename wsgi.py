"""
Waitress WSGI entry point for production deployment.

Usage::

    python wsgi.py

Waitress is a pure-Python WSGI server; it listens on ``APP_PORT`` and
binds to ``WAITRESS_HOST`` (default all interfaces).
"""

import os

from waitress import serve

from helpdesk import create_app
from helpdesk.uploads import ensure_upload_dirs

# Force production config when running via this entry point.
app = create_app(os.environ.get("FLASK_ENV", "production"))

if __name__ == "__main__":
    with app.app_context():
        ensure_upload_dirs()

    host = os.environ.get("WAITRESS_HOST", "0.0.0.0")
    port = app.config["APP_PORT"]
    print(f"Starting {app.config['APP_NAME']} on {host}:{port}")
    serve(app, host=host, port=port, threads=8)
