"""
Tests for the main blueprint and the app-wide hooks: health check,
uploaded files, JSON error rendering and request ids.
"""

import os
import uuid

from sqlalchemy.exc import OperationalError

from helpdesk.extensions import db


class TestHealthCheck:
    """Tests for the health check endpoint."""

    def test_health_check_returns_200(self, client):
        """The health check should report a connected database."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.get_json() == {"status": "healthy", "database": "connected"}

    def test_health_check_returns_503_when_db_down(self, client, monkeypatch):
        def _fail(*args, **kwargs):
            raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        monkeypatch.setattr(db.session, "execute", _fail)
        response = client.get("/health")
        assert response.status_code == 503
        assert response.get_json()["status"] == "unhealthy"


class TestErrorRendering:
    """Framework errors use the same JSON envelope as service errors."""

    def test_unknown_route_is_json_404(self, client):
        response = client.get("/api/v1/nothing-here")
        body = response.get_json()
        assert response.status_code == 404
        assert body["error"] == {"code": "NOT_FOUND", "message": "Route not found"}
        assert body["meta"]["timestamp"].endswith("Z")

    def test_wrong_method_is_json_405(self, client):
        response = client.put("/api/v1/divisions")
        assert response.status_code == 405
        assert response.get_json()["error"]["message"] == "Method not allowed"

    def test_unexpected_exception_is_500(self, app, client):
        def explode():
            raise RuntimeError("boom")

        app.add_url_rule("/explode", "explode", explode)
        response = client.get("/explode")
        assert response.status_code == 500
        assert response.get_json()["error"] == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "Internal server error",
        }


class TestRequestId:
    def test_generated_when_missing(self, client):
        response = client.get("/health")
        request_id = response.headers["X-Request-ID"]
        assert str(uuid.UUID(request_id)) == request_id

    def test_client_value_is_echoed(self, client):
        response = client.get("/health", headers={"X-Request-ID": "trace-123"})
        assert response.headers["X-Request-ID"] == "trace-123"


class TestUploadsRoute:
    def test_serves_stored_file(self, client, upload_root):
        os.makedirs(os.path.join(upload_root, "file"))
        with open(os.path.join(upload_root, "file", "notes.txt"), "wb") as handle:
            handle.write(b"hello")

        response = client.get("/uploads/file/notes.txt")
        assert response.status_code == 200
        assert response.data == b"hello"

    def test_missing_file_is_404(self, client):
        response = client.get("/uploads/file/missing.txt")
        assert response.status_code == 404
        assert response.get_json()["error"]["code"] == "NOT_FOUND"
