"""
Tests for ticket attachment uploads, listing and deletion.
"""

import io
import os

from sqlalchemy.exc import OperationalError

from helpdesk import uploads
from helpdesk.repositories import ticket_attachment_repository


def _upload(client, ticket_id, filename, uploaded_by, content=b"content"):
    data = {"file": (io.BytesIO(content), filename)}
    if uploaded_by is not None:
        data["uploadedBy"] = str(uploaded_by)
    return client.post(
        f"/api/v1/tickets/{ticket_id}/attachments",
        data=data,
        content_type="multipart/form-data",
    )


def _database_down(*args, **kwargs):
    raise OperationalError("INSERT", {}, Exception("database is down"))


def _stored(upload_root, subdir):
    path = os.path.join(upload_root, subdir)
    return os.listdir(path) if os.path.isdir(path) else []


class TestUpload:
    def test_image_attachment(self, client, make_ticket, upload_root):
        ticket = make_ticket()
        response = _upload(client, ticket.id, "screen.PNG", ticket.created_by)
        data = response.get_json()["data"]

        assert response.status_code == 201
        assert data["type"] == "IMAGE"
        assert data["ticketId"] == ticket.id
        assert data["fileUrl"].startswith("http://testserver/uploads/image/ticket/")
        assert len(_stored(upload_root, uploads.IMAGE_TICKET_DIR)) == 1

    def test_document_attachment(self, client, make_ticket, upload_root):
        ticket = make_ticket()
        response = _upload(client, ticket.id, "log.txt", ticket.created_by)
        data = response.get_json()["data"]

        assert data["type"] == "FILE"
        assert data["fileUrl"].startswith("http://testserver/uploads/file/")
        assert len(_stored(upload_root, uploads.FILE_DIR)) == 1

    def test_unsupported_extension(self, client, make_ticket, upload_root):
        ticket = make_ticket()
        response = _upload(client, ticket.id, "virus.exe", ticket.created_by)
        assert response.status_code == 400
        assert "Invalid file type" in response.get_json()["error"]["message"]
        assert _stored(upload_root, uploads.FILE_DIR) == []

    def test_oversized_image(self, client, make_ticket):
        ticket = make_ticket()
        big = b"0" * (uploads.MAX_IMAGE_SIZE + 10)
        response = _upload(client, ticket.id, "huge.jpg", ticket.created_by, big)
        assert response.status_code == 400
        assert response.get_json()["error"]["message"] == (
            "Image size exceeds maximum limit of 5MB"
        )

    def test_missing_file(self, client, make_ticket):
        ticket = make_ticket()
        response = client.post(
            f"/api/v1/tickets/{ticket.id}/attachments",
            data={"uploadedBy": str(ticket.created_by)},
            content_type="multipart/form-data",
        )
        assert response.get_json()["error"]["message"] == "File is required"

    def test_missing_uploader(self, client, make_ticket):
        ticket = make_ticket()
        response = _upload(client, ticket.id, "a.pdf", None)
        assert response.status_code == 400
        assert response.get_json()["error"]["details"] == {
            "uploadedBy": "Required and must be greater than 0"
        }

    def test_unknown_ticket_writes_nothing(self, client, make_user, upload_root):
        user = make_user()
        response = _upload(client, 999, "a.pdf", user.id)
        assert response.status_code == 404
        assert _stored(upload_root, uploads.FILE_DIR) == []


class TestListGetDelete:
    def test_list_filtered_by_type(self, client, make_ticket):
        ticket = make_ticket()
        _upload(client, ticket.id, "a.png", ticket.created_by)
        _upload(client, ticket.id, "b.pdf", ticket.created_by)

        url = f"/api/v1/tickets/{ticket.id}/attachments"
        assert client.get(url).get_json()["data"]["pagination"]["totalItems"] == 2
        images = client.get(f"{url}?type=image").get_json()["data"]["items"]
        assert [item["type"] for item in images] == ["IMAGE"]
        assert client.get(f"{url}?type=video").status_code == 400

    def test_list_unknown_ticket(self, client):
        response = client.get("/api/v1/tickets/999/attachments")
        assert response.status_code == 404

    def test_get_and_delete(self, client, make_ticket, upload_root):
        ticket = make_ticket()
        created = _upload(client, ticket.id, "notes.docx", ticket.created_by)
        attachment_id = created.get_json()["data"]["id"]

        fetched = client.get(f"/api/v1/ticket-attachments/{attachment_id}")
        assert fetched.get_json()["data"]["id"] == attachment_id

        response = client.delete(f"/api/v1/ticket-attachments/{attachment_id}")
        assert response.get_json() == {
            "success": True,
            "message": "Ticket attachment deleted successfully",
        }
        assert _stored(upload_root, uploads.FILE_DIR) == []
        missing = client.get(f"/api/v1/ticket-attachments/{attachment_id}")
        assert missing.status_code == 404


class TestDatabaseFailure:
    def test_insert_failure_removes_stored_file(
        self, client, make_ticket, upload_root, monkeypatch
    ):
        monkeypatch.setattr(ticket_attachment_repository, "create", _database_down)
        ticket = make_ticket()
        response = _upload(client, ticket.id, "log.txt", ticket.created_by)

        assert response.status_code == 500
        assert response.get_json()["error"] == {
            "code": "INTERNAL_SERVER_ERROR",
            "message": "Failed to create ticket attachment",
        }
        assert _stored(upload_root, uploads.FILE_DIR) == []
