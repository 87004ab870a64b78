"""
Tests for the ticket resolutions blueprint and the
``/tickets/<id>/resolution`` lookup.
"""

API = "/api/v1/ticket-resolutions"


class TestCreateResolution:
    def test_create_and_lookup(self, client, make_ticket):
        ticket = make_ticket()
        response = client.post(
            API,
            json={
                "ticketId": ticket.id,
                "resolvedBy": ticket.created_by,
                "resolutionNote": "Cleared the print queue.",
            },
        )
        assert response.status_code == 201
        resolution = response.get_json()["data"]

        lookup = client.get(f"/api/v1/tickets/{ticket.id}/resolution")
        assert lookup.status_code == 200
        assert lookup.get_json()["data"] == resolution

        duplicate = client.post(
            API, json={"ticketId": ticket.id, "resolvedBy": ticket.created_by}
        )
        assert duplicate.status_code == 409
        assert duplicate.get_json()["error"]["message"] == (
            "Ticket resolution already exists"
        )

    def test_validation(self, client):
        response = client.post(API, json={"ticketId": 0})
        assert response.status_code == 400
        assert response.get_json()["error"]["details"] == {
            "ticketId": "Required and must be greater than 0",
            "resolvedBy": "Required and must be greater than 0",
        }


class TestTicketResolutionLookup:
    def test_lookup_without_resolution(self, client, make_ticket):
        ticket = make_ticket()
        response = client.get(f"/api/v1/tickets/{ticket.id}/resolution")
        assert response.status_code == 404
        assert response.get_json()["error"]["message"] == (
            "Ticket resolution not found"
        )

    def test_lookup_unknown_ticket(self, client):
        response = client.get("/api/v1/tickets/999/resolution")
        assert response.get_json()["error"]["message"] == "Ticket not found"


class TestUpdateListDelete:
    def test_update_list_delete(self, client, make_ticket):
        ticket = make_ticket()
        created = client.post(
            API, json={"ticketId": ticket.id, "resolvedBy": ticket.created_by}
        ).get_json()["data"]

        updated = client.patch(
            f"{API}/{created['id']}", json={"resolutionNote": "Swapped the cable."}
        ).get_json()["data"]
        assert updated["resolutionNote"] == "Swapped the cable."

        listed = client.get(f"{API}?resolvedBy={ticket.created_by}").get_json()
        assert listed["data"]["pagination"]["totalItems"] == 1

        response = client.delete(f"{API}/{created['id']}")
        assert response.get_json() == {
            "success": True,
            "message": "Ticket resolution deleted successfully",
        }
