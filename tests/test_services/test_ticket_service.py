"""
Tests for ticket_service: references, lifecycle timestamps and
cascading deletion.
"""

import io
import os
from datetime import datetime

import pytest
from werkzeug.datastructures import FileStorage

from helpdesk import uploads
from helpdesk.errors import NotFoundError, ValidationError
from helpdesk.models.itsm import TicketAttachment, TicketResolution
from helpdesk.schemas.ticket import (
    CreateTicketRequest,
    GetTicketsQuery,
    UpdateTicketRequest,
)
from helpdesk.services import ticket_service


@pytest.fixture()
def staff(make_user):
    return make_user(name="Jane Staff", email="jane@example.com")


@pytest.fixture()
def tech(make_user):
    return make_user(name="Ivan Tech", email="ivan@example.com", role="IT")


@pytest.fixture()
def hardware(make_category):
    return make_category("Hardware")


def _parse(value):
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _update(ticket, **overrides):
    fields = {
        "title": ticket.title,
        "description": ticket.description,
        "category_id": ticket.category_id,
        "priority": ticket.priority,
        "status": ticket.status,
    }
    fields.update(overrides)
    return UpdateTicketRequest(**fields)


class TestCreateTicket:
    def test_new_ticket_is_open(self, staff, hardware):
        result = ticket_service.create(
            CreateTicketRequest(
                title="  Laptop will not boot ",
                description="Black screen after the update.",
                category_id=hardware.id,
                priority="URGENT",
                created_by=staff.id,
            )
        )
        assert result["title"] == "Laptop will not boot"
        assert result["status"] == "OPEN"
        assert result["categoryName"] == "Hardware"
        assert result["assignedTo"] is None
        assert result["resolvedAt"] is None
        assert result["closedAt"] is None

    def test_inactive_category(self, staff, make_category):
        retired = make_category("Retired", is_active=False)
        with pytest.raises(ValidationError) as exc_info:
            ticket_service.create(
                CreateTicketRequest(
                    title="Broken chair",
                    description="Wobbles.",
                    category_id=retired.id,
                    priority="LOW",
                    created_by=staff.id,
                )
            )
        assert exc_info.value.details == {"categoryId": "Category is not active"}

    def test_unknown_assignee(self, staff, hardware):
        with pytest.raises(NotFoundError, match="User not found"):
            ticket_service.create(
                CreateTicketRequest(
                    title="Monitor flicker",
                    description="Flickers at 60Hz.",
                    category_id=hardware.id,
                    priority="LOW",
                    created_by=staff.id,
                    assigned_to=999,
                )
            )


class TestLifecycleTimestamps:
    def test_resolved_at_is_stamped_once(self, make_ticket):
        ticket = make_ticket()
        first = ticket_service.update(ticket.id, _update(ticket, status="RESOLVED"))
        assert first["resolvedAt"] is not None

        second = ticket_service.update(ticket.id, _update(ticket, status="RESOLVED"))
        assert second["resolvedAt"] == first["resolvedAt"]

    def test_closed_at_is_stamped(self, make_ticket):
        ticket = make_ticket()
        result = ticket_service.update(ticket.id, _update(ticket, status="CLOSED"))
        assert result["closedAt"] is not None
        assert result["resolvedAt"] is None

    def test_any_status_change_is_allowed(self, make_ticket):
        ticket = make_ticket(status="CLOSED")
        result = ticket_service.update(ticket.id, _update(ticket, status="OPEN"))
        assert result["status"] == "OPEN"

    def test_assigning_stamps_assigned_at(self, make_ticket, tech):
        ticket = make_ticket()
        before = ticket_service.get_by_id(ticket.id)["assignedAt"]
        result = ticket_service.update(
            ticket.id,
            _update(ticket, assigned_to=tech.id, assigned_to_provided=True),
        )
        assert result["assignedTo"] == tech.id
        assert _parse(result["assignedAt"]) >= _parse(before)

    def test_absent_assignee_keeps_current(self, make_ticket, tech):
        ticket = make_ticket(assigned_to=tech)
        result = ticket_service.update(ticket.id, _update(ticket, title="Renamed"))
        assert result["assignedTo"] == tech.id

    def test_null_assignee_unassigns(self, make_ticket, tech):
        ticket = make_ticket(assigned_to=tech)
        result = ticket_service.update(
            ticket.id, _update(ticket, assigned_to=None, assigned_to_provided=True)
        )
        assert result["assignedTo"] is None

    def test_inactive_assignee_rejected(self, make_ticket, make_user):
        ticket = make_ticket()
        gone = make_user(email="gone@example.com", is_active=False)
        with pytest.raises(ValidationError) as exc_info:
            ticket_service.update(
                ticket.id,
                _update(ticket, assigned_to=gone.id, assigned_to_provided=True),
            )
        assert exc_info.value.details == {"assignedTo": "User is not active"}


class TestListTickets:
    def test_status_and_priority_filters_ignore_case(self, make_ticket):
        make_ticket(title="Urgent one", priority="URGENT")
        make_ticket(title="Closed one", status="CLOSED")
        make_ticket(title="Plain one")

        urgent = ticket_service.get_all(GetTicketsQuery(priority="urgent"))
        closed = ticket_service.get_all(GetTicketsQuery(status="closed"))

        assert [item["title"] for item in urgent.items] == ["Urgent one"]
        assert [item["title"] for item in closed.items] == ["Closed one"]

    def test_assigned_to_filter(self, make_ticket, tech):
        make_ticket(title="Mine", assigned_to=tech)
        make_ticket(title="Unassigned")
        result = ticket_service.get_all(GetTicketsQuery(assigned_to=tech.id))
        assert result.pagination.total_items == 1


class TestDeleteTicket:
    def test_cascades_and_removes_files(self, db, make_ticket, staff, upload_root):
        ticket = make_ticket(created_by=staff)
        url = uploads.save_ticket_image(
            FileStorage(io.BytesIO(b"png"), filename="shot.png")
        )
        db.session.add(
            TicketAttachment(
                ticket_id=ticket.id, uploaded_by=staff.id, file_url=url, type="IMAGE"
            )
        )
        db.session.add(TicketResolution(ticket_id=ticket.id, resolved_by=staff.id))
        db.session.commit()

        ticket_service.delete(ticket.id)

        assert TicketAttachment.query.count() == 0
        assert TicketResolution.query.count() == 0
        assert not os.path.exists(uploads.resolve_path(url))
        with pytest.raises(NotFoundError):
            ticket_service.get_by_id(ticket.id)

    def test_missing_ticket(self, app):
        with pytest.raises(NotFoundError, match="Ticket not found"):
            ticket_service.delete(321)
