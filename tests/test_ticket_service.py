from datetime import datetime, timedelta, timezone

import pytest

from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.tickets.models import Ticket
from ticketing.modules.statuses.models import TicketStatus
from ticketing.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketCommentCreate,
    TicketAttachmentCreate, TicketFeedbackCreate,
)
from ticketing.modules.tickets.service import TicketService
from ticketing.modules.users.models import User

def _payload(ref, **overrides) -> TicketCreate:
    data = dict(
        title="Printer on fire",
        description="Third floor printer is smoking",
        category_id=ref.bug,
        priority_id=ref.high,
        department_id=ref.support,
    )
    data.update(overrides)
    return TicketCreate(**data)

@pytest.fixture
def service(session):
    return TicketService(session)

@pytest.fixture
async def ticket(service, ref):
    return await service.create(_payload(ref), ref.customer)

# ---- create ----

async def test_create_uses_default_status(service, ref):
    out = await service.create(_payload(ref), ref.customer)
    assert out.status_id == 1
    assert out.status_name == "Open"
    assert out.closed_at is None
    assert out.team_id is None and out.assigned_to_id is None
    assert out.created_by_name == "Cora Customer"
    assert out.department_name == "Support"

async def test_create_rejects_inactive_creator(service, session, ref):
    user = await session.get(User, ref.customer)
    user.is_active = False
    await session.commit()
    with pytest.raises(NotFoundError, match="User not found or inactive"):
        await service.create(_payload(ref), ref.customer)

async def test_create_rejects_team_from_other_department(service, ref):
    with pytest.raises(ValidationError, match="team doesn't belong"):
        await service.create(_payload(ref, team_id=ref.invoices), ref.customer)

async def test_create_checks_department_before_category(service, ref):
    with pytest.raises(ValidationError, match="Invalid department"):
        await service.create(_payload(ref, department_id=999, category_id=999), ref.customer)

@pytest.mark.parametrize("field,message", [
    ("category_id", "Invalid ticket category"),
    ("priority_id", "Invalid ticket priority"),
    ("assigned_to_id", "Invalid assigned user"),
])
async def test_create_rejects_unknown_references(service, ref, field, message):
    with pytest.raises(ValidationError, match=message):
        await service.create(_payload(ref, **{field: 999}), ref.customer)

async def test_create_with_team_and_assignee(service, ref):
    out = await service.create(_payload(ref, team_id=ref.alpha, assigned_to_id=ref.agent), ref.customer)
    assert out.team_name == "Alpha"
    assert out.assigned_to_name == "Alan Agent"

# ---- update ----

def _update(ref, **overrides) -> TicketUpdate:
    data = dict(
        title="Printer still on fire",
        description="Now the second floor too",
        category_id=ref.bug,
        priority_id=ref.low,
        status_id=ref.in_progress,
    )
    data.update(overrides)
    return TicketUpdate(**data)

async def test_update_applies_fields(service, ref, ticket):
    out = await service.update(ticket.id, _update(ref, team_id=ref.alpha), ref.agent)
    assert out.title == "Printer still on fire"
    assert out.priority_name == "Low"
    assert out.status_name == "In Progress"
    assert out.team_name == "Alpha"
    assert out.updated_at > ticket.updated_at

async def test_update_into_terminal_status_sets_closed_at(service, ref, ticket):
    out = await service.update(ticket.id, _update(ref, status_id=ref.closed), ref.agent)
    assert out.closed_at is not None
    out = await service.update(ticket.id, _update(ref, status_id=ref.open), ref.agent)
    assert out.closed_at is None

async def test_update_rejects_team_outside_ticket_department(service, ref, ticket):
    with pytest.raises(ValidationError, match="team doesn't belong"):
        await service.update(ticket.id, _update(ref, team_id=ref.invoices), ref.agent)

async def test_update_rejects_unknown_status(service, ref, ticket):
    with pytest.raises(ValidationError, match="Invalid ticket status"):
        await service.update(ticket.id, _update(ref, status_id=999), ref.agent)

async def test_update_missing_ticket(service, ref):
    with pytest.raises(NotFoundError, match="Ticket not found"):
        await service.update(999, _update(ref), ref.agent)

# ---- status ----

async def test_resolving_closes_and_audits(service, ref, ticket):
    out = await service.update_status(ticket.id, ref.resolved, ref.agent)
    assert out.status_id == ref.resolved
    assert out.closed_at is not None

    comments = await service.get_comments(ticket.id, include_internal=True)
    assert comments[0].comment == "Status changed to Resolved"
    assert comments[0].is_internal
    assert comments[0].user_name == "Alan Agent"

async def test_leaving_terminal_status_clears_closed_at(service, ref, ticket):
    await service.update_status(ticket.id, ref.closed, ref.agent)
    out = await service.update_status(ticket.id, ref.in_progress, ref.agent)
    assert out.closed_at is None

async def test_any_status_can_follow_any_other(service, ref, ticket):
    for status_id in (ref.closed, ref.open, ref.resolved, ref.in_progress, ref.closed):
        out = await service.update_status(ticket.id, status_id, ref.agent)
        assert out.status_id == status_id
        assert (out.closed_at is not None) == (status_id in (ref.closed, ref.resolved))

async def test_update_status_unknown(service, ref, ticket):
    with pytest.raises(ValidationError, match="Invalid ticket status"):
        await service.update_status(ticket.id, 999, ref.agent)

async def test_close_and_reopen(service, ref, ticket):
    closed = await service.close(ticket.id, ref.agent)
    # lowest-id terminal status
    assert closed.status_name == "Resolved"
    assert closed.closed_at is not None

    reopened = await service.reopen(ticket.id, ref.agent)
    assert reopened.status_name == "Open"
    assert reopened.closed_at is None

async def test_close_without_terminal_status(service, session, ref, ticket):
    for status_id in (ref.resolved, ref.closed):
        status = await session.get(TicketStatus, status_id)
        status.name = status.name.replace("Resolved", "Fixed").replace("Closed", "Done")
    await session.commit()
    with pytest.raises(ValidationError, match="Closed status not found"):
        await service.close(ticket.id, ref.agent)

async def test_update_priority_audits(service, ref, ticket):
    out = await service.update_priority(ticket.id, ref.low, ref.agent)
    assert out.priority_name == "Low"
    comments = await service.get_comments(ticket.id, include_internal=True)
    assert comments[0].comment == "Priority changed to Low"

# ---- assignment ----

async def _internal_count(service, ticket_id):
    return len(await service.get_comments(ticket_id, include_internal=True))

async def test_assignment_side_effects(service, ref, ticket):
    before = ticket.updated_at

    steps = [
        (service.assign, (ticket.id, ref.agent, ref.admin), "Ticket assigned to Alan Agent"),
        (service.reassign, (ticket.id, ref.admin, ref.admin), "Ticket reassigned to Ada Admin"),
        (service.unassign, (ticket.id, ref.admin), "Ticket unassigned"),
    ]
    for call, args, text in steps:
        count = await _internal_count(service, ticket.id)
        out = await call(*args)
        comments = await service.get_comments(ticket.id, include_internal=True)
        assert len(comments) == count + 1
        assert comments[0].comment == text
        assert comments[0].is_internal
        assert out.updated_at > before
        before = out.updated_at

    assert out.assigned_to_id is None

async def test_reassign_unassigned_ticket_reads_as_assign(service, ref, ticket):
    await service.reassign(ticket.id, ref.agent, ref.admin)
    comments = await service.get_comments(ticket.id, include_internal=True)
    assert comments[0].comment == "Ticket assigned to Alan Agent"

async def test_assign_inactive_user(service, session, ref, ticket):
    user = await session.get(User, ref.agent)
    user.is_active = False
    await session.commit()
    with pytest.raises(ValidationError, match="Invalid assigned user"):
        await service.assign(ticket.id, ref.agent, ref.admin)
    assert await _internal_count(service, ticket.id) == 0

async def test_assign_missing_ticket(service, ref):
    with pytest.raises(NotFoundError):
        await service.assign(999, ref.agent, ref.admin)

# ---- comments ----

async def test_comment_visibility(service, ref, ticket):
    await service.add_comment(ticket.id, TicketCommentCreate(comment="public note"), ref.customer)
    await service.add_comment(ticket.id, TicketCommentCreate(comment="agents only", is_internal=True), ref.agent)

    public = await service.get_comments(ticket.id, include_internal=False)
    assert [c.comment for c in public] == ["public note"]
    assert not any(c.is_internal for c in public)

    everything = await service.get_comments(ticket.id, include_internal=True)
    assert [c.comment for c in everything] == ["agents only", "public note"]

async def test_comment_bumps_ticket(service, ref, ticket):
    await service.add_comment(ticket.id, TicketCommentCreate(comment="ping"), ref.customer)
    out = await service.get_by_id(ticket.id)
    assert out.updated_at > ticket.updated_at

async def test_comment_on_missing_ticket(service, ref):
    with pytest.raises(NotFoundError, match="Ticket not found"):
        await service.add_comment(999, TicketCommentCreate(comment="hello"), ref.customer)

# ---- attachments and feedback ----

async def test_attachments(service, ref, ticket):
    added = await service.add_attachment(
        ticket.id, TicketAttachmentCreate(file_name="log.txt", file_path="tickets/1/log.txt"), ref.customer
    )
    assert added.user_name == "Cora Customer"
    assert [a.file_name for a in await service.get_attachments(ticket.id)] == ["log.txt"]

    assert await service.remove_attachment(added.id, ref.customer)
    assert await service.get_attachments(ticket.id) == []
    with pytest.raises(NotFoundError, match="Attachment not found"):
        await service.remove_attachment(added.id, ref.customer)

async def test_feedback_only_once_on_closed_ticket(service, ref, ticket):
    with pytest.raises(ValidationError, match="closed tickets"):
        await service.add_feedback(ticket.id, TicketFeedbackCreate(rating=5), ref.customer)

    await service.close(ticket.id, ref.agent)
    out = await service.add_feedback(ticket.id, TicketFeedbackCreate(rating=4, comment="quick"), ref.customer)
    assert out.rating == 4
    assert (await service.get_feedback(ticket.id)).comment == "quick"

    with pytest.raises(ValidationError, match="already submitted"):
        await service.add_feedback(ticket.id, TicketFeedbackCreate(rating=1), ref.customer)

async def test_feedback_missing(service, ref, ticket):
    with pytest.raises(NotFoundError):
        await service.get_feedback(ticket.id)

# ---- reads and analytics ----

async def test_filters_and_counts(service, ref):
    first = await service.create(_payload(ref, title="first"), ref.customer)
    second = await service.create(_payload(ref, title="second", assigned_to_id=ref.agent), ref.admin)
    third = await service.create(_payload(ref, title="third", team_id=ref.alpha), ref.customer)
    await service.close(second.id, ref.agent)

    assert [t.id for t in await service.get_all()] == [third.id, second.id, first.id]
    assert [t.id for t in await service.get_by_user(ref.customer)] == [third.id, first.id]
    assert [t.id for t in await service.get_assigned_to_user(ref.agent)] == [second.id]
    assert [t.id for t in await service.get_by_team(ref.alpha)] == [third.id]
    assert [t.id for t in await service.get_active()] == [third.id, first.id]
    assert len(await service.get_by_department(ref.support)) == 3
    assert await service.get_by_department(ref.billing) == []
    assert len(await service.get_by_category(ref.bug)) == 3
    assert len(await service.get_by_priority(ref.high)) == 3
    assert [t.id for t in await service.get_by_status(ref.open)] == [third.id, first.id]

    assert await service.active_count() == 2
    assert await service.count_by_status(ref.resolved) == 1
    assert await service.count_by_user(ref.customer) == 2
    assert await service.count_by_department(ref.support) == 3

async def test_created_between(service, ref, ticket):
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    found = await service.get_created_between(now - timedelta(hours=1), now + timedelta(hours=1))
    assert [t.id for t in found] == [ticket.id]
    assert await service.get_created_between(now + timedelta(hours=1), now + timedelta(hours=2)) == []
    with pytest.raises(ValidationError):
        await service.get_created_between(now, now - timedelta(days=1))

async def test_delete_removes_children(service, session, ref, ticket):
    await service.add_comment(ticket.id, TicketCommentCreate(comment="bye"), ref.customer)
    assert await service.delete(ticket.id)
    with pytest.raises(NotFoundError):
        await service.get_by_id(ticket.id)
    assert await session.get(Ticket, ticket.id) is None
    with pytest.raises(NotFoundError):
        await service.delete(ticket.id)
