import pytest

from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.categories.schemas import TicketCategoryCreate, TicketCategoryUpdate
from ticketing.modules.categories.service import TicketCategoryService
from ticketing.modules.departments.schemas import DepartmentCreate, DepartmentUpdate
from ticketing.modules.departments.service import DepartmentService
from ticketing.modules.faq.schemas import FAQCategoryCreate, FAQItemCreate
from ticketing.modules.faq.service import FAQService
from ticketing.modules.priorities.schemas import TicketPriorityCreate, TicketPriorityUpdate
from ticketing.modules.priorities.service import TicketPriorityService
from ticketing.modules.statuses.schemas import TicketStatusCreate, TicketStatusUpdate
from ticketing.modules.statuses.service import TicketStatusService
from ticketing.modules.teams.schemas import TeamCreate, TeamUpdate
from ticketing.modules.teams.service import TeamService
from ticketing.modules.tickets.schemas import TicketCreate
from ticketing.modules.tickets.service import TicketService
from ticketing.modules.users.schemas import UserCreate, UserRoleIn
from ticketing.modules.users.service import UserService

async def _open_ticket(session, ref, **overrides):
    data = dict(title="t", description="d", category_id=ref.bug, priority_id=ref.high, department_id=ref.support)
    data.update(overrides)
    return await TicketService(session).create(TicketCreate(**data), ref.customer)

# ---- departments ----

async def test_department_name_is_unique_ignoring_case(session, ref):
    service = DepartmentService(session)
    with pytest.raises(ValidationError, match="Department name already exists"):
        await service.create(DepartmentCreate(name="  support "))

async def test_department_update_keeps_own_name(session, ref):
    service = DepartmentService(session)
    updated = await service.update(ref.support, DepartmentUpdate(name="Support", description="First line"))
    assert updated.description == "First line"
    with pytest.raises(ValidationError):
        await service.update(ref.support, DepartmentUpdate(name="BILLING"))

async def test_department_deactivate_hides_it(session, ref):
    service = DepartmentService(session)
    assert await service.deactivate(ref.billing)
    assert not await service.deactivate(ref.billing)
    with pytest.raises(NotFoundError):
        await service.get_by_id(ref.billing)
    assert [d.name for d in await service.get_all_active()] == ["Support"]

async def test_department_details(session, ref):
    await _open_ticket(session, ref)
    details = await DepartmentService(session).get_details(ref.support)
    assert [t.name for t in details.teams] == ["Alpha"]
    assert {u.email for u in details.users} == {"admin@example.com", "agent@example.com", "customer@example.com"}
    assert details.active_tickets_count == 1

# ---- teams ----

async def test_team_names_are_unique_per_department(session, ref):
    service = TeamService(session)
    with pytest.raises(ValidationError, match="Team name already exists in this department"):
        await service.create(TeamCreate(department_id=ref.support, name="alpha"))

    other = await service.create(TeamCreate(department_id=ref.billing, name="Alpha"))
    assert other.department_name == "Billing"

async def test_team_requires_active_department(session, ref):
    service = TeamService(session)
    await DepartmentService(session).deactivate(ref.billing)
    with pytest.raises(ValidationError, match="Invalid department"):
        await service.create(TeamCreate(department_id=ref.billing, name="Refunds"))

async def test_team_update_and_listing(session, ref):
    service = TeamService(session)
    out = await service.update(ref.alpha, TeamUpdate(name="Alpha", description="Escalations"))
    assert out.description == "Escalations"
    assert [t.name for t in await service.get_by_department(ref.support)] == ["Alpha"]
    assert await service.deactivate(ref.alpha)
    assert await service.get_by_department(ref.support) == []

# ---- categories ----

async def test_category_uniqueness_and_guarded_deactivate(session, ref):
    service = TicketCategoryService(session)
    with pytest.raises(ValidationError, match="already exists"):
        await service.create(TicketCategoryCreate(name="BUG"))
    await service.update(ref.bug, TicketCategoryUpdate(name="Bug", description="Defects"))

    ticket = await _open_ticket(session, ref)
    with pytest.raises(ValidationError, match="1 active tickets"):
        await service.deactivate(ref.bug)

    await TicketService(session).close(ticket.id, ref.agent)
    assert await service.deactivate(ref.bug)
    assert await service.get_active() == []

# ---- priorities and statuses ----

async def test_priority_uniqueness(session, ref):
    service = TicketPriorityService(session)
    with pytest.raises(ValidationError, match="already exists"):
        await service.create(TicketPriorityCreate(name="high"))
    updated = await service.update(ref.high, TicketPriorityUpdate(name="High", level=1))
    assert updated.level == 1

async def test_priority_delete_guard(session, ref):
    service = TicketPriorityService(session)
    await _open_ticket(session, ref)
    with pytest.raises(ValidationError, match="being used by 1 tickets"):
        await service.delete(ref.high)
    assert await service.delete(ref.low)
    with pytest.raises(NotFoundError):
        await service.get_by_id(ref.low)

async def test_priorities_ordered_by_name(session, ref):
    service = TicketPriorityService(session)
    assert [p.name for p in await service.get_all_ordered_by_name()] == ["High", "Low"]

async def test_status_delete_guard(session, ref):
    service = TicketStatusService(session)
    await _open_ticket(session, ref)
    with pytest.raises(ValidationError, match="being used by 1 tickets"):
        await service.delete(ref.open)
    assert await service.ticket_count(ref.open) == 1
    assert await service.delete(ref.in_progress)

async def test_status_uniqueness(session, ref):
    service = TicketStatusService(session)
    with pytest.raises(ValidationError, match="already exists"):
        await service.create(TicketStatusCreate(name="closed"))
    created = await service.create(TicketStatusCreate(name="Waiting"))
    assert not created.is_terminal

# ---- users ----

async def test_user_email_unique_ignoring_case(session, ref):
    service = UserService(session)
    with pytest.raises(ValidationError, match="Email already exists"):
        await service.create(UserCreate(email="Agent@Example.com", password="x", first_name="A", last_name="B"))

async def test_user_create_validates_role_scope(session, ref):
    service = UserService(session)
    payload = UserCreate(
        email="new@example.com", password="pw", first_name="New", last_name="Person",
        user_roles=[UserRoleIn(role_id=ref.agent_role, department_id=ref.support, team_id=ref.invoices)],
    )
    with pytest.raises(ValidationError, match="Team does not belong"):
        await service.create(payload)

    payload.user_roles = [UserRoleIn(role_id=ref.agent_role, department_id=ref.billing, team_id=ref.invoices)]
    out = await service.create(payload)
    assert out.email == "new@example.com"
    assert out.user_roles[0].role_name == "Agent"
    assert out.user_roles[0].team_name == "Invoices"

# ---- faq ----

async def test_faq_category_and_items(session, ref):
    service = FAQService(session)
    category = await service.create_category(FAQCategoryCreate(name="Accounts"))
    with pytest.raises(ValidationError, match="Category name already exists"):
        await service.create_category(FAQCategoryCreate(name="ACCOUNTS"))

    item = await service.create_item(
        FAQItemCreate(category_id=category.id, question="How do I reset my password?", answer="Use the login page."),
        ref.agent,
    )
    assert item.created_by_name == "Alan Agent"
    assert [i.id for i in await service.search("PASSWORD")] == [item.id]
    assert await service.search("invoice") == []

    with_items = await service.get_category_with_items(category.id)
    assert [i.question for i in with_items.items] == ["How do I reset my password?"]

    await service.deactivate_category(category.id)
    with pytest.raises(ValidationError, match="Invalid or inactive category"):
        await service.create_item(FAQItemCreate(category_id=category.id, question="q", answer="a"), ref.agent)

async def test_status_rename_cannot_flip_closed_state_in_use(session, ref):
    service = TicketStatusService(session)
    ticket = await _open_ticket(session, ref)
    with pytest.raises(ValidationError, match="lifecycle meaning of a status used by 1 tickets"):
        await service.update(ref.open, TicketStatusUpdate(name="Closed - legacy"))

    out = await TicketService(session).get_by_id(ticket.id)
    assert out.status_name == "Open"
    assert out.closed_at is None

    # same lifecycle meaning, or no tickets using it, is fine
    assert (await service.update(ref.open, TicketStatusUpdate(name="New"))).name == "New"
    assert (await service.update(ref.in_progress, TicketStatusUpdate(name="Resolved - pending"))).is_terminal

async def test_faq_search_treats_wildcards_literally(session, ref):
    service = FAQService(session)
    category = await service.create_category(FAQCategoryCreate(name="Service levels"))
    uptime = await service.create_item(
        FAQItemCreate(category_id=category.id, question="Is uptime 100%?", answer="Close to it."), ref.agent
    )
    await service.create_item(
        FAQItemCreate(category_id=category.id, question="Why 100 servers?", answer="Redundancy."), ref.agent
    )
    snake = await service.create_item(
        FAQItemCreate(category_id=category.id, question="What is vpn_profile?", answer="A config file."), ref.agent
    )
    await service.create_item(
        FAQItemCreate(category_id=category.id, question="Where is vpnXprofile?", answer="Nowhere."), ref.agent
    )

    assert [i.id for i in await service.search("100%")] == [uptime.id]
    assert [i.id for i in await service.search("vpn_profile")] == [snake.id]
