import logging
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.config import settings
from ticketing.core.errors import NotFoundError, ValidationError
from ticketing.modules.tickets.repository import (
    TicketRepository, TicketCommentRepository,
    TicketAttachmentRepository, TicketFeedbackRepository
)
from ticketing.modules.tickets.models import Ticket
from ticketing.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketOut,
    TicketCommentCreate, TicketCommentOut,
    TicketAttachmentCreate, TicketAttachmentOut,
    TicketFeedbackCreate, TicketFeedbackOut
)
from ticketing.modules.categories.repository import TicketCategoryRepository
from ticketing.modules.departments.repository import DepartmentRepository
from ticketing.modules.priorities.repository import TicketPriorityRepository
from ticketing.modules.statuses.repository import TicketStatusRepository
from ticketing.modules.statuses import workflow
from ticketing.modules.teams.repository import TeamRepository
from ticketing.modules.users.models import User
from ticketing.modules.users.repository import UserRepository

logger = logging.getLogger(__name__)

def _now() -> datetime:
    return datetime.now(timezone.utc)

def _aware(value: datetime) -> datetime:
    # SQLite hands back naive values for TIMESTAMP(timezone=True)
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)

def _touch(ticket: Ticket) -> datetime:
    """Advance ``updated_at`` to now, always strictly past its previous value."""
    now = _now()
    if ticket.updated_at is not None and now <= _aware(ticket.updated_at):
        now = _aware(ticket.updated_at) + timedelta(microseconds=1)
    ticket.updated_at = now
    return now

class TicketService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.tickets = TicketRepository(session)
        self.comments = TicketCommentRepository(session)
        self.attachments = TicketAttachmentRepository(session)
        self.feedback = TicketFeedbackRepository(session)
        self.users = UserRepository(session)
        self.departments = DepartmentRepository(session)
        self.teams = TeamRepository(session)
        self.categories = TicketCategoryRepository(session)
        self.priorities = TicketPriorityRepository(session)
        self.statuses = TicketStatusRepository(session)

    # ---- Lookups ----
    async def _ticket(self, ticket_id: int) -> Ticket:
        ticket = await self.tickets.get(ticket_id)
        if not ticket:
            logger.warning("Ticket not found: %s", ticket_id)
            raise NotFoundError("Ticket not found")
        return ticket

    async def _active_user(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if not user or not user.is_active:
            logger.warning("User not found or inactive: %s", user_id)
            raise NotFoundError("User not found or inactive")
        return user

    async def _assignee(self, user_id: int) -> User:
        user = await self.users.get(user_id)
        if not user or not user.is_active:
            logger.warning("Assigned user not found or inactive: %s", user_id)
            raise ValidationError("Invalid assigned user")
        return user

    async def _check_team(self, team_id: int, department_id: int) -> None:
        team = await self.teams.get(team_id)
        if not team or not team.is_active or team.department_id != department_id:
            raise ValidationError("Invalid team or team doesn't belong to the specified department")

    async def _check_category(self, category_id: int) -> None:
        category = await self.categories.get(category_id)
        if not category or not category.is_active:
            raise ValidationError("Invalid ticket category")

    async def _check_priority(self, priority_id: int):
        priority = await self.priorities.get(priority_id)
        if not priority:
            raise ValidationError("Invalid ticket priority")
        return priority

    def _apply_status(self, ticket: Ticket, status, now: datetime) -> None:
        ticket.status_id = status.id
        if workflow.is_terminal(status.name):
            ticket.closed_at = now
        elif ticket.closed_at is not None:
            ticket.closed_at = None
            logger.debug("Ticket %s reopened", ticket.id)

    # ---- Reads ----
    async def get_by_id(self, ticket_id: int) -> TicketOut:
        ticket = await self.tickets.get_details(ticket_id)
        if not ticket:
            logger.warning("Ticket not found: %s", ticket_id)
            raise NotFoundError("Ticket not found")
        return TicketOut.from_entity(ticket)

    async def _list(self, **filters) -> list[TicketOut]:
        return [TicketOut.from_entity(t) for t in await self.tickets.list_filtered(**filters)]

    async def get_all(self) -> list[TicketOut]:
        return await self._list()

    async def get_by_user(self, user_id: int) -> list[TicketOut]:
        return await self._list(created_by_id=user_id)

    async def get_assigned_to_user(self, user_id: int) -> list[TicketOut]:
        return await self._list(assigned_to_id=user_id)

    async def get_by_department(self, department_id: int) -> list[TicketOut]:
        return await self._list(department_id=department_id)

    async def get_by_team(self, team_id: int) -> list[TicketOut]:
        return await self._list(team_id=team_id)

    async def get_by_status(self, status_id: int) -> list[TicketOut]:
        return await self._list(status_id=status_id)

    async def get_by_priority(self, priority_id: int) -> list[TicketOut]:
        return await self._list(priority_id=priority_id)

    async def get_by_category(self, category_id: int) -> list[TicketOut]:
        return await self._list(category_id=category_id)

    async def get_active(self) -> list[TicketOut]:
        return await self._list(active=True)

    async def get_created_between(self, start: datetime, end: datetime) -> list[TicketOut]:
        # query params may arrive naive or offset-aware; compare in UTC
        start, end = _aware(start).astimezone(timezone.utc), _aware(end).astimezone(timezone.utc)
        if start > end:
            raise ValidationError("Start date must be before end date")
        return await self._list(created_from=start, created_to=end)

    # ---- Lifecycle ----
    async def create(self, payload: TicketCreate, created_by_id: int) -> TicketOut:
        logger.info("Creating ticket %r for user %s", payload.title, created_by_id)
        await self._active_user(created_by_id)

        department = await self.departments.get(payload.department_id)
        if not department or not department.is_active:
            raise ValidationError("Invalid department")
        if payload.team_id is not None:
            await self._check_team(payload.team_id, payload.department_id)
        await self._check_category(payload.category_id)
        await self._check_priority(payload.priority_id)
        if payload.assigned_to_id is not None:
            await self._assignee(payload.assigned_to_id)

        status = await self.statuses.get(settings.DEFAULT_STATUS_ID)
        if not status:
            logger.error("Default ticket status %s is missing", settings.DEFAULT_STATUS_ID)
            raise ValidationError("Default ticket status is not configured")

        now = _now()
        obj = await self.tickets.create(
            title=payload.title,
            description=payload.description,
            category_id=payload.category_id,
            priority_id=payload.priority_id,
            status_id=status.id,
            department_id=payload.department_id,
            team_id=payload.team_id,
            assigned_to_id=payload.assigned_to_id,
            created_by_id=created_by_id,
            created_at=now,
            updated_at=now,
            closed_at=None,
        )
        await self.session.commit()
        logger.info("Created ticket %s", obj.id)
        return await self.get_by_id(obj.id)

    async def update(self, ticket_id: int, payload: TicketUpdate, updated_by_id: int) -> TicketOut:
        ticket = await self._ticket(ticket_id)
        await self._active_user(updated_by_id)
        await self._check_category(payload.category_id)
        await self._check_priority(payload.priority_id)
        status = await self.statuses.get(payload.status_id)
        if not status:
            raise ValidationError("Invalid ticket status")
        if payload.assigned_to_id is not None:
            await self._assignee(payload.assigned_to_id)
        if payload.team_id is not None:
            await self._check_team(payload.team_id, ticket.department_id)

        now = _touch(ticket)
        ticket.title = payload.title
        ticket.description = payload.description
        ticket.category_id = payload.category_id
        ticket.priority_id = payload.priority_id
        ticket.assigned_to_id = payload.assigned_to_id
        ticket.team_id = payload.team_id
        if status.id != ticket.status_id or workflow.is_terminal(status.name) != (ticket.closed_at is not None):
            self._apply_status(ticket, status, now)
        await self.session.commit()
        logger.info("Updated ticket %s by user %s", ticket_id, updated_by_id)
        return await self.get_by_id(ticket_id)

    async def delete(self, ticket_id: int) -> bool:
        ticket = await self._ticket(ticket_id)
        await self.tickets.delete(ticket)
        await self.session.commit()
        logger.info("Deleted ticket %s", ticket_id)
        return True

    async def assign(self, ticket_id: int, assigned_to_id: int, actor_id: int) -> TicketOut:
        logger.info("Assigning ticket %s to user %s by user %s", ticket_id, assigned_to_id, actor_id)
        ticket = await self._ticket(ticket_id)
        assignee = await self._assignee(assigned_to_id)
        ticket.assigned_to_id = assignee.id
        _touch(ticket)
        await self.session.commit()
        await self._audit(ticket_id, f"Ticket assigned to {assignee.full_name}", actor_id)
        return await self.get_by_id(ticket_id)

    async def unassign(self, ticket_id: int, actor_id: int) -> TicketOut:
        logger.info("Unassigning ticket %s by user %s", ticket_id, actor_id)
        ticket = await self._ticket(ticket_id)
        ticket.assigned_to_id = None
        _touch(ticket)
        await self.session.commit()
        await self._audit(ticket_id, "Ticket unassigned", actor_id)
        return await self.get_by_id(ticket_id)

    async def reassign(self, ticket_id: int, assigned_to_id: int, actor_id: int) -> TicketOut:
        logger.info("Reassigning ticket %s to user %s by user %s", ticket_id, assigned_to_id, actor_id)
        ticket = await self._ticket(ticket_id)
        assignee = await self._assignee(assigned_to_id)
        verb = "reassigned" if ticket.assigned_to_id is not None else "assigned"
        ticket.assigned_to_id = assignee.id
        _touch(ticket)
        await self.session.commit()
        await self._audit(ticket_id, f"Ticket {verb} to {assignee.full_name}", actor_id)
        return await self.get_by_id(ticket_id)

    async def update_status(self, ticket_id: int, status_id: int, actor_id: int) -> TicketOut:
        logger.info("Changing status of ticket %s to %s by user %s", ticket_id, status_id, actor_id)
        ticket = await self._ticket(ticket_id)
        status = await self.statuses.get(status_id)
        if not status:
            raise ValidationError("Invalid ticket status")
        self._apply_status(ticket, status, _touch(ticket))
        await self.session.commit()
        await self._audit(ticket_id, f"Status changed to {status.name}", actor_id)
        return await self.get_by_id(ticket_id)

    async def update_priority(self, ticket_id: int, priority_id: int, actor_id: int) -> TicketOut:
        ticket = await self._ticket(ticket_id)
        priority = await self._check_priority(priority_id)
        ticket.priority_id = priority.id
        _touch(ticket)
        await self.session.commit()
        await self._audit(ticket_id, f"Priority changed to {priority.name}", actor_id)
        return await self.get_by_id(ticket_id)

    async def close(self, ticket_id: int, actor_id: int) -> TicketOut:
        await self._ticket(ticket_id)
        status = workflow.pick_terminal(await self.statuses.list())
        if not status:
            raise ValidationError("Closed status not found")
        logger.debug("Closing ticket %s with status %s", ticket_id, status.name)
        return await self.update_status(ticket_id, status.id, actor_id)

    async def reopen(self, ticket_id: int, actor_id: int) -> TicketOut:
        await self._ticket(ticket_id)
        status = workflow.pick_reopen(await self.statuses.list())
        if not status:
            raise ValidationError("Open status not found")
        logger.debug("Reopening ticket %s with status %s", ticket_id, status.name)
        return await self.update_status(ticket_id, status.id, actor_id)

    # ---- Comments ----
    async def _audit(self, ticket_id: int, text: str, actor_id: int) -> None:
        # committed after the change it describes
        await self.add_comment(ticket_id, TicketCommentCreate(comment=text, is_internal=True), actor_id)

    async def add_comment(self, ticket_id: int, payload: TicketCommentCreate, user_id: int) -> TicketCommentOut:
        ticket = await self._ticket(ticket_id)
        await self._active_user(user_id)
        obj = await self.comments.create(
            ticket_id=ticket_id, user_id=user_id, comment=payload.comment, is_internal=payload.is_internal
        )
        _touch(ticket)
        await self.session.commit()
        return TicketCommentOut.from_entity(await self.comments.get(obj.id))

    async def get_comments(self, ticket_id: int, include_internal: bool = False) -> list[TicketCommentOut]:
        await self._ticket(ticket_id)
        rows = await self.comments.list_for_ticket(ticket_id, include_internal=include_internal)
        return [TicketCommentOut.from_entity(c) for c in rows]

    # ---- Attachments ----
    async def add_attachment(self, ticket_id: int, payload: TicketAttachmentCreate, user_id: int) -> TicketAttachmentOut:
        ticket = await self._ticket(ticket_id)
        await self._active_user(user_id)
        now = _touch(ticket)
        obj = await self.attachments.create(
            ticket_id=ticket_id, user_id=user_id,
            file_name=payload.file_name, file_path=payload.file_path, uploaded_at=now,
        )
        await self.session.commit()
        logger.info("Attached %r to ticket %s", payload.file_name, ticket_id)
        return TicketAttachmentOut.from_entity(await self.attachments.get(obj.id))

    async def get_attachments(self, ticket_id: int) -> list[TicketAttachmentOut]:
        await self._ticket(ticket_id)
        return [TicketAttachmentOut.from_entity(a) for a in await self.attachments.list_for_ticket(ticket_id)]

    async def remove_attachment(self, attachment_id: int, user_id: int) -> bool:
        obj = await self.attachments.get(attachment_id)
        if not obj:
            raise NotFoundError("Attachment not found")
        await self.attachments.delete(obj)
        await self.session.commit()
        logger.info("Removed attachment %s by user %s", attachment_id, user_id)
        return True

    # ---- Feedback ----
    async def add_feedback(self, ticket_id: int, payload: TicketFeedbackCreate, user_id: int) -> TicketFeedbackOut:
        ticket = await self._ticket(ticket_id)
        await self._active_user(user_id)
        if ticket.closed_at is None:
            raise ValidationError("Feedback can only be left on closed tickets")
        if await self.feedback.get_for_ticket(ticket_id):
            raise ValidationError("Feedback already submitted for this ticket")
        obj = await self.feedback.create(
            ticket_id=ticket_id, user_id=user_id, rating=payload.rating, comment=payload.comment
        )
        await self.session.commit()
        return TicketFeedbackOut.model_validate(obj)

    async def get_feedback(self, ticket_id: int) -> TicketFeedbackOut:
        await self._ticket(ticket_id)
        obj = await self.feedback.get_for_ticket(ticket_id)
        if not obj:
            raise NotFoundError("Feedback not found")
        return TicketFeedbackOut.model_validate(obj)

    # ---- Analytics ----
    async def active_count(self) -> int:
        return await self.tickets.count(active=True)

    async def count_by_status(self, status_id: int) -> int:
        return await self.tickets.count(status_id=status_id)

    async def count_by_user(self, user_id: int) -> int:
        return await self.tickets.count(created_by_id=user_id)

    async def count_by_department(self, department_id: int) -> int:
        return await self.tickets.count(department_id=department_id)
