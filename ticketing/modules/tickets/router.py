from datetime import datetime
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import get_principal, require_roles, Principal
from ticketing.modules.tickets.schemas import (
    TicketCreate, TicketUpdate, TicketOut, TicketCount,
    AssignRequest, StatusChangeRequest, PriorityChangeRequest,
    TicketCommentCreate, TicketCommentOut,
    TicketAttachmentCreate, TicketAttachmentOut,
    TicketFeedbackCreate, TicketFeedbackOut
)
from ticketing.modules.tickets.service import TicketService

router = APIRouter(dependencies=[Depends(get_principal)])

def svc(session: AsyncSession = Depends(get_session)) -> TicketService:
    return TicketService(session)

# ---- Filtered reads ----

@router.get("", response_model=list[TicketOut])
async def list_tickets(service: TicketService = Depends(svc)):
    return await service.get_all()

@router.get("/active", response_model=list[TicketOut])
async def list_active_tickets(service: TicketService = Depends(svc)):
    return await service.get_active()

@router.get("/user/{user_id}", response_model=list[TicketOut])
async def list_tickets_by_user(user_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_user(user_id)

@router.get("/assigned/{user_id}", response_model=list[TicketOut])
async def list_tickets_assigned_to(user_id: int, service: TicketService = Depends(svc)):
    return await service.get_assigned_to_user(user_id)

@router.get("/department/{department_id}", response_model=list[TicketOut])
async def list_tickets_by_department(department_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_department(department_id)

@router.get("/team/{team_id}", response_model=list[TicketOut])
async def list_tickets_by_team(team_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_team(team_id)

@router.get("/status/{status_id}", response_model=list[TicketOut])
async def list_tickets_by_status(status_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_status(status_id)

@router.get("/priority/{priority_id}", response_model=list[TicketOut])
async def list_tickets_by_priority(priority_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_priority(priority_id)

@router.get("/category/{category_id}", response_model=list[TicketOut])
async def list_tickets_by_category(category_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_category(category_id)

@router.get("/date-range", response_model=list[TicketOut])
async def list_tickets_created_between(start: datetime, end: datetime, service: TicketService = Depends(svc)):
    return await service.get_created_between(start, end)

# ---- Analytics ----

@router.get("/analytics/active-count", response_model=TicketCount)
async def active_ticket_count(service: TicketService = Depends(svc)):
    return TicketCount(count=await service.active_count())

@router.get("/analytics/status/{status_id}/count", response_model=TicketCount)
async def ticket_count_by_status(status_id: int, service: TicketService = Depends(svc)):
    return TicketCount(count=await service.count_by_status(status_id))

@router.get("/analytics/user/{user_id}/count", response_model=TicketCount)
async def ticket_count_by_user(user_id: int, service: TicketService = Depends(svc)):
    return TicketCount(count=await service.count_by_user(user_id))

@router.get("/analytics/department/{department_id}/count", response_model=TicketCount)
async def ticket_count_by_department(department_id: int, service: TicketService = Depends(svc)):
    return TicketCount(count=await service.count_by_department(department_id))

# ---- Tickets ----

@router.post("", response_model=TicketOut, status_code=status.HTTP_201_CREATED)
async def create_ticket(
    payload: TicketCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: TicketService = Depends(svc),
):
    obj = await service.create(payload, principal.user_id)
    response.headers["Location"] = str(request.url_for("get_ticket", ticket_id=obj.id))
    return obj

@router.get("/{ticket_id}", response_model=TicketOut)
async def get_ticket(ticket_id: int, service: TicketService = Depends(svc)):
    return await service.get_by_id(ticket_id)

@router.put("/{ticket_id}", response_model=TicketOut)
async def update_ticket(ticket_id: int, payload: TicketUpdate, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.update(ticket_id, payload, principal.user_id)

@router.delete("/{ticket_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def delete_ticket(ticket_id: int, service: TicketService = Depends(svc)):
    await service.delete(ticket_id)

@router.post("/{ticket_id}/assign", response_model=TicketOut)
async def assign_ticket(ticket_id: int, payload: AssignRequest, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.assign(ticket_id, payload.assigned_to_id, principal.user_id)

@router.post("/{ticket_id}/unassign", response_model=TicketOut)
async def unassign_ticket(ticket_id: int, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.unassign(ticket_id, principal.user_id)

@router.post("/{ticket_id}/reassign", response_model=TicketOut)
async def reassign_ticket(ticket_id: int, payload: AssignRequest, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.reassign(ticket_id, payload.assigned_to_id, principal.user_id)

@router.post("/{ticket_id}/status", response_model=TicketOut)
async def change_ticket_status(ticket_id: int, payload: StatusChangeRequest, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.update_status(ticket_id, payload.status_id, principal.user_id)

@router.post("/{ticket_id}/priority", response_model=TicketOut)
async def change_ticket_priority(ticket_id: int, payload: PriorityChangeRequest, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.update_priority(ticket_id, payload.priority_id, principal.user_id)

@router.post("/{ticket_id}/close", response_model=TicketOut)
async def close_ticket(ticket_id: int, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.close(ticket_id, principal.user_id)

@router.post("/{ticket_id}/reopen", response_model=TicketOut)
async def reopen_ticket(ticket_id: int, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    return await service.reopen(ticket_id, principal.user_id)

# ---- Comments ----

@router.get("/{ticket_id}/comments", response_model=list[TicketCommentOut])
async def list_ticket_comments(ticket_id: int, include_internal: bool = False, service: TicketService = Depends(svc)):
    return await service.get_comments(ticket_id, include_internal)

@router.post("/{ticket_id}/comments", response_model=TicketCommentOut, status_code=status.HTTP_201_CREATED)
async def add_ticket_comment(
    ticket_id: int,
    payload: TicketCommentCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: TicketService = Depends(svc),
):
    obj = await service.add_comment(ticket_id, payload, principal.user_id)
    response.headers["Location"] = str(request.url_for("list_ticket_comments", ticket_id=ticket_id))
    return obj

# ---- Attachments ----

@router.get("/{ticket_id}/attachments", response_model=list[TicketAttachmentOut])
async def list_ticket_attachments(ticket_id: int, service: TicketService = Depends(svc)):
    return await service.get_attachments(ticket_id)

@router.post("/{ticket_id}/attachments", response_model=TicketAttachmentOut, status_code=status.HTTP_201_CREATED)
async def add_ticket_attachment(
    ticket_id: int,
    payload: TicketAttachmentCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: TicketService = Depends(svc),
):
    obj = await service.add_attachment(ticket_id, payload, principal.user_id)
    response.headers["Location"] = str(request.url_for("list_ticket_attachments", ticket_id=ticket_id))
    return obj

@router.delete("/attachments/{attachment_id}", status_code=204)
async def remove_ticket_attachment(attachment_id: int, principal: Principal = Depends(get_principal), service: TicketService = Depends(svc)):
    await service.remove_attachment(attachment_id, principal.user_id)

# ---- Feedback ----

@router.get("/{ticket_id}/feedback", response_model=TicketFeedbackOut)
async def get_ticket_feedback(ticket_id: int, service: TicketService = Depends(svc)):
    return await service.get_feedback(ticket_id)

@router.post("/{ticket_id}/feedback", response_model=TicketFeedbackOut, status_code=status.HTTP_201_CREATED)
async def add_ticket_feedback(
    ticket_id: int,
    payload: TicketFeedbackCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: TicketService = Depends(svc),
):
    obj = await service.add_feedback(ticket_id, payload, principal.user_id)
    response.headers["Location"] = str(request.url_for("get_ticket_feedback", ticket_id=ticket_id))
    return obj
