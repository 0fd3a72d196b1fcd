from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.statuses.schemas import TicketStatusCreate, TicketStatusUpdate, TicketStatusOut
from ticketing.modules.statuses.service import TicketStatusService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> TicketStatusService:
    return TicketStatusService(session)

@router.get("", response_model=list[TicketStatusOut])
async def list_statuses(ordered_by_name: bool = False, service: TicketStatusService = Depends(svc)):
    if ordered_by_name:
        return await service.get_all_ordered_by_name()
    return await service.get_all()

@router.get("/{status_id}", response_model=TicketStatusOut)
async def get_status(status_id: int, service: TicketStatusService = Depends(svc)):
    return await service.get_by_id(status_id)

@router.get("/{status_id}/tickets-count", response_model=int)
async def get_status_ticket_count(status_id: int, service: TicketStatusService = Depends(svc)):
    return await service.ticket_count(status_id)

@router.post("", response_model=TicketStatusOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_status(
    payload: TicketStatusCreate,
    request: Request,
    response: Response,
    service: TicketStatusService = Depends(svc),
):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_status", status_id=obj.id))
    return obj

@router.put("/{status_id}", response_model=TicketStatusOut, dependencies=[Depends(require_roles("Admin"))])
async def update_status(status_id: int, payload: TicketStatusUpdate, service: TicketStatusService = Depends(svc)):
    return await service.update(status_id, payload)

@router.delete("/{status_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def delete_status(status_id: int, service: TicketStatusService = Depends(svc)):
    await service.delete(status_id)
