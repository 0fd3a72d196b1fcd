from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.priorities.schemas import TicketPriorityCreate, TicketPriorityUpdate, TicketPriorityOut
from ticketing.modules.priorities.service import TicketPriorityService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> TicketPriorityService:
    return TicketPriorityService(session)

@router.get("", response_model=list[TicketPriorityOut])
async def list_priorities(ordered_by_name: bool = False, service: TicketPriorityService = Depends(svc)):
    if ordered_by_name:
        return await service.get_all_ordered_by_name()
    return await service.get_all()

@router.get("/{priority_id}", response_model=TicketPriorityOut)
async def get_priority(priority_id: int, service: TicketPriorityService = Depends(svc)):
    return await service.get_by_id(priority_id)

@router.get("/{priority_id}/tickets-count", response_model=int)
async def get_priority_ticket_count(priority_id: int, service: TicketPriorityService = Depends(svc)):
    return await service.ticket_count(priority_id)

@router.post("", response_model=TicketPriorityOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_priority(
    payload: TicketPriorityCreate,
    request: Request,
    response: Response,
    service: TicketPriorityService = Depends(svc),
):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_priority", priority_id=obj.id))
    return obj

@router.put("/{priority_id}", response_model=TicketPriorityOut, dependencies=[Depends(require_roles("Admin"))])
async def update_priority(priority_id: int, payload: TicketPriorityUpdate, service: TicketPriorityService = Depends(svc)):
    return await service.update(priority_id, payload)

@router.delete("/{priority_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def delete_priority(priority_id: int, service: TicketPriorityService = Depends(svc)):
    await service.delete(priority_id)
