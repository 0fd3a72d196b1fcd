from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.categories.schemas import TicketCategoryCreate, TicketCategoryUpdate, TicketCategoryOut
from ticketing.modules.categories.service import TicketCategoryService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> TicketCategoryService:
    return TicketCategoryService(session)

@router.get("", response_model=list[TicketCategoryOut])
async def list_categories(service: TicketCategoryService = Depends(svc)):
    return await service.get_all()

@router.get("/active", response_model=list[TicketCategoryOut])
async def list_active_categories(service: TicketCategoryService = Depends(svc)):
    return await service.get_active()

@router.get("/{category_id}", response_model=TicketCategoryOut)
async def get_category(category_id: int, service: TicketCategoryService = Depends(svc)):
    return await service.get_by_id(category_id)

@router.post("", response_model=TicketCategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_category(
    payload: TicketCategoryCreate,
    request: Request,
    response: Response,
    service: TicketCategoryService = Depends(svc),
):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_category", category_id=obj.id))
    return obj

@router.put("/{category_id}", response_model=TicketCategoryOut, dependencies=[Depends(require_roles("Admin"))])
async def update_category(category_id: int, payload: TicketCategoryUpdate, service: TicketCategoryService = Depends(svc)):
    return await service.update(category_id, payload)

@router.delete("/{category_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def deactivate_category(category_id: int, service: TicketCategoryService = Depends(svc)):
    await service.deactivate(category_id)
