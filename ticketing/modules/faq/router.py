from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import get_principal, require_roles, Principal
from ticketing.modules.faq.schemas import (
    FAQCategoryCreate, FAQCategoryUpdate, FAQCategoryOut, FAQCategoryWithItems,
    FAQItemCreate, FAQItemUpdate, FAQItemOut
)
from ticketing.modules.faq.service import FAQService

router = APIRouter(dependencies=[Depends(get_principal)])

def svc(session: AsyncSession = Depends(get_session)) -> FAQService:
    return FAQService(session)

# ---- Categories ----

@router.get("/categories", response_model=list[FAQCategoryOut])
async def list_faq_categories(service: FAQService = Depends(svc)):
    return await service.get_all_categories()

@router.get("/categories/{category_id}", response_model=FAQCategoryWithItems)
async def get_faq_category(category_id: int, service: FAQService = Depends(svc)):
    return await service.get_category_with_items(category_id)

@router.get("/categories/{category_id}/items", response_model=list[FAQItemOut])
async def list_faq_items_for_category(category_id: int, service: FAQService = Depends(svc)):
    return await service.get_items_by_category(category_id)

@router.post("/categories", response_model=FAQCategoryOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def create_faq_category(payload: FAQCategoryCreate, request: Request, response: Response, service: FAQService = Depends(svc)):
    obj = await service.create_category(payload)
    response.headers["Location"] = str(request.url_for("get_faq_category", category_id=obj.id))
    return obj

@router.put("/categories/{category_id}", response_model=FAQCategoryOut, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def update_faq_category(category_id: int, payload: FAQCategoryUpdate, service: FAQService = Depends(svc)):
    return await service.update_category(category_id, payload)

@router.delete("/categories/{category_id}", status_code=204, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def deactivate_faq_category(category_id: int, service: FAQService = Depends(svc)):
    await service.deactivate_category(category_id)

# ---- Items ----

@router.get("", response_model=list[FAQItemOut])
async def list_faqs(service: FAQService = Depends(svc)):
    return await service.get_active_items()

@router.get("/search", response_model=list[FAQItemOut])
async def search_faqs(q: str = "", service: FAQService = Depends(svc)):
    return await service.search(q)

@router.get("/{item_id}", response_model=FAQItemOut)
async def get_faq(item_id: int, service: FAQService = Depends(svc)):
    return await service.get_item(item_id)

@router.post("", response_model=FAQItemOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def create_faq(
    payload: FAQItemCreate,
    request: Request,
    response: Response,
    principal: Principal = Depends(get_principal),
    service: FAQService = Depends(svc),
):
    obj = await service.create_item(payload, principal.user_id)
    response.headers["Location"] = str(request.url_for("get_faq", item_id=obj.id))
    return obj

@router.put("/{item_id}", response_model=FAQItemOut, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def update_faq(item_id: int, payload: FAQItemUpdate, service: FAQService = Depends(svc)):
    return await service.update_item(item_id, payload)

@router.delete("/{item_id}", status_code=204, dependencies=[Depends(require_roles("Admin", "Agent"))])
async def deactivate_faq(item_id: int, service: FAQService = Depends(svc)):
    await service.deactivate_item(item_id)
