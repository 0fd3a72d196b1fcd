from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.departments.schemas import (
    DepartmentCreate, DepartmentUpdate, DepartmentOut, DepartmentDetails
)
from ticketing.modules.departments.service import DepartmentService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> DepartmentService:
    return DepartmentService(session)

@router.get("", response_model=list[DepartmentOut])
async def list_departments(service: DepartmentService = Depends(svc)):
    return await service.get_all_active()

@router.get("/user/{user_id}", response_model=list[DepartmentOut])
async def list_departments_for_user(user_id: int, service: DepartmentService = Depends(svc)):
    return await service.get_by_user(user_id)

@router.get("/{department_id}", response_model=DepartmentOut)
async def get_department(department_id: int, service: DepartmentService = Depends(svc)):
    return await service.get_by_id(department_id)

@router.get("/{department_id}/details", response_model=DepartmentDetails)
async def get_department_details(department_id: int, service: DepartmentService = Depends(svc)):
    return await service.get_details(department_id)

@router.post("", response_model=DepartmentOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_department(
    payload: DepartmentCreate,
    request: Request,
    response: Response,
    service: DepartmentService = Depends(svc),
):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_department", department_id=obj.id))
    return obj

@router.put("/{department_id}", response_model=DepartmentOut, dependencies=[Depends(require_roles("Admin"))])
async def update_department(department_id: int, payload: DepartmentUpdate, service: DepartmentService = Depends(svc)):
    return await service.update(department_id, payload)

@router.delete("/{department_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def deactivate_department(department_id: int, service: DepartmentService = Depends(svc)):
    await service.deactivate(department_id)
