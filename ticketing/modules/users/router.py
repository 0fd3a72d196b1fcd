from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.users.schemas import UserCreate, UserUpdate, UserOut
from ticketing.modules.users.service import UserService

router = APIRouter(dependencies=[Depends(require_roles("Admin", "Agent"))])

def svc(session: AsyncSession = Depends(get_session)) -> UserService:
    return UserService(session)

@router.get("", response_model=list[UserOut])
async def list_users(service: UserService = Depends(svc)):
    return await service.get_all_active()

@router.get("/email/{email}", response_model=UserOut)
async def get_user_by_email(email: str, service: UserService = Depends(svc)):
    return await service.get_by_email(email)

@router.get("/department/{department_id}", response_model=list[UserOut])
async def list_users_for_department(department_id: int, service: UserService = Depends(svc)):
    return await service.get_by_department(department_id)

@router.get("/team/{team_id}", response_model=list[UserOut])
async def list_users_for_team(team_id: int, service: UserService = Depends(svc)):
    return await service.get_by_team(team_id)

@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int, service: UserService = Depends(svc)):
    return await service.get_by_id(user_id)

@router.post("", response_model=UserOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_user(payload: UserCreate, request: Request, response: Response, service: UserService = Depends(svc)):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_user", user_id=obj.id))
    return obj

@router.put("/{user_id}", response_model=UserOut, dependencies=[Depends(require_roles("Admin"))])
async def update_user(user_id: int, payload: UserUpdate, service: UserService = Depends(svc)):
    return await service.update(user_id, payload)

@router.delete("/{user_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def deactivate_user(user_id: int, service: UserService = Depends(svc)):
    await service.deactivate(user_id)
