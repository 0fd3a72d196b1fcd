from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import get_principal, Principal
from ticketing.modules.auth.schemas import LoginRequest, LoginResponse, ChangePasswordRequest
from ticketing.modules.auth.service import AuthService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(session)

@router.post("/login", response_model=LoginResponse)
async def login(payload: LoginRequest, service: AuthService = Depends(svc)):
    return await service.login(payload)

@router.post("/change-password")
async def change_password(
    payload: ChangePasswordRequest,
    principal: Principal = Depends(get_principal),
    service: AuthService = Depends(svc),
):
    await service.change_password(principal.user_id, payload)
    return {"message": "Password changed successfully"}
