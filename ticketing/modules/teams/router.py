from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession
from ticketing.core.db import get_session
from ticketing.core.security import require_roles
from ticketing.modules.teams.schemas import TeamCreate, TeamUpdate, TeamOut, TeamDetails
from ticketing.modules.teams.service import TeamService

router = APIRouter()

def svc(session: AsyncSession = Depends(get_session)) -> TeamService:
    return TeamService(session)

@router.get("", response_model=list[TeamOut])
async def list_teams(service: TeamService = Depends(svc)):
    return await service.get_all_active()

@router.get("/department/{department_id}", response_model=list[TeamOut])
async def list_teams_for_department(department_id: int, service: TeamService = Depends(svc)):
    return await service.get_by_department(department_id)

@router.get("/user/{user_id}", response_model=list[TeamOut])
async def list_teams_for_user(user_id: int, service: TeamService = Depends(svc)):
    return await service.get_by_user(user_id)

@router.get("/{team_id}", response_model=TeamOut)
async def get_team(team_id: int, service: TeamService = Depends(svc)):
    return await service.get_by_id(team_id)

@router.get("/{team_id}/details", response_model=TeamDetails)
async def get_team_details(team_id: int, service: TeamService = Depends(svc)):
    return await service.get_details(team_id)

@router.post("", response_model=TeamOut, status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_roles("Admin"))])
async def create_team(payload: TeamCreate, request: Request, response: Response, service: TeamService = Depends(svc)):
    obj = await service.create(payload)
    response.headers["Location"] = str(request.url_for("get_team", team_id=obj.id))
    return obj

@router.put("/{team_id}", response_model=TeamOut, dependencies=[Depends(require_roles("Admin"))])
async def update_team(team_id: int, payload: TeamUpdate, service: TeamService = Depends(svc)):
    return await service.update(team_id, payload)

@router.delete("/{team_id}", status_code=204, dependencies=[Depends(require_roles("Admin"))])
async def deactivate_team(team_id: int, service: TeamService = Depends(svc)):
    await service.deactivate(team_id)
