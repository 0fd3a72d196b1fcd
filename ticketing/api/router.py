from fastapi import APIRouter
from ticketing.modules.tickets.router import router as tickets_router
from ticketing.modules.departments.router import router as departments_router
from ticketing.modules.teams.router import router as teams_router
from ticketing.modules.categories.router import router as categories_router
from ticketing.modules.priorities.router import router as priorities_router
from ticketing.modules.statuses.router import router as statuses_router
from ticketing.modules.users.router import router as users_router
from ticketing.modules.auth.router import router as auth_router
from ticketing.modules.faq.router import router as faq_router

api_router = APIRouter()
api_router.include_router(tickets_router, prefix="/tickets", tags=["tickets"])
api_router.include_router(departments_router, prefix="/departments", tags=["departments"])
api_router.include_router(teams_router, prefix="/teams", tags=["teams"])
api_router.include_router(categories_router, prefix="/ticket-categories", tags=["ticket-categories"])
api_router.include_router(priorities_router, prefix="/ticket-priorities", tags=["ticket-priorities"])
api_router.include_router(statuses_router, prefix="/ticket-statuses", tags=["ticket-statuses"])
api_router.include_router(users_router, prefix="/users", tags=["users"])
api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(faq_router, prefix="/faq", tags=["faq"])

@api_router.get("/health", tags=["health"])
async def health():
    return {"status": "ok"}
