import os

# configure before anything from ticketing is imported
os.environ.setdefault("POSTGRES_DSN", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DB_MANAGE", "migrations")
os.environ.setdefault("JWT_SECRET", "test-secret")

from types import SimpleNamespace

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

import ticketing.models  # noqa: F401
from ticketing.core.base import Base
from ticketing.core.db import get_session
from ticketing.core.security import hash_password
from ticketing.main import app
from ticketing.models import (
    Department, Team, TicketCategory, TicketPriority, TicketStatus, User, Role, UserRole,
)

PASSWORD = "Secret123!"

@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()

@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s

@pytest.fixture
async def ref(session):
    """Reference rows most tests need. Status ids follow insertion order, so Open is 1."""
    statuses = [TicketStatus(name=n) for n in ("Open", "In Progress", "Resolved", "Closed")]
    session.add_all(statuses)
    await session.flush()

    roles = {n: Role(name=n) for n in ("Admin", "Agent", "User")}
    session.add_all(roles.values())

    support = Department(name="Support", is_active=True)
    billing = Department(name="Billing", is_active=True)
    session.add_all([support, billing])
    await session.flush()

    alpha = Team(name="Alpha", department_id=support.id, is_active=True)
    invoices = Team(name="Invoices", department_id=billing.id, is_active=True)
    bug = TicketCategory(name="Bug", is_active=True)
    high = TicketPriority(name="High", level=2)
    low = TicketPriority(name="Low", level=4)
    session.add_all([alpha, invoices, bug, high, low])
    await session.flush()

    def make_user(email, first, last, role):
        return User(
            email=email,
            password_hash=hash_password(PASSWORD),
            first_name=first,
            last_name=last,
            is_active=True,
            user_roles=[UserRole(role_id=roles[role].id, department_id=support.id)],
        )

    admin = make_user("admin@example.com", "Ada", "Admin", "Admin")
    agent = make_user("agent@example.com", "Alan", "Agent", "Agent")
    customer = make_user("customer@example.com", "Cora", "Customer", "User")
    session.add_all([admin, agent, customer])
    await session.commit()

    return SimpleNamespace(
        open=statuses[0].id,
        in_progress=statuses[1].id,
        resolved=statuses[2].id,
        closed=statuses[3].id,
        support=support.id,
        billing=billing.id,
        alpha=alpha.id,
        invoices=invoices.id,
        bug=bug.id,
        high=high.id,
        low=low.id,
        admin=admin.id,
        agent=agent.id,
        customer=customer.id,
        agent_role=roles["Agent"].id,
    )

@pytest.fixture
async def client(session_factory):
    async def override_session():
        async with session_factory() as s:
            yield s

    app.dependency_overrides[get_session] = override_session
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()

@pytest.fixture
def login(client):
    async def _login(email: str, password: str = PASSWORD) -> dict:
        res = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert res.status_code == 200, res.text
        return {"Authorization": f"Bearer {res.json()['access_token']}"}
    return _login

@pytest.fixture
async def admin_headers(login, ref):
    return await login("admin@example.com")

@pytest.fixture
async def agent_headers(login, ref):
    return await login("agent@example.com")

@pytest.fixture
async def customer_headers(login, ref):
    return await login("customer@example.com")
