import asyncio
import os
import sys
from sqlalchemy.future import select

# Add the project root to the Python path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ticketing.core.db import SessionLocal, init_models
from ticketing.core.security import hash_password
from ticketing.modules.statuses.models import TicketStatus
from ticketing.modules.priorities.models import TicketPriority
from ticketing.modules.users.models import User, Role, UserRole

# Inserted in order; the first status gets id 1, the default for new tickets
STATUSES = [
    {"name": "Open", "description": "Newly created", "color": "#2563eb"},
    {"name": "In Progress", "description": "Being worked on", "color": "#d97706"},
    {"name": "Resolved", "description": "Fix delivered", "color": "#16a34a"},
    {"name": "Closed", "description": "No further work", "color": "#6b7280"},
]

PRIORITIES = [
    {"name": "Low", "level": 4, "color": "#6b7280"},
    {"name": "Medium", "level": 3, "color": "#2563eb"},
    {"name": "High", "level": 2, "color": "#d97706"},
    {"name": "Critical", "level": 1, "color": "#dc2626"},
]

ROLES = [
    {"name": "Admin", "description": "Full access"},
    {"name": "Agent", "description": "Works tickets"},
    {"name": "User", "description": "Raises tickets"},
]

async def get_or_create(db, model, name: str, **fields):
    result = await db.execute(select(model).where(model.name == name))
    obj = result.scalars().first()
    if obj:
        print(f"  - {model.__name__} '{name}' already present (id {obj.id})")
        return obj
    obj = model(name=name, **fields)
    db.add(obj)
    await db.flush()
    print(f"  - Created {model.__name__} '{name}' (id {obj.id})")
    return obj

async def seed_admin(db, admin_role: Role):
    """
    Creates an Admin user when ADMIN_EMAIL and ADMIN_PASSWORD are set.
    """
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    if not email or not password:
        print("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin user.")
        return
    result = await db.execute(select(User).where(User.email == email.lower()))
    if result.scalars().first():
        print(f"  - Admin user {email} already present")
        return
    user = User(
        email=email.lower(),
        password_hash=hash_password(password),
        first_name="System",
        last_name="Administrator",
        is_active=True,
    )
    user.user_roles.append(UserRole(role_id=admin_role.id))
    db.add(user)
    print(f"  - Created admin user {email}")

async def main():
    print("Seeding reference data...")
    await init_models()

    async with SessionLocal() as db:
        print("Statuses:")
        for row in STATUSES:
            await get_or_create(db, TicketStatus, **row)
        print("Priorities:")
        for row in PRIORITIES:
            await get_or_create(db, TicketPriority, **row)
        print("Roles:")
        roles = {row["name"]: await get_or_create(db, Role, **row) for row in ROLES}
        await seed_admin(db, roles["Admin"])
        await db.commit()

    print("Done.")

if __name__ == "__main__":
    asyncio.run(main())
