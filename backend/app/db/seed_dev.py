"""Dev seeding helper - default emission factors and stub-auth users."""

import asyncio
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from backend.app.db.emission_factors import seed_default_factors
from backend.app.db.engine import get_async_engine
from backend.app.db.models import User

# Fixed IDs usable as stub bearer tokens ("Bearer <id>" / "Bearer <id>:admin")
DEV_USER_ID = uuid.UUID("00000000-0000-0000-0000-000000000002")
DEV_ADMIN_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")


async def seed_dev_data(engine: AsyncEngine | None = None) -> None:
    """Seed emission factors plus a dev user and a dev admin.

    This function is idempotent - safe to run multiple times.
    Creates:
    - Every default DEFRA emission factor that has no row yet
    - User with id DEV_USER_ID if it doesn't exist
    - Admin with id DEV_ADMIN_ID if it doesn't exist
    """
    async with AsyncSession(engine or get_async_engine(), expire_on_commit=False) as session:
        inserted = await seed_default_factors(session)
        print(f"Inserted {inserted} emission factors")

        for user_id, name, email, role in (
            (DEV_USER_ID, "Dev User", "dev@example.com", "user"),
            (DEV_ADMIN_ID, "Dev Admin", "admin@example.com", "admin"),
        ):
            result = await session.execute(select(User).where(User.id == user_id))
            user = result.scalar_one_or_none()

            if not user:
                print(f"Creating {role} {email} with id {user_id}...")
                session.add(
                    User(
                        id=user_id,
                        name=name,
                        email=email,
                        password_hash="stub",  # Not used in stub auth
                        role=role,
                    )
                )
            else:
                print(f"{role.capitalize()} already exists: {user.email}")

        await session.commit()
        print("Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_data())
