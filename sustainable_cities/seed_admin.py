import asyncio
import os

from sqlalchemy.future import select
from sustainable_cities.core.db import SessionLocal
from sustainable_cities.core.security import get_password_hash
from sustainable_cities.modules.auth.models import User, UserRole

ADMIN_EMAIL = os.getenv("SEED_ADMIN_EMAIL", "admin@sustainablecities.local")
ADMIN_PASSWORD = os.getenv("SEED_ADMIN_PASSWORD", "admin123")

async def seed_admin():
    async with SessionLocal() as session:
        result = await session.execute(select(User).where(User.email == ADMIN_EMAIL))
        existing_admin = result.scalars().first()

        if existing_admin:
            print("Admin user already exists.")
            return

        print("Creating admin user...")
        admin_user = User(
            email=ADMIN_EMAIL,
            hashed_password=get_password_hash(ADMIN_PASSWORD),
            name="City Administrator",
            role=UserRole.ADMIN,
            is_active=True
        )
        session.add(admin_user)
        await session.commit()
        print("Admin created successfully!")
        print(f"Email: {ADMIN_EMAIL}")

if __name__ == "__main__":
    asyncio.run(seed_admin())
