#!/usr/bin/env python3
"""Create (or promote) a SYSTEM_ADMIN account.

Signup only ever creates NORMAL_USER accounts, so the first administrator
has to be created out of band.

Environment:
    DATABASE_URL     Target database (postgresql://...)
    ADMIN_EMAIL      Admin login email
    ADMIN_PASSWORD   8-16 chars, one uppercase, one special character
    ADMIN_NAME       20-60 chars (default: "System Administrator Account")

Usage:
    python -m scripts.create_admin
"""

import asyncio
import os
import sys

# Add parent to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
from sqlalchemy import func, select

from ratings_api.models import Role, User
from ratings_api.services.credentials import CredentialService, check_password_policy
from ratings_api.settings import get_settings
from ratings_api.stores.postgres import close_db, get_session, init_db

load_dotenv()

DEFAULT_ADMIN_NAME = "System Administrator Account"


async def create_admin(email: str, password: str, name: str) -> None:
    settings = get_settings()
    credentials = CredentialService.from_settings(settings)

    await init_db(settings)
    try:
        async with get_session() as session:
            result = await session.execute(
                select(User).where(func.lower(User.email) == email.lower())
            )
            user = result.scalar_one_or_none()

            if user is None:
                session.add(
                    User(
                        name=name,
                        email=email,
                        password_hash=credentials.hash_password(password),
                        role=Role.SYSTEM_ADMIN,
                    )
                )
                print(f"  ✅ created admin {email}")
            elif user.role is Role.SYSTEM_ADMIN:
                print(f"  ⏭️  {email} is already an admin")
            elif user.role is Role.STORE_OWNER:
                raise SystemExit(f"{email} is a store owner; use a different email")
            else:
                user.role = Role.SYSTEM_ADMIN
                print(f"  ✅ promoted {email} to SYSTEM_ADMIN")
    finally:
        await close_db()


async def main() -> None:
    email = os.getenv("ADMIN_EMAIL")
    password = os.getenv("ADMIN_PASSWORD")
    name = os.getenv("ADMIN_NAME", DEFAULT_ADMIN_NAME)
    if not email or not password:
        raise SystemExit("ADMIN_EMAIL and ADMIN_PASSWORD are required")
    if not 20 <= len(name) <= 60:
        raise SystemExit("ADMIN_NAME must be 20-60 characters")
    try:
        check_password_policy(password)
    except ValueError as e:
        raise SystemExit(str(e)) from e

    await create_admin(email, password, name)


if __name__ == "__main__":
    asyncio.run(main())
