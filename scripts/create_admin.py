#!/usr/bin/env python3
"""
Provision (or promote) the first administrator of the social service.

Reads from .env:
    ADMIN_ACCOUNT_ID     — identity subject (UUID) of the admin (required)
    ADMIN_USERNAME       — username when the account is created (default "admin")
    ADMIN_DISPLAY_NAME   — display name when created (default "Administrator")
    SOCIAL_DATABASE_URL  — target database (required)

Administrators are always PRIVATE; promotion flips visibility in the same write.

Usage:
    python -m scripts.create_admin
"""
from __future__ import annotations

import asyncio
import os
import sys
import uuid
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "services" / "social"))
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "shared"))

from dotenv import load_dotenv

load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from sqlalchemy.ext.asyncio import async_sessionmaker

from app.models.account import Account
from app.models.enums import AccountRole, Visibility
from shared.database.postgres import get_async_engine


async def main() -> None:
    raw_id = os.getenv("ADMIN_ACCOUNT_ID")
    if not raw_id:
        print("Error: ADMIN_ACCOUNT_ID must be set in .env")
        sys.exit(1)
    try:
        account_id = uuid.UUID(raw_id)
    except ValueError:
        print(f"Error: ADMIN_ACCOUNT_ID is not a UUID: {raw_id!r}")
        sys.exit(1)
    username = os.getenv("ADMIN_USERNAME", "admin")
    display_name = os.getenv("ADMIN_DISPLAY_NAME", "Administrator")
    db_url = os.environ["SOCIAL_DATABASE_URL"]

    engine = get_async_engine(db_url)
    session_factory = async_sessionmaker(engine, expire_on_commit=False)

    async with session_factory() as session:
        existing = await session.get(Account, account_id)

        if existing is not None:
            print(f"Account {existing.username} already exists (id={existing.id}).")
            if existing.role == AccountRole.ADMIN:
                print("  -> Already an admin. Nothing to do.")
            else:
                existing.role = AccountRole.ADMIN
                existing.visibility = Visibility.PRIVATE
                existing.is_active = True
                await session.commit()
                print("  -> Promoted to admin (visibility set to PRIVATE).")
        else:
            session.add(
                Account(
                    id=account_id,
                    username=username,
                    display_name=display_name,
                    role=AccountRole.ADMIN,
                    visibility=Visibility.PRIVATE,
                    is_active=True,
                )
            )
            await session.commit()
            print(f"Admin created: {username} (id={account_id})")

    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
