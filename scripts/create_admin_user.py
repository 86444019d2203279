"""
Script to create an admin user
Run this to create the first admin for the payment settings console
"""

import sys
import asyncio
import uuid
from datetime import datetime, timezone
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from sqlalchemy import select

from boosterhub.auth import hash_password, generate_random_password
from boosterhub.config import get_settings
from boosterhub.database import build_engine, dispose_engine
from boosterhub.models.admin import admin_users


async def create_admin_user(username: str, full_name: str, password: str = None):
    """
    Create an admin user

    Args:
        username: Login name, also recorded as the actor on payment changes
        full_name: Admin full name
        password: Password (if None, will generate random)
    """
    engine = build_engine(get_settings())
    if engine is None:
        print("❌ DATABASE_URL is not set")
        return

    try:
        async with engine.connect() as conn:
            existing = await conn.scalar(
                select(admin_users.c.id).where(admin_users.c.username == username)
            )

        if existing:
            print(f"❌ Admin user {username} already exists!")
            return

        # Generate password if not provided
        if password is None:
            password = generate_random_password(12)
            generated = True
        else:
            generated = False

        async with engine.begin() as conn:
            await conn.execute(
                admin_users.insert().values(
                    id=uuid.uuid4(),
                    username=username,
                    password_hash=hash_password(password),
                    full_name=full_name,
                    role="admin",
                    is_active=True,
                    is_locked=False,
                    must_change_password=generated,
                    created_at=datetime.now(timezone.utc),
                )
            )

        print("✅ Admin user created successfully!")
        print(f"   Username: {username}")
        print(f"   Name: {full_name}")

        if generated:
            print(f"   Password: {password}")
            print("   ⚠️  IMPORTANT: Save this password! It is shown only once.")
        else:
            print("   Password: (custom password set)")

    finally:
        await dispose_engine(engine)


async def main():
    """Main function"""
    print("\n" + "="*60)
    print("CREATE ADMIN USER")
    print("="*60 + "\n")

    username = input("Enter username: ").strip()
    full_name = input("Enter full name: ").strip()

    if not username:
        print("❌ Username is required!")
        return

    use_custom = input("Set custom password? (y/n): ").strip().lower()

    if use_custom == 'y':
        password = input("Enter password: ").strip()
        confirm = input("Confirm password: ").strip()

        if password != confirm:
            print("❌ Passwords do not match!")
            return

        if len(password) < 8:
            print("❌ Password must be at least 8 characters!")
            return
    else:
        password = None

    print("\n")
    await create_admin_user(username, full_name, password)
    print("\n")


if __name__ == "__main__":
    asyncio.run(main())
