"""
Создаёт пользователя для разработки (dev@example.com / devpassword).
"""

import asyncio
import os
import sys

# Add project root to path
sys.path.append(os.getcwd())

from livemap.config import settings
from livemap.core.users.repository import UserRepository
from livemap.core.users.security import PasswordHasher
from livemap.core.users.service import UserService
from livemap.common.errors import DuplicateEmailError
from livemap.infra.database import DatabaseManager, init_db
from livemap.shared.models.user import RegisterRequest


async def main() -> None:
    db = DatabaseManager()
    await init_db(db)
    print("Connected to DB")

    service = UserService(UserRepository(db), PasswordHasher(settings.security.BCRYPT_ROUNDS))
    try:
        user = await service.register(
            RegisterRequest(name="Dev User", email="dev@example.com", password="devpassword")
        )
        print(f"User {user.id} created")
    except DuplicateEmailError:
        print("User dev@example.com already exists")
    finally:
        await db.disconnect()


if __name__ == "__main__":
    asyncio.run(main())
