"""Create a user through the same validation and duplicate checks as the API.

Usage:
    python -m scripts.create_user <email> <username> <password>
"""

import asyncio
import sys

from accounts.core.config import get_settings
from accounts.core.lifespan import build_user_service
from accounts.domain.exceptions import AccountsException
from accounts.infrastructure.persistence.database import ConnectionProvider


async def main() -> None:
    """Create user from argv."""
    if len(sys.argv) < 4:
        print(
            "Usage: python -m scripts.create_user <email> <username> <password>",
            file=sys.stderr,
        )
        sys.exit(1)
    email, username, password = sys.argv[1:4]

    settings = get_settings()
    provider = ConnectionProvider.from_settings(settings)
    service = build_user_service(provider, settings)
    try:
        user = await service.create_user(
            {"email": email, "username": username, "password": password}
        )
    except AccountsException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    finally:
        await provider.close()
    print(f"Created user: {user.id} ({user.username}, {user.email})")


if __name__ == "__main__":
    asyncio.run(main())
