"""Reset an active user's password.

Usage:
    python -m scripts.reset_password <user_id> <new_password>
The new password must satisfy the strong-password rule.
"""

import asyncio
import sys

from accounts.core.config import get_settings
from accounts.core.lifespan import build_user_service
from accounts.domain.exceptions import AccountsException
from accounts.infrastructure.persistence.database import ConnectionProvider


async def main() -> None:
    """Reset password for user_id."""
    if len(sys.argv) < 3:
        print(
            "Usage: python -m scripts.reset_password <user_id> <new_password>",
            file=sys.stderr,
        )
        sys.exit(1)
    user_id, new_password = sys.argv[1:3]

    settings = get_settings()
    provider = ConnectionProvider.from_settings(settings)
    service = build_user_service(provider, settings)
    try:
        user = await service.change_password({"id": user_id, "password": new_password})
    except AccountsException as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)
    finally:
        await provider.close()
    print(f"Password reset for user {user.id} ({user.username})")


if __name__ == "__main__":
    asyncio.run(main())
