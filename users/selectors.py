"""Actor lookups for the identity provider boundary."""

from typing import Optional

from common.db import translate_db_errors
from common.errors import UnauthorizedError

from .models import User


def get_actor(actor_id: Optional[int]) -> User:
    """Return the active user behind ``actor_id`` or raise UnauthorizedError."""

    if not actor_id:
        raise UnauthorizedError("Missing actor identity")
    with translate_db_errors("users.get_actor"):
        try:
            return User.objects.get(id=actor_id, is_active=True)
        except User.DoesNotExist:
            raise UnauthorizedError("Unknown actor")
