from typing import Optional

from app.core.errors import RemoteCallError
from app.core.logger import logger
from app.services.db_service import db_service

ADMIN_ROLE = "admin"


class RoleService:
    def __init__(self, db=None):
        self.db = db or db_service

    async def is_admin(self, user_id: Optional[str]) -> bool:
        """
        True only when a `user_roles` row with role "admin" exists for the user.
        Lookup failures deny access; the warning below keeps them apart from a
        plain "no such role" in the logs.
        """
        if not user_id:
            return False

        try:
            return await self.db.has_role(user_id, ADMIN_ROLE)
        except RemoteCallError:
            logger.warning(f"⚠️ Admin lookup failed for user {user_id}, denying access")
            return False
