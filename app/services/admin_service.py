from typing import Dict, Iterable, List

from app.core.errors import AdminAccessDenied
from app.core.logger import logger
from app.models.db_models import AdminBookingView, AuthUser, Booking, Profile
from app.services.db_service import db_service
from app.services.role_service import RoleService

PLACEHOLDER_PROFILE = Profile(id="", full_name="Unknown", phone="N/A")


def join_profiles(bookings: Iterable[Booking], profiles: Iterable[Profile]) -> List[AdminBookingView]:
    """Attaches each booking's customer profile; customers without a profile get PLACEHOLDER_PROFILE."""
    by_id: Dict[str, Profile] = {p.id: p for p in profiles}
    return [
        AdminBookingView(**booking.model_dump(), profile=by_id.get(booking.user_id, PLACEHOLDER_PROFILE))
        for booking in bookings
    ]


class AdminService:
    def __init__(self, db=None, roles: RoleService = None):
        self.db = db or db_service
        self.roles = roles or RoleService(self.db)

    async def require_admin(self, user: AuthUser):
        if not await self.roles.is_admin(user.id):
            logger.warning(f"🚫 Non-admin user {user.id} reached the admin view")
            raise AdminAccessDenied()

    async def list_bookings(self, user: AuthUser) -> List[AdminBookingView]:
        """
        All bookings, newest first, with customer name and phone.
        Bookings and profiles are two separate reads, so a profile edited in
        between can show up stale.
        """
        await self.require_admin(user)

        bookings = [Booking(**row) for row in await self.db.list_all_bookings()]
        user_ids = sorted({b.user_id for b in bookings})
        profiles = [Profile(**row) for row in await self.db.get_profiles(user_ids)]

        views = join_profiles(bookings, profiles)
        found = {p.id for p in profiles}
        missing = sum(1 for b in bookings if b.user_id not in found)
        if missing:
            logger.info(f"👤 {missing} booking(s) without a customer profile")
        return views
