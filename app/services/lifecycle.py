from typing import Dict, FrozenSet

from app.core.config import settings
from app.core.errors import AdminAccessDenied, InvalidStatusTransitionError, NotFoundError
from app.core.logger import logger
from app.models.db_models import AuthUser, Booking, BookingStatus
from app.services.db_service import db_service
from app.services.role_service import RoleService

S = BookingStatus

# pending -> processing -> completed, with cancel from any open state.
# Completed and cancelled are terminal.
ALLOWED_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    S.PENDING: frozenset({S.PROCESSING, S.COMPLETED, S.CANCELLED}),
    S.PROCESSING: frozenset({S.COMPLETED, S.CANCELLED}),
    S.COMPLETED: frozenset(),
    S.CANCELLED: frozenset(),
}


def is_terminal(status: BookingStatus) -> bool:
    return not ALLOWED_TRANSITIONS[status]


def can_transition(current: BookingStatus, requested: BookingStatus, permissive: bool = None) -> bool:
    if permissive is None:
        permissive = settings.ALLOW_ANY_STATUS_TRANSITION
    if permissive or current == requested:
        return True
    return requested in ALLOWED_TRANSITIONS[current]


class BookingLifecycle:
    """Admin-only status changes. Each change is one update of one booking row; no status is kept here."""

    def __init__(self, db=None, roles: RoleService = None):
        self.db = db or db_service
        self.roles = roles or RoleService(self.db)

    async def transition(self, actor: AuthUser, booking_id: str, requested: BookingStatus) -> Booking:
        if not await self.roles.is_admin(actor.id):
            logger.warning(f"🚫 User {actor.id} tried to set booking {booking_id} to {requested.value}")
            raise AdminAccessDenied()

        row = await self.db.get_booking(booking_id)
        if not row:
            raise NotFoundError("Booking not found")
        booking = Booking(**row)

        if booking.status == requested:
            return booking

        if not can_transition(booking.status, requested):
            if is_terminal(booking.status):
                logger.info(f"🔒 Booking {booking_id} is {booking.status.value}, refusing {requested.value}")
            raise InvalidStatusTransitionError(booking.status.value, requested.value)

        updated = await self.db.update_booking_status(booking_id, requested.value)
        if not updated:
            raise NotFoundError("Booking not found")

        logger.info(f"📦 Booking {booking_id}: {booking.status.value} -> {requested.value} by {actor.id}")
        # The update response has no embedded service; keep the one we already read
        return Booking(**{**updated, 'services': row.get('services')})
