from fastapi import APIRouter, Depends

from app.api.deps import get_admin_service, get_lifecycle
from app.core.security import get_current_user, get_session_context
from app.models.api_models import AdminBookingList, StatusUpdateRequest
from app.models.db_models import AuthUser, Booking
from app.services.admin_service import AdminService
from app.services.lifecycle import BookingLifecycle
from app.services.session_context import SessionContext

router = APIRouter()


@router.get("/admin/bookings", response_model=AdminBookingList)
async def all_bookings(
    user: AuthUser = Depends(get_current_user),
    admin: AdminService = Depends(get_admin_service),
    ctx: SessionContext = Depends(get_session_context),
):
    views = await ctx.guarded(user.id, admin.list_bookings(user))
    return AdminBookingList(bookings=views)


@router.patch("/admin/bookings/{booking_id}/status", response_model=Booking)
async def update_status(
    booking_id: str,
    req: StatusUpdateRequest,
    user: AuthUser = Depends(get_current_user),
    lifecycle: BookingLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.transition(user, booking_id, req.status)
