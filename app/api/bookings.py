from fastapi import APIRouter, Depends
from typing import List

from app.api.deps import get_booking_service
from app.core.security import get_current_user
from app.models.api_models import BookingCreateRequest
from app.models.db_models import AuthUser, Booking, BookingInput
from app.services.booking_service import BookingService

router = APIRouter()


@router.post("/bookings", response_model=Booking, status_code=201)
async def create_booking(
    req: BookingCreateRequest,
    user: AuthUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    booking_input = BookingInput(
        weight=req.weight,
        address=req.address,
        pickup_date=req.pickup_date,
        notes=req.notes,
    )
    return await bookings.create_booking(user, req.service_id, booking_input)


@router.get("/bookings", response_model=List[Booking])
async def my_bookings(
    user: AuthUser = Depends(get_current_user),
    bookings: BookingService = Depends(get_booking_service),
):
    return await bookings.list_user_bookings(user)
