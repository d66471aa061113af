from pydantic import BaseModel, Field
from typing import Optional, Union, List
from decimal import Decimal

from app.models.db_models import BookingStatus, AdminBookingView, Profile

# --- Incoming Request Models ---

class QuoteRequest(BaseModel):
    # Free text from the weight input; anything non-numeric quotes as 0
    weight: Optional[Union[str, float]] = None

class BookingCreateRequest(BaseModel):
    service_id: str
    weight: Optional[Union[str, float]] = None
    address: str = ""
    pickup_date: str = ""
    notes: Optional[str] = None

class StatusUpdateRequest(BaseModel):
    status: BookingStatus


# --- Outgoing Response Models ---

class QuoteResponse(BaseModel):
    service_id: str
    price_per_kg: Decimal
    total_price: Decimal
    currency: str
    ready_in: str

class SessionInfo(BaseModel):
    user_id: str
    email: Optional[str] = None
    is_admin: bool = False

class AdminBookingList(BaseModel):
    bookings: List[AdminBookingView] = Field(default_factory=list)

class ProfileResponse(BaseModel):
    profile: Optional[Profile] = None

class MessageResponse(BaseModel):
    message: str
