from enum import Enum
from typing import Optional, Union
from datetime import date, datetime
from decimal import Decimal
from pydantic import BaseModel, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# --- Table rows (column names match the Supabase schema) ---

class Service(BaseModel):
    id: str
    name: str
    type: Optional[str] = None
    description: Optional[str] = None
    price_per_kg: Decimal = Field(ge=0)
    min_weight: Decimal = Field(gt=0)
    turnaround_days: int = Field(ge=1)
    is_active: bool = True


class ServiceSummary(BaseModel):
    """Service columns embedded in a booking read (`services(name, turnaround_days)`)."""
    name: str
    turnaround_days: Optional[int] = None


class Booking(BaseModel):
    id: str
    user_id: str
    service_id: str
    weight_kg: Decimal
    total_price: Decimal
    pickup_address: str
    pickup_date: date
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    created_at: Optional[datetime] = None
    services: Optional[ServiceSummary] = None


class Profile(BaseModel):
    id: str
    full_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class AuthUser(BaseModel):
    id: str
    email: Optional[str] = None


# --- Booking workflow ---

class BookingInput(BaseModel):
    """Raw booking form values. Weight stays free text until validated."""
    weight: Optional[Union[str, float]] = None
    address: str = ""
    pickup_date: str = ""
    notes: Optional[str] = None


class ValidatedBooking(BaseModel):
    weight_kg: Decimal
    pickup_address: str
    pickup_date: date
    notes: Optional[str] = None

    def to_row(self, user_id: str, service_id: str, total_price: Decimal) -> dict:
        """Insert payload for the `bookings` table. New bookings always start pending."""
        return {
            "user_id": user_id,
            "service_id": service_id,
            "weight_kg": float(self.weight_kg),
            "total_price": float(total_price),
            "pickup_address": self.pickup_address,
            "pickup_date": self.pickup_date.isoformat(),
            "notes": self.notes,
            "status": BookingStatus.PENDING.value,
        }


class AdminBookingView(Booking):
    profile: Profile
