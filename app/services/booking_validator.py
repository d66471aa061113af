from datetime import date, datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.core.errors import BookingValidationError
from app.models.db_models import BookingInput, Service, ValidatedBooking
from app.services.pricing import parse_weight, format_kg

MIN_WEIGHT_KG = Decimal("0.5")
MAX_WEIGHT_KG = Decimal("100")
ADDRESS_MIN_LENGTH = 10
ADDRESS_MAX_LENGTH = 500
NOTES_MAX_LENGTH = 1000


def business_today() -> date:
    return datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE)).date()


def validate(booking_input: BookingInput, service: Service, today: date = None) -> ValidatedBooking:
    """
    Checks a booking form against the generic rules and then the service's own
    minimum weight. Raises BookingValidationError with the first failing rule's
    message; nothing is aggregated.
    """
    today = today or business_today()

    # 1. Weight
    weight = parse_weight(booking_input.weight)
    if weight is None:
        raise BookingValidationError("Weight must be a number")
    if weight < MIN_WEIGHT_KG:
        raise BookingValidationError(f"Minimum weight is {format_kg(MIN_WEIGHT_KG)} kg")
    if weight > MAX_WEIGHT_KG:
        raise BookingValidationError(f"Maximum weight is {format_kg(MAX_WEIGHT_KG)} kg")

    # 2. Address
    address = (booking_input.address or "").strip()
    if len(address) < ADDRESS_MIN_LENGTH:
        raise BookingValidationError(f"Address must be at least {ADDRESS_MIN_LENGTH} characters")
    if len(address) > ADDRESS_MAX_LENGTH:
        raise BookingValidationError(f"Address must be at most {ADDRESS_MAX_LENGTH} characters")

    # 3. Pickup date, earliest is tomorrow
    raw_date = (booking_input.pickup_date or "").strip()
    if not raw_date:
        raise BookingValidationError("Pickup date is required")
    try:
        pickup_date = date.fromisoformat(raw_date)
    except ValueError:
        raise BookingValidationError("Pickup date must be a valid date")
    if pickup_date <= today:
        raise BookingValidationError("Pickup date must be tomorrow or later")

    # 4. Notes
    notes = booking_input.notes
    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        raise BookingValidationError(f"Notes must be at most {NOTES_MAX_LENGTH} characters")
    if notes is not None and not notes.strip():
        notes = None

    # 5. Service-specific minimum
    if weight < service.min_weight:
        raise BookingValidationError(f"Minimum weight for this service is {format_kg(service.min_weight)} kg")

    return ValidatedBooking(
        weight_kg=weight,
        pickup_address=address,
        pickup_date=pickup_date,
        notes=notes,
    )
