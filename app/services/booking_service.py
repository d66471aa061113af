from datetime import date
from typing import List

from app.core.logger import logger
from app.models.db_models import AuthUser, Booking, BookingInput, Service
from app.services.booking_validator import validate
from app.services.catalog_service import CatalogService
from app.services.db_service import db_service
from app.services.pricing import compute_total


class BookingService:
    def __init__(self, db=None, catalog: CatalogService = None):
        self.db = db or db_service
        self.catalog = catalog or CatalogService(self.db)

    async def create_booking(self, user: AuthUser, service_id: str, booking_input: BookingInput, today: date = None) -> Booking:
        """
        Validates the form against the service and stores a pending booking.
        The total is priced once here and stored as a snapshot; later rate
        changes on the service do not touch it.
        """
        service: Service = await self.catalog.get_service(service_id)

        logger.info(f"📥 Booking Request - user {user.id}, service {service.name}, weight {booking_input.weight!r}")
        validated = validate(booking_input, service, today=today)

        total_price = compute_total(validated.weight_kg, service.price_per_kg)
        row = validated.to_row(user.id, service.id, total_price)

        stored = await self.db.insert_booking(row)
        booking = Booking(**stored)
        logger.info(f"🏁 Booking {booking.id} created: {validated.weight_kg} kg x {service.price_per_kg} = {total_price}")
        return booking

    async def list_user_bookings(self, user: AuthUser) -> List[Booking]:
        """Customer dashboard, newest first. Always read from the database so admin changes show up at once."""
        rows = await self.db.list_bookings_for_user(user.id)
        return [Booking(**row) for row in rows]
