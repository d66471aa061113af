from typing import List

from app.core.errors import NotFoundError
from app.core.logger import logger
from app.models.db_models import Service
from app.services.db_service import db_service


class CatalogService:
    """Read-only view of the active laundry services. The database is authoritative, nothing is cached."""

    def __init__(self, db=None):
        self.db = db or db_service

    async def list_active_services(self) -> List[Service]:
        rows = await self.db.list_active_services()
        services = [Service(**row) for row in rows if row.get('is_active', True)]
        # The query already orders by price; the name tie-break keeps repeated reads identical
        services.sort(key=lambda s: (s.price_per_kg, s.name))
        logger.debug(f"📋 {len(services)} active services")
        return services

    async def get_service(self, service_id: str) -> Service:
        row = await self.db.get_service(service_id)
        if not row or not row.get('is_active', True):
            raise NotFoundError("Service not found")
        return Service(**row)
