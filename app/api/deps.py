from fastapi import Depends

from app.services.admin_service import AdminService
from app.services.booking_service import BookingService
from app.services.catalog_service import CatalogService
from app.services.db_service import DBService, db_service
from app.services.lifecycle import BookingLifecycle
from app.services.role_service import RoleService


def get_db() -> DBService:
    return db_service


def get_catalog_service(db=Depends(get_db)) -> CatalogService:
    return CatalogService(db)


def get_role_service(db=Depends(get_db)) -> RoleService:
    return RoleService(db)


def get_booking_service(db=Depends(get_db), catalog: CatalogService = Depends(get_catalog_service)) -> BookingService:
    return BookingService(db, catalog)


def get_admin_service(db=Depends(get_db), roles: RoleService = Depends(get_role_service)) -> AdminService:
    return AdminService(db, roles)


def get_lifecycle(db=Depends(get_db), roles: RoleService = Depends(get_role_service)) -> BookingLifecycle:
    return BookingLifecycle(db, roles)
