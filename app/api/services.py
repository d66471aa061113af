from fastapi import APIRouter, Depends
from typing import List

from app.api.deps import get_catalog_service
from app.core.config import settings
from app.models.api_models import QuoteRequest, QuoteResponse
from app.models.db_models import Service
from app.services.catalog_service import CatalogService
from app.services.pricing import compute_total, ready_in_label

router = APIRouter()


@router.get("/services", response_model=List[Service])
async def list_services(catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.list_active_services()


@router.get("/services/{service_id}", response_model=Service)
async def get_service(service_id: str, catalog: CatalogService = Depends(get_catalog_service)):
    return await catalog.get_service(service_id)


@router.post("/services/{service_id}/quote", response_model=QuoteResponse)
async def quote(service_id: str, req: QuoteRequest, catalog: CatalogService = Depends(get_catalog_service)):
    # Live total for the booking form; empty or garbage weight quotes as 0.00
    service = await catalog.get_service(service_id)
    return QuoteResponse(
        service_id=service.id,
        price_per_kg=service.price_per_kg,
        total_price=compute_total(req.weight, service.price_per_kg),
        currency=settings.CURRENCY_SYMBOL,
        ready_in=ready_in_label(service.turnaround_days),
    )
