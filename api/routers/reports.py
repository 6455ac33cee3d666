"""
Router per aggregazioni upload e palette.

Endpoint:
- GET /api/uploads/{index}/totals: totali per unità
- GET /api/uploads/{index}/categories: distribuzione per categoria
- GET /api/uploads/{index}/products: distribuzione per prodotto (per unità)
- GET /api/uploads/{index}/report: vista completa per il rendering
- GET /api/palette: palette colori
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query

from api.deps import get_upload_store
from api.routers.uploads import get_upload_or_404
from core.upload_store import UploadStore
from ingest.aggregation import (
    available_units,
    build_upload_report,
    category_distribution,
    product_distribution,
    totals_by_unit,
)
from ingest.palette import generate_palette

router = APIRouter(prefix="/api", tags=["reports"])


@router.get("/uploads/{index}/totals")
async def get_totals(index: int, store: UploadStore = Depends(get_upload_store)):
    upload = get_upload_or_404(store, index)
    totals = totals_by_unit(upload.rows)
    return {
        "tipo": upload.tipo,
        "totals": [{"unidade": unit, "total": total} for unit, total in totals.items()],
    }


@router.get("/uploads/{index}/categories")
async def get_categories(index: int, store: UploadStore = Depends(get_upload_store)):
    """Lista vuota + has_categories=False se il batch non ha dimensione categoria."""
    upload = get_upload_or_404(store, index)
    categories = category_distribution(upload.rows)
    return {
        "tipo": upload.tipo,
        "has_categories": bool(categories),
        "categories": [{"categoria": c, "count": n} for c, n in categories],
    }


@router.get("/uploads/{index}/products")
async def get_products(
    index: int,
    unit: Optional[str] = Query(None, description="Unità selezionata (default: prima disponibile)"),
    store: UploadStore = Depends(get_upload_store),
):
    upload = get_upload_or_404(store, index)
    units = available_units(upload.rows)
    selected = unit if unit is not None else (units[0] if units else None)
    products = product_distribution(upload.rows, selected) if selected is not None else []
    return {
        "tipo": upload.tipo,
        "available_units": units,
        "selected_unit": selected,
        "products": [{"produto": p, "total": t} for p, t in products],
    }


@router.get("/uploads/{index}/report")
async def get_report(
    index: int,
    unit: Optional[str] = Query(None),
    store: UploadStore = Depends(get_upload_store),
):
    upload = get_upload_or_404(store, index)
    return build_upload_report(upload, unit=unit)


@router.get("/palette")
async def get_palette(count: int = Query(..., ge=0, le=1000)):
    return {"colors": generate_palette(count)}
