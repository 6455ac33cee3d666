"""
Router per upload (ingest e mutazioni dello store).

Endpoint:
- GET /api/uploads: lista ordinata degli upload
- POST /api/uploads: ingest file CSV
- DELETE /api/uploads/last: rimuove l'ultimo upload
- DELETE /api/uploads: rimuove tutti gli upload
- POST /api/uploads/reset: hard reset (store + blob persistito)
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from api.deps import get_upload_store
from core.config import get_config
from core.errors import IngestError
from core.upload_store import UploadStore
from ingest.pipeline import process_file

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["uploads"])


@router.get("/uploads")
async def list_uploads(store: UploadStore = Depends(get_upload_store)):
    """Lista upload in ordine di inserimento."""
    return {
        "count": len(store),
        "uploads": [upload.to_dict() for upload in store.uploads],
    }


@router.post("/uploads", status_code=201)
async def ingest_upload(
    file: UploadFile = File(...),
    correlation_id: Optional[str] = Form(None),
    store: UploadStore = Depends(get_upload_store),
):
    """
    Ingest di un file CSV.

    Errori:
    - 422 UNPARSEABLE_FILE / EMPTY_OR_UNRECOGNIZED_BATCH
    - 409 DUPLICATE_TYPE
    """
    file_name = file.filename or ""
    try:
        upload = await process_file(
            file,
            file_name,
            store,
            correlation_id=correlation_id,
            max_bytes=get_config().csv_max_bytes,
        )
    except IngestError as e:
        logger.warning(f"[API] Upload rifiutato: file={file_name}, code={e.code}")
        raise HTTPException(status_code=e.status_code, detail=e.to_dict())
    finally:
        await file.close()

    return upload.to_dict()


@router.delete("/uploads/last")
async def remove_last_upload(store: UploadStore = Depends(get_upload_store)):
    """Rimuove l'ultimo upload (no-op se vuoto)."""
    removed = store.remove_last()
    return {
        "removed": removed.to_dict() if removed else None,
        "count": len(store),
    }


@router.delete("/uploads")
async def clear_uploads(store: UploadStore = Depends(get_upload_store)):
    """Rimuove tutti gli upload (no-op se vuoto)."""
    removed_count = store.clear_all()
    return {"removed_count": removed_count, "count": len(store)}


@router.post("/uploads/reset")
async def hard_reset(store: UploadStore = Depends(get_upload_store)):
    """Hard reset incondizionato."""
    store.hard_reset()
    return {"status": "reset", "count": len(store)}


def get_upload_or_404(store: UploadStore, index: int):
    try:
        return store.get(index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"Upload {index} non trovato")
