"""
Main FastAPI application per estoque-processor.

Espone al collaboratore di rendering le operazioni di ingest, mutazione
dello store e lettura delle aggregazioni.
"""
import logging
from datetime import datetime, timezone

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.deps import get_upload_store
from api.routers import reports, uploads
from core.config import get_config, validate_config
from core.logger import setup_colored_logging
from core.upload_store import UploadStore

setup_colored_logging("processor")
logger = logging.getLogger(__name__)

app = FastAPI(title="Estoque Processor", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(uploads.router)
app.include_router(reports.router)


@app.on_event("startup")
async def startup_event():
    """Valida configurazione e carica gli upload persistiti."""
    try:
        validate_config()
        store = get_upload_store()
        logger.info(f"Startup completato: {len(store)} upload caricati")
    except Exception as e:
        logger.error(f"Error during startup: {e}", exc_info=True)
        raise


@app.get("/health")
async def health_check(store: UploadStore = Depends(get_upload_store)):
    """Health check del servizio."""
    config = get_config()
    return {
        "status": "healthy",
        "service": "estoque-processor",
        "version": config.processor_version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "storage_backend": config.storage_backend,
        "uploads": len(store),
        "endpoints": {
            "uploads": "/api/uploads",
            "remove_last": "/api/uploads/last",
            "reset": "/api/uploads/reset",
            "report": "/api/uploads/{index}/report",
            "palette": "/api/palette",
        },
    }
