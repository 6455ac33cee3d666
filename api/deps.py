"""
Dipendenze FastAPI condivise dai router.
"""
import logging
from typing import Optional

from core.config import get_config
from core.persistence import create_upload_list_store
from core.upload_store import UploadStore

logger = logging.getLogger(__name__)

# Store process-wide (un solo worker)
_upload_store: Optional[UploadStore] = None


def get_upload_store() -> UploadStore:
    """Ottiene lo UploadStore dell'applicazione (creato al primo uso)."""
    global _upload_store
    if _upload_store is None:
        config = get_config()
        _upload_store = UploadStore(create_upload_list_store(config))
        logger.info(f"[API] Upload store inizializzato con {len(_upload_store)} upload")
    return _upload_store
