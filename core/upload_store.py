"""
Upload store: collezione ordinata process-wide degli upload.

Ogni mutazione sostituisce la tupla degli upload e ri-serializza subito
sul blob persistito. Errori di persistenza vengono loggati e assorbiti:
lo store resta utilizzabile anche con persistenza non disponibile.
"""
import logging
from typing import Callable, Optional, Tuple

from core.errors import DuplicateType
from core.persistence import UploadListStore
from ingest.types import Upload

logger = logging.getLogger(__name__)

# Capability di conferma per operazioni distruttive (messaggio -> procedi?)
Confirm = Callable[[str], bool]

CONFIRM_REMOVE_LAST = 'Remover o último upload ("{tipo}")?'
CONFIRM_CLEAR_ALL = "Remover todos os {count} uploads?"


def always_confirm(message: str) -> bool:
    """Conferma di default per contesti headless: procedi sempre."""
    return True


class UploadStore:
    """Lista ordinata di Upload sincronizzata con il blob persistito."""

    def __init__(self, persistence: UploadListStore, confirm: Optional[Confirm] = None):
        self._persistence = persistence
        self._confirm = confirm or always_confirm
        self._uploads: Tuple[Upload, ...] = self._load()

    @property
    def uploads(self) -> Tuple[Upload, ...]:
        return self._uploads

    def __len__(self) -> int:
        return len(self._uploads)

    def get(self, index: int) -> Upload:
        """Upload per indice (ordine di inserimento). Solleva IndexError."""
        if index < 0:
            raise IndexError(index)
        return self._uploads[index]

    def find_by_type(self, tipo: str) -> Optional[Upload]:
        for upload in self._uploads:
            if upload.same_type(tipo):
                return upload
        return None

    def append(self, upload: Upload) -> Upload:
        """
        Aggiunge un upload in coda.

        Raises:
            DuplicateType: Se esiste già un upload con lo stesso tipo
        """
        existing = self.find_by_type(upload.tipo)
        if existing is not None:
            raise DuplicateType(existing.tipo)

        self._uploads = self._uploads + (upload,)
        logger.info(
            f"[UPLOAD_STORE] Upload aggiunto: tipo={upload.tipo}, rows={len(upload.rows)}, "
            f"totale upload={len(self._uploads)}"
        )
        self._persist()
        return upload

    def remove_last(self) -> Optional[Upload]:
        """
        Rimuove l'ultimo upload (no-op se vuoto o se la conferma è negata).

        Returns:
            Upload rimosso oppure None
        """
        if not self._uploads:
            return None

        last = self._uploads[-1]
        if not self._ask(CONFIRM_REMOVE_LAST.format(tipo=last.tipo)):
            logger.info("[UPLOAD_STORE] Rimozione ultimo upload annullata")
            return None

        self._uploads = self._uploads[:-1]
        logger.info(f"[UPLOAD_STORE] Upload rimosso: tipo={last.tipo}")
        self._persist()
        return last

    def clear_all(self) -> int:
        """
        Rimuove tutti gli upload (no-op se vuoto o se la conferma è negata).

        Returns:
            Numero di upload rimossi
        """
        count = len(self._uploads)
        if count == 0:
            return 0

        if not self._ask(CONFIRM_CLEAR_ALL.format(count=count)):
            logger.info("[UPLOAD_STORE] Pulizia upload annullata")
            return 0

        self._uploads = ()
        logger.info(f"[UPLOAD_STORE] Rimossi {count} upload")
        self._persist()
        return count

    def hard_reset(self) -> None:
        """Svuota store e blob persistito, senza conferma e anche se già vuoto."""
        self._uploads = ()
        try:
            self._persistence.clear()
        except Exception as e:
            logger.warning(f"[UPLOAD_STORE] Errore cancellazione blob persistito: {e}")
        logger.info("[UPLOAD_STORE] Hard reset completato")

    def _ask(self, message: str) -> bool:
        try:
            return bool(self._confirm(message))
        except Exception as e:
            # Conferma non presentabile: si procede
            logger.warning(f"[UPLOAD_STORE] Conferma non disponibile ({e}), procedo")
            return True

    def _load(self) -> Tuple[Upload, ...]:
        try:
            uploads = tuple(self._persistence.load())
        except Exception as e:
            logger.warning(f"[UPLOAD_STORE] Blob persistito illeggibile, store vuoto: {e}")
            return ()
        logger.info(f"[UPLOAD_STORE] Caricati {len(uploads)} upload dal blob persistito")
        return uploads

    def _persist(self) -> None:
        try:
            self._persistence.save(self._uploads)
        except Exception as e:
            logger.warning(f"[UPLOAD_STORE] Errore salvataggio blob persistito: {e}")
