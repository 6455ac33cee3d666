"""
Persistenza del blob upload.

Lo stato persistito è un unico blob JSON sotto una chiave fissa, il cui
contenuto decodificato è la lista ordinata degli Upload. Gli adapter
sollevano eccezioni: è lo UploadStore che le assorbe.
"""
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from pydantic import TypeAdapter
from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from core.config import ProcessorConfig
from ingest.types import Upload

logger = logging.getLogger(__name__)

DEFAULT_KEY = "uploads"

_UPLOAD_LIST = TypeAdapter(List[Upload])

Base = declarative_base()


class BlobEntry(Base):
    """Blob chiave/valore (una riga per chiave)."""
    __tablename__ = "kv_blobs"

    key = Column(String(100), primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))


def encode_uploads(uploads: Sequence[Upload]) -> str:
    return _UPLOAD_LIST.dump_json(list(uploads), by_alias=True).decode("utf-8")


def decode_uploads(blob: Optional[str]) -> List[Upload]:
    """
    Decodifica il blob persistito.

    Raises:
        pydantic.ValidationError: Se il blob è malformato
    """
    if not blob:
        return []
    return _UPLOAD_LIST.validate_json(blob)


class UploadListStore(Protocol):
    """Capability load/save/clear sulla lista upload persistita."""

    def load(self) -> List[Upload]:
        ...

    def save(self, uploads: Sequence[Upload]) -> None:
        ...

    def clear(self) -> None:
        ...


class InMemoryUploadListStore:
    """Store in memoria; serializza comunque per avere lo stesso formato del blob."""

    def __init__(self, blob: Optional[str] = None):
        self.blob = blob

    def load(self) -> List[Upload]:
        return decode_uploads(self.blob)

    def save(self, uploads: Sequence[Upload]) -> None:
        self.blob = encode_uploads(uploads)

    def clear(self) -> None:
        self.blob = None


class JsonFileUploadListStore:
    """Blob salvato come file JSON ({chiave: lista upload})."""

    def __init__(self, path, key: str = DEFAULT_KEY):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Formato blob non valido in {self.path}")
        return data

    def load(self) -> List[Upload]:
        data = self._read_all()
        if self.key not in data:
            return []
        return _UPLOAD_LIST.validate_python(data[self.key])

    def save(self, uploads: Sequence[Upload]) -> None:
        try:
            data = self._read_all()
        except ValueError:
            logger.warning(f"[PERSISTENCE] Blob corrotto in {self.path}, verrà sovrascritto")
            data = {}
        data[self.key] = json.loads(encode_uploads(uploads))
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        tmp_path.replace(self.path)

    def clear(self) -> None:
        if not self.path.exists():
            return
        try:
            data = self._read_all()
        except ValueError:
            # Blob corrotto: rimuovi tutto il file
            self.path.unlink()
            return
        data.pop(self.key, None)
        if data:
            self.path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        else:
            self.path.unlink()


class SqlUploadListStore:
    """Blob salvato in una tabella chiave/valore via SQLAlchemy."""

    def __init__(self, database_url: str, key: str = DEFAULT_KEY):
        self.key = key
        self.engine = create_engine(database_url)
        self.Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        Base.metadata.create_all(self.engine)

    def load(self) -> List[Upload]:
        with self.Session() as session:
            entry = session.get(BlobEntry, self.key)
            return decode_uploads(entry.value if entry else None)

    def save(self, uploads: Sequence[Upload]) -> None:
        with self.Session.begin() as session:
            session.merge(
                BlobEntry(
                    key=self.key,
                    value=encode_uploads(uploads),
                    updated_at=datetime.now(timezone.utc),
                )
            )

    def clear(self) -> None:
        with self.Session.begin() as session:
            entry = session.get(BlobEntry, self.key)
            if entry is not None:
                session.delete(entry)


def create_upload_list_store(config: ProcessorConfig) -> UploadListStore:
    """
    Crea lo store di persistenza dalla configurazione.

    Se il backend configurato non è inizializzabile (es. database non
    raggiungibile) ripiega su memoria: il core deve restare utilizzabile.
    """
    try:
        if config.storage_backend == "sql":
            store = SqlUploadListStore(config.database_url, key=config.storage_key)
        elif config.storage_backend == "file":
            store = JsonFileUploadListStore(config.storage_file, key=config.storage_key)
        else:
            store = InMemoryUploadListStore()
    except Exception as e:
        logger.warning(
            f"[PERSISTENCE] Backend '{config.storage_backend}' non disponibile, uso memoria: {e}"
        )
        return InMemoryUploadListStore()

    logger.info(f"[PERSISTENCE] Backend upload: {config.storage_backend}")
    return store
