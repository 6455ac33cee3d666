"""
Configurazione per estoque-processor usando pydantic-settings.

Gestisce variabili d'ambiente e backend di persistenza degli upload.
"""
import logging
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Carica .env
load_dotenv()

logger = logging.getLogger(__name__)


class ProcessorConfig(BaseSettings):
    """Configurazione completa del processor."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistenza upload
    storage_backend: Literal["sql", "file", "memory"] = Field(
        default="sql", description="Backend blob upload (sql, file, memory)"
    )
    database_url: str = Field(default="sqlite:///./estoque.db", description="URL SQLAlchemy per backend sql")
    storage_file: str = Field(default="./uploads.json", description="Percorso blob JSON per backend file")
    storage_key: str = Field(default="uploads", description="Chiave fissa del blob upload")

    # Server
    host: str = Field(default="0.0.0.0", description="Host server FastAPI")
    port: int = Field(default=8001, description="Porta server FastAPI")

    # Limiti
    csv_max_bytes: int = Field(default=10 * 1024 * 1024, ge=1, description="Dimensione massima file CSV")

    # Processor info
    processor_name: str = Field(default="Estoque Processor", description="Nome processor")
    processor_version: str = Field(default="1.0.0", description="Versione processor")

    def validate_config(self) -> bool:
        """Valida configurazione critica."""
        errors = []

        if self.storage_backend == "sql" and not self.database_url:
            errors.append("DATABASE_URL non configurato per backend sql")
        if self.storage_backend == "file" and not self.storage_file:
            errors.append("STORAGE_FILE non configurato per backend file")
        if not self.storage_key:
            errors.append("STORAGE_KEY vuoto")

        if self.storage_backend == "memory":
            logger.warning("Backend memory: gli upload non sopravvivono al riavvio")

        if errors:
            error_msg = "Configurazione processor non valida:\n" + "\n".join(f"  - {error}" for error in errors)
            logger.error(error_msg)
            raise ValueError(error_msg)

        logger.info(f"Configurazione processor validata (backend={self.storage_backend})")
        return True


# Istanza globale configurazione
_config: Optional[ProcessorConfig] = None


def get_config() -> ProcessorConfig:
    """Ottiene istanza configurazione (singleton)."""
    global _config
    if _config is None:
        _config = ProcessorConfig()
    return _config


def validate_config() -> bool:
    """Valida configurazione critica (funzione standalone)."""
    return get_config().validate_config()


def reset_config() -> None:
    """Scarta il singleton (usato dai test dopo modifiche all'ambiente)."""
    global _config
    _config = None
