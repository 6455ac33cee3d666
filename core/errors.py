"""
Tassonomia errori della pipeline di ingest.

Ogni errore porta un codice stabile e un messaggio user-facing (in
portoghese, mostrato così com'è dal collaboratore UI).
"""
from typing import Optional


class IngestError(Exception):
    """Errore base: operazione abortita, nessuna modifica di stato."""

    code = "INGEST_ERROR"
    status_code = 422

    def __init__(self, user_message: str, detail: Optional[str] = None):
        super().__init__(user_message if detail is None else f"{user_message} ({detail})")
        self.user_message = user_message
        self.detail = detail

    def to_dict(self) -> dict:
        payload = {"code": self.code, "message": self.user_message}
        if self.detail:
            payload["detail"] = self.detail
        return payload


class UnparseableFile(IngestError):
    """Il parser CSV fallisce (struttura malformata, file vuoto o troppo grande)."""

    code = "UNPARSEABLE_FILE"

    def __init__(self, detail: Optional[str] = None):
        super().__init__("Não foi possível ler o arquivo CSV.", detail)


class EmptyOrUnrecognizedBatch(IngestError):
    """Tutte le righe scartate: nessun produto/categoria utilizzabile."""

    code = "EMPTY_OR_UNRECOGNIZED_BATCH"

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            "Nenhuma linha válida encontrada. Verifique se o arquivo tem colunas "
            "de produto ou categoria.",
            detail,
        )


class DuplicateType(IngestError):
    """Esiste già un upload con lo stesso tipo (case-insensitive)."""

    code = "DUPLICATE_TYPE"
    status_code = 409

    def __init__(self, tipo: str):
        super().__init__(
            f'Já existe um upload do tipo "{tipo}". Remova o upload existente '
            f"(remover último) ou limpe todos os uploads antes de enviar outro "
            f"arquivo deste tipo."
        )
        self.tipo = tipo

    def to_dict(self) -> dict:
        payload = super().to_dict()
        payload["tipo"] = self.tipo
        return payload
