"""
Modelli dati canonici per la pipeline di ingest.

Riga canonica (CanonicalRow) e upload (Upload) sono immutabili: un upload
viene sostituito in blocco, mai modificato sul posto.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Record grezzo come arriva dal parser CSV (header arbitrario -> valore)
RawValue = Union[str, int, float, None]
RawRecord = Mapping[str, RawValue]


class CanonicalRow(BaseModel):
    """Riga normalizzata con schema fisso."""

    model_config = ConfigDict(frozen=True)

    id: str = ''
    created_at: str = ''
    tipo: str = ''
    produto: str = ''
    categoria: str = ''
    quantidade: float = 0.0
    unidade_de_medida: str = ''

    @field_validator('quantidade')
    @classmethod
    def validate_quantidade(cls, v: float) -> float:
        """NaN/Infinity non sono ammessi: degradano a 0."""
        if v != v or v in (float('inf'), float('-inf')):
            return 0.0
        return v

    def identifying_value(self) -> str:
        """Produto se presente, altrimenti categoria."""
        return self.produto or self.categoria


class Upload(BaseModel):
    """Un file ingerito: metadati + righe canoniche."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    tipo: str
    file_name: str = Field(default='', alias='fileName')
    uploaded_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), alias='uploadedAt'
    )
    rows: Tuple[CanonicalRow, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode='json')

    def same_type(self, tipo: Optional[str]) -> bool:
        return (tipo or '').strip().casefold() == self.tipo.strip().casefold()
