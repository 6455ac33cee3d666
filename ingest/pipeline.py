"""
Pipeline Orchestratore - dal file CSV all'Upload nello store.

Flow: lettura testo (unico punto di sospensione) → parse CSV → normalizzazione
righe → filtro righe vuote/totali → inferenza tipo batch → controllo
unicità tipo → normalizzazione unità → append nello store.
"""
import logging
import re
import time
from datetime import datetime, timezone
from typing import Iterable, List, Optional, Protocol, Sequence, Union

from core.errors import DuplicateType, EmptyOrUnrecognizedBatch, IngestError, UnparseableFile
from core.logger import get_request_context, log_json, set_request_context
from ingest.csv_parser import parse_csv
from ingest.header_aliases import slugify
from ingest.normalization import DEFAULT_TIPO, UNIT_HEAD, normalize_row
from ingest.types import CanonicalRow, RawRecord, Upload

logger = logging.getLogger(__name__)

FALLBACK_TIPO = 'estoque'

# Etichette di subtotale esportate dai gestionali (confronto senza spazi)
TOTAL_ROW_TOKENS = frozenset({'total', 'totais', 'totalgeral'})

_WHITESPACE = re.compile(r'\s+')

# Varianti plurali riscritte sulla forma canonica
UNIT_SPELLINGS = {'cabeças': UNIT_HEAD}


class AsyncReadable(Protocol):
    async def read(self) -> Union[bytes, str]:
        ...


def is_total_row(row: CanonicalRow) -> bool:
    """
    True se il campo identificativo (produto, altrimenti categoria) è una
    riga di totale del file sorgente ('Total', 'TOTAL', 'Totais', ...).
    """
    value = _WHITESPACE.sub('', row.identifying_value()).casefold()
    return value in TOTAL_ROW_TOKENS


def filter_rows(rows: Iterable[CanonicalRow]) -> List[CanonicalRow]:
    """Scarta righe senza produto/categoria e righe di totale."""
    kept: List[CanonicalRow] = []
    for row in rows:
        if not row.produto and not row.categoria:
            continue
        if is_total_row(row):
            logger.debug(f"[PIPELINE] Riga totale scartata: '{row.identifying_value()}'")
            continue
        kept.append(row)
    return kept


def infer_batch_type(rows: Sequence[CanonicalRow], file_name: Optional[str]) -> str:
    """
    Inferisce il tipo del batch.

    Ordine: tipo della prima riga che ne ha uno → 'gado' se lo slug del
    nome file contiene il token → 'estoque'.
    """
    for row in rows:
        if row.tipo.strip():
            return row.tipo.strip()

    if DEFAULT_TIPO in slugify(file_name).split('_'):
        return DEFAULT_TIPO
    return FALLBACK_TIPO


def normalize_unit_spelling(rows: Iterable[CanonicalRow]) -> List[CanonicalRow]:
    """Riscrive 'cabeças' (case-insensitive) in 'cabeça'; nessun'altra variante."""
    normalized: List[CanonicalRow] = []
    for row in rows:
        canonical = UNIT_SPELLINGS.get(row.unidade_de_medida.strip().casefold())
        if canonical and row.unidade_de_medida != canonical:
            row = row.model_copy(update={'unidade_de_medida': canonical})
        normalized.append(row)
    return normalized


def build_upload(
    records: Sequence[RawRecord],
    file_name: Optional[str],
    existing: Sequence[Upload] = (),
) -> Upload:
    """
    Costruisce un nuovo Upload da record grezzi.

    Args:
        records: Record del CSV nell'ordine del file
        file_name: Nome file (può essere vuoto)
        existing: Snapshot corrente degli upload (per il controllo di unicità)

    Returns:
        Upload pronto per l'inserimento

    Raises:
        EmptyOrUnrecognizedBatch: Se nessuna riga sopravvive ai filtri
        DuplicateType: Se il tipo inferito esiste già nello store
    """
    normalized = [normalize_row(record) for record in records]
    rows = filter_rows(normalized)

    logger.info(
        f'[PIPELINE] Righe normalizzate: {len(rows)}/{len(normalized)} valide '
        f'({len(normalized) - len(rows)} scartate)'
    )

    if not rows:
        raise EmptyOrUnrecognizedBatch(f'{len(normalized)} linhas lidas, nenhuma utilizável')

    tipo = infer_batch_type(rows, file_name)

    for upload in existing:
        if upload.same_type(tipo):
            logger.warning(f"[PIPELINE] Tipo '{tipo}' già presente (file={upload.file_name})")
            raise DuplicateType(upload.tipo)

    return Upload(
        tipo=tipo,
        file_name=file_name or '',
        uploaded_at=datetime.now(timezone.utc),
        rows=tuple(normalize_unit_spelling(rows)),
    )


async def process_file(
    source: AsyncReadable,
    file_name: Optional[str],
    store,
    correlation_id: Optional[str] = None,
    max_bytes: Optional[int] = None,
) -> Upload:
    """
    Ingest completo di un file nello UploadStore.

    Args:
        source: Oggetto con metodo async read() (es. UploadFile FastAPI)
        file_name: Nome file mostrato
        store: UploadStore di destinazione
        correlation_id: ID correlazione per logging (genera se None)
        max_bytes: Dimensione massima accettata (None = nessun limite)

    Returns:
        Upload aggiunto allo store

    Raises:
        IngestError: UnparseableFile, EmptyOrUnrecognizedBatch, DuplicateType
    """
    start_time = time.time()
    set_request_context(correlation_id=correlation_id)
    correlation_id = get_request_context().get('correlation_id')

    logger.info(f'[PIPELINE] Starting processing: {file_name}')
    content = await source.read()

    records: List[RawRecord] = []
    try:
        if max_bytes is not None and len(content) > max_bytes:
            raise UnparseableFile(f'arquivo maior que {max_bytes} bytes')

        records = parse_csv(content)
        upload = build_upload(records, file_name, store.uploads)
        store.append(upload)
    except IngestError as e:
        log_json(
            level='error',
            message=f'Pipeline failed: {e.code}',
            correlation_id=correlation_id,
            file_name=file_name,
            rows_total=len(records),
            elapsed_ms=round((time.time() - start_time) * 1000, 2),
            decision='reject',
            error_code=e.code,
        )
        raise

    log_json(
        level='info',
        message=f'Pipeline completed: tipo={upload.tipo}, rows={len(upload.rows)}',
        correlation_id=correlation_id,
        file_name=file_name,
        tipo=upload.tipo,
        rows_total=len(records),
        rows_valid=len(upload.rows),
        rows_rejected=len(records) - len(upload.rows),
        elapsed_ms=round((time.time() - start_time) * 1000, 2),
        decision='save',
    )
    return upload
