"""
Normalization per righe inventario.

Unifica parsing numerico locale-tolerant e normalizzazione riga
(re-key via alias, coercizione campi, default e inferenze incrociate).
"""
import logging
import math
import re
from typing import Any, Dict

from ingest.header_aliases import resolve_header
from ingest.types import CanonicalRow, RawRecord

logger = logging.getLogger(__name__)

DEFAULT_TIPO = 'gado'
UNIT_HEAD = 'cabeça'
UNIT_GENERIC = 'unid'
UNIT_WEIGHT = 'kg'

# Tolleranza per considerare intera una quantità
INTEGRAL_EPSILON = 1e-9

_NON_NUMERIC = re.compile(r'[^0-9.\-]')


def is_na(value: Any) -> bool:
    """
    Verifica se valore è null/NaN.

    Args:
        value: Valore da verificare

    Returns:
        True se valore è None o float NaN
    """
    if value is None:
        return True
    if isinstance(value, float):
        return math.isnan(value)
    return False


def parse_locale_number(value: Any) -> float:
    """
    Converte un valore 'numerico' in float, tollerando formati europei e US.

    Regole:
    - Se sono presenti sia ',' che '.', il più a destra è il separatore
      decimale e l'altro è separatore delle migliaia ('1.234,56', '1,234.56')
    - Se ne è presente uno solo, è il separatore decimale
    - Ogni altro carattere non cifra/punto/meno viene rimosso
    - Default 0 se vuoto, null o non parsabile; mai NaN/Infinity

    Args:
        value: Valore originale (numero, stringa o None)

    Returns:
        Float finito (0.0 se non parsabile)
    """
    if is_na(value):
        return 0.0

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        number = float(value)
        return number if math.isfinite(number) else 0.0

    value_str = str(value).strip()
    if not value_str:
        return 0.0

    last_comma = value_str.rfind(',')
    last_dot = value_str.rfind('.')

    if last_comma >= 0 and last_dot >= 0:
        if last_comma > last_dot:
            decimal_sep, group_sep = ',', '.'
        else:
            decimal_sep, group_sep = '.', ','
        value_str = value_str.replace(group_sep, '').replace(decimal_sep, '.')
    elif last_comma >= 0:
        value_str = value_str.replace(',', '.')

    value_str = _NON_NUMERIC.sub('', value_str)

    try:
        number = float(value_str)
    except ValueError:
        return 0.0

    return number if math.isfinite(number) else 0.0


def _text(value: Any) -> str:
    """Converte in stringa trimmata; null/NaN diventano stringa vuota."""
    if is_na(value):
        return ''
    return str(value).strip()


def rekey_record(record: RawRecord) -> Dict[str, Any]:
    """
    Re-key del record via alias resolver.

    Se più colonne risolvono allo stesso nome canonico vince l'ultima
    nell'ordine originale delle colonne.

    Args:
        record: Record grezzo (header arbitrari)

    Returns:
        Dict con chiavi canoniche (o slug per colonne non riconosciute)
    """
    rekeyed: Dict[str, Any] = {}
    for header, value in record.items():
        canonical = resolve_header(header)
        if canonical in rekeyed:
            logger.debug(
                f"[NORMALIZATION] Colonna '{header}' sovrascrive valore precedente di '{canonical}'"
            )
        rekeyed[canonical] = value
    return rekeyed


def default_unit_for(quantity: float) -> str:
    """Unità di default in base alla forma della quantità (intera -> cabeça)."""
    if abs(quantity - round(quantity)) < INTEGRAL_EPSILON:
        return UNIT_HEAD
    return UNIT_GENERIC


def normalize_row(record: RawRecord) -> CanonicalRow:
    """
    Normalizza un record grezzo in una CanonicalRow.

    Flow:
    1. Re-key via alias (ultima colonna vince)
    2. Trim di tipo, produto, categoria, unità
    3. Quantità: parse di 'quantidade'; se 0 fallback su 'peso_kg'
       (se non zero, adotta il peso e imposta unità 'kg' se assente)
    4. Default: tipo 'gado'; unità 'cabeça' se quantità intera, 'unid' altrimenti
    5. Categoria mai derivata da produto
    6. Passthrough di id e created_at

    Produto e categoria possono essere entrambi vuoti: il filtro avviene a
    livello di batch.

    Args:
        record: Record grezzo

    Returns:
        CanonicalRow
    """
    row = rekey_record(record)

    tipo = _text(row.get('tipo'))
    produto = _text(row.get('produto'))
    categoria = _text(row.get('categoria'))
    unidade = _text(row.get('unidade_de_medida')) or _text(row.get('unidade'))

    quantidade = parse_locale_number(row.get('quantidade'))
    if quantidade == 0:
        peso = parse_locale_number(row.get('peso_kg'))
        if peso != 0:
            quantidade = peso
            if not unidade:
                unidade = UNIT_WEIGHT

    if not tipo:
        tipo = DEFAULT_TIPO
    if not unidade:
        unidade = default_unit_for(quantidade)

    return CanonicalRow(
        id=_text(row.get('id')),
        created_at=_text(row.get('created_at')),
        tipo=tipo,
        produto=produto,
        categoria=categoria,
        quantidade=quantidade,
        unidade_de_medida=unidade,
    )
