"""
Aggregazioni su righe canoniche di un upload.

Funzioni pure: non modificano l'input e vengono ricalcolate a ogni
lettura (i batch sono piccoli).
"""
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from ingest.normalization import UNIT_GENERIC
from ingest.palette import generate_palette
from ingest.types import CanonicalRow, Upload

NO_PRODUCT_LABEL = '(sem produto)'


def totals_by_unit(rows: Iterable[CanonicalRow]) -> Dict[str, float]:
    """
    Somma quantidade per unità di misura.

    Unità vuota → 'unid'. L'ordine di visualizzazione è compito del
    collaboratore UI.
    """
    totals: Dict[str, float] = {}
    for row in rows:
        unit = row.unidade_de_medida.strip() or UNIT_GENERIC
        totals[unit] = totals.get(unit, 0.0) + row.quantidade
    return totals


def category_distribution(rows: Iterable[CanonicalRow]) -> List[Tuple[str, int]]:
    """
    Conteggio righe per categoria, ordinato per conteggio decrescente.

    Righe senza categoria sono escluse; lista vuota significa che il batch
    non ha dimensione categoria.
    """
    counts: Dict[str, int] = {}
    for row in rows:
        categoria = row.categoria.strip()
        if categoria:
            counts[categoria] = counts.get(categoria, 0) + 1
    return sorted(counts.items(), key=lambda item: item[1], reverse=True)


def available_units(rows: Iterable[CanonicalRow]) -> List[str]:
    """Unità distinte non vuote, in ordine di prima apparizione."""
    units: Dict[str, None] = {}
    for row in rows:
        unit = row.unidade_de_medida.strip()
        if unit:
            units.setdefault(unit, None)
    return list(units)


def product_distribution(rows: Iterable[CanonicalRow], unit: str) -> List[Tuple[str, float]]:
    """
    Somma quantidade per produto, limitata a una unità di misura.

    Le righe di sola categoria (produto vuoto, categoria presente) restano
    fuori: contano solo nella distribuzione per categoria.

    Args:
        rows: Righe dell'upload
        unit: Unità selezionata (match esatto dopo trim)

    Returns:
        Lista (produto, somma) ordinata per somma decrescente
    """
    selected = (unit or '').strip()
    sums: Dict[str, float] = {}
    for row in rows:
        if row.unidade_de_medida.strip() != selected:
            continue
        if not row.produto.strip() and row.categoria.strip():
            continue
        produto = row.produto.strip() or NO_PRODUCT_LABEL
        sums[produto] = sums.get(produto, 0.0) + row.quantidade
    return sorted(sums.items(), key=lambda item: item[1], reverse=True)


def build_upload_report(upload: Upload, unit: Optional[str] = None) -> Dict[str, Any]:
    """
    Vista completa di un upload per il rendering (tabella + grafici).

    Args:
        upload: Upload da aggregare
        unit: Unità per la distribuzione prodotti (default: prima disponibile)

    Returns:
        Dict con totali, distribuzioni, unità disponibili e palette
    """
    rows: Sequence[CanonicalRow] = upload.rows
    units = available_units(rows)
    selected_unit = unit if unit is not None else (units[0] if units else None)

    categories = category_distribution(rows)
    products = product_distribution(rows, selected_unit) if selected_unit is not None else []

    series_length = len(categories) if categories else len(products)

    return {
        'tipo': upload.tipo,
        'fileName': upload.file_name,
        'uploadedAt': upload.uploaded_at.isoformat(),
        'row_count': len(rows),
        'totals_by_unit': [{'unidade': u, 'total': t} for u, t in totals_by_unit(rows).items()],
        'category_distribution': (
            [{'categoria': c, 'count': n} for c, n in categories] if categories else None
        ),
        'available_units': units,
        'selected_unit': selected_unit,
        'product_distribution': [{'produto': p, 'total': t} for p, t in products],
        'palette': generate_palette(series_length),
    }
