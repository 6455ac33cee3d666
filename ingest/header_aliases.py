"""
Risoluzione header CSV -> nomi canonici.

Ogni header grezzo viene ridotto a slug (ASCII, minuscolo, underscore) e
cercato nella tabella statica degli alias. Header non riconosciuti passano
invariati (come slug) e vengono poi ignorati dal normalizzatore di riga.
"""
import logging
import re
import unicodedata
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r'[^a-z0-9]+')


def slugify(value: Any) -> str:
    """
    Riduce una stringa arbitraria a token confrontabile.

    Scompone Unicode, rimuove i diacritici, porta a minuscolo, sostituisce
    ogni sequenza di caratteri non [a-z0-9] con un solo underscore e
    rimuove gli underscore iniziali/finali.

    Esempi:
    - 'Número de Cabeças' -> 'numero_de_cabecas'
    - '  Peso (kg) ' -> 'peso_kg'
    - None -> ''

    Args:
        value: Valore da normalizzare (None ammesso)

    Returns:
        Slug oppure stringa vuota
    """
    if value is None:
        return ''
    decomposed = unicodedata.normalize('NFD', str(value))
    stripped = ''.join(ch for ch in decomposed if unicodedata.category(ch) != 'Mn')
    return _NON_ALNUM.sub('_', stripped.lower()).strip('_')


# Nome canonico -> alias riconosciuti. Gli insiemi devono essere disgiunti.
COLUMN_ALIASES: Dict[str, List[str]] = {
    'tipo': [
        'tipo', 'type', 'tipo de estoque', 'tipo estoque', 'tipo inventario',
        'tipo de inventario', 'tipo lancamento', 'modalidade',
    ],
    'produto': [
        'produto', 'product', 'produtos', 'item', 'itens', 'animal', 'animais',
        'especie', 'raca', 'descricao', 'description', 'nome', 'nome produto',
        'nome do produto', 'insumo', 'material', 'artigo', 'mercadoria',
    ],
    'categoria': [
        'categoria', 'category', 'categorias', 'classe', 'classificacao',
        'grupo', 'subcategoria', 'faixa', 'faixa etaria', 'era', 'lote',
    ],
    'quantidade': [
        'quantidade', 'quantity', 'qty', 'qtd', 'qtde', 'quant', 'qt',
        'cabecas', 'cabeca', 'numero de cabecas', 'n de cabecas', 'n cabecas',
        'num cabecas', 'no cabecas', 'total cabecas', 'total de cabecas',
        'saldo', 'estoque', 'estoque atual', 'contagem', 'unidades', 'volume',
    ],
    'unidade_de_medida': [
        'unidade de medida', 'unidade medida', 'unidade', 'unidades de medida',
        'und', 'un', 'unid', 'um', 'u m', 'unit', 'medida',
    ],
    'id': ['id', 'codigo', 'cod', 'identificador', 'uuid', 'brinco'],
    'created_at': [
        'created at', 'criado em', 'data criacao', 'data de criacao',
        'data cadastro', 'data de cadastro', 'data', 'timestamp',
    ],
    'peso_kg': [
        'peso kg', 'peso', 'kg', 'peso total', 'peso total kg', 'peso em kg',
        'peso liquido', 'peso vivo', 'weight', 'weight kg',
    ],
}

# Indice alias-slug -> nome canonico, costruito una volta sola
_ALIAS_INDEX: Dict[str, str] = {
    slugify(alias): canonical
    for canonical, aliases in COLUMN_ALIASES.items()
    for alias in aliases
}


def resolve_header(header: Any) -> str:
    """
    Risolve un header grezzo nel nome canonico.

    Args:
        header: Header originale

    Returns:
        Nome canonico se l'alias e' riconosciuto, altrimenti lo slug stesso
    """
    slug = slugify(header)
    return _ALIAS_INDEX.get(slug, slug)


def map_headers(original_columns: Iterable[Any]) -> Dict[str, str]:
    """
    Mappa una lista di header originali sui nomi canonici.

    Args:
        original_columns: Header nell'ordine del file

    Returns:
        Dict {'header originale': 'nome canonico o slug'}
    """
    mapping: Dict[str, str] = {}
    recognized = 0
    for column in original_columns:
        resolved = resolve_header(column)
        mapping[str(column)] = resolved
        if resolved in COLUMN_ALIASES:
            recognized += 1
        else:
            logger.debug(f"[NORMALIZATION] Header non riconosciuto: '{column}' -> '{resolved}'")

    logger.info(f'[NORMALIZATION] Header mapping: {recognized}/{len(mapping)} colonne riconosciute')
    return mapping
