"""
CSV Parser.

Decodifica testo (UTF-8 con tolleranza BOM, fallback su encoding legacy) e
parsing pandas di CSV separati da virgola con riga header.
"""
import io
import logging
from typing import Any, Dict, List, Tuple, Union

import chardet
import pandas as pd

from core.errors import UnparseableFile

logger = logging.getLogger(__name__)

SEPARATOR = ','
MIN_CHARDET_CONFIDENCE = 0.8


def detect_encoding(file_content: bytes) -> Tuple[str, float]:
    """
    Rileva encoding file provando: utf-8-sig → encoding suggerito → latin-1.

    Args:
        file_content: Contenuto file (bytes)

    Returns:
        Tuple (encoding, confidence)
    """
    try:
        file_content.decode('utf-8-sig')
        return 'utf-8-sig', 1.0
    except UnicodeDecodeError:
        pass

    # Export da fogli di calcolo spesso salvati in cp1252/latin-1
    guess = chardet.detect(file_content[:10000])
    detected = guess.get('encoding')
    confidence = guess.get('confidence') or 0.0

    # Suggerimento chardet solo se affidabile, altrimenti cp1252 (export Excel)
    candidates = [detected] if confidence >= MIN_CHARDET_CONFIDENCE else []
    for enc in candidates + ['cp1252', 'latin-1']:
        if not enc:
            continue
        try:
            file_content.decode(enc)
            logger.warning(
                f'[CSV_PARSER] File non UTF-8, uso encoding {enc} (confidence={confidence:.2f})'
            )
            return enc, confidence
        except (UnicodeDecodeError, LookupError):
            continue

    # latin-1 decodifica qualsiasi sequenza di byte
    return 'latin-1', 0.0


def decode_content(file_content: Union[bytes, str]) -> str:
    """Decodifica contenuto file in testo."""
    if isinstance(file_content, str):
        return file_content.lstrip('\ufeff')
    encoding, _ = detect_encoding(file_content)
    return file_content.decode(encoding)


def parse_csv(file_content: Union[bytes, str]) -> List[Dict[str, Any]]:
    """
    Parse file CSV con pandas in lista ordinata di record grezzi.

    La riga header viene letta separatamente (header=None) così che header
    duplicati non vengano rinominati da pandas: nel dict del record vince
    l'ultima colonna.

    Args:
        file_content: Contenuto file (bytes o testo)

    Returns:
        Lista di dict {header originale: valore stringa}

    Raises:
        UnparseableFile: Se il CSV è vuoto o strutturalmente malformato
    """
    text = decode_content(file_content)

    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=SEPARATOR,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine='python',
        )
    except (pd.errors.EmptyDataError, pd.errors.ParserError) as e:
        logger.error(f'[CSV_PARSER] Error parsing CSV: {e}')
        raise UnparseableFile(str(e)) from e

    if df.empty:
        raise UnparseableFile('arquivo sem cabeçalho')

    df = df.fillna('')
    headers = [str(h).strip() for h in df.iloc[0].tolist()]
    records = [dict(zip(headers, values)) for values in df.iloc[1:].itertuples(index=False, name=None)]

    logger.info(f'[CSV_PARSER] CSV parsed: {len(records)} rows, {len(headers)} columns')
    return records
