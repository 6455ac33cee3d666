"""
Palette colori per grafici di distribuzione.

La tonalità avanza ogni volta della frazione aurea (mod 1) con saturazione
e luminosità fisse: colori ben distinti per qualsiasi N senza tabelle.
"""
import colorsys
from typing import List

GOLDEN_RATIO_CONJUGATE = 0.618033988749895

DEFAULT_SATURATION = 0.65
DEFAULT_LIGHTNESS = 0.55

FALLBACK_COLOR = '#8B4513'


def _to_hex(hue: float, lightness: float, saturation: float) -> str:
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return '#{:02X}{:02X}{:02X}'.format(round(r * 255), round(g * 255), round(b * 255))


def generate_palette(
    count: int,
    start_hue: float = 0.0,
    saturation: float = DEFAULT_SATURATION,
    lightness: float = DEFAULT_LIGHTNESS,
) -> List[str]:
    """
    Genera N colori esadecimali ('#RRGGBB') visivamente distinti.

    Per N <= 0 ritorna un solo colore di fallback: chi indicizza modulo la
    lunghezza della palette non deve mai dividere per zero.

    Args:
        count: Numero di colori richiesti
        start_hue: Tonalità iniziale (0-1)
        saturation: Saturazione fissa (0-1)
        lightness: Luminosità fissa (0-1)

    Returns:
        Lista di colori (mai vuota)
    """
    if count <= 0:
        return [FALLBACK_COLOR]

    colors: List[str] = []
    hue = start_hue % 1.0
    for _ in range(count):
        colors.append(_to_hex(hue, lightness, saturation))
        hue = (hue + GOLDEN_RATIO_CONJUGATE) % 1.0
    return colors
