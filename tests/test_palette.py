"""
Test unitari per palette colori.
"""
import re

from ingest.palette import FALLBACK_COLOR, generate_palette


class TestPalette:
    """Test per generate_palette."""

    def test_length(self):
        """Test lunghezza palette."""
        assert len(generate_palette(7)) == 7

    def test_zero_returns_fallback(self):
        """Test colore di fallback."""
        assert generate_palette(0) == [FALLBACK_COLOR]
        assert generate_palette(-3) == [FALLBACK_COLOR]

    def test_hex_format(self):
        """Test formato esadecimale."""
        for color in generate_palette(20):
            assert re.fullmatch(r"#[0-9A-F]{6}", color)

    def test_deterministic(self):
        """Test determinismo."""
        assert generate_palette(12) == generate_palette(12)

    def test_prefix_stable(self):
        """Test prefisso stabile."""
        assert generate_palette(10)[:4] == generate_palette(4)

    def test_distinct_for_small_counts(self):
        """Test colori distinti."""
        colors = generate_palette(30)
        assert len(set(colors)) == len(colors)
