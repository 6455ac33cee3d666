"""
Test unitari per slug e risoluzione alias header.
"""
import pytest

from ingest.header_aliases import COLUMN_ALIASES, map_headers, resolve_header, slugify


class TestSlugify:
    """Test per slugify."""

    def test_accents_case_and_punctuation_collapse(self):
        """Stringhe che differiscono per accenti, maiuscole o punteggiatura coincidono."""
        assert slugify("Número de Cabeças") == slugify("numero_de_cabecas") == "numero_de_cabecas"
        assert slugify("NUMERO-DE-CABEÇAS") == "numero_de_cabecas"

    def test_trims_underscores(self):
        """Test trim underscore."""
        assert slugify("  Peso (kg) ") == "peso_kg"
        assert slugify("__x__") == "x"

    def test_empty_and_none(self):
        """Test stringa vuota e None."""
        assert slugify("") == ""
        assert slugify(None) == ""
        assert slugify("!!!") == ""

    def test_non_string_input(self):
        """Test input non stringa."""
        assert slugify(42) == "42"

    @pytest.mark.parametrize("value", ["Açúcar & Sal", "Unidade de Medida", "  a  b  "])
    def test_output_shape(self, value):
        """Test formato output slug."""
        import re
        assert re.fullmatch(r"[a-z0-9]+(_[a-z0-9]+)*", slugify(value))


class TestResolveHeader:
    """Test per resolve_header."""

    def test_canonical_names_resolve_to_themselves(self):
        """Test nomi canonici."""
        for canonical in COLUMN_ALIASES:
            assert resolve_header(canonical) == canonical

    def test_known_aliases(self):
        """Test alias noti."""
        assert resolve_header("Animal") == "produto"
        assert resolve_header("cabecas") == "quantidade"
        assert resolve_header("Nº de Cabeças") == "quantidade"
        assert resolve_header("Unidade") == "unidade_de_medida"
        assert resolve_header("Peso") == "peso_kg"
        assert resolve_header("Peso (kg)") == "peso_kg"
        assert resolve_header("Criado em") == "created_at"
        assert resolve_header("QTDE") == "quantidade"

    def test_unknown_header_passes_through_as_slug(self):
        """Test header sconosciuto restituito come slug."""
        assert resolve_header("Observações Gerais") == "observacoes_gerais"

    def test_alias_sets_are_disjoint(self):
        """Test insiemi alias disgiunti."""
        seen = {}
        for canonical, aliases in COLUMN_ALIASES.items():
            for alias in aliases:
                slug = slugify(alias)
                assert seen.setdefault(slug, canonical) == canonical, slug


class TestMapHeaders:
    """Test per map_headers."""

    def test_map_headers(self):
        """Test mapping header."""
        mapping = map_headers(["Animal", "Cabeças", "Fazenda"])
        assert mapping == {"Animal": "produto", "Cabeças": "quantidade", "Fazenda": "fazenda"}
