"""
Test unitari per parser CSV.
"""
import pytest

from core.errors import UnparseableFile
from ingest.csv_parser import decode_content, detect_encoding, parse_csv


class TestEncoding:
    """Test per rilevamento encoding."""

    def test_detect_encoding_utf8(self):
        """Test rilevamento encoding UTF-8."""
        content = "Produto,Quantidade\nRação,3".encode("utf-8")
        encoding, _ = detect_encoding(content)
        assert encoding == "utf-8-sig"

    def test_bom_is_removed(self):
        """Test rimozione BOM."""
        content = "\ufeffProduto,Quantidade\nSal,3".encode("utf-8")
        assert decode_content(content).startswith("Produto")

    def test_legacy_encoding_fallback(self):
        """Test fallback encoding legacy."""
        content = "Produto,Quantidade\nRação,3".encode("cp1252")
        assert "Ração" in decode_content(content)

    def test_text_input_passthrough(self):
        """Test input testo."""
        assert decode_content("\ufeffa,b") == "a,b"


class TestCSVParser:
    """Test per parse_csv."""

    def test_parse_csv_clean(self):
        """Test parsing CSV pulito."""
        content = "Produto,Quantidade\nRação,3\nSal,\"1.234,5\"".encode("utf-8")
        records = parse_csv(content)

        assert records == [
            {"Produto": "Ração", "Quantidade": "3"},
            {"Produto": "Sal", "Quantidade": "1.234,5"},
        ]

    def test_values_are_kept_as_strings(self):
        """Test valori mantenuti come stringhe."""
        records = parse_csv("id,Quantidade\n007,NA\n")
        assert records[0] == {"id": "007", "Quantidade": "NA"}

    def test_short_rows_are_padded(self):
        """Test righe corte completate."""
        records = parse_csv("Produto,Categoria,Quantidade\nBoi,,\nVaca\n")
        assert records[1] == {"Produto": "Vaca", "Categoria": "", "Quantidade": ""}

    def test_blank_lines_skipped(self):
        """Test righe vuote ignorate."""
        records = parse_csv("Produto,Quantidade\n\nBoi,1\n\n")
        assert len(records) == 1

    def test_duplicate_headers_last_wins(self):
        """Test header duplicati."""
        records = parse_csv("Produto,Produto\nMilho,Soja\n")
        assert records == [{"Produto": "Soja"}]

    def test_header_only(self):
        """Test file con solo header."""
        assert parse_csv("Produto,Quantidade\n") == []

    def test_empty_file_is_unparseable(self):
        """Test file vuoto."""
        with pytest.raises(UnparseableFile):
            parse_csv(b"")

    def test_too_many_fields_is_unparseable(self):
        """Test righe con troppi campi."""
        with pytest.raises(UnparseableFile):
            parse_csv("Produto,Quantidade\nBoi,1\nVaca,2,3,4\n")
