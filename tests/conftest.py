"""
Configurazione pytest e fixture comuni.
"""
import os

# Nessun database reale durante i test
os.environ["STORAGE_BACKEND"] = "memory"

import pytest

from core.persistence import InMemoryUploadListStore
from core.upload_store import UploadStore


@pytest.fixture
def memory_persistence():
    """Fixture per persistenza in memoria."""
    return InMemoryUploadListStore()


@pytest.fixture
def upload_store(memory_persistence):
    """Fixture per UploadStore vuoto su persistenza in memoria."""
    return UploadStore(memory_persistence)


@pytest.fixture
def gado_csv_content():
    """Fixture per CSV rebanho (con categoria, plurale cabeças e riga totale)."""
    return (
        "Tipo,Animal,Categoria,Nº de Cabeças,Unidade\n"
        "gado,Nelore,Bezerro,10,cabeças\n"
        "gado,Nelore,Vaca,25,cabeças\n"
        "gado,Angus,Vaca,5,Cabeças\n"
        "gado,Total,,40,cabeças\n"
    ).encode("utf-8")


@pytest.fixture
def estoque_csv_content():
    """Fixture per CSV magazzino (numeri europei, peso come fallback)."""
    return (
        "tipo,Produto,Quantidade,Peso (kg)\n"
        "estoque,Ração,,\"1.250,5\"\n"
        "estoque,Sal mineral,3,\n"
        "estoque,Vacina,\"2,5\",\n"
        "estoque,TOTAIS,6,\n"
    ).encode("utf-8")
