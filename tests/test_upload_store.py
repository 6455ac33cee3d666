"""
Test per UploadStore (mutazioni, conferme, persistenza degradata).
"""
import pytest

from core.errors import DuplicateType
from core.persistence import InMemoryUploadListStore, decode_uploads
from core.upload_store import UploadStore
from ingest.types import CanonicalRow, Upload


def _upload(tipo, produto="Boi"):
    return Upload(tipo=tipo, file_name=f"{tipo}.csv", rows=(CanonicalRow(tipo=tipo, produto=produto),))


class BrokenPersistence(InMemoryUploadListStore):
    """Persistenza che fallisce in lettura e scrittura ma permette clear."""

    def load(self):
        raise OSError("storage disabilitato")

    def save(self, uploads):
        raise OSError("storage disabilitato")


class TestAppend:
    """Test per append."""

    def test_append_persists(self, upload_store, memory_persistence):
        """Test append persistito."""
        upload = upload_store.append(_upload("gado"))

        assert upload_store.uploads == (upload,)
        assert decode_uploads(memory_persistence.blob) == [upload]

    def test_append_rejects_duplicate_type(self, upload_store):
        """Test append rifiuta tipo duplicato."""
        upload_store.append(_upload("gado"))

        with pytest.raises(DuplicateType):
            upload_store.append(_upload("GADO"))
        assert len(upload_store) == 1

    def test_insertion_order(self, upload_store):
        """Test ordine di inserimento."""
        upload_store.append(_upload("gado"))
        upload_store.append(_upload("estoque"))
        assert [u.tipo for u in upload_store.uploads] == ["gado", "estoque"]

    def test_get(self, upload_store):
        """Test accesso per indice."""
        upload_store.append(_upload("gado"))
        assert upload_store.get(0).tipo == "gado"
        with pytest.raises(IndexError):
            upload_store.get(1)
        with pytest.raises(IndexError):
            upload_store.get(-1)


class TestRemoval:
    """Test per remove_last e clear_all."""

    def test_remove_last(self, upload_store, memory_persistence):
        """Test rimozione ultimo."""
        upload_store.append(_upload("gado"))
        last = upload_store.append(_upload("estoque"))

        assert upload_store.remove_last() == last
        assert [u.tipo for u in upload_store.uploads] == ["gado"]
        assert [u.tipo for u in decode_uploads(memory_persistence.blob)] == ["gado"]

    def test_remove_last_empty_is_noop(self, upload_store, memory_persistence):
        """Test rimozione su store vuoto."""
        assert upload_store.remove_last() is None
        assert memory_persistence.blob is None

    def test_clear_all(self, upload_store, memory_persistence):
        """Test pulizia completa."""
        upload_store.append(_upload("gado"))
        upload_store.append(_upload("estoque"))

        assert upload_store.clear_all() == 2
        assert upload_store.uploads == ()
        assert decode_uploads(memory_persistence.blob) == []

    def test_clear_all_empty_is_noop(self, upload_store, memory_persistence):
        """Test pulizia su store vuoto."""
        assert upload_store.clear_all() == 0
        assert memory_persistence.blob is None

    def test_removed_type_can_be_ingested_again(self, upload_store):
        """Test tipo rimosso reinseribile."""
        upload_store.append(_upload("gado"))
        upload_store.remove_last()
        upload_store.append(_upload("gado", produto="Vaca"))
        assert upload_store.get(0).rows[0].produto == "Vaca"


class TestConfirm:
    """Test per la capability di conferma."""

    def test_declined_confirmation_keeps_uploads(self, memory_persistence):
        """Test conferma negata."""
        messages = []

        def decline(message):
            messages.append(message)
            return False

        store = UploadStore(memory_persistence, confirm=decline)
        store.append(_upload("gado"))

        assert store.remove_last() is None
        assert store.clear_all() == 0
        assert len(store) == 1
        assert "gado" in messages[0]

    def test_failing_confirmation_proceeds(self, memory_persistence):
        """Test conferma non disponibile."""
        def unavailable(message):
            raise RuntimeError("nessun prompt in contesto headless")

        store = UploadStore(memory_persistence, confirm=unavailable)
        store.append(_upload("gado"))

        assert store.remove_last() is not None
        assert len(store) == 0

    def test_hard_reset_does_not_ask(self, memory_persistence):
        """Test hard reset senza conferma."""
        def never(message):
            raise AssertionError("hard reset non deve chiedere conferma")

        store = UploadStore(memory_persistence, confirm=never)
        store.hard_reset()
        assert len(store) == 0


class TestPersistenceLifecycle:
    """Test per caricamento e hard reset."""

    def test_loads_persisted_uploads(self, memory_persistence):
        """Test caricamento upload persistiti."""
        UploadStore(memory_persistence).append(_upload("gado"))

        reloaded = UploadStore(memory_persistence)
        assert [u.tipo for u in reloaded.uploads] == ["gado"]
        assert reloaded.get(0).file_name == "gado.csv"

    def test_corrupt_blob_means_empty_store(self):
        """Test blob corrotto."""
        store = UploadStore(InMemoryUploadListStore(blob="{not json"))
        assert store.uploads == ()

    def test_wrong_shape_blob_means_empty_store(self):
        """Test blob con formato errato."""
        store = UploadStore(InMemoryUploadListStore(blob='{"tipo": "gado"}'))
        assert store.uploads == ()

    def test_broken_persistence_is_absorbed(self):
        """Test errori persistenza assorbiti."""
        store = UploadStore(BrokenPersistence())

        store.append(_upload("gado"))
        assert len(store) == 1
        assert store.remove_last() is not None

    def test_hard_reset_clears_blob_even_after_failed_saves(self):
        """Test hard reset dopo salvataggi falliti."""
        persistence = BrokenPersistence(blob="stale")
        store = UploadStore(persistence)
        store.append(_upload("gado"))

        store.hard_reset()

        assert store.uploads == ()
        assert persistence.blob is None

    def test_hard_reset_on_empty_store(self, upload_store, memory_persistence):
        """Test hard reset su store vuoto."""
        memory_persistence.blob = "qualcosa"
        upload_store.hard_reset()
        assert memory_persistence.blob is None
