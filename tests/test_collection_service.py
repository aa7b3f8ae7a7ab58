"""
Behaviour of the positional CRUD engine over the artwork collection.
"""
from __future__ import annotations

import sys
import threading
from pathlib import Path

import pytest

# Make the gallery package importable when running tests locally
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from gallery.domain.artwork import Artwork, NotFoundError, StorageError, ValidationError  # noqa: E402
from gallery.domain.search import favourite_matches, title_matches  # noqa: E402
from gallery.repositories.json_storage import JsonArtworkStorage  # noqa: E402
from gallery.services.collection_service import ArtworkCollection  # noqa: E402


class CountingStorage(JsonArtworkStorage):
    def __init__(self, path):
        super().__init__(path)
        self.saves = 0
        self.fail = False

    def save(self, records):
        if self.fail:
            raise OSError("disk full")
        self.saves += 1
        super().save(records)


class FakeAssets:
    def __init__(self, present=()):
        self.present = set(present)
        self.deleted = []

    def store(self, data, suggested_name):
        self.present.add(suggested_name)
        return suggested_name

    def delete(self, ref):
        self.deleted.append(ref)
        if ref in self.present:
            self.present.discard(ref)
            return True
        return False


@pytest.fixture()
def storage(tmp_path):
    return CountingStorage(tmp_path / "data.json")


@pytest.fixture()
def collection(storage):
    return ArtworkCollection(storage, FakeAssets())


def _titles(collection, predicate=None):
    return [(index, item.title) for index, item in collection.list(predicate)]


def test_create_appends_and_returns_index(collection, storage):
    assert collection.create("A", "2001", "first") == 0
    assert collection.create("B", "2002", "second") == 1
    assert collection.create("C", "2003", "third") == 2

    assert collection.get(1) == Artwork("B", "2002", "second", image=None, liked=False)
    assert storage.saves == 3
    assert [a.title for a in storage.load()] == ["A", "B", "C"]


def test_create_rejects_empty_fields_without_saving(collection, storage):
    collection.create("A", "2001", "first")

    for args in [("", "2001", "d"), ("T", "", "d"), ("T", "2001", "   "), (None, "2001", "d")]:
        with pytest.raises(ValidationError):
            collection.create(*args)

    assert len(collection) == 1
    assert storage.saves == 1


def test_validation_error_lists_missing_fields(collection):
    with pytest.raises(ValidationError) as excinfo:
        collection.create("", "2001", "")
    assert excinfo.value.missing == ["title", "description"]


def test_create_strips_text_and_keeps_image(collection):
    index = collection.create("  A ", " 2001", "first ", image="1-2-a.png")
    assert collection.get(index) == Artwork("A", "2001", "first", image="1-2-a.png", liked=False)


def test_delete_reindexes(collection):
    for title in ("A", "B", "C"):
        collection.create(title, "2000", f"{title} description")

    collection.delete(0)

    assert _titles(collection) == [(0, "B"), (1, "C")]
    assert collection.get(0).title == "B"
    assert collection.get(0).description == "B description"


@pytest.mark.parametrize("k", [0, 1, 2, 3])
def test_delete_shifts_following_positions(collection, k):
    for n in range(4):
        collection.create(f"T{n}", "2000", "d")

    collection.delete(k)

    if k < 3:
        assert collection.get(k).title == f"T{k + 1}"
    else:
        with pytest.raises(NotFoundError):
            collection.get(k)


@pytest.mark.parametrize("bad", [3, -1, "x", "1.0", 1.0, True, None, "-1", ""])
def test_invalid_indices_raise_not_found(collection, bad):
    for title in ("A", "B", "C"):
        collection.create(title, "2000", "d")

    with pytest.raises(NotFoundError):
        collection.get(bad)
    with pytest.raises(NotFoundError):
        collection.update(bad, "T", "D", "X")
    with pytest.raises(NotFoundError):
        collection.delete(bad)
    assert len(collection) == 3


def test_string_indices_are_accepted(collection):
    collection.create("A", "2000", "d")
    collection.create("B", "2000", "d")
    assert collection.get("1").title == "B"


def test_update_preserves_image_and_liked(collection, storage):
    index = collection.create("Old", "1900", "old text", image="9-9-old.png")
    collection.toggle_like(index)

    updated = collection.update(index, "New", "1901", "new text")

    assert updated == Artwork("New", "1901", "new text", image="9-9-old.png", liked=True)
    assert collection.get(index) == updated
    assert storage.load()[index] == updated


def test_update_unknown_index_wins_over_blank_fields(collection, storage):
    collection.create("A", "2000", "d")
    saves = storage.saves

    with pytest.raises(NotFoundError):
        collection.update(9, "", "", "")
    assert storage.saves == saves


def test_update_validates_fields(collection):
    index = collection.create("A", "2000", "d")
    with pytest.raises(ValidationError):
        collection.update(index, "", "2000", "d")
    assert collection.get(index).title == "A"


def test_toggle_like_twice_restores_value(collection, storage):
    index = collection.create("A", "2000", "d")

    assert collection.toggle_like(index).liked is True
    assert storage.load()[index].liked is True
    assert collection.toggle_like(index).liked is False
    assert collection.get(index).liked is False


def test_toggle_like_invalid_index_is_noop(collection, storage):
    collection.create("A", "2000", "d")
    saves = storage.saves

    assert collection.toggle_like(5) is None
    assert collection.toggle_like("abc") is None
    assert storage.saves == saves
    assert collection.get(0).liked is False


def test_title_search_is_case_insensitive(collection):
    for title in ("Abcdef", "xyz", "ABC123"):
        collection.create(title, "2000", "d")

    assert _titles(collection, title_matches("abc")) == [(0, "Abcdef"), (2, "ABC123")]
    assert len(_titles(collection, title_matches(""))) == 3


def test_favourites_search_matches_title_or_description(collection):
    collection.create("Sunset", "2000", "orange sky")
    collection.create("Harbour", "2001", "boats at SUNSET")
    collection.create("Sunrise", "2002", "morning")
    collection.toggle_like(0)
    collection.toggle_like(1)

    assert _titles(collection, favourite_matches("sunset")) == [(0, "Sunset"), (1, "Harbour")]
    assert _titles(collection, favourite_matches("")) == [(0, "Sunset"), (1, "Harbour")]
    assert _titles(collection, favourite_matches("morning")) == []


def test_listing_is_restartable_snapshot(collection):
    collection.create("A", "2000", "d")
    listing = collection.list()
    collection.create("B", "2000", "d")

    assert list(listing) == list(listing)
    assert [item.title for _, item in listing] == ["A"]
    assert [item.title for _, item in collection.list()] == ["A", "B"]


def test_delete_cleans_up_asset(storage):
    assets = FakeAssets(present={"x.png"})
    collection = ArtworkCollection(storage, assets)
    collection.create("A", "2000", "d", image="x.png")
    collection.create("B", "2000", "d")

    collection.delete(0)
    collection.delete(0)

    assert assets.deleted == ["x.png"]
    assert "x.png" not in assets.present


def test_delete_succeeds_when_asset_already_absent(storage):
    assets = FakeAssets()
    collection = ArtworkCollection(storage, assets)
    collection.create("A", "2000", "d", image="gone.png")

    collection.delete(0)

    assert assets.deleted == ["gone.png"]
    assert len(collection) == 0


def test_delete_survives_asset_errors(storage):
    class BrokenAssets(FakeAssets):
        def delete(self, ref):
            raise PermissionError("read-only")

    collection = ArtworkCollection(storage, BrokenAssets())
    collection.create("A", "2000", "d", image="x.png")

    collection.delete(0)

    assert len(collection) == 0


def test_failed_save_keeps_previous_state(collection, storage):
    collection.create("A", "2000", "d")
    storage.fail = True

    with pytest.raises(StorageError):
        collection.create("B", "2000", "d")
    with pytest.raises(StorageError):
        collection.delete(0)
    with pytest.raises(StorageError):
        collection.toggle_like(0)
    with pytest.raises(StorageError):
        collection.update(0, "B", "2", "e")

    assert _titles(collection) == [(0, "A")]
    assert collection.get(0).liked is False


def test_reload_from_disk(storage):
    first = ArtworkCollection(storage)
    first.create("A", "2000", "d", image="1-1-a.png")
    first.toggle_like(0)

    second = ArtworkCollection(JsonArtworkStorage(storage.path))
    assert list(second.list()) == list(first.list())


def test_malformed_document_starts_empty(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[{broken", encoding="utf-8")

    collection = ArtworkCollection(JsonArtworkStorage(path))

    assert len(collection) == 0
    assert collection.create("A", "2000", "d") == 0


def test_concurrent_creates_keep_every_record(collection, storage):
    def worker(n):
        for i in range(10):
            collection.create(f"T{n}-{i}", "2000", "d")

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(collection) == 40
    assert len(storage.load()) == 40
    assert [index for index, _ in collection.list()] == list(range(40))


def test_concurrent_deletes_remove_distinct_records(collection, storage):
    for n in range(20):
        collection.create(f"T{n}", "2000", "d")
    barrier = threading.Barrier(4)

    def worker():
        barrier.wait()
        for _ in range(3):
            collection.delete(0)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    survivors = [f"T{n}" for n in range(12, 20)]
    assert [item.title for _, item in collection.list()] == survivors
    assert [item.title for item in storage.load()] == survivors
