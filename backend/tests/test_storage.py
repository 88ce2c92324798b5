"""Tests for image storage and the analysis record store."""
import json

import pytest

from chromaleap.errors import PersistenceFailure, StorageFailure
from chromaleap.storage import ANALYSES_TABLE, AnalysisRepository, random_filename


class TestLocalImageStorage:
    def test_put_returns_public_url(self, storage):
        url = storage.put(b"image-bytes", "abc.png")

        assert url == "http://testserver/uploads/abc.png"
        assert (storage.root / "abc.png").read_bytes() == b"image-bytes"

    def test_public_url_strips_directories(self, storage):
        assert storage.get_public_url("nested/../abc.png") == "http://testserver/uploads/abc.png"

    def test_invalid_path(self, storage):
        with pytest.raises(StorageFailure):
            storage.put(b"x", "..")

    def test_random_filenames_do_not_collide(self):
        names = {random_filename("photo.webp") for _ in range(50)}

        assert len(names) == 50
        assert all(name.endswith(".webp") for name in names)


class TestAnalysisRepository:
    def test_insert_and_get(self, repository):
        row = repository.insert(ANALYSES_TABLE, {"image_url": "https://x/a.jpg", "analysis_result": {"k": 1}})

        record = repository.get(ANALYSES_TABLE, row["id"])
        assert record["id"] == row["id"]
        assert record["image_url"] == "https://x/a.jpg"
        assert record["analysis_result"] == {"k": 1}
        assert record["created_at"].endswith("Z")

    def test_records_survive_a_new_instance(self, tmp_path):
        first = AnalysisRepository(tmp_path)
        row = first.insert(ANALYSES_TABLE, {"image_url": "u", "analysis_result": []})

        second = AnalysisRepository(tmp_path)
        assert second.get(ANALYSES_TABLE, row["id"])["image_url"] == "u"
        stored = json.loads((tmp_path / ANALYSES_TABLE / f"{row['id']}.json").read_text(encoding="utf-8"))
        assert stored["analysis_result"] == []

    def test_unknown_or_malformed_ids(self, repository):
        assert repository.get(ANALYSES_TABLE, "f" * 32) is None
        assert repository.get(ANALYSES_TABLE, "../../etc/passwd") is None

    def test_unserializable_record_raises(self, repository):
        with pytest.raises(PersistenceFailure):
            repository.insert(ANALYSES_TABLE, {"image_url": "u", "analysis_result": object()})

    def test_invalid_table_name(self, repository):
        with pytest.raises(PersistenceFailure):
            repository.insert("../elsewhere", {"image_url": "u"})
