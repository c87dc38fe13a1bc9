"""Tests for the JSON document store."""

from __future__ import annotations

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from training_store import DocumentNotFound, DuplicateDocument, JsonDocumentStore, StoreError


@pytest.fixture
def db(tmp_path) -> JsonDocumentStore:
    return JsonDocumentStore(tmp_path / "db")


class TestSingleDocuments:
    def test_insert_and_get(self, db):
        doc_id = db.insert("plans", {"name": "5K"}, doc_id="5km-iniciante")
        assert doc_id == "5km-iniciante"
        assert db.get("plans", "5km-iniciante") == {"name": "5K", "_id": "5km-iniciante"}

    def test_generated_id(self, db):
        doc_id = db.insert("workouts", {"title": "Run"})
        assert len(doc_id) == 32
        assert db.get("workouts", doc_id)["title"] == "Run"

    def test_duplicate_insert(self, db):
        db.insert("plans", {}, doc_id="a")
        with pytest.raises(DuplicateDocument, match="plans/a already exists"):
            db.insert("plans", {}, doc_id="a")

    def test_missing_document(self, db):
        assert db.get("plans", "nope") is None

    def test_replace_requires_existing(self, db):
        with pytest.raises(DocumentNotFound):
            db.replace("plans", "a", {"name": "x"})
        db.replace("plans", "a", {"name": "x"}, upsert=True)
        db.replace("plans", "a", {"name": "y"})
        assert db.get("plans", "a")["name"] == "y"

    def test_update_merges(self, db):
        db.insert("userProfiles", {"activePlan": None, "streakDays": 1}, doc_id="u1")
        merged = db.update("userProfiles", "u1", {"activePlan": "10km"})
        assert merged == {"activePlan": "10km", "streakDays": 1, "_id": "u1"}

    def test_update_missing(self, db):
        with pytest.raises(DocumentNotFound):
            db.update("userProfiles", "ghost", {})

    def test_delete(self, db):
        db.insert("plans", {}, doc_id="a")
        assert db.delete("plans", "a")
        assert not db.delete("plans", "a")

    def test_ids_with_slashes_are_quoted(self, db, tmp_path):
        db.insert("plans", {"n": 1}, doc_id="coach/10km")
        assert db.ids("plans") == ["coach/10km"]
        assert (tmp_path / "db" / "plans" / "coach%2F10km.json").exists()

    def test_unicode_written_verbatim(self, db, tmp_path):
        db.insert("plans", {"nivel": "intermediário"}, doc_id="p")
        text = (tmp_path / "db" / "plans" / "p.json").read_text(encoding="utf-8")
        assert "intermediário" in text


# ---------------------------------------------------------------------------
# Queries and housekeeping
# ---------------------------------------------------------------------------


class TestQueries:
    def test_find_with_predicate(self, db):
        db.insert("workouts", {"userId": "a"}, doc_id="1")
        db.insert("workouts", {"userId": "b"}, doc_id="2")
        db.insert("workouts", {"userId": "a"}, doc_id="3")
        found = db.find("workouts", lambda d: d["userId"] == "a")
        assert [d["_id"] for d in found] == ["1", "3"]

    def test_find_one(self, db):
        db.insert("workouts", {"userId": "a"}, doc_id="1")
        assert db.find_one("workouts", lambda d: d["userId"] == "a")["_id"] == "1"
        assert db.find_one("workouts", lambda d: d["userId"] == "z") is None

    def test_empty_collection(self, db):
        assert db.find("nothing") == []
        assert db.ids("nothing") == []

    def test_ids_during_concurrent_writes(self, db):
        wanted = {f"w{i:03d}" for i in range(40)}

        def write(doc_id):
            db.insert("workouts", {"n": doc_id}, doc_id=doc_id)
            db.update("workouts", doc_id, {"seen": True})
            return set(db.ids("workouts"))

        with ThreadPoolExecutor(max_workers=8) as pool:
            snapshots = list(pool.map(write, sorted(wanted)))

        for snapshot in snapshots:
            assert snapshot <= wanted
        assert set(db.ids("workouts")) == wanted

    def test_corrupt_file_skipped(self, db, tmp_path):
        db.insert("plans", {"ok": True}, doc_id="good")
        (tmp_path / "db" / "plans" / "bad.json").write_text("{not json", encoding="utf-8")
        assert [d["_id"] for d in db.find("plans")] == ["good"]

    def test_drop(self, db):
        db.insert("plans", {}, doc_id="a")
        db.drop("plans")
        assert db.find("plans") == []

    def test_stored_as_json(self, db, tmp_path):
        db.insert("plans", {"days": [1, 2]}, doc_id="p")
        raw = json.loads((tmp_path / "db" / "plans" / "p.json").read_text(encoding="utf-8"))
        assert raw == {"days": [1, 2], "_id": "p"}


class TestInvalidNames:
    @pytest.mark.parametrize("collection", ["", "a/b", ".hidden"])
    def test_bad_collection(self, db, collection):
        with pytest.raises(StoreError, match="Invalid collection"):
            db.get(collection, "x")

    def test_empty_id(self, db):
        with pytest.raises(StoreError, match="must not be empty"):
            db.replace("plans", "", {}, upsert=True)
