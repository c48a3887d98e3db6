"""
test_storage.py - Durable state store
"""

import json
import os
import pytest
from dataclasses import replace
from datetime import datetime, timezone
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from src.errors import PersistenceError
from src.schemas import CategoryRatings
from src.storage import StateStore, DECISIONS_FILENAME, REVIEWS_FILENAME
from tests.sample_reviews import make_review


class TestDecisions:
    """Tests for moderation decision persistence."""

    def test_absent_decision_is_none(self, tmp_path):
        assert StateStore(tmp_path).get_decision(7454) is None

    def test_round_trip(self, tmp_path):
        when = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
        store = StateStore(tmp_path)
        store.put_decision(7454, True, when)
        store.put_decision(7455, False, when)
        store.save_decisions()

        reloaded = StateStore(tmp_path)
        assert reloaded.get_decision(7454).is_approved is True
        assert reloaded.get_decision(7455).is_approved is False
        assert reloaded.get_decision(7454).last_updated == when

    def test_file_format(self, tmp_path):
        store = StateStore(tmp_path)
        store.put_decision(7454, True)
        store.save_decisions()

        data = json.loads((tmp_path / DECISIONS_FILENAME).read_text())
        assert data['reviews'][0]['id'] == 7454
        assert data['reviews'][0]['isApproved'] is True
        assert 'lastUpdated' in data['reviews'][0]
        assert 'lastSync' in data

    def test_latest_decision_wins(self, tmp_path):
        store = StateStore(tmp_path)
        store.put_decision(1, True)
        store.put_decision(1, False)
        assert store.get_decision(1).is_approved is False
        assert len(store.all_decisions()) == 1

    def test_corrupt_file_is_moved_aside(self, tmp_path):
        (tmp_path / DECISIONS_FILENAME).write_text("{not json")
        store = StateStore(tmp_path)

        assert store.all_decisions() == {}
        assert not (tmp_path / DECISIONS_FILENAME).exists()
        assert any(p.name.startswith(f"{DECISIONS_FILENAME}.corrupt-") for p in tmp_path.iterdir())


class TestReviews:
    """Tests for canonical review set persistence."""

    def test_empty_when_never_saved(self, tmp_path):
        assert StateStore(tmp_path).load_reviews() == []

    def test_round_trip_preserves_every_field(self, tmp_path):
        review = make_review(7454, rating=56 / 6, categories=CategoryRatings(
            cleanliness=10, communication=9, respect_house_rules=9,
            check_in=10, value=8, location=10,
        ))
        precise = review.submitted_at.replace(microsecond=123456)
        review = replace(review, submitted_at=precise)

        store = StateStore(tmp_path)
        store.save_reviews([review])
        loaded = StateStore(tmp_path).load_reviews()

        assert loaded == [review]
        assert loaded[0].submitted_at.microsecond == 123456

    def test_write_leaves_no_temp_files(self, tmp_path):
        store = StateStore(tmp_path)
        store.save_reviews([make_review(1)])
        store.save_reviews([make_review(1), make_review(2)])

        assert sorted(p.name for p in tmp_path.iterdir()) == [REVIEWS_FILENAME]

    def test_failed_write_keeps_previous_document(self, tmp_path, monkeypatch):
        store = StateStore(tmp_path)
        store.save_reviews([make_review(1)])
        before = (tmp_path / REVIEWS_FILENAME).read_bytes()

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, "replace", broken_replace)
        with pytest.raises(PersistenceError):
            store.save_reviews([make_review(1), make_review(2)])

        assert (tmp_path / REVIEWS_FILENAME).read_bytes() == before
        assert sorted(p.name for p in tmp_path.iterdir()) == [REVIEWS_FILENAME]

    def test_malformed_document_raises(self, tmp_path):
        (tmp_path / REVIEWS_FILENAME).write_text(json.dumps({'reviews': [{'id': 1}]}))
        with pytest.raises(PersistenceError):
            StateStore(tmp_path).load_reviews()
