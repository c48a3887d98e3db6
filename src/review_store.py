"""
review_store.py - In-memory canonical review set

Holds the reconciled reviews as an immutable tuple plus an id index.
Writers swap the whole snapshot; readers get a consistent tuple without
blocking behind a mutation. Only AggregationPipeline writes.
"""

import threading
from typing import Dict, Iterable, Optional, Tuple

from src.schemas import CanonicalReview


class InMemoryReviewStore:
    """Id-keyed arena of CanonicalReview records in insertion order."""

    def __init__(self, reviews: Iterable[CanonicalReview] = ()):
        self._lock = threading.Lock()
        self._reviews: Tuple[CanonicalReview, ...] = ()
        self._by_id: Dict[int, CanonicalReview] = {}
        self.replace_all(reviews)

    def replace_all(self, reviews: Iterable[CanonicalReview]) -> None:
        snapshot = tuple(reviews)
        index = {review.id: review for review in snapshot}
        with self._lock:
            self._reviews = snapshot
            self._by_id = index

    def snapshot(self) -> Tuple[CanonicalReview, ...]:
        with self._lock:
            return self._reviews

    def get(self, review_id: int) -> Optional[CanonicalReview]:
        with self._lock:
            return self._by_id.get(review_id)

    def __contains__(self, review_id: object) -> bool:
        with self._lock:
            return review_id in self._by_id

    def __len__(self) -> int:
        with self._lock:
            return len(self._reviews)
