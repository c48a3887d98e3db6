"""
pipeline.py - Review Aggregation Pipeline

Orchestrates the review set lifecycle:
1. Load the persisted canonical set, or fetch + normalize every provider
2. Merge provider outputs (adapter registration order, then provider order)
3. Reconcile persisted moderation decisions onto every review
4. Persist the merged set

Moderation (approve/reject) goes through here too. Every mutation runs
under one lock so a full-set persist can never overwrite a newer decision.

Scaling note: each mutation reconciles the whole set (O(n)).
"""

import logging
import threading
from typing import Dict, List, Optional, Sequence

from src.errors import PersistenceError
from src.provider_adapter import ProviderAdapter
from src.review_store import InMemoryReviewStore
from src.schemas import CanonicalReview, ModerationDecision
from src.storage import StateStore

logger = logging.getLogger(__name__)


# =============================================================================
# PIPELINE STAGES
# =============================================================================

def stage_fetch(adapters: Sequence[ProviderAdapter]) -> List[List[CanonicalReview]]:
    """
    Stage 1: Fetch and normalize from every provider.

    Adapters degrade to fallback data on their own, so this always returns
    one list per adapter.
    """
    results = []
    for adapter in adapters:
        normalized = adapter.fetch_and_normalize()
        logger.info(f"Normalized {len(normalized)} reviews from {adapter.channel.value}")
        results.append(normalized)
    return results


def stage_merge(batches: Sequence[List[CanonicalReview]]) -> List[CanonicalReview]:
    """
    Stage 2: Concatenate provider batches, keeping ids unique.

    A repeated id keeps its first occurrence; later ones are dropped.
    """
    merged = []
    seen = set()
    for batch in batches:
        for review in batch:
            if review.id in seen:
                logger.warning(
                    f"Dropping review {review.id} from {review.channel.value}: duplicate id"
                )
                continue
            seen.add(review.id)
            merged.append(review)
    return merged


def stage_reconcile(
    reviews: Sequence[CanonicalReview],
    decisions: Dict[int, ModerationDecision]
) -> List[CanonicalReview]:
    """
    Stage 3: Overlay moderation decisions.

    Reviews without a decision come out pending and unapproved.
    """
    return [review.with_decision(decisions.get(review.id)) for review in reviews]


# =============================================================================
# PIPELINE
# =============================================================================

class AggregationPipeline:
    """
    Owns the canonical review set.

    Args:
        adapters: Provider adapters in registration order
        state_store: Durable decisions + review set
        review_store: In-memory set read by the query engine and registry
    """

    def __init__(self, adapters: Sequence[ProviderAdapter], state_store: StateStore,
                 review_store: Optional[InMemoryReviewStore] = None):
        self.adapters = list(adapters)
        self.state_store = state_store
        self.review_store = review_store or InMemoryReviewStore()
        self._lock = threading.RLock()
        self.loaded = False

    def load_or_refresh(self) -> List[CanonicalReview]:
        """
        Load the persisted set if there is one, otherwise fetch from providers.

        A persisted set is never re-fetched here; use refresh() for that.
        """
        with self._lock:
            try:
                stored = self.state_store.load_reviews()
            except PersistenceError as e:
                logger.error(f"Error loading stored reviews, fetching from providers: {e}")
                stored = []

            if stored:
                self.review_store.replace_all(stored)
                self.reconcile()
                self.loaded = True
                logger.info(f"Loaded {len(stored)} reviews from storage")
                return list(self.review_store.snapshot())

            return self.refresh()

    def refresh(self) -> List[CanonicalReview]:
        """Force a provider re-fetch, reconcile and persist."""
        with self._lock:
            batches = stage_fetch(self.adapters)
            merged = stage_merge(batches)
            reconciled = stage_reconcile(merged, self.state_store.all_decisions())
            self.review_store.replace_all(reconciled)
            self.loaded = True
            self._persist()

            counts = ", ".join(
                f"{len(batch)} from {adapter.channel.value}"
                for adapter, batch in zip(self.adapters, batches)
            )
            logger.info(f"Loaded {len(reconciled)} reviews ({counts})")
            return reconciled

    def reconcile(self) -> None:
        """Re-apply every stored decision to the in-memory set."""
        with self._lock:
            reconciled = stage_reconcile(
                self.review_store.snapshot(), self.state_store.all_decisions()
            )
            self.review_store.replace_all(reconciled)

    def approve(self, review_id: int) -> bool:
        """Approve a review. Returns False if the id is unknown."""
        return self._moderate(review_id, is_approved=True)

    def reject(self, review_id: int) -> bool:
        """Reject a review. Returns False if the id is unknown."""
        return self._moderate(review_id, is_approved=False)

    def _moderate(self, review_id: int, is_approved: bool) -> bool:
        with self._lock:
            if review_id not in self.review_store:
                logger.info(f"Review {review_id} not found")
                return False

            self.state_store.put_decision(review_id, is_approved)
            self.reconcile()
            self._persist()

            verdict = "approved" if is_approved else "rejected"
            logger.info(f"Review {review_id} {verdict}")
            return True

    def _persist(self) -> bool:
        """
        Write decisions and the full review set from memory.

        Failures are logged, not raised: memory stays authoritative and the
        next successful persist catches the store up.
        """
        try:
            self.state_store.save_decisions()
            self.state_store.save_reviews(list(self.review_store.snapshot()))
        except PersistenceError as e:
            logger.error(f"Error persisting review state: {e}")
            return False
        return True

    def reviews(self) -> List[CanonicalReview]:
        return list(self.review_store.snapshot())
