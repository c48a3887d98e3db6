"""
property_registry.py - Property catalog with live review statistics

Statistics are recomputed from the current review set on every call;
nothing is cached, so mutations are visible immediately.
"""

from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from src.property_catalog import PROPERTY_CATALOG
from src.review_store import InMemoryReviewStore
from src.schemas import CanonicalReview, Property, PropertyWithStats, round_half_up


def compute_property_stats(
    prop: Property,
    reviews: Sequence[CanonicalReview]
) -> PropertyWithStats:
    """
    Decorate one catalog entry with its review statistics.

    Args:
        prop: Catalog entry
        reviews: Reviews already filtered to this property

    Returns:
        PropertyWithStats with average (one decimal, 0 if none), total and
        approved counts
    """
    average = 0.0
    if reviews:
        average = round_half_up(sum(r.overall_rating for r in reviews) / len(reviews), 1)
    return PropertyWithStats(
        property=prop,
        average_rating=average,
        total_reviews=len(reviews),
        approved_reviews=sum(1 for r in reviews if r.is_approved),
    )


class PropertyRegistry:
    """Static catalog, enriched at read time."""

    def __init__(self, review_store: InMemoryReviewStore,
                 catalog: Optional[Sequence[Property]] = None):
        self.review_store = review_store
        self.catalog = list(PROPERTY_CATALOG if catalog is None else catalog)

    def list(self) -> List[PropertyWithStats]:
        by_property: Dict[str, List[CanonicalReview]] = defaultdict(list)
        for review in self.review_store.snapshot():
            by_property[review.property_id].append(review)
        return [compute_property_stats(p, by_property.get(p.id, [])) for p in self.catalog]

    def get(self, property_id: str) -> Optional[PropertyWithStats]:
        for prop in self.catalog:
            if prop.id == property_id:
                reviews = [r for r in self.review_store.snapshot() if r.property_id == property_id]
                return compute_property_stats(prop, reviews)
        return None
