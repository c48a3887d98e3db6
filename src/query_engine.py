"""
query_engine.py - Review filtering and dashboard aggregates

Read-only over the in-memory review set:
1. Conjunctive filters, applied in a fixed order, newest first
2. Dashboard statistics over the full unfiltered set
3. Parsing of raw query-string filters into ReviewFilters
"""

from collections import Counter
from datetime import datetime
from typing import Callable, Iterable, List, Optional, Sequence

from src.errors import ValidationError
from src.property_registry import PropertyRegistry
from src.review_store import InMemoryReviewStore
from src.schemas import (
    CanonicalReview, Channel, DashboardStats, ReviewFilters, ReviewStatus,
    CATEGORY_NAMES, round_half_up, to_utc
)


# =============================================================================
# CONFIGURATION
# =============================================================================

RECENT_REVIEWS_LIMIT = 5
TOP_PROPERTIES_LIMIT = 5

_TRUE_VALUES = {'true', '1'}
_FALSE_VALUES = {'false', '0'}


# =============================================================================
# FILTERING
# =============================================================================

def sort_newest_first(reviews: Iterable[CanonicalReview]) -> List[CanonicalReview]:
    """Descending by submitted_at. Stable, so ties keep input order."""
    return sorted(reviews, key=lambda r: r.submitted_at, reverse=True)


def build_predicates(filters: ReviewFilters) -> List[Callable[[CanonicalReview], bool]]:
    """One predicate per filter that is set, in application order."""
    predicates = []
    if filters.property_id:
        predicates.append(lambda r: r.property_id == filters.property_id)
    if filters.rating is not None:
        predicates.append(lambda r: r.overall_rating >= filters.rating)
    if filters.category:
        predicates.append(lambda r: r.categories.get(filters.category) > 0)
    if filters.channel is not None:
        predicates.append(lambda r: r.channel == filters.channel)
    if filters.status is not None:
        predicates.append(lambda r: r.status == filters.status)
    if filters.is_approved is not None:
        predicates.append(lambda r: r.is_approved == filters.is_approved)
    if filters.date_from is not None:
        predicates.append(lambda r: r.submitted_at >= filters.date_from)
    if filters.date_to is not None:
        predicates.append(lambda r: r.submitted_at <= filters.date_to)
    return predicates


def filter_reviews(
    reviews: Sequence[CanonicalReview],
    filters: Optional[ReviewFilters] = None
) -> List[CanonicalReview]:
    """
    Apply filters with AND semantics and sort newest first.

    Args:
        reviews: Review set to filter
        filters: Filters; None or unset fields mean no constraint

    Returns:
        Matching reviews, descending by submitted_at
    """
    if filters is None:
        filters = ReviewFilters()
    if filters.category and filters.category not in CATEGORY_NAMES:
        raise ValidationError(f"Unknown category '{filters.category}'")

    filtered = list(reviews)
    for predicate in build_predicates(filters):
        filtered = [r for r in filtered if predicate(r)]
    return sort_newest_first(filtered)


# =============================================================================
# FILTER PARSING
# =============================================================================

def _blank(value: Optional[str]) -> bool:
    return value is None or value.strip() == ''


def parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValidationError(f"{name} must be 'true' or 'false', got '{value}'")


def parse_datetime(name: str, value: str) -> datetime:
    """ISO-8601 date or datetime; naive values are taken as UTC."""
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return to_utc(datetime.fromisoformat(text))
    except ValueError:
        raise ValidationError(f"{name} must be an ISO-8601 date, got '{value}'")


def parse_filters(
    property_id: Optional[str] = None,
    rating: Optional[str] = None,
    category: Optional[str] = None,
    channel: Optional[str] = None,
    status: Optional[str] = None,
    is_approved: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
) -> ReviewFilters:
    """
    Build ReviewFilters from raw query-string values.

    Blank values are treated as absent.

    Raises:
        ValidationError: a value is present but malformed
    """
    filters = ReviewFilters()

    if not _blank(property_id):
        filters.property_id = property_id.strip()

    if not _blank(rating):
        try:
            filters.rating = float(rating)
        except ValueError:
            raise ValidationError(f"rating must be a number, got '{rating}'")

    if not _blank(category):
        if category not in CATEGORY_NAMES:
            raise ValidationError(
                f"Unknown category '{category}'. Expected one of: {', '.join(CATEGORY_NAMES)}"
            )
        filters.category = category

    if not _blank(channel):
        try:
            filters.channel = Channel(channel)
        except ValueError:
            raise ValidationError(f"Unknown channel '{channel}'")

    if not _blank(status):
        try:
            filters.status = ReviewStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown status '{status}'")

    if not _blank(is_approved):
        filters.is_approved = parse_bool('isApproved', is_approved)

    if not _blank(date_from):
        filters.date_from = parse_datetime('dateFrom', date_from)
    if not _blank(date_to):
        filters.date_to = parse_datetime('dateTo', date_to)

    return filters


def parse_review_id(value: str) -> int:
    """Path segment to review id."""
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Review id must be an integer, got '{value}'")


# =============================================================================
# QUERY ENGINE
# =============================================================================

class ReviewQueryEngine:
    """
    Read-side API over the in-memory review set.

    Args:
        review_store: In-memory set owned by the pipeline
        registry: Property registry used for per-property aggregates
    """

    def __init__(self, review_store: InMemoryReviewStore, registry: PropertyRegistry):
        self.review_store = review_store
        self.registry = registry

    def query(self, filters: Optional[ReviewFilters] = None) -> List[CanonicalReview]:
        return filter_reviews(self.review_store.snapshot(), filters)

    def approved(self, property_id: Optional[str] = None) -> List[CanonicalReview]:
        """Publicly displayable reviews, optionally for one property."""
        return self.query(ReviewFilters(property_id=property_id, is_approved=True))

    def dashboard_stats(self) -> DashboardStats:
        """
        Aggregates over the full, unfiltered set.

        - average_rating: mean overall rating, one decimal, 0 when empty
        - rating_distribution: round(overall_rating) -> count (half-up)
        - top_performing_properties: properties with at least one review,
          by average rating descending
        """
        reviews = self.review_store.snapshot()
        total = len(reviews)

        average = 0.0
        if total:
            average = round_half_up(sum(r.overall_rating for r in reviews) / total, 1)

        distribution = Counter(int(round_half_up(r.overall_rating)) for r in reviews)

        properties = self.registry.list()
        reviewed = [p for p in properties if p.total_reviews > 0]
        top = sorted(reviewed, key=lambda p: p.average_rating, reverse=True)

        return DashboardStats(
            total_reviews=total,
            average_rating=average,
            approved_reviews=sum(1 for r in reviews if r.is_approved),
            pending_reviews=sum(1 for r in reviews if r.status == ReviewStatus.PENDING),
            properties_count=len(properties),
            recent_reviews=sort_newest_first(reviews)[:RECENT_REVIEWS_LIMIT],
            top_performing_properties=top[:TOP_PROPERTIES_LIMIT],
            rating_distribution=dict(distribution),
        )
