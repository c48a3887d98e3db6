"""
sample_reviews.py - Review builders and fake providers for tests

Provides:
- make_review(): CanonicalReview with sensible defaults
- StaticAdapter: provider adapter serving fixed reviews, optionally failing
- fallback_adapters(): the real adapters with no credentials, so they serve
  their built-in fallback datasets without touching the network
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional
from unittest.mock import Mock

import requests

from src.errors import UpstreamUnavailable
from src.google_places_adapter import GooglePlacesAdapter
from src.hostaway_adapter import HostawayAdapter
from src.provider_adapter import ProviderAdapter
from src.schemas import (
    CanonicalReview, CategoryRatings, Channel, ReviewStatus, ReviewType
)

BASE_DATE = datetime(2023, 12, 1, 12, 0, tzinfo=timezone.utc)


def make_review(
    review_id: int,
    rating: float = 8,
    property_id: str = "luxury-loft-manhattan",
    days: int = 0,
    channel: Channel = Channel.HOSTAWAY,
    is_approved: bool = False,
    status: Optional[ReviewStatus] = None,
    categories: Optional[CategoryRatings] = None,
) -> CanonicalReview:
    """Build a review submitted `days` after BASE_DATE."""
    if status is None:
        status = ReviewStatus.PUBLISHED if is_approved else ReviewStatus.PENDING
    return CanonicalReview(
        id=review_id,
        review_type=ReviewType.GUEST_TO_HOST,
        status=status,
        overall_rating=rating,
        public_review=f"Review {review_id}",
        categories=categories or CategoryRatings.uniform(rating),
        submitted_at=BASE_DATE + timedelta(days=days),
        guest_name=f"Guest {review_id}",
        listing_name=property_id,
        channel=channel,
        is_approved=is_approved,
        property_id=property_id,
    )


class StaticAdapter(ProviderAdapter[CanonicalReview]):
    """Serves fixed reviews; counts fetches; can simulate an outage."""

    def __init__(self, reviews: List[CanonicalReview],
                 channel: Channel = Channel.HOSTAWAY,
                 fallback: Optional[List[CanonicalReview]] = None,
                 fail: bool = False):
        super().__init__(session=Mock(spec=requests.Session))
        self.channel = channel
        self.reviews = list(reviews)
        self.fallback = list(fallback or [])
        self.fail = fail
        self.fetch_calls = 0

    def fetch_records(self) -> List[CanonicalReview]:
        self.fetch_calls += 1
        if self.fail:
            raise UpstreamUnavailable("simulated outage")
        return list(self.reviews)

    def fallback_records(self) -> List[CanonicalReview]:
        return list(self.fallback)

    def normalize(self, record: CanonicalReview) -> CanonicalReview:
        return record


def offline_session() -> Mock:
    """A requests session whose every call fails with a connection error."""
    session = Mock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("network unreachable")
    return session


def json_session(payload, status_code: int = 200) -> Mock:
    """A requests session answering every GET with payload."""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.json.return_value = payload
    session = Mock(spec=requests.Session)
    session.get.return_value = response
    return session


def fallback_adapters() -> List[ProviderAdapter]:
    """Hostaway then Google, both without credentials."""
    return [
        HostawayAdapter(api_key="", account_id="", session=offline_session()),
        GooglePlacesAdapter(api_key="", session=offline_session()),
    ]
