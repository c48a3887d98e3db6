"""
hostaway_adapter.py - Hostaway property-management reviews

Hostaway reports per-category ratings on a 0-10 scale, so no scale
conversion is needed. The overall rating is derived from the categories;
the provider's own "rating" only counts when no category was rated.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests

from src.errors import UpstreamUnavailable
from src.fallback_reviews import HOSTAWAY_FALLBACK
from src.property_slugs import derive_property_slug
from src.provider_adapter import ProviderAdapter
from src.schemas import (
    CanonicalReview, CategoryRatings, Channel, ReviewStatus, ReviewType,
    CATEGORY_NAMES, to_utc
)

logger = logging.getLogger(__name__)

HOSTAWAY_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


@dataclass
class HostawayReviewRecord:
    """A review as returned by GET /reviews."""
    id: int
    review_type: ReviewType
    status: ReviewStatus
    rating: Optional[float]
    public_review: str
    submitted_at: datetime
    guest_name: str
    listing_name: str
    category_ratings: Dict[str, float] = field(default_factory=dict)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "HostawayReviewRecord":
        """
        Parse one API record.

        Raises:
            KeyError, ValueError, TypeError: malformed record
        """
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")

        categories = {}
        entries = data.get('reviewCategory') or []
        if not isinstance(entries, list):
            raise TypeError("reviewCategory is not a list")
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning(f"Ignoring malformed category entry {entry!r}")
                continue
            if entry.get('rating') is not None:
                categories[entry['category']] = float(entry['rating'])

        rating = data.get('rating')
        return cls(
            id=int(data['id']),
            review_type=ReviewType(data['type']),
            status=parse_provider_status(data.get('status')),
            rating=float(rating) if rating is not None else None,
            public_review=data.get('publicReview') or '',
            submitted_at=parse_hostaway_date(data['submittedAt']),
            guest_name=data.get('guestName') or '',
            listing_name=data['listingName'],
            category_ratings=categories,
        )


def parse_provider_status(value: Any) -> ReviewStatus:
    """Hostaway's own status; unknown values count as pending."""
    try:
        return ReviewStatus(value)
    except ValueError:
        return ReviewStatus.PENDING


def parse_hostaway_date(value: str) -> datetime:
    """Hostaway timestamps carry no zone; they are UTC."""
    try:
        parsed = datetime.strptime(value, HOSTAWAY_DATE_FORMAT)
    except ValueError:
        parsed = datetime.fromisoformat(value)
    return to_utc(parsed)


def parse_records(payload: List[Dict[str, Any]]) -> List[HostawayReviewRecord]:
    """Parse API records, skipping (and logging) malformed ones."""
    records = []
    for raw in payload:
        try:
            records.append(HostawayReviewRecord.from_api(raw))
        except (KeyError, ValueError, TypeError) as e:
            review_id = raw.get('id') if isinstance(raw, dict) else raw
            logger.warning(f"Skipping malformed Hostaway review {review_id!r}: {e}")
    return records


class HostawayAdapter(ProviderAdapter[HostawayReviewRecord]):
    """Fetches and normalizes Hostaway reviews."""

    channel = Channel.HOSTAWAY

    def __init__(self, api_key: str, account_id: str,
                 base_url: str = "https://api.hostaway.com/v1",
                 timeout_seconds: float = 10.0,
                 session: Optional[requests.Session] = None):
        super().__init__(timeout_seconds=timeout_seconds, session=session)
        self.api_key = api_key
        self.account_id = account_id
        self.base_url = base_url.rstrip('/')

    def fetch_records(self) -> List[HostawayReviewRecord]:
        if not self.api_key or not self.account_id:
            raise UpstreamUnavailable("no Hostaway credentials configured")

        payload = self._get_json(
            f"{self.base_url}/reviews",
            params={'accountId': self.account_id},
            headers={
                'Authorization': f"Bearer {self.api_key}",
                'Content-Type': 'application/json',
            },
        )
        result = payload.get('result') or []
        if not isinstance(result, list):
            raise UpstreamUnavailable("'result' is not a list")
        return parse_records(result)

    def fallback_records(self) -> List[HostawayReviewRecord]:
        return parse_records(HOSTAWAY_FALLBACK)

    def normalize(self, record: HostawayReviewRecord) -> CanonicalReview:
        categories = CategoryRatings(**{
            name: record.category_ratings.get(name, 0) for name in CATEGORY_NAMES
        })

        overall = categories.mean_rating()
        if overall == 0 and record.rating:
            overall = record.rating

        return CanonicalReview(
            id=record.id,
            review_type=record.review_type,
            status=record.status,
            overall_rating=overall,
            public_review=record.public_review,
            categories=categories,
            submitted_at=record.submitted_at,
            guest_name=record.guest_name,
            listing_name=record.listing_name,
            channel=self.channel,
            is_approved=False,
            property_id=derive_property_slug(record.listing_name, self.channel),
        )
