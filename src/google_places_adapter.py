"""
google_places_adapter.py - Google Places reviews

Google reviews carry a single 1-5 star rating and no category breakdown,
and no review id. The adapter:
- scales stars to the 0-10 range and applies the result to every category
- synthesizes ids from a monotonic counter seeded with the current epoch
  milliseconds plus an offset, which keeps them clear of Hostaway's id space
"""

import itertools
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import requests

from src.errors import UpstreamUnavailable
from src.fallback_reviews import GOOGLE_FALLBACK
from src.property_slugs import derive_property_slug
from src.provider_adapter import ProviderAdapter
from src.schemas import (
    CanonicalReview, CategoryRatings, Channel, ReviewStatus, ReviewType,
    round_half_up
)

logger = logging.getLogger(__name__)

GOOGLE_ID_OFFSET = 10000
GOOGLE_STAR_SCALE = 5

PLACE_DETAIL_FIELDS = (
    "place_id,name,rating,user_ratings_total,reviews,formatted_address,geometry"
)

_synthetic_ids = itertools.count(int(time.time() * 1000) + GOOGLE_ID_OFFSET)


def next_review_id() -> int:
    """Next synthesized id for a review without a native id."""
    return next(_synthetic_ids)


def stars_to_ten_point(rating: float) -> float:
    return rating / GOOGLE_STAR_SCALE * 10


@dataclass
class GooglePlaceReviewRecord:
    """One place review plus the property it was fetched for."""
    property_name: str
    author_name: str
    rating: float
    text: str
    time: int
    language: str = "en"
    relative_time_description: str = ""

    @classmethod
    def from_api(cls, data: Dict[str, Any], property_name: str) -> "GooglePlaceReviewRecord":
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        return cls(
            property_name=property_name,
            author_name=data.get('author_name') or '',
            rating=float(data['rating']),
            text=data.get('text') or '',
            time=int(data['time']),
            language=data.get('language') or 'en',
            relative_time_description=data.get('relative_time_description') or '',
        )


class GooglePlacesAdapter(ProviderAdapter[GooglePlaceReviewRecord]):
    """
    Fetches reviews for the configured places.

    Args:
        api_key: Places API key
        place_ids: Mapping place_id -> property display name
    """

    channel = Channel.GOOGLE

    def __init__(self, api_key: str, place_ids: Optional[Dict[str, str]] = None,
                 base_url: str = "https://maps.googleapis.com/maps/api/place",
                 timeout_seconds: float = 10.0,
                 session: Optional[requests.Session] = None):
        super().__init__(timeout_seconds=timeout_seconds, session=session)
        self.api_key = api_key
        self.place_ids = dict(place_ids or {})
        self.base_url = base_url.rstrip('/')

    # -------------------------------------------------------------------------
    # Places API
    # -------------------------------------------------------------------------

    def _call(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        if not self.api_key:
            raise UpstreamUnavailable("no Google Places API key configured")

        payload = self._get_json(
            f"{self.base_url}/{endpoint}/json",
            params={**params, 'key': self.api_key},
        )
        status = payload.get('status', 'OK')
        if status not in ('OK', 'ZERO_RESULTS', 'NOT_FOUND'):
            message = payload.get('error_message') or status
            raise UpstreamUnavailable(f"Places API returned {status}: {message}")
        return payload

    def search_places(self, query: str) -> List[Dict[str, Any]]:
        """Text search for lodging. Returns [] when the API is unavailable."""
        try:
            payload = self._call('textsearch', {'query': query, 'type': 'lodging'})
        except UpstreamUnavailable as e:
            logger.error(f"Error searching Google Places for {query!r}: {e.message}")
            return []
        results = payload.get('results') or []
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    def get_place_details(self, place_id: str) -> Optional[Dict[str, Any]]:
        """Place details with reviews, or None when missing or unavailable."""
        try:
            payload = self._call(
                'details', {'place_id': place_id, 'fields': PLACE_DETAIL_FIELDS}
            )
        except UpstreamUnavailable as e:
            logger.error(f"Error fetching place details for {place_id}: {e.message}")
            return None
        result = payload.get('result')
        return result if isinstance(result, dict) and result else None

    def records_from_place(self, place: Dict[str, Any],
                           property_name: Optional[str] = None) -> List[GooglePlaceReviewRecord]:
        """Turn a place-details result into review records."""
        if not isinstance(place, dict):
            logger.warning(f"Ignoring malformed place result {place!r}")
            return []
        name = property_name or place.get('name') or ''
        reviews = place.get('reviews') or []
        if not isinstance(reviews, list):
            logger.warning(f"Ignoring malformed reviews for {name}: not a list")
            return []

        records = []
        for raw in reviews:
            try:
                records.append(GooglePlaceReviewRecord.from_api(raw, name))
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed Google review for {name}: {e}")
        return records

    # -------------------------------------------------------------------------
    # Adapter contract
    # -------------------------------------------------------------------------

    def fetch_records(self) -> List[GooglePlaceReviewRecord]:
        if not self.place_ids:
            raise UpstreamUnavailable("no Google place ids configured")

        records = []
        for place_id, property_name in self.place_ids.items():
            payload = self._call(
                'details', {'place_id': place_id, 'fields': PLACE_DETAIL_FIELDS}
            )
            place = payload.get('result')
            if not place:
                logger.warning(f"Google place {place_id} ({property_name}) not found")
                continue
            records.extend(self.records_from_place(place, property_name))
        return records

    def fallback_records(self) -> List[GooglePlaceReviewRecord]:
        return [GooglePlaceReviewRecord(**raw) for raw in GOOGLE_FALLBACK]

    def normalize(self, record: GooglePlaceReviewRecord) -> CanonicalReview:
        category_rating = round_half_up(stars_to_ten_point(record.rating))
        return CanonicalReview(
            id=next_review_id(),
            review_type=ReviewType.GUEST_TO_HOST,
            status=ReviewStatus.PUBLISHED,
            overall_rating=stars_to_ten_point(record.rating),
            public_review=record.text,
            categories=CategoryRatings.uniform(category_rating),
            submitted_at=datetime.fromtimestamp(record.time, tz=timezone.utc),
            guest_name=record.author_name,
            listing_name=record.property_name,
            channel=self.channel,
            is_approved=False,
            property_id=derive_property_slug(record.property_name, self.channel),
        )
