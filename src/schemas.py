"""
schemas.py - Data Models for the Guest Review Hub

Design Decisions:
- Use dataclasses for simplicity and JSON serialization support
- Enums with str mixin for constrained values (channel, status, direction)
- CanonicalReview is frozen: approval state only changes by producing a new
  record through with_decision(), which recomputes status from the decision
- Persisted/API dictionaries use camelCase keys to match the dashboard client
"""

from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from enum import Enum
from typing import List, Dict, Optional, Any
import json


class Channel(str, Enum):
    """Origin of a review. Set once by the provider adapter."""
    HOSTAWAY = "hostaway"
    GOOGLE = "google"
    AIRBNB = "airbnb"
    BOOKING = "booking"


class ReviewType(str, Enum):
    """Direction of the review."""
    GUEST_TO_HOST = "guest-to-host"
    HOST_TO_GUEST = "host-to-guest"


class ReviewStatus(str, Enum):
    """Public visibility state, always derived from the moderation decision."""
    PUBLISHED = "published"
    PENDING = "pending"
    REJECTED = "rejected"


CATEGORY_NAMES = (
    "cleanliness",
    "communication",
    "respect_house_rules",
    "check_in",
    "value",
    "location",
)


def to_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes, convert aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def round_half_up(value: float, ndigits: int = 0) -> float:
    """
    Round half away from zero for non-negative ratings.

    Python's round() uses banker's rounding (round(8.5) == 8); dashboard
    figures are expected to round 8.5 up to 9.
    """
    factor = 10 ** ndigits
    return int(value * factor + 0.5) / factor


# =============================================================================
# REVIEW SCHEMAS
# =============================================================================

@dataclass(frozen=True)
class CategoryRatings:
    """
    Six fixed rating axes on a 0-10 scale.
    A value of 0 means the provider did not rate that axis.
    """
    cleanliness: float = 0
    communication: float = 0
    respect_house_rules: float = 0
    check_in: float = 0
    value: float = 0
    location: float = 0

    @classmethod
    def uniform(cls, rating: float) -> "CategoryRatings":
        """Same rating on every axis (providers without a breakdown)."""
        return cls(**{name: rating for name in CATEGORY_NAMES})

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CategoryRatings":
        return cls(**{name: data.get(name) or 0 for name in CATEGORY_NAMES})

    def get(self, name: str) -> float:
        return getattr(self, name)

    def rated_values(self) -> List[float]:
        """Ratings that count towards the overall mean (strictly positive)."""
        return [v for v in (self.get(n) for n in CATEGORY_NAMES) if v > 0]

    def mean_rating(self) -> float:
        """Arithmetic mean of the positive ratings, 0 when none are rated."""
        values = self.rated_values()
        if not values:
            return 0
        return sum(values) / len(values)

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


@dataclass(frozen=True)
class ModerationDecision:
    """
    Persisted verdict for one review id.

    Attributes:
        review_id: Canonical review id the decision applies to
        is_approved: True for approve, False for an explicit reject
        last_updated: When the decision was recorded (UTC)
    """
    review_id: int
    is_approved: bool
    last_updated: datetime

    @property
    def status(self) -> ReviewStatus:
        return ReviewStatus.PUBLISHED if self.is_approved else ReviewStatus.REJECTED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.review_id,
            'isApproved': self.is_approved,
            'lastUpdated': self.last_updated.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModerationDecision":
        return cls(
            review_id=int(data['id']),
            is_approved=bool(data['isApproved']),
            last_updated=to_utc(datetime.fromisoformat(data['lastUpdated'])),
        )


@dataclass(frozen=True)
class CanonicalReview:
    """
    Provider-agnostic normalized review.

    Attributes:
        id: Globally unique id across all providers
        review_type: Direction (guest-to-host / host-to-guest)
        status: Derived from the moderation decision, see with_decision()
        overall_rating: 0-10 rating
        public_review: Review body
        categories: Per-axis ratings on a 0-10 scale
        submitted_at: Provider-reported submission time (UTC)
        guest_name: Reviewer display name
        listing_name: Property display name as reported by the provider
        channel: Provider the review came from
        is_approved: Whether the review is shown publicly
        property_id: Canonical property slug
    """
    id: int
    review_type: ReviewType
    status: ReviewStatus
    overall_rating: float
    public_review: str
    categories: CategoryRatings
    submitted_at: datetime
    guest_name: str
    listing_name: str
    channel: Channel
    is_approved: bool
    property_id: str

    def with_decision(self, decision: Optional[ModerationDecision]) -> "CanonicalReview":
        """
        Project a moderation decision onto this review.

        No decision means pending and not approved. Both fields are always
        recomputed together so they can never disagree.
        """
        if decision is None:
            return replace(self, is_approved=False, status=ReviewStatus.PENDING)
        return replace(self, is_approved=decision.is_approved, status=decision.status)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dictionary."""
        return {
            'id': self.id,
            'type': self.review_type.value,
            'status': self.status.value,
            'overallRating': self.overall_rating,
            'publicReview': self.public_review,
            'categories': self.categories.to_dict(),
            'submittedAt': self.submitted_at.isoformat(),
            'guestName': self.guest_name,
            'listingName': self.listing_name,
            'channel': self.channel.value,
            'isApproved': self.is_approved,
            'propertyId': self.property_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CanonicalReview":
        """Deserialize from the dictionary produced by to_dict()."""
        return cls(
            id=int(data['id']),
            review_type=ReviewType(data['type']),
            status=ReviewStatus(data['status']),
            overall_rating=data['overallRating'],
            public_review=data['publicReview'],
            categories=CategoryRatings.from_dict(data['categories']),
            submitted_at=to_utc(datetime.fromisoformat(data['submittedAt'])),
            guest_name=data['guestName'],
            listing_name=data['listingName'],
            channel=Channel(data['channel']),
            is_approved=bool(data['isApproved']),
            property_id=data['propertyId'],
        )


# =============================================================================
# QUERY SCHEMAS
# =============================================================================

@dataclass
class ReviewFilters:
    """Optional, conjunctive review filters. None means no constraint."""
    property_id: Optional[str] = None
    rating: Optional[float] = None
    category: Optional[str] = None
    channel: Optional[Channel] = None
    status: Optional[ReviewStatus] = None
    is_approved: Optional[bool] = None
    date_from: Optional[datetime] = None
    date_to: Optional[datetime] = None


# =============================================================================
# PROPERTY SCHEMAS
# =============================================================================

@dataclass(frozen=True)
class Property:
    """Static catalog entry for a rentable property."""
    id: str
    name: str
    address: str
    city: str
    country: str
    description: str
    price_per_night: float
    currency: str
    images: List[str] = field(default_factory=list)
    house_rules: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'address': self.address,
            'city': self.city,
            'country': self.country,
            'images': list(self.images),
            'description': self.description,
            'houseRules': list(self.house_rules),
            'price': {
                'perNight': self.price_per_night,
                'currency': self.currency,
            },
        }


@dataclass
class PropertyWithStats:
    """
    Catalog entry decorated with review statistics computed at read time.
    Never persisted.
    """
    property: Property
    average_rating: float
    total_reviews: int
    approved_reviews: int

    def to_dict(self) -> Dict[str, Any]:
        d = self.property.to_dict()
        d['averageRating'] = self.average_rating
        d['totalReviews'] = self.total_reviews
        d['approvedReviews'] = self.approved_reviews
        return d


@dataclass
class DashboardStats:
    """Manager dashboard aggregates over the full review set."""
    total_reviews: int
    average_rating: float
    approved_reviews: int
    pending_reviews: int
    properties_count: int
    recent_reviews: List[CanonicalReview]
    top_performing_properties: List[PropertyWithStats]
    rating_distribution: Dict[int, int]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalReviews': self.total_reviews,
            'averageRating': self.average_rating,
            'approvedReviews': self.approved_reviews,
            'pendingReviews': self.pending_reviews,
            'propertiesCount': self.properties_count,
            'recentReviews': [r.to_dict() for r in self.recent_reviews],
            'topPerformingProperties': [
                p.to_dict() for p in self.top_performing_properties
            ],
            'ratingDistribution': dict(self.rating_distribution),
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)
