"""
schemas.py - Pydantic models for API responses

These define the exact JSON returned by the API. Field names are camelCase
on the wire; every response is wrapped in {"success": ..., "data"/"message"}.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.schemas import Channel, ReviewStatus, ReviewType


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REVIEWS
# =============================================================================

class CategoryRatingsOut(BaseModel):
    """Category keys stay snake_case, matching the provider vocabulary."""
    cleanliness: float
    communication: float
    respect_house_rules: float
    check_in: float
    value: float
    location: float


class ReviewOut(CamelModel):
    id: int
    review_type: ReviewType = Field(alias="type")
    status: ReviewStatus
    overall_rating: float
    public_review: str
    categories: CategoryRatingsOut
    submitted_at: datetime
    guest_name: str
    listing_name: str
    channel: Channel
    is_approved: bool
    property_id: str


class ReviewListResponse(CamelModel):
    success: bool = True
    data: List[ReviewOut]


# =============================================================================
# PROPERTIES
# =============================================================================

class PriceOut(CamelModel):
    per_night: float
    currency: str


class PropertyOut(CamelModel):
    id: str
    name: str
    address: str
    city: str
    country: str
    images: List[str]
    description: str
    house_rules: List[str]
    price: PriceOut
    average_rating: float
    total_reviews: int
    approved_reviews: int


class PropertyListResponse(CamelModel):
    success: bool = True
    data: List[PropertyOut]


class PropertyResponse(CamelModel):
    success: bool = True
    data: PropertyOut


# =============================================================================
# DASHBOARD
# =============================================================================

class DashboardStatsOut(CamelModel):
    total_reviews: int
    average_rating: float
    approved_reviews: int
    pending_reviews: int
    properties_count: int
    recent_reviews: List[ReviewOut]
    top_performing_properties: List[PropertyOut]
    rating_distribution: Dict[int, int]


class DashboardStatsResponse(CamelModel):
    success: bool = True
    data: DashboardStatsOut


# =============================================================================
# AUTH
# =============================================================================

class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class ManagerOut(CamelModel):
    id: str
    email: str
    name: str
    role: str
    created_at: Optional[datetime] = None


class AuthData(CamelModel):
    token: str
    user: ManagerOut


class AuthResponse(CamelModel):
    success: bool = True
    data: AuthData


class ProfileResponse(CamelModel):
    success: bool = True
    data: ManagerOut


# =============================================================================
# GENERIC
# =============================================================================

class DataResponse(CamelModel):
    """Passthrough payloads (Google Places)."""
    success: bool = True
    data: Any


class MessageResponse(CamelModel):
    success: bool = True
    message: str


class HealthResponse(CamelModel):
    success: bool = True
    message: str
    timestamp: datetime


class ErrorResponse(CamelModel):
    """Standard error response."""
    success: bool = False
    message: str
