"""
main.py - FastAPI backend for the Guest Review Hub

Endpoints (all under /api):
- GET   /reviews                   - filtered reviews (manager)
- GET   /reviews/approved          - publicly displayable reviews
- GET   /reviews/dashboard-stats   - dashboard aggregates (manager)
- GET   /reviews/properties        - properties with review stats
- PATCH /reviews/{id}/approve      - approve a review (manager)
- PATCH /reviews/{id}/reject       - reject a review (manager)
- POST  /reviews/refresh           - force provider re-fetch (admin)
- GET   /properties                - properties with review stats
- GET   /properties/{id}           - one property with review stats
- /auth/login, /auth/register, /auth/profile
- /google/...                      - Google Places passthrough
- GET   /health
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.auth import (
    TokenUser, create_access_token, get_current_user, require_admin, require_manager
)
from api.schemas import (
    AuthResponse, DashboardStatsResponse, DataResponse, ErrorResponse,
    HealthResponse, LoginRequest, MessageResponse, ProfileResponse,
    PropertyListResponse, PropertyResponse, RegisterRequest, ReviewListResponse
)
from api.services import AppServices, build_services
from src.errors import NotFoundError, ReviewHubError, ValidationError
from src.query_engine import parse_filters, parse_review_id
from src.settings import Settings, load_settings, setup_logging

logger = logging.getLogger(__name__)

SERVICE_NAME = "Flex Living Reviews API"


def get_services(request: Request) -> AppServices:
    return request.app.state.services


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(by_alias=True),
    )


# =============================================================================
# REVIEWS
# =============================================================================

reviews_router = APIRouter(prefix="/api/reviews", tags=["reviews"])


@reviews_router.get("", response_model=ReviewListResponse)
def list_reviews(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    rating: Optional[str] = None,
    category: Optional[str] = None,
    channel: Optional[str] = None,
    status: Optional[str] = None,
    is_approved: Optional[str] = Query(None, alias="isApproved"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(require_manager),
):
    """All reviews matching the filters, newest first."""
    filters = parse_filters(
        property_id=property_id, rating=rating, category=category,
        channel=channel, status=status, is_approved=is_approved,
        date_from=date_from, date_to=date_to,
    )
    reviews = services.query_engine.query(filters)
    return {'success': True, 'data': [r.to_dict() for r in reviews]}


@reviews_router.get("/approved", response_model=ReviewListResponse)
def list_approved_reviews(
    property_id: Optional[str] = Query(None, alias="propertyId"),
    services: AppServices = Depends(get_services),
):
    """Public: reviews a manager has approved for display."""
    reviews = services.query_engine.approved(property_id or None)
    return {'success': True, 'data': [r.to_dict() for r in reviews]}


@reviews_router.get("/dashboard-stats", response_model=DashboardStatsResponse)
def dashboard_stats(
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(require_manager),
):
    return {'success': True, 'data': services.query_engine.dashboard_stats().to_dict()}


@reviews_router.get("/properties", response_model=PropertyListResponse)
def list_review_properties(services: AppServices = Depends(get_services)):
    return {'success': True, 'data': [p.to_dict() for p in services.registry.list()]}


@reviews_router.patch(
    "/{review_id}/approve",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
def approve_review(
    review_id: str,
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(require_manager),
):
    if not services.pipeline.approve(parse_review_id(review_id)):
        raise NotFoundError("Review not found")
    return {'success': True, 'message': 'Review approved successfully'}


@reviews_router.patch(
    "/{review_id}/reject",
    response_model=MessageResponse,
    responses={404: {"model": ErrorResponse}},
)
def reject_review(
    review_id: str,
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(require_manager),
):
    if not services.pipeline.reject(parse_review_id(review_id)):
        raise NotFoundError("Review not found")
    return {'success': True, 'message': 'Review rejected successfully'}


@reviews_router.post("/refresh", response_model=MessageResponse)
def refresh_reviews(
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(require_admin),
):
    """Re-fetch every provider, replacing the persisted review set."""
    reviews = services.pipeline.refresh()
    return {'success': True, 'message': f'Reloaded {len(reviews)} reviews from providers'}


# =============================================================================
# PROPERTIES
# =============================================================================

properties_router = APIRouter(prefix="/api/properties", tags=["properties"])


@properties_router.get("", response_model=PropertyListResponse)
def list_properties(services: AppServices = Depends(get_services)):
    """Public: catalog with live review statistics."""
    return {'success': True, 'data': [p.to_dict() for p in services.registry.list()]}


@properties_router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_property(property_id: str, services: AppServices = Depends(get_services)):
    """Public: one property with its review statistics."""
    prop = services.registry.get(property_id)
    if prop is None:
        raise NotFoundError("Property not found")
    return {'success': True, 'data': prop.to_dict()}


# =============================================================================
# AUTH
# =============================================================================

auth_router = APIRouter(prefix="/api/auth", tags=["auth"])


@auth_router.post("/login", response_model=AuthResponse, response_model_exclude_none=True)
def login(body: LoginRequest, services: AppServices = Depends(get_services)):
    manager = services.managers.authenticate(body.email, body.password)
    token = create_access_token(manager, services.settings)
    return {'success': True, 'data': {'token': token, 'user': manager.to_dict()}}


@auth_router.post(
    "/register", status_code=201,
    response_model=AuthResponse, response_model_exclude_none=True,
)
def register(body: RegisterRequest, services: AppServices = Depends(get_services)):
    manager = services.managers.register(body.email, body.password, body.name, body.role)
    token = create_access_token(manager, services.settings)
    return {'success': True, 'data': {'token': token, 'user': manager.to_dict()}}


@auth_router.get("/profile", response_model=ProfileResponse)
def profile(
    services: AppServices = Depends(get_services),
    user: TokenUser = Depends(get_current_user),
):
    manager = services.managers.get(user.id)
    if manager is None:
        raise NotFoundError("Manager not found")
    return {'success': True, 'data': manager.to_dict(include_created=True)}


# =============================================================================
# GOOGLE PLACES
# =============================================================================

google_router = APIRouter(prefix="/api/google", tags=["google"])


@google_router.get("/places/search", response_model=DataResponse)
def search_places(
    query: Optional[str] = None,
    services: AppServices = Depends(get_services),
):
    if not query:
        raise ValidationError("Query parameter is required")
    return {'success': True, 'data': services.google.search_places(query)}


@google_router.get("/places/{place_id}", response_model=DataResponse)
def place_details(place_id: str, services: AppServices = Depends(get_services)):
    place = services.google.get_place_details(place_id)
    if place is None:
        raise NotFoundError("Place not found")
    return {'success': True, 'data': place}


@google_router.get("/places/{place_id}/reviews", response_model=DataResponse)
def place_reviews(place_id: str, services: AppServices = Depends(get_services)):
    place = services.google.get_place_details(place_id)
    if place is None:
        raise NotFoundError("Place not found")
    records = services.google.records_from_place(place)
    reviews = services.google.normalize_all(records)
    return {'success': True, 'data': [r.to_dict() for r in reviews]}


@google_router.get("/reviews/search", response_model=DataResponse)
def search_reviews_by_property(
    property_name: Optional[str] = Query(None, alias="propertyName"),
    location: Optional[str] = None,
    services: AppServices = Depends(get_services),
):
    """Search the property, then normalize the first hit's reviews."""
    if not property_name:
        raise ValidationError("Property name is required")

    places = services.google.search_places(f"{property_name} {location or 'London UK'}")
    if not places:
        return {'success': True, 'data': []}

    place = services.google.get_place_details(places[0].get('place_id', ''))
    if place is None:
        return {'success': True, 'data': []}

    reviews = services.google.normalize_all(services.google.records_from_place(place))
    return {'success': True, 'data': [r.to_dict() for r in reviews]}


# =============================================================================
# APP INITIALIZATION
# =============================================================================

def register_error_handlers(app: FastAPI) -> None:
    """Translate errors into the {"success": false, "message"} envelope."""

    @app.exception_handler(ReviewHubError)
    async def review_hub_error(request: Request, exc: ReviewHubError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
            return _error(exc.status_code, "Internal server error")
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return _error(400, f"Invalid request: {details}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return _error(404, "Route not found")
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return _error(500, "Internal server error")


def create_app(services: Optional[AppServices] = None,
               settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        services: Pre-built components (tests); built at startup when None
        settings: Configuration; read from the environment when None
    """
    settings = services.settings if services else (settings or load_settings())

    if settings.is_production:
        missing = settings.missing_production_secrets()
        if missing:
            raise RuntimeError(f"Missing required environment variables: {', '.join(missing)}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.services is None:
            app.state.services = build_services(settings)
        pipeline = app.state.services.pipeline
        if not pipeline.loaded:
            pipeline.load_or_refresh()
        logger.info(f"{SERVICE_NAME} ready")
        yield

    app = FastAPI(
        title=SERVICE_NAME,
        description="Aggregated guest reviews with manager moderation",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "X-Requested-With", "Content-Type", "Accept", "Authorization"],
    )

    register_error_handlers(app)

    @app.get("/api/health", response_model=HealthResponse)
    def health():
        return {
            'success': True,
            'message': f"{SERVICE_NAME} is running",
            'timestamp': datetime.now(timezone.utc),
        }

    app.include_router(reviews_router)
    app.include_router(properties_router)
    app.include_router(auth_router)
    app.include_router(google_router)
    return app


_settings = load_settings()
setup_logging(_settings.log_level)
app = create_app(settings=_settings)


if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "5000")))
