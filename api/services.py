"""
services.py - Wiring of the review hub components

One AppServices instance per application. Tests build their own with
build_services() pointed at a temporary data directory.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from api.managers import ManagerDirectory
from src.google_places_adapter import GooglePlacesAdapter
from src.hostaway_adapter import HostawayAdapter
from src.pipeline import AggregationPipeline
from src.property_registry import PropertyRegistry
from src.provider_adapter import ProviderAdapter
from src.query_engine import ReviewQueryEngine
from src.review_store import InMemoryReviewStore
from src.settings import Settings
from src.storage import StateStore


@dataclass
class AppServices:
    settings: Settings
    pipeline: AggregationPipeline
    query_engine: ReviewQueryEngine
    registry: PropertyRegistry
    google: GooglePlacesAdapter
    managers: ManagerDirectory


def build_services(settings: Settings,
                   adapters: Optional[Sequence[ProviderAdapter]] = None,
                   managers: Optional[ManagerDirectory] = None) -> AppServices:
    """
    Build every component from settings.

    Args:
        settings: Runtime configuration
        adapters: Override the provider adapters (registration order matters)
        managers: Override the manager directory
    """
    google = GooglePlacesAdapter(
        api_key=settings.google_places_api_key,
        place_ids=settings.google_place_ids,
        base_url=settings.google_places_base_url,
        timeout_seconds=settings.provider_timeout_seconds,
    )
    if adapters is None:
        adapters = [
            HostawayAdapter(
                api_key=settings.hostaway_api_key,
                account_id=settings.hostaway_account_id,
                base_url=settings.hostaway_base_url,
                timeout_seconds=settings.provider_timeout_seconds,
            ),
            google,
        ]

    review_store = InMemoryReviewStore()
    registry = PropertyRegistry(review_store)
    pipeline = AggregationPipeline(adapters, StateStore(settings.data_dir), review_store)

    return AppServices(
        settings=settings,
        pipeline=pipeline,
        query_engine=ReviewQueryEngine(review_store, registry),
        registry=registry,
        google=google,
        managers=managers or ManagerDirectory(settings.default_manager_password),
    )
