"""
run_example.py - Demonstration of the review aggregation pipeline

Runs the full pipeline with both providers offline (so the built-in
fallback reviews are used), moderates a couple of reviews and prints the
manager dashboard as JSON. State is written to a temporary directory.
"""

import sys
import tempfile
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.google_places_adapter import GooglePlacesAdapter
from src.hostaway_adapter import HostawayAdapter
from src.pipeline import AggregationPipeline
from src.property_registry import PropertyRegistry
from src.query_engine import ReviewQueryEngine
from src.schemas import Channel, ReviewFilters
from src.settings import setup_logging
from src.storage import StateStore


def print_separator(title: str = ""):
    """Print a visual separator."""
    print("\n" + "=" * 60)
    if title:
        print(f"  {title}")
        print("=" * 60)


def run_aggregation_example(data_dir: Path) -> AggregationPipeline:
    """Fetch, merge and persist the review set."""
    print_separator("AGGREGATION: Providers Offline")

    # No credentials -> each adapter serves its fallback dataset
    pipeline = AggregationPipeline(
        [HostawayAdapter(api_key="", account_id=""), GooglePlacesAdapter(api_key="")],
        StateStore(data_dir),
    )
    reviews = pipeline.load_or_refresh()

    print(f"\nLoaded {len(reviews)} reviews")
    for review in reviews:
        print(f"  [{review.channel.value:8}] #{review.id:<14} {review.overall_rating:5.2f}  "
              f"{review.guest_name} @ {review.listing_name}")
    return pipeline


def run_moderation_example(pipeline: AggregationPipeline):
    """Approve and reject a review, then show the result."""
    print_separator("MODERATION")

    pipeline.approve(7454)
    pipeline.reject(7456)
    for review_id in (7454, 7456):
        review = pipeline.review_store.get(review_id)
        print(f"  #{review_id}: status={review.status.value}, approved={review.is_approved}")


def run_query_example(engine: ReviewQueryEngine):
    """Filter the review set."""
    print_separator("QUERIES")

    google = engine.query(ReviewFilters(channel=Channel.GOOGLE))
    print(f"\nGoogle reviews: {[r.guest_name for r in google]}")

    high = engine.query(ReviewFilters(rating=9))
    print(f"Rated 9 or above: {[r.id for r in high]}")

    print(f"Publicly displayed: {[r.id for r in engine.approved()]}")


def output_dashboard_example(engine: ReviewQueryEngine):
    """Show the dashboard JSON."""
    print_separator("DASHBOARD JSON")
    print("\n" + engine.dashboard_stats().to_json())


def main():
    """Run all examples."""
    setup_logging("WARNING")

    print("\n" + "=" * 60)
    print("  GUEST REVIEW HUB - Demo")
    print("=" * 60)

    with tempfile.TemporaryDirectory() as tmp:
        pipeline = run_aggregation_example(Path(tmp))
        engine = ReviewQueryEngine(
            pipeline.review_store, PropertyRegistry(pipeline.review_store)
        )
        run_moderation_example(pipeline)
        run_query_example(engine)
        output_dashboard_example(engine)

    print_separator("DEMO COMPLETE")


if __name__ == "__main__":
    main()
