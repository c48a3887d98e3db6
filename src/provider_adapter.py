"""
provider_adapter.py - Common contract for review providers

Each provider gets one adapter that:
1. Fetches provider-native records (fetch)
2. Maps one record to a CanonicalReview (normalize)

fetch() must never raise. Provider failures are logged by the adapter and
answered with a fixed fallback dataset so aggregation never fails because
one provider is unreachable.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

import requests

from src.errors import UpstreamUnavailable
from src.schemas import CanonicalReview, Channel

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT")


class ProviderAdapter(ABC, Generic[RecordT]):
    """Base class for provider adapters."""

    channel: Channel

    def __init__(self, timeout_seconds: float = 10.0,
                 session: Optional[requests.Session] = None):
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    # -------------------------------------------------------------------------
    # Contract
    # -------------------------------------------------------------------------

    @abstractmethod
    def fetch_records(self) -> List[RecordT]:
        """Fetch from the provider. May raise UpstreamUnavailable."""

    @abstractmethod
    def fallback_records(self) -> List[RecordT]:
        """Fixed dataset served when the provider is unavailable."""

    @abstractmethod
    def normalize(self, record: RecordT) -> CanonicalReview:
        """Map one provider-native record to a CanonicalReview."""

    # -------------------------------------------------------------------------
    # Shared behavior
    # -------------------------------------------------------------------------

    def fetch(self) -> List[RecordT]:
        """
        Fetch provider records, degrading to the fallback dataset.

        Returns:
            Provider records, or the fallback dataset on any upstream failure
            or a response that can't be parsed
        """
        try:
            records = self.fetch_records()
        except UpstreamUnavailable as e:
            logger.warning(
                f"{self.channel.value} unavailable ({e.message}) - using fallback data"
            )
            return self.fallback_records()
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error(
                f"{self.channel.value} returned malformed data ({e!r}) - using fallback data"
            )
            return self.fallback_records()
        logger.info(f"Fetched {len(records)} records from {self.channel.value}")
        return records

    def normalize_all(self, records: List[RecordT]) -> List[CanonicalReview]:
        """Normalize records in provider order."""
        return [self.normalize(record) for record in records]

    def fetch_and_normalize(self) -> List[CanonicalReview]:
        return self.normalize_all(self.fetch())

    def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None,
                  headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        GET a JSON document from the provider.

        Raises:
            UpstreamUnavailable: network error, timeout, non-2xx status
                or a body that is not a JSON object
        """
        try:
            response = self.session.get(
                url, params=params, headers=headers, timeout=self.timeout_seconds
            )
        except requests.RequestException as e:
            raise UpstreamUnavailable(f"request failed: {e}") from e

        if response.status_code in (401, 403):
            raise UpstreamUnavailable(f"access denied (HTTP {response.status_code})")
        if not response.ok:
            raise UpstreamUnavailable(f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamUnavailable("response is not valid JSON") from e
        if not isinstance(payload, dict):
            raise UpstreamUnavailable("unexpected response shape")
        return payload
