"""
storage.py - Durable state for moderation decisions and canonical reviews

Two JSON documents under the data directory:
- review-states.json: {"reviews": [{id, isApproved, lastUpdated}], "lastSync"}
- reviews.json:       {"reviews": [<canonical review>...], "lastSync"}

Writes go to a temp file in the same directory, are fsynced, then renamed
over the target, so a crash never leaves a half-written document.

Moderation decisions are held in memory and written from there. A failed
save leaves the in-memory decisions intact; the next successful save
writes all of them.
"""

import json
import logging
import os
import tempfile
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from src.errors import PersistenceError
from src.schemas import CanonicalReview, ModerationDecision

logger = logging.getLogger(__name__)

DECISIONS_FILENAME = "review-states.json"
REVIEWS_FILENAME = "reviews.json"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class StateStore:
    """
    File-backed store for moderation decisions and the canonical review set.

    Args:
        data_dir: Directory holding both JSON documents (created if missing)
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)
        self.decisions_path = self.data_dir / DECISIONS_FILENAME
        self.reviews_path = self.data_dir / REVIEWS_FILENAME
        self._lock = threading.RLock()

        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Cannot create data directory {self.data_dir}: {e}")

        self._decisions: Dict[int, ModerationDecision] = self._load_decisions()
        logger.info(
            f"Initialized StateStore at {self.data_dir} "
            f"with {len(self._decisions)} moderation decisions"
        )

    # -------------------------------------------------------------------------
    # Low-level I/O
    # -------------------------------------------------------------------------

    def _read_json(self, path: Path) -> Optional[Dict[str, Any]]:
        """
        Read a JSON document.

        Returns:
            Parsed document, or None if the file doesn't exist

        Raises:
            PersistenceError: unreadable or not a JSON object
        """
        if not path.exists():
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceError(f"Failed to read {path}: not a JSON object")
        return data

    def _write_json(self, path: Path, data: Dict[str, Any]) -> None:
        """Atomically replace path with data (temp file + fsync + rename)."""
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=str(path.parent),
                prefix=f".{path.name}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                json.dump(data, tmp, indent=2)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Failed to write {path}: {e}") from e

    def _quarantine(self, path: Path) -> None:
        """Move an unreadable document aside so it isn't overwritten."""
        target = path.with_name(f"{path.name}.corrupt-{_now():%Y%m%d%H%M%S}")
        try:
            os.replace(path, target)
            logger.error(f"Moved unreadable {path.name} to {target.name}")
        except OSError as e:
            logger.error(f"Could not move unreadable {path}: {e}")

    # -------------------------------------------------------------------------
    # Moderation decisions
    # -------------------------------------------------------------------------

    def _load_decisions(self) -> Dict[int, ModerationDecision]:
        try:
            data = self._read_json(self.decisions_path)
        except PersistenceError as e:
            logger.error(f"Error loading review states: {e}")
            self._quarantine(self.decisions_path)
            return {}
        if data is None:
            return {}

        decisions = {}
        for raw in data.get('reviews') or []:
            try:
                decision = ModerationDecision.from_dict(raw)
            except (KeyError, ValueError, TypeError) as e:
                logger.warning(f"Skipping malformed review state {raw!r}: {e}")
                continue
            decisions[decision.review_id] = decision
        return decisions

    def get_decision(self, review_id: int) -> Optional[ModerationDecision]:
        with self._lock:
            return self._decisions.get(review_id)

    def all_decisions(self) -> Dict[int, ModerationDecision]:
        with self._lock:
            return dict(self._decisions)

    def put_decision(self, review_id: int, is_approved: bool,
                     when: Optional[datetime] = None) -> ModerationDecision:
        """Record a decision in memory. Call save_decisions() to persist."""
        decision = ModerationDecision(
            review_id=review_id,
            is_approved=is_approved,
            last_updated=when or _now(),
        )
        with self._lock:
            self._decisions[review_id] = decision
        return decision

    def save_decisions(self) -> None:
        """Persist all in-memory decisions. Raises PersistenceError."""
        with self._lock:
            payload = {
                'reviews': [d.to_dict() for d in self._decisions.values()],
                'lastSync': _now().isoformat(),
            }
            self._write_json(self.decisions_path, payload)

    # -------------------------------------------------------------------------
    # Canonical review set
    # -------------------------------------------------------------------------

    def load_reviews(self) -> List[CanonicalReview]:
        """
        Load the persisted canonical set.

        Returns:
            Stored reviews; empty list when nothing has been persisted

        Raises:
            PersistenceError: the document exists but can't be parsed
        """
        with self._lock:
            data = self._read_json(self.reviews_path)
        if data is None:
            return []

        try:
            reviews = [CanonicalReview.from_dict(r) for r in data.get('reviews') or []]
        except (KeyError, ValueError, TypeError) as e:
            raise PersistenceError(f"Malformed review in {self.reviews_path}: {e}") from e
        logger.info(f"Loaded {len(reviews)} reviews from {self.reviews_path}")
        return reviews

    def save_reviews(self, reviews: List[CanonicalReview]) -> None:
        """Persist the full canonical set. Raises PersistenceError."""
        payload = {
            'reviews': [r.to_dict() for r in reviews],
            'lastSync': _now().isoformat(),
        }
        with self._lock:
            self._write_json(self.reviews_path, payload)
        logger.debug(f"Saved {len(reviews)} reviews to {self.reviews_path}")
