"""Append-only audit log of analyses and feedback, with in-memory fallback."""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)


def utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class FeedbackRepository:
    """Stores ``{feedback, analysis, timestamp}`` records in a JSON array file.

    The whole file is read and rewritten on every append. There is no locking,
    so concurrent writers may lose entries; the log is an audit trail only.
    Without a path the records are kept in memory.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._memory_store: List[Dict[str, Any]] = []

    def append(self, feedback: Dict[str, Any], analysis: Dict[str, Any]) -> Dict[str, Any]:
        entry = {"feedback": feedback, "analysis": analysis, "timestamp": utcnow_iso()}
        if self.path is None:
            self._memory_store.append(entry)
            return entry

        entries = self._read()
        entries.append(entry)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, indent=2), encoding="utf-8")
        return entry

    def get_all(self) -> List[Dict[str, Any]]:
        if self.path is None:
            return list(self._memory_store)
        return self._read()

    def recent_ratings(self, count: int) -> List[float]:
        """Ratings from the last ``count`` rated feedback entries."""

        ratings: List[float] = []
        for entry in reversed(self.get_all()):
            feedback = entry.get("feedback") or {}
            rating = feedback.get("rating") if isinstance(feedback, dict) else None
            if isinstance(rating, (int, float)) and not isinstance(rating, bool):
                ratings.append(float(rating))
            if len(ratings) >= count:
                break
        ratings.reverse()
        return ratings

    def _read(self) -> List[Dict[str, Any]]:
        if self.path is None or not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Feedback log %s unreadable, starting a new one: %s", self.path, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Feedback log %s is not a JSON array, starting a new one", self.path)
            return []
        return data
