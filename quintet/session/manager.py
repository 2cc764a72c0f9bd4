"""
Session Manager - Creates and tracks matches.

PERSISTENCE RULES:
- NO database
- Matches live in memory only, for the life of the process
- Ending a match drops it; nothing is kept
"""

from __future__ import annotations
from typing import Any
import logging
import time

from .config import MatchConfig
from .match import Match

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Manages match sessions.

    Responsibilities:
    - Create matches from configuration
    - Look them up by id
    - Drop finished or abandoned matches
    """

    def __init__(self):
        self._matches: dict[str, Match] = {}
        self._created_at: dict[str, float] = {}

    def create_match(self, config: MatchConfig | dict[str, Any] | None = None) -> Match:
        """
        Create and register a new match.

        Args:
            config: MatchConfig, or a plain dict in either key style

        Raises:
            pydantic.ValidationError: if a dict config is invalid
        """
        if isinstance(config, dict):
            config = MatchConfig.model_validate(config)
        match = Match(config)
        self._matches[match.match_id] = match
        self._created_at[match.match_id] = time.time()
        return match

    def get_match(self, match_id: str) -> Match | None:
        """Get a match by ID."""
        return self._matches.get(match_id)

    def end_match(self, match_id: str) -> bool:
        """Remove a match. False if it did not exist."""
        match = self._matches.pop(match_id, None)
        self._created_at.pop(match_id, None)
        if match is None:
            return False
        logger.info("Match %s ended after %s turns", match_id, match.turn_number)
        return True

    def list_matches(self) -> list[str]:
        """IDs of all live matches, oldest first."""
        return list(self._matches)

    def cleanup_finished(self, max_age_seconds: int = 3600) -> list[str]:
        """
        Drop finished matches older than max_age_seconds.

        Called periodically to free memory.
        """
        now = time.time()
        stale = [
            mid for mid, match in self._matches.items()
            if match.is_over and now - self._created_at.get(mid, now) > max_age_seconds
        ]
        for mid in stale:
            self.end_match(mid)
        return stale

    def __len__(self) -> int:
        return len(self._matches)
