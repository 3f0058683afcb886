"""
Match Store - Holds the single live match.

The store is owned by the service (composition root) and injected into
the lifecycle manager, resolver and opponent driver. It holds zero or
one match; installing a new match replaces the old one.

No locks: everything runs on one asyncio event loop, and every
read-modify-write of a match happens without an await in between.
"""

from __future__ import annotations
import logging

from ..engine_core.state import Match

logger = logging.getLogger(__name__)


class MatchStore:
    """In-memory, single-slot match store. No persistence."""

    def __init__(self):
        self._match: Match | None = None

    @property
    def active(self) -> Match | None:
        """The live match (not a copy), or None."""
        return self._match

    def install(self, match: Match):
        if self._match is not None and self._match.match_id != match.match_id:
            logger.info("Replacing match %s with %s", self._match.match_id, match.match_id)
        self._match = match

    def get(self, match_id: str) -> Match | None:
        """Get the live match if its id matches."""
        if self._match is not None and self._match.match_id == match_id:
            return self._match
        return None

    def snapshot(self, match_id: str | None = None) -> Match | None:
        """
        Deep copy of the live match.

        With no id, snapshots whatever match is live.
        """
        match = self._match if match_id is None else self.get(match_id)
        return match.clone() if match else None

    def discard(self, match_id: str) -> bool:
        """Drop the match if it is the live one. Returns True if dropped."""
        if self.get(match_id) is None:
            return False
        self._match = None
        return True

    def clear(self):
        self._match = None
