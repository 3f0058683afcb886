"""
Match Lifecycle Manager - Matchmaking and match teardown.

LIFECYCLE:
1. Caller starts matchmaking with its profile
2. After the matchmaking delay an opponent of the other role is
   fabricated and a fresh match is installed in the store
3. Caller subscribes and plays
4. Once the match is finished the caller returns to the lobby,
   which discards the match

At most one matchmaking request may be outstanding. Cancelling it
guarantees the pending match is never installed.
"""

from __future__ import annotations
import asyncio
import logging

from ..config import (
    OPPONENT_PROFILES,
    OPPONENT_LEVEL,
    OPPONENT_XP,
    OPPONENT_XP_TO_NEXT_LEVEL,
    AVATAR_URL_TEMPLATE,
)
from ..engine_core.state import Match, PlayerProfile, PlayerState
from ..errors import (
    MatchmakingCancelledError,
    MatchmakingInProgressError,
    MatchmakingTimeoutError,
)
from .store import MatchStore

logger = logging.getLogger(__name__)


def fabricate_opponent(profile: PlayerProfile) -> PlayerProfile:
    """Build the opponent for `profile`: the other role, a distinct username."""
    role = profile.role.opponent
    preset = OPPONENT_PROFILES[role.value]

    username = preset["username"]
    suffix = 2
    while username == profile.username:
        username = f"{preset['username']}-{suffix}"
        suffix += 1

    return PlayerProfile(
        username=username,
        role=role,
        avatar_url=AVATAR_URL_TEMPLATE.format(seed=preset["avatar_seed"]),
        level=OPPONENT_LEVEL,
        xp=OPPONENT_XP,
        xp_to_next_level=OPPONENT_XP_TO_NEXT_LEVEL,
    )


class MatchLifecycleManager:
    """
    Creates and discards matches.

    Responsibilities:
    - Run (and cancel) the single matchmaking request
    - Install new matches in the store
    - Hand out snapshots of the live match
    """

    def __init__(
        self,
        store: MatchStore,
        matchmaking_delay: float = 2.5,
        matchmaking_timeout: float | None = None,
    ):
        self.store = store
        self.matchmaking_delay = matchmaking_delay
        self.matchmaking_timeout = matchmaking_timeout
        self._pending: asyncio.Task | None = None
        self._cancel_requested = False

    @property
    def is_searching(self) -> bool:
        return self._pending is not None and not self._pending.done()

    async def start_matchmaking(self, profile: PlayerProfile) -> Match:
        """
        Find a match for `profile`.

        Returns a snapshot of the newly installed match, with `profile`
        to act first.

        Raises:
            MatchmakingInProgressError: another request is outstanding
            MatchmakingCancelledError: cancel_matchmaking() was called
            MatchmakingTimeoutError: the configured timeout elapsed
        """
        if self.is_searching:
            raise MatchmakingInProgressError(
                f"Matchmaking already in progress, cannot start for {profile.username}"
            )

        self._cancel_requested = False
        task = asyncio.ensure_future(self._matchmake(profile))
        self._pending = task
        logger.info("Matchmaking started for %s (%s)", profile.username, profile.role.value)

        try:
            if self.matchmaking_timeout is None:
                match = await task
            else:
                match = await asyncio.wait_for(task, self.matchmaking_timeout)
        except asyncio.TimeoutError:
            logger.info("Matchmaking for %s timed out", profile.username)
            raise MatchmakingTimeoutError(
                f"No match found within {self.matchmaking_timeout}s"
            ) from None
        except asyncio.CancelledError:
            if not self._cancel_requested:
                task.cancel()
                raise
            raise MatchmakingCancelledError(
                f"Matchmaking for {profile.username} was cancelled"
            ) from None
        finally:
            if self._pending is task:
                self._pending = None

        return match.clone()

    async def _matchmake(self, profile: PlayerProfile) -> Match:
        await asyncio.sleep(self.matchmaking_delay)

        opponent = fabricate_opponent(profile)
        match = Match.create(
            PlayerState(profile=profile, is_human=True),
            PlayerState(profile=opponent, is_human=False),
        )
        self.store.install(match)
        logger.info(
            "Match %s created: %s vs %s",
            match.match_id, profile.username, opponent.username,
        )
        return match

    def cancel_matchmaking(self) -> bool:
        """
        Abandon the outstanding matchmaking request, if any.

        Returns True if a request was cancelled. Has no effect on a
        match that has already been installed.
        """
        if not self.is_searching:
            return False
        self._cancel_requested = True
        self._pending.cancel()
        logger.info("Matchmaking cancelled")
        return True

    def current_match(self) -> Match | None:
        """Snapshot of the live match, or None."""
        return self.store.snapshot()

    def discard_match(self, match_id: str) -> bool:
        """Return to the lobby: drop the match. Idempotent."""
        discarded = self.store.discard(match_id)
        if discarded:
            logger.info("Match %s discarded", match_id)
        return discarded
