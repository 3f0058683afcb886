"""
Action Resolver - Store-bound entry point for submitting actions.

Both the human caller and the opponent driver go through
ActionResolver.submit_action(), so every mutation is published the
same way.
"""

from __future__ import annotations
import asyncio
import logging

from ..engine_core.action import ActionResult, RejectionReason
from ..engine_core.reducer import Reducer
from .notifier import UpdateNotifier
from .store import MatchStore

logger = logging.getLogger(__name__)


class ActionResolver:
    """
    Looks up the match, applies the reducer, publishes on success.

    `latency` models the round trip to a backing store; the match is
    read and mutated only after it, in one synchronous step.
    """

    def __init__(
        self,
        store: MatchStore,
        reducer: Reducer,
        notifier: UpdateNotifier,
        latency: float = 0.0,
    ):
        self.store = store
        self.reducer = reducer
        self.notifier = notifier
        self.latency = latency

    async def submit_action(self, match_id: str, username: str, action_id: str) -> ActionResult:
        """
        Submit `action_id` for `username` in match `match_id`.

        Raises InvalidActionError if the action id is unknown.
        """
        await asyncio.sleep(self.latency)

        match = self.store.get(match_id)
        if match is None:
            logger.debug("Rejected %s from %s: no match %s", action_id, username, match_id)
            return ActionResult.rejected(
                RejectionReason.MATCH_NOT_FOUND,
                f"No active match with id {match_id}",
            )

        result = self.reducer.apply(match, username, action_id)
        if result.success:
            self.notifier.publish(match)
        return result
