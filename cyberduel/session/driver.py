"""
Opponent Driver - Scheduled task that plays for the non-human player.

Every `interval` seconds the driver checks whether the match is active
and waiting on a non-human player. If so it asks its strategy to pick
among the affordable actions and submits the pick through the same
ActionResolver as any other caller. No affordable action (or a strategy
that returns None) means the driver waits for the next tick.

Stopping the driver prevents further moves; a move already handed to
the resolver is shielded and completes.
"""

from __future__ import annotations
from copy import deepcopy
import asyncio
import logging

from ..bots.policy import OpponentStrategy, RandomPolicy
from ..engine_core.action import ActionResult
from ..engine_core.catalog import ActionCatalog
from .resolver import ActionResolver
from .store import MatchStore

logger = logging.getLogger(__name__)


class OpponentDriver:
    """Drives the autonomous opponent of one match."""

    def __init__(
        self,
        match_id: str,
        store: MatchStore,
        catalog: ActionCatalog,
        resolver: ActionResolver,
        strategy: OpponentStrategy | None = None,
        interval: float = 4.0,
    ):
        self.match_id = match_id
        self.store = store
        self.catalog = catalog
        self.resolver = resolver
        self.strategy = strategy or RandomPolicy()
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> asyncio.Task:
        """Schedule the driver loop on the running event loop."""
        if not self.running:
            self._task = asyncio.ensure_future(self._run())
        return self._task

    def stop(self):
        """Stop issuing moves. Idempotent."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval)
            match = self.store.get(self.match_id)
            if match is None or match.is_finished:
                logger.debug("Opponent driver for %s exiting", self.match_id)
                return
            await self.tick()

    async def tick(self) -> ActionResult | None:
        """
        Take at most one move for the opponent.

        Returns the resolver's result, or None if there was nothing to do.
        """
        match = self.store.get(self.match_id)
        if match is None or not match.is_active:
            return None

        player = match.current_player
        if player.is_human:
            return None

        affordable = self.catalog.affordable(player.role, player.energy)
        if not affordable:
            logger.debug("%s cannot afford any action, waiting", player.username)
            return None

        action = self.strategy(deepcopy(player), affordable)
        if action is None:
            return None

        logger.debug("%s chooses %s", player.username, action.id)
        return await asyncio.shield(
            self.resolver.submit_action(self.match_id, player.username, action.id)
        )
