"""
PVP Service - Composition root between the UI/API and the engine.

The service:
1. Owns the match store and wires it into every component
2. Runs matchmaking
3. Routes action submissions through the resolver
4. Hands out subscriptions (snapshot push + autonomous opponent)

This layer is framework-agnostic (used by the FastAPI app and the CLI).
"""

from __future__ import annotations
import logging

from ..bots.policy import OpponentStrategy, RandomPolicy
from ..config import Settings
from ..engine_core.action import ActionResult
from ..engine_core.catalog import ActionCatalog, ActionDef, DEFAULT_CATALOG
from ..engine_core.reducer import Reducer
from ..engine_core.state import Match, PlayerProfile, Role
from ..session import (
    ActionResolver,
    MatchLifecycleManager,
    MatchStore,
    OpponentDriver,
    Subscription,
    UpdateCallback,
    UpdateNotifier,
)

logger = logging.getLogger(__name__)


class PvpService:
    """
    Main service for the battle UI.

    Usage:
        service = PvpService(Settings.from_env())

        match = await service.start_matchmaking(profile)
        unsubscribe = service.subscribe(match.match_id, render)
        result = await service.submit_action(match.match_id, profile.username, "phishing_email")
        ...
        unsubscribe()
        service.return_to_lobby(match.match_id)
    """

    def __init__(
        self,
        settings: Settings | None = None,
        catalog: ActionCatalog | None = None,
        strategy: OpponentStrategy | None = None,
    ):
        self.settings = settings or Settings()
        self.catalog = catalog or DEFAULT_CATALOG
        self.strategy = strategy or RandomPolicy(seed=self.settings.opponent_seed)

        self.store = MatchStore()
        self.notifier = UpdateNotifier()
        self.reducer = Reducer(catalog=self.catalog)
        self.resolver = ActionResolver(
            self.store,
            self.reducer,
            self.notifier,
            latency=self.settings.submit_latency,
        )
        self.manager = MatchLifecycleManager(
            self.store,
            matchmaking_delay=self.settings.matchmaking_delay,
            matchmaking_timeout=self.settings.matchmaking_timeout,
        )
        self._subscriptions: list[Subscription] = []

    # =========================================================================
    # Catalog
    # =========================================================================

    def actions_for(self, role: Role) -> list[ActionDef]:
        return self.catalog.actions_for(role)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start_matchmaking(self, profile: PlayerProfile) -> Match:
        return await self.manager.start_matchmaking(profile)

    def cancel_matchmaking(self) -> bool:
        return self.manager.cancel_matchmaking()

    @property
    def is_searching(self) -> bool:
        return self.manager.is_searching

    def current_match(self) -> Match | None:
        return self.manager.current_match()

    def get_match(self, match_id: str) -> Match | None:
        """Snapshot of the match with this id, or None."""
        return self.store.snapshot(match_id)

    def return_to_lobby(self, match_id: str) -> bool:
        """
        Discard the match and stop everything attached to it.

        Subscriptions for the match are cancelled first so no driver
        keeps ticking against a match that no longer exists.
        """
        for subscription in list(self._subscriptions):
            if subscription.match_id == match_id:
                subscription.cancel()
        return self.manager.discard_match(match_id)

    # =========================================================================
    # Play
    # =========================================================================

    async def submit_action(self, match_id: str, username: str, action_id: str) -> ActionResult:
        """
        Submit an action for a player.

        Rejections come back as a result with `success=False`; an unknown
        action id raises InvalidActionError.
        """
        return await self.resolver.submit_action(match_id, username, action_id)

    def opponent_driver(self, match_id: str, strategy: OpponentStrategy | None = None) -> OpponentDriver:
        """Build (but do not start) an opponent driver for a match."""
        return OpponentDriver(
            match_id=match_id,
            store=self.store,
            catalog=self.catalog,
            resolver=self.resolver,
            strategy=strategy or self.strategy,
            interval=self.settings.opponent_interval,
        )

    def subscribe(
        self,
        match_id: str,
        on_update: UpdateCallback,
        drive_opponent: bool = True,
    ) -> Subscription:
        """
        Receive a snapshot after every change to the match.

        With `drive_opponent` (the default) an opponent driver runs for
        as long as the subscription lives, so this must be called from
        inside a running event loop. Cancelling the returned handle
        stops both the pushes and the driver.
        """
        subscription = self.notifier.subscribe(match_id, on_update)
        if drive_opponent:
            driver = self.opponent_driver(match_id)
            driver.start()
            subscription.add_cancel_hook(driver.stop)

        self._subscriptions.append(subscription)
        subscription.add_cancel_hook(lambda: self._forget(subscription))
        return subscription

    def _forget(self, subscription: Subscription):
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)

    def close(self):
        """Cancel every subscription and any outstanding matchmaking."""
        for subscription in list(self._subscriptions):
            subscription.cancel()
        self.manager.cancel_matchmaking()
