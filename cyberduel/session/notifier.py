"""
Update Notifier - Publish/subscribe channel for match snapshots.

The resolver publishes after every successful mutation; subscribers of
that match id each receive their own deep copy, so nothing a subscriber
does to its snapshot can reach the store.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import itertools
import logging

from ..engine_core.state import Match

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[Match], None]


@dataclass(eq=False)
class Subscription:
    """
    Handle returned by subscribe().

    Calling it (or cancel()) unsubscribes. Extra cleanup hooks, such as
    stopping an opponent driver, run on the first cancel only.
    """
    subscription_id: int
    match_id: str
    _on_cancel: list[Callable[[], None]] = field(default_factory=list)
    cancelled: bool = False

    def add_cancel_hook(self, hook: Callable[[], None]):
        self._on_cancel.append(hook)

    def cancel(self):
        if self.cancelled:
            return
        self.cancelled = True
        for hook in self._on_cancel:
            hook()

    def __call__(self):
        self.cancel()


class UpdateNotifier:
    """Fan-out of match snapshots to subscribers, keyed by match id."""

    def __init__(self):
        self._subscribers: dict[str, dict[int, UpdateCallback]] = {}
        self._ids = itertools.count(1)

    def subscribe(self, match_id: str, callback: UpdateCallback) -> Subscription:
        subscription_id = next(self._ids)
        self._subscribers.setdefault(match_id, {})[subscription_id] = callback

        subscription = Subscription(subscription_id=subscription_id, match_id=match_id)
        subscription.add_cancel_hook(lambda: self._remove(match_id, subscription_id))
        return subscription

    def _remove(self, match_id: str, subscription_id: int):
        callbacks = self._subscribers.get(match_id)
        if not callbacks:
            return
        callbacks.pop(subscription_id, None)
        if not callbacks:
            del self._subscribers[match_id]

    def subscriber_count(self, match_id: str) -> int:
        return len(self._subscribers.get(match_id, {}))

    def publish(self, match: Match) -> int:
        """
        Push a snapshot of `match` to its subscribers.

        Returns the number of callbacks invoked. A failing callback is
        logged and does not stop delivery to the others.
        """
        callbacks = list(self._subscribers.get(match.match_id, {}).values())
        for callback in callbacks:
            try:
                callback(match.clone())
            except Exception:
                logger.exception("Subscriber callback failed for match %s", match.match_id)
        return len(callbacks)
