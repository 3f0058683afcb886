"""
Opponent Policy - Strategy interface for the autonomous opponent.

A policy is handed the acting player and the actions it can afford,
and returns the action to play (or None to skip this tick).

Any callable with the signature
    (player: PlayerState, affordable: list[ActionDef]) -> ActionDef | None
can be used wherever a policy is expected.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional
import random

if TYPE_CHECKING:
    from ..engine_core.state import PlayerState
    from ..engine_core.catalog import ActionDef


OpponentStrategy = Callable[["PlayerState", "list[ActionDef]"], Optional["ActionDef"]]


class OpponentPolicy(ABC):
    """
    Abstract base class for opponent policies.

    Policies are callable so they can be passed as plain strategies.
    """

    @abstractmethod
    def select_action(
        self,
        player: PlayerState,
        affordable: list[ActionDef],
    ) -> ActionDef | None:
        """
        Select an action from the affordable ones.

        Args:
            player: The player about to act
            affordable: Actions of the player's role it can pay for

        Returns:
            The action to submit, or None to pass this tick
        """
        pass

    def __call__(self, player: PlayerState, affordable: list[ActionDef]) -> ActionDef | None:
        return self.select_action(player, affordable)

    def get_name(self) -> str:
        """Get the policy's name/identifier."""
        return self.__class__.__name__


class RandomPolicy(OpponentPolicy):
    """
    Random policy - picks uniformly among affordable actions.

    This is how the live opponent plays. Seed it for reproducible runs.
    """

    def __init__(self, seed: int | None = None):
        self.rng = random.Random(seed)

    def select_action(self, player, affordable):
        if not affordable:
            return None
        return self.rng.choice(affordable)


class FirstAffordablePolicy(OpponentPolicy):
    """
    First-affordable policy - always plays the first affordable action.

    Used for deterministic testing.
    """

    def select_action(self, player, affordable):
        return affordable[0] if affordable else None
