"""
Game Loop - Plays a whole match without waiting on timers.

The loop:
1. Runs matchmaking for the human profile
2. On the human's turn, asks the human-seat strategy for an action
3. On the opponent's turn, ticks the opponent driver once
4. Repeats until the match finishes or the step limit is hit

Used for simulations (CLI) and end-to-end tests. The human seat is
driven by a strategy, but it still goes through submit_action like
the battle UI would.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from copy import deepcopy
from typing import TYPE_CHECKING

from ..bots.policy import OpponentStrategy, RandomPolicy
from ..engine_core.state import Match, PlayerProfile

if TYPE_CHECKING:
    from ..api.service import PvpService


@dataclass
class LoopResult:
    """
    Result of an autoplayed match.

    `finished` is False when the step limit stopped the loop first.
    """
    match: Match
    steps: int
    finished: bool
    winner: str | None = None
    snapshots: list[Match] = field(default_factory=list)


class GameLoop:
    """
    Autoplay driver.

    Usage:
        loop = GameLoop(service, human_strategy=RandomPolicy(seed=1))
        result = await loop.run(PlayerProfile("Cipher007", Role.ATTACKER))
        print(result.winner)
    """

    def __init__(
        self,
        service: PvpService,
        human_strategy: OpponentStrategy | None = None,
        opponent_strategy: OpponentStrategy | None = None,
        max_steps: int = 500,
    ):
        self.service = service
        self.human_strategy = human_strategy or RandomPolicy()
        self.opponent_strategy = opponent_strategy
        self.max_steps = max_steps

    async def run(self, profile: PlayerProfile) -> LoopResult:
        match = await self.service.start_matchmaking(profile)
        match_id = match.match_id

        snapshots: list[Match] = []
        subscription = self.service.subscribe(match_id, snapshots.append, drive_opponent=False)
        driver = self.service.opponent_driver(match_id, strategy=self.opponent_strategy)

        steps = 0
        try:
            while steps < self.max_steps:
                live = self.service.store.get(match_id)
                if live is None or live.is_finished:
                    break
                steps += 1

                player = live.current_player
                if not player.is_human:
                    await driver.tick()
                    continue

                affordable = self.service.catalog.affordable(player.role, player.energy)
                action = self.human_strategy(deepcopy(player), affordable)
                if action is not None:
                    await self.service.submit_action(match_id, player.username, action.id)
        finally:
            subscription.cancel()

        final = self.service.get_match(match_id)
        return LoopResult(
            match=final,
            steps=steps,
            finished=final.is_finished,
            winner=final.winner,
            snapshots=snapshots,
        )
