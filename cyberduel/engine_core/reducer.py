"""
Reducer - Applies a submitted action to a match.

The reducer is the single point of match mutation.
All resolution must go through Reducer.apply().

Design principles:
- Deterministic: no randomness, no clock reads beyond log timestamps
- Validates before applying; rejections leave the match untouched
- Mutates the match in place (the store owns the only live copy)
- Returns ActionResult with success/rejection
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging

from .state import Match, MatchStatus, ENERGY_REGEN
from .action import ActionResult, RejectionReason
from .catalog import ActionCatalog, ActionDef, DEFAULT_CATALOG

logger = logging.getLogger(__name__)


@dataclass
class Reducer:
    """
    Reducer applies actions to a match.

    Stateless - all state is in the Match.
    Catalog provides the action definitions.
    """
    catalog: ActionCatalog = field(default_factory=lambda: DEFAULT_CATALOG)

    def apply(self, match: Match, username: str, action_id: str) -> ActionResult:
        """
        Resolve `username` playing `action_id` in `match`.

        Raises InvalidActionError for an unknown action id; every other
        problem comes back as a rejected ActionResult.
        """
        rejection = self._validate_turn(match, username)
        if rejection:
            logger.debug("Rejected %s from %s: %s", action_id, username, rejection.message)
            return rejection

        action = self.catalog.find_by_id(action_id)
        actor = match.get_player(username)

        rejection = self._validate_action(actor, action)
        if rejection:
            logger.debug("Rejected %s from %s: %s", action_id, username, rejection.message)
            return rejection

        return self._resolve(match, username, action)

    def _validate_turn(self, match: Match, username: str) -> ActionResult | None:
        if match.status == MatchStatus.FINISHED:
            return ActionResult.rejected(
                RejectionReason.MATCH_FINISHED,
                f"Match {match.match_id} is already finished",
            )
        if match.current_turn != username:
            return ActionResult.rejected(
                RejectionReason.NOT_YOUR_TURN,
                f"Not {username}'s turn",
            )
        return None

    def _validate_action(self, actor, action: ActionDef) -> ActionResult | None:
        if action.role != actor.role:
            return ActionResult.rejected(
                RejectionReason.ROLE_MISMATCH,
                f"{action.name} is not available to the {actor.role.value} role",
            )
        if actor.energy < action.cost:
            return ActionResult.rejected(
                RejectionReason.INSUFFICIENT_ENERGY,
                f"{action.name} costs {action.cost} energy, {actor.username} has {actor.energy}",
            )
        return None

    def _resolve(self, match: Match, username: str, action: ActionDef) -> ActionResult:
        actor = match.get_player(username)
        target = match.opponent_of(username)
        entries = []

        # 1. Apply costs
        actor.energy -= action.cost
        entries.append(match.add_log(f"{username} uses {action.name}."))

        # 2. Apply effects (damage, defense and heal are independent)
        if action.damage > 0:
            target.system_integrity -= action.damage
            entries.append(match.add_log(
                f"{action.name} deals {action.damage} damage to {target.username}."
            ))
        if action.defense > 0:
            actor.system_integrity += action.defense
            entries.append(match.add_log(
                f"{action.name} restores {action.defense} integrity for {actor.username}."
            ))
        if action.damage < 0:
            actor.system_integrity += action.heal
            entries.append(match.add_log(
                f"{action.name} restores {action.heal} integrity."
            ))

        actor.clamp()
        target.clamp()

        # 3. Check for winner; the actor wins even if both sides are at zero
        if target.is_compromised:
            match.status = MatchStatus.FINISHED
            match.winner = actor.username
            entries.append(match.add_log(
                f"{target.username}'s system is compromised! {actor.username} wins!"
            ))
            logger.info("Match %s finished, winner %s", match.match_id, actor.username)
            return ActionResult.resolved(action, entries, winner=actor.username)

        # 4. Switch turns; only the player about to act regenerates
        match.current_turn = target.username
        match.turn_number += 1
        target.energy += ENERGY_REGEN
        target.clamp()
        entries.append(match.add_log(f"It is now {match.current_turn}'s turn."))

        logger.debug(
            "Match %s turn %d: %s used %s",
            match.match_id, match.turn_number, username, action.id,
        )
        return ActionResult.resolved(action, entries)


def apply_action(
    match: Match,
    username: str,
    action_id: str,
    catalog: ActionCatalog | None = None,
) -> ActionResult:
    """
    Convenience function to apply an action.

    Creates a Reducer and applies the action.
    """
    reducer = Reducer(catalog=catalog or DEFAULT_CATALOG)
    return reducer.apply(match, username, action_id)
