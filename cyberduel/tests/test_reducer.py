"""
Tests for the reducer (action resolution).

Tests:
- Costs, damage, defense and healing
- Clamping
- Turn handoff and energy regeneration
- Win detection
- Rejections leave the match untouched
"""

import random

import pytest

from ..engine_core.action import RejectionReason
from ..engine_core.catalog import ActionCatalog, ActionDef, DEFAULT_CATALOG
from ..engine_core.reducer import Reducer, apply_action
from ..engine_core.state import Match, MatchStatus, PlayerProfile, PlayerState, Role, MAX_INTEGRITY
from ..errors import InvalidActionError
from .conftest import HUMAN, BOT


class TestResolution:
    """Successful actions."""

    def test_phishing_email_scenario(self, match, reducer):
        """Too-expensive action is rejected, then a cheap one resolves."""
        before = match.clone()
        result = reducer.apply(match, HUMAN, "sql_injection")

        assert not result.success
        assert result.reason == RejectionReason.INSUFFICIENT_ENERGY
        assert match == before

        result = reducer.apply(match, HUMAN, "phishing_email")

        assert result.success
        assert match.get_player(BOT).system_integrity == 90
        assert match.get_player(HUMAN).energy == 3
        assert match.current_turn == BOT
        assert match.turn_number == 2
        assert match.get_player(BOT).energy == 9

    def test_log_entries_in_order(self, match, reducer):
        result = reducer.apply(match, HUMAN, "phishing_email")

        texts = [e.text for e in result.log_entries]
        assert texts == [
            f"{HUMAN} uses Phishing Email.",
            f"Phishing Email deals 10 damage to {BOT}.",
            f"It is now {BOT}'s turn.",
        ]
        assert match.log[-3:] == result.log_entries

    def test_turn_handoff_entry_stamped_with_new_turn(self, match, reducer):
        result = reducer.apply(match, HUMAN, "phishing_email")
        assert [e.turn for e in result.log_entries] == [1, 1, 2]

    def test_defense_heals_actor(self, match, reducer):
        reducer.apply(match, HUMAN, "ddos_swarm")
        result = reducer.apply(match, BOT, "firewall_update")

        assert result.success
        assert match.get_player(BOT).system_integrity == 90
        assert "restores 10 integrity" in result.log_entries[1].text

    def test_energy_regen_capped(self, match, reducer):
        match.get_player(BOT).energy = 8
        reducer.apply(match, HUMAN, "phishing_email")
        assert match.get_player(BOT).energy == 10

    def test_regen_only_for_next_player(self, match, reducer):
        reducer.apply(match, HUMAN, "phishing_email")
        assert match.get_player(HUMAN).energy == 3

    def test_heal_clamped_at_max(self, attacker_profile):
        """A self-heal past 100 clamps to 100."""
        field_patch = ActionDef(
            id="field_patch", name="Field Patch", description="Attacker-side heal.",
            cost=4, damage=-20, defense=0, role=attacker_profile.role,
        )
        catalog = ActionCatalog(list(DEFAULT_CATALOG) + [field_patch])
        match = Match.create(
            PlayerState(profile=attacker_profile, system_integrity=90),
            PlayerState(profile=PlayerProfile(BOT, Role.DEFENDER), is_human=False),
        )

        result = apply_action(match, HUMAN, "field_patch", catalog=catalog)

        assert result.success
        assert match.get_player(HUMAN).system_integrity == MAX_INTEGRITY
        assert "Field Patch restores 20 integrity." in [e.text for e in result.log_entries]

    def test_honeypot_damages_and_heals(self, bot_first_match, reducer):
        """Damage and defense both apply when an action has both."""
        match = bot_first_match
        match.get_player(BOT).system_integrity = 50
        match.get_player(BOT).energy = 7

        result = reducer.apply(match, BOT, "honeypot_deploy")

        assert result.success
        assert match.get_player(HUMAN).system_integrity == 85
        assert match.get_player(BOT).system_integrity == 65
        assert match.get_player(BOT).energy == 0
        assert len(result.log_entries) == 4


class TestWinDetection:
    """Matches end when the opponent's integrity reaches zero."""

    def test_lethal_damage_finishes_match(self, match, reducer):
        match.get_player(BOT).system_integrity = 15

        result = reducer.apply(match, HUMAN, "ddos_swarm")

        assert result.success
        assert result.winner == HUMAN
        assert match.get_player(BOT).system_integrity == 0
        assert match.status == MatchStatus.FINISHED
        assert match.winner == HUMAN
        assert match.current_turn == HUMAN
        assert match.turn_number == 1
        assert match.log[-1].text == f"{BOT}'s system is compromised! {HUMAN} wins!"

    def test_no_energy_granted_on_win(self, match, reducer):
        match.get_player(BOT).system_integrity = 5
        energy_before = match.get_player(BOT).energy
        reducer.apply(match, HUMAN, "phishing_email")
        assert match.get_player(BOT).energy == energy_before

    def test_exact_zero_wins(self, match, reducer):
        match.get_player(BOT).system_integrity = 10
        result = reducer.apply(match, HUMAN, "phishing_email")
        assert result.winner == HUMAN

    def test_actor_wins_even_at_zero_integrity(self, match, reducer):
        match.get_player(HUMAN).system_integrity = 0
        match.get_player(BOT).system_integrity = 10

        result = reducer.apply(match, HUMAN, "phishing_email")

        assert result.winner == HUMAN
        assert match.winner == HUMAN

    def test_finished_match_rejects_everything(self, match, reducer):
        match.get_player(BOT).system_integrity = 10
        reducer.apply(match, HUMAN, "phishing_email")
        before = match.clone()

        for username in (HUMAN, BOT):
            result = reducer.apply(match, username, "phishing_email")
            assert result.reason == RejectionReason.MATCH_FINISHED

        assert match == before


class TestRejections:
    """Rejected submissions never mutate the match."""

    def test_wrong_turn_rejected(self, match, reducer):
        before = match.clone()
        result = reducer.apply(match, BOT, "firewall_update")

        assert not result.success
        assert result.reason == RejectionReason.NOT_YOUR_TURN
        assert match == before

    def test_unknown_player_rejected(self, match, reducer):
        result = reducer.apply(match, "mallory", "phishing_email")
        assert result.reason == RejectionReason.NOT_YOUR_TURN

    def test_other_factions_action_rejected(self, match, reducer):
        before = match.clone()
        result = reducer.apply(match, HUMAN, "firewall_update")

        assert result.reason == RejectionReason.ROLE_MISMATCH
        assert match == before

    def test_unknown_action_raises_without_mutation(self, match, reducer):
        before = match.clone()
        with pytest.raises(InvalidActionError):
            reducer.apply(match, HUMAN, "zero_day")
        assert match == before

    def test_rejection_has_message(self, match, reducer):
        result = reducer.apply(match, HUMAN, "rootkit_install")
        assert "10 energy" in result.message


class TestInvariants:
    """Properties that hold over arbitrary sequences of play."""

    @pytest.mark.parametrize("seed", range(20))
    def test_random_play_keeps_invariants(self, match, seed):
        rng = random.Random(seed)
        reducer = Reducer(catalog=DEFAULT_CATALOG)
        last_turn = match.turn_number

        for _ in range(200):
            if match.is_finished:
                break
            actor = match.current_turn
            player = match.current_player
            # Mix valid choices with wrong-turn and unaffordable ones
            action = rng.choice(DEFAULT_CATALOG.actions_for(player.role))
            username = actor if rng.random() > 0.1 else match.opponent_of(actor).username

            before = match.clone()
            result = reducer.apply(match, username, action.id)

            for p in match.players:
                assert 0 <= p.system_integrity <= 100
                assert 0 <= p.energy <= p.max_energy

            if not result.success:
                assert match == before
                continue

            if match.is_finished:
                assert match.winner == actor
                assert match.opponent_of(actor).system_integrity == 0
                assert match.turn_number == last_turn
            else:
                assert match.current_turn == match.opponent_of(actor).username
                assert match.turn_number == last_turn + 1
            last_turn = match.turn_number

        turns = [e.turn for e in match.log]
        assert turns == sorted(turns)
        assert match.current_turn in match.usernames
