"""
Pytest fixtures for CyberDuel tests.
"""

import pytest

from ..api.service import PvpService
from ..bots import FirstAffordablePolicy
from ..config import Settings
from ..engine_core.catalog import DEFAULT_CATALOG, ActionCatalog
from ..engine_core.reducer import Reducer
from ..engine_core.state import Match, PlayerProfile, PlayerState, Role
from ..session import ActionResolver, MatchStore, UpdateNotifier


HUMAN = "Cipher007"
BOT = "Firewall"


@pytest.fixture
def catalog() -> ActionCatalog:
    return DEFAULT_CATALOG


@pytest.fixture
def reducer(catalog) -> Reducer:
    return Reducer(catalog=catalog)


@pytest.fixture
def attacker_profile() -> PlayerProfile:
    return PlayerProfile(username=HUMAN, role=Role.ATTACKER, level=7, xp=420)


@pytest.fixture
def defender_profile() -> PlayerProfile:
    return PlayerProfile(username=BOT, role=Role.DEFENDER, level=14, xp=100)


@pytest.fixture
def match(attacker_profile, defender_profile) -> Match:
    """Fresh match, human attacker to act, bot defender."""
    return Match.create(
        PlayerState(profile=attacker_profile, is_human=True),
        PlayerState(profile=defender_profile, is_human=False),
        match_id="match-test",
    )


@pytest.fixture
def bot_first_match(attacker_profile, defender_profile) -> Match:
    """Fresh match where the bot defender acts first."""
    return Match.create(
        PlayerState(profile=defender_profile, is_human=False),
        PlayerState(profile=attacker_profile, is_human=True),
        match_id="match-bot-first",
    )


@pytest.fixture
def store() -> MatchStore:
    return MatchStore()


@pytest.fixture
def notifier() -> UpdateNotifier:
    return UpdateNotifier()


@pytest.fixture
def resolver(store, reducer, notifier) -> ActionResolver:
    return ActionResolver(store, reducer, notifier)


@pytest.fixture
def fast_settings() -> Settings:
    """Settings with timers short enough for tests."""
    return Settings(
        matchmaking_delay=0.0,
        opponent_interval=0.01,
        submit_latency=0.0,
    )


@pytest.fixture
def service(fast_settings) -> PvpService:
    return PvpService(settings=fast_settings, strategy=FirstAffordablePolicy())
