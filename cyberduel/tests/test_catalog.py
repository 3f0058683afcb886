"""
Tests for the action catalog.
"""

import dataclasses

import pytest

from ..engine_core.catalog import ActionCatalog, ActionDef, DEFAULT_CATALOG
from ..engine_core.state import Role
from ..errors import InvalidActionError


class TestCatalogLookup:
    """Lookups by role and by id."""

    def test_actions_for_attacker_in_catalog_order(self, catalog):
        ids = [a.id for a in catalog.actions_for(Role.ATTACKER)]
        assert ids == [
            "phishing_email",
            "ddos_swarm",
            "sql_injection",
            "credential_stuffing",
            "rootkit_install",
        ]

    def test_actions_for_defender(self, catalog):
        actions = catalog.actions_for(Role.DEFENDER)
        assert len(actions) == 5
        assert all(a.role == Role.DEFENDER for a in actions)

    def test_find_by_id(self, catalog):
        action = catalog.find_by_id("sql_injection")
        assert action.cost == 6
        assert action.damage == 35

    def test_find_unknown_id_raises(self, catalog):
        with pytest.raises(InvalidActionError) as exc_info:
            catalog.find_by_id("zero_day")
        assert exc_info.value.action_id == "zero_day"
        assert "zero_day" in str(exc_info.value)

    def test_invalid_action_is_a_key_error(self, catalog):
        with pytest.raises(KeyError):
            catalog.find_by_id("zero_day")

    def test_affordable_filters_by_cost(self, catalog):
        ids = [a.id for a in catalog.affordable(Role.ATTACKER, 3)]
        assert ids == ["phishing_email", "credential_stuffing"]

    def test_affordable_with_no_energy(self, catalog):
        assert catalog.affordable(Role.DEFENDER, 0) == []


class TestCatalogDefinitions:
    """Catalog entries and construction rules."""

    def test_patch_vulnerability_is_a_heal(self):
        patch = DEFAULT_CATALOG.find_by_id("patch_vulnerability")
        assert patch.damage == -20
        assert patch.heal == 20

    def test_honeypot_has_damage_and_defense(self):
        honeypot = DEFAULT_CATALOG.find_by_id("honeypot_deploy")
        assert honeypot.damage > 0
        assert honeypot.defense > 0

    def test_actions_are_immutable(self, catalog):
        action = catalog.find_by_id("phishing_email")
        with pytest.raises(dataclasses.FrozenInstanceError):
            action.cost = 0

    def test_duplicate_ids_rejected(self):
        action = DEFAULT_CATALOG.find_by_id("phishing_email")
        with pytest.raises(ValueError, match="Duplicate"):
            ActionCatalog([action, action])

    def test_negative_cost_rejected(self):
        with pytest.raises(ValueError):
            ActionDef(
                id="free_lunch", name="Free Lunch", description="",
                cost=-1, damage=5, defense=0, role=Role.ATTACKER,
            )
