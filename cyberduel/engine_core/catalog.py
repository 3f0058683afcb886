"""
Action Catalog - The fixed set of moves each faction can make.

The catalog is built once at startup and never mutated. Lookups by
unknown id are programmer errors and raise InvalidActionError.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable

from .state import Role
from ..errors import InvalidActionError


@dataclass(frozen=True)
class ActionDef:
    """
    A catalog entry.

    damage > 0 hits the opponent, damage < 0 heals the user.
    defense > 0 also heals the user.
    """
    id: str
    name: str
    description: str
    cost: int
    damage: int
    defense: int
    role: Role

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError(f"{self.id}: cost must be non-negative")
        if self.defense < 0:
            raise ValueError(f"{self.id}: defense must be non-negative")

    @property
    def heal(self) -> int:
        """Self-heal from negative damage (0 for attacks)."""
        return -self.damage if self.damage < 0 else 0


class ActionCatalog:
    """Read-only registry of actions, kept in definition order."""

    def __init__(self, actions: Iterable[ActionDef]):
        self._actions: dict[str, ActionDef] = {}
        for action in actions:
            if action.id in self._actions:
                raise ValueError(f"Duplicate action id: {action.id}")
            self._actions[action.id] = action

    def __contains__(self, action_id: str) -> bool:
        return action_id in self._actions

    def __iter__(self):
        return iter(self._actions.values())

    def __len__(self) -> int:
        return len(self._actions)

    def actions_for(self, role: Role) -> list[ActionDef]:
        """All actions usable by a role, in catalog order."""
        return [a for a in self._actions.values() if a.role == role]

    def find_by_id(self, action_id: str) -> ActionDef:
        try:
            return self._actions[action_id]
        except KeyError:
            raise InvalidActionError(action_id) from None

    def affordable(self, role: Role, energy: int) -> list[ActionDef]:
        """Actions of `role` that cost no more than `energy`."""
        return [a for a in self.actions_for(role) if a.cost <= energy]


ATTACKER_PAYLOADS = [
    ActionDef(
        id="phishing_email",
        name="Phishing Email",
        description="A low-cost attack that deals minor damage if it bypasses filters.",
        cost=2, damage=10, defense=0, role=Role.ATTACKER,
    ),
    ActionDef(
        id="ddos_swarm",
        name="DDoS Swarm",
        description="Overwhelms the target, dealing moderate, consistent damage.",
        cost=4, damage=20, defense=0, role=Role.ATTACKER,
    ),
    ActionDef(
        id="sql_injection",
        name="SQL Injection",
        description="A precise attack that bypasses weak defenses for high damage.",
        cost=6, damage=35, defense=0, role=Role.ATTACKER,
    ),
    ActionDef(
        id="credential_stuffing",
        name="Credential Stuffing",
        description="Attempts to find a weak password. Low damage, but cheap.",
        cost=3, damage=15, defense=0, role=Role.ATTACKER,
    ),
    ActionDef(
        id="rootkit_install",
        name="Rootkit Install",
        description="Ultimate attack. Very high cost, deals devastating damage.",
        cost=10, damage=60, defense=0, role=Role.ATTACKER,
    ),
]

DEFENDER_COUNTERMEASURES = [
    ActionDef(
        id="firewall_update",
        name="Firewall Update",
        description="Basic defense. Blocks a small amount of incoming damage.",
        cost=2, damage=0, defense=10, role=Role.DEFENDER,
    ),
    ActionDef(
        id="isolate_endpoint",
        name="Isolate Endpoint",
        description="Temporarily shields the system from most attacks.",
        cost=5, damage=0, defense=30, role=Role.DEFENDER,
    ),
    ActionDef(
        id="patch_vulnerability",
        name="Patch Vulnerability",
        description="Heals system integrity by fixing a known exploit.",
        cost=4, damage=-20, defense=0, role=Role.DEFENDER,
    ),
    ActionDef(
        id="threat_intelligence_scan",
        name="Threat Intel Scan",
        description="Analyze attack patterns to gain energy for a stronger response.",
        cost=1, damage=0, defense=5, role=Role.DEFENDER,
    ),
    ActionDef(
        id="honeypot_deploy",
        name="Deploy Honeypot",
        description="Lays a trap. Blocks damage and reflects a portion back to the attacker.",
        cost=7, damage=15, defense=15, role=Role.DEFENDER,
    ),
]

DEFAULT_CATALOG = ActionCatalog(ATTACKER_PAYLOADS + DEFENDER_COUNTERMEASURES)
