"""
CyberDuel - Turn-based PVP match engine for the security dashboard.

An attacker and a defender trade catalog actions until one side's
system integrity is driven to zero. The engine provides:
- Action catalog per role
- Match lifecycle (matchmaking, snapshots, return to lobby)
- Deterministic action resolution
- Snapshot push to subscribers
- An autonomous opponent
"""

__version__ = "0.1.0"
