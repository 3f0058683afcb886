"""
Bots module - Autonomous opponent strategies.

Provides:
- OpponentPolicy: Interface for choosing the opponent's action
- RandomPolicy: Uniform choice among affordable actions
- FirstAffordablePolicy: Deterministic choice for tests
"""

from .policy import OpponentPolicy, OpponentStrategy, RandomPolicy, FirstAffordablePolicy

__all__ = [
    "OpponentPolicy",
    "OpponentStrategy",
    "RandomPolicy",
    "FirstAffordablePolicy",
]
