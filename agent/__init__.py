"""Belief-driven decision core for a Wumpus cave agent.

The package is organised leaf-first: positions and headings, the sparse
belief model, danger estimation, route planning, action compilation, goal
selection and finally the per-step control loop in :mod:`agent.controller`.
"""

from __future__ import annotations

from .actions import Action, Percept
from .belief import BeliefCell, WorldBelief
from .config import AgentConfig, Bounds
from .controller import AgentState, WumpusAgent
from .directions import Heading
from .goals import NoApplicableGoalError, PlanningError
from .position import Position

__all__ = [
    "Action",
    "Percept",
    "BeliefCell",
    "WorldBelief",
    "AgentConfig",
    "Bounds",
    "AgentState",
    "WumpusAgent",
    "Heading",
    "NoApplicableGoalError",
    "PlanningError",
    "Position",
]
