"""Primitive actions and the per-step percept record.

Agents receive a :class:`Percept` every step and must answer with exactly one
:class:`Action`. Both types are deliberately free of any simulator details so
that the agent can be driven by any host environment.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Action(str, Enum):
    TURN_LEFT = "turn_left"
    TURN_RIGHT = "turn_right"
    MOVE_FORWARD = "move_forward"
    GRAB = "grab"
    FIRE = "fire"
    END_EPISODE = "end_episode"


@dataclass(frozen=True)
class Percept:
    """Sensory signals delivered to the agent for a single step.

    ``last_action`` is the action the environment executed on the previous
    step (``None`` on the first step of an episode). ``bump`` reports that a
    forward move was blocked by a wall.
    """

    stench: bool = False
    breeze: bool = False
    glitter: bool = False
    bump: bool = False
    scream: bool = False
    last_action: Optional[Action] = None
    remaining_projectiles: int = 1


__all__ = ["Action", "Percept"]
