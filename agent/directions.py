"""Heading geometry used by the agent.

Headings are ordered clockwise so that a right turn is ``+1`` and a left
turn is ``-1`` modulo four.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Final, Tuple


class Heading(IntEnum):
    """Cardinal direction the agent is facing."""

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3


# (dx, dy) offsets; north is +y
OFFSETS: Final[Dict[Heading, Tuple[int, int]]] = {
    Heading.NORTH: (0, 1),
    Heading.EAST: (1, 0),
    Heading.SOUTH: (0, -1),
    Heading.WEST: (-1, 0),
}


def turn_left(heading: Heading) -> Heading:
    return Heading((heading - 1) % 4)


def turn_right(heading: Heading) -> Heading:
    return Heading((heading + 1) % 4)


def required_left_turns(source: Heading, target: Heading) -> int:
    """Number of left turns (0-3) needed to face ``target`` from ``source``."""
    return (source - target) % 4


def required_right_turns(source: Heading, target: Heading) -> int:
    """Number of right turns (0-3) needed to face ``target`` from ``source``."""
    return (target - source) % 4


def heading_for_offset(dx: int, dy: int) -> Heading:
    for heading, offset in OFFSETS.items():
        if offset == (dx, dy):
            return heading
    raise ValueError(f"Offset ({dx}, {dy}) is not a unit cardinal step.")


__all__ = [
    "Heading",
    "OFFSETS",
    "turn_left",
    "turn_right",
    "required_left_turns",
    "required_right_turns",
    "heading_for_offset",
]
