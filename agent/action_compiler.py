"""Turn a route into primitive actions.

For each step of the route the compiler rotates towards the direction of
travel using whichever of left or right turns is shorter, then moves forward.
The compiler is pure: it neither reads nor mutates the belief model.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from .actions import Action
from .directions import Heading, required_left_turns, required_right_turns
from .position import Position


def rotation_actions(current: Heading, target: Heading) -> List[Action]:
    """Cheapest turn sequence from ``current`` to ``target``.

    Right turns win a two-turn tie.
    """
    left = required_left_turns(current, target)
    right = required_right_turns(current, target)
    if right <= left:
        return [Action.TURN_RIGHT] * right
    return [Action.TURN_LEFT] * left


def compile_path_with_heading(
    start: Position,
    path: Sequence[Position],
    heading: Heading,
) -> Tuple[List[Action], Heading]:
    """Compile ``path`` and also report the heading after the last move.

    Raises ``ValueError`` if two consecutive cells are not adjacent.
    """
    actions: List[Action] = []
    last = start
    for cell in path:
        direction = last.heading_to(cell)
        actions.extend(rotation_actions(heading, direction))
        heading = direction
        actions.append(Action.MOVE_FORWARD)
        last = cell
    return actions, heading


def compile_path(start: Position, path: Sequence[Position], heading: Heading) -> List[Action]:
    """Return the actions that walk ``path`` from ``start`` facing ``heading``."""
    actions, _ = compile_path_with_heading(start, path, heading)
    return actions


__all__ = ["rotation_actions", "compile_path", "compile_path_with_heading"]
