"""The agent's sparse model of the cave.

Cells are created lazily as the agent discovers them and are never removed.
Adjacency is always recomputed from coordinates; cells do not reference each
other.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Set

import structlog

from .config import Bounds
from .position import Position

log = structlog.get_logger()


@dataclass
class BeliefCell:
    """What the agent has inferred about a single cell.

    Sensory flags are only meaningful once ``visited`` is set; a cell that is
    merely adjacent to a visited one carries no cues.
    """

    position: Position
    visited: bool = False
    is_wall: bool = False
    has_stench: bool = False
    has_breeze: bool = False
    has_goal_item: bool = False


class WorldBelief:
    """Mapping of :class:`Position` to :class:`BeliefCell`.

    Iteration order is discovery order, which keeps every tie-break in the
    planner and goal selection reproducible.
    """

    def __init__(self, bounds: Optional[Bounds] = None):
        self.bounds: Optional[Bounds] = bounds
        self._cells: Dict[Position, BeliefCell] = {}
        self.wumpus_eliminated: bool = False
        self._wumpus_cleared: Set[Position] = set()

    def __contains__(self, pos: Position) -> bool:
        return pos in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[BeliefCell]:
        return iter(list(self._cells.values()))

    def positions(self) -> List[Position]:
        return list(self._cells)

    def cell_at(self, pos: Position) -> Optional[BeliefCell]:
        return self._cells.get(pos)

    def ensure_cell(self, pos: Position) -> BeliefCell:
        """Return the cell at ``pos``, creating a default one if needed.

        Cells outside the arena bounds are created as walls.
        """
        cell = self._cells.get(pos)
        if cell is None:
            is_wall = self.bounds is not None and not self.bounds.contains(pos.x, pos.y)
            cell = BeliefCell(pos, is_wall=is_wall)
            self._cells[pos] = cell
            log.debug("Cell discovered", pos=tuple(pos), is_wall=is_wall)
        return cell

    def ensure_neighbors(self, pos: Position) -> None:
        for neighbor in pos.neighbors():
            self.ensure_cell(neighbor)

    def apply_sensor_report(
        self,
        pos: Position,
        stench: bool,
        breeze: bool,
        has_goal_item: bool,
    ) -> BeliefCell:
        """Record what the agent senses while standing on ``pos``.

        Flags are overwritten, not accumulated: the current reading is the
        truth for that cell.
        """
        cell = self.ensure_cell(pos)
        cell.visited = True
        cell.has_stench = stench
        cell.has_breeze = breeze
        cell.has_goal_item = has_goal_item
        return cell

    def mark_wall(self, pos: Position) -> BeliefCell:
        cell = self.ensure_cell(pos)
        if not cell.is_wall:
            log.info("Wall detected", pos=tuple(pos))
        cell.is_wall = True
        return cell

    def mark_wumpus_eliminated(self) -> None:
        """The wumpus is dead; stench no longer indicates danger anywhere."""
        if not self.wumpus_eliminated:
            log.info("Wumpus eliminated")
        self.wumpus_eliminated = True

    def clear_wumpus_at(self, pos: Position) -> None:
        """A missed shot proved ``pos`` holds no wumpus."""
        self._wumpus_cleared.add(pos)
        log.info("Cell cleared of wumpus", pos=tuple(pos))

    def wumpus_cleared(self, pos: Position) -> bool:
        return self.wumpus_eliminated or pos in self._wumpus_cleared

    def visited_positions(self) -> List[Position]:
        return [pos for pos, cell in self._cells.items() if cell.visited]

    def frontier(self) -> List[Position]:
        """Known cells that are neither visited nor walls."""
        return [
            pos
            for pos, cell in self._cells.items()
            if not cell.visited and not cell.is_wall
        ]


__all__ = ["BeliefCell", "WorldBelief"]
