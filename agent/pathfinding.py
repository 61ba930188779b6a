# agent/pathfinding.py
"""Cost-aware shortest-path search over the belief model.

Routes only pass through *admissible* cells: cells the agent knows about,
that are not walls, and whose danger estimate stays below the acceptable
danger threshold. The source cell is always admissible so the agent can
plan its way out of a cell it would not otherwise enter.
"""

from __future__ import annotations

import heapq
import itertools
from typing import Dict, List, Optional, Set

import structlog

from .belief import WorldBelief
from .config import ROUTE_COST_UNIFORM, AgentConfig
from .danger import danger_estimate
from .position import Position

log = structlog.get_logger(__name__)

_DEFAULT_CONFIG = AgentConfig()


class RoutePlanner:
    """Single-source Dijkstra over the admissible part of a :class:`WorldBelief`.

    :meth:`compute` builds the distance and predecessor tables once; any
    number of :meth:`route_to` queries can then be answered from them until
    the belief model changes.
    """

    def __init__(self, belief: WorldBelief, config: AgentConfig = _DEFAULT_CONFIG):
        self.belief = belief
        self.config = config
        self.source: Optional[Position] = None
        self.distance: Dict[Position, int] = {}
        self.previous: Dict[Position, Optional[Position]] = {}
        self._admissible: Set[Position] = set()

    def is_admissible(self, pos: Position) -> bool:
        if pos == self.source:
            return True
        cell = self.belief.cell_at(pos)
        if cell is None or cell.is_wall:
            return False
        return danger_estimate(self.belief, pos, self.config) < self.config.acceptable_danger

    def _step_cost(self, pos: Position) -> int:
        if self.config.route_cost_policy == ROUTE_COST_UNIFORM:
            return 1
        # prefer_unexplored: only re-entering known ground costs anything
        cell = self.belief.cell_at(pos)
        return 1 if cell is not None and cell.visited else 0

    def compute(self, source: Position) -> "RoutePlanner":
        self.source = source
        self._admissible = {cell.position for cell in self.belief if self.is_admissible(cell.position)}
        self._admissible.add(source)

        self.distance = {source: 0}
        self.previous = {source: None}
        settled: Set[Position] = set()
        tie = itertools.count()
        pq = [(0, next(tie), source)]

        # --- Dijkstra Loop ---
        while pq:
            cost, _, pos = heapq.heappop(pq)
            if pos in settled:
                continue
            settled.add(pos)

            for neighbor in pos.neighbors():
                if neighbor not in self._admissible or neighbor in settled:
                    continue
                new_cost = cost + self._step_cost(neighbor)
                if neighbor not in self.distance or new_cost < self.distance[neighbor]:
                    self.distance[neighbor] = new_cost
                    self.previous[neighbor] = pos
                    heapq.heappush(pq, (new_cost, next(tie), neighbor))

        log.debug(
            "Route tree computed",
            source=tuple(source),
            admissible=len(self._admissible),
            reachable=len(settled),
        )
        return self

    def route_to(self, target: Position) -> Optional[List[Position]]:
        """Return cells from (exclusive) source to (inclusive) ``target``.

        ``None`` means the target cannot be reached through admissible cells.
        """
        if self.source is None:
            raise RuntimeError("compute() must be called before route_to().")
        if target not in self.previous:
            return None
        path: List[Position] = []
        current: Optional[Position] = target
        while current != self.source:
            path.append(current)
            current = self.previous[current]
        path.reverse()
        return path

    def distance_to(self, target: Position) -> Optional[int]:
        return self.distance.get(target)

    def reachable(self) -> List[Position]:
        """Every position with a route, excluding the source."""
        return [pos for pos in self.distance if pos != self.source]


def calculate_route(
    belief: WorldBelief,
    source: Position,
    target: Position,
    config: AgentConfig = _DEFAULT_CONFIG,
) -> Optional[List[Position]]:
    """Convenience wrapper for a one-off route query."""
    route = RoutePlanner(belief, config).compute(source).route_to(target)
    if route is None:
        log.debug("No route found", source=tuple(source), target=tuple(target))
    return route


__all__ = ["RoutePlanner", "calculate_route"]
