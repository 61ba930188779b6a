"""Fixed-priority goal selection.

Whenever the agent has no pending plan it walks :data:`GOALS` in order and
takes the first goal whose ``applicable`` check passes. Each goal then
produces a complete, compiled action sequence via ``plan``.

Priority order:

1. :class:`PickupGoal` - grab the goal item we are standing on.
2. :class:`EliminateHazardGoal` - shoot a confidently located wumpus.
3. :class:`ExploreGoal` - walk to the nearest safe undiscovered cell.
4. :class:`ReturnHomeGoal` - go back to the start and end the episode.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol, Sequence, Tuple

import structlog

from .action_compiler import compile_path
from .actions import Action
from .belief import WorldBelief
from .config import AgentConfig
from .danger import is_explorable, is_shoot_candidate
from .directions import Heading
from .pathfinding import RoutePlanner
from .position import Position

log = structlog.get_logger()


class PlanningError(RuntimeError):
    """A planning invariant was violated; the episode cannot continue."""


class NoApplicableGoalError(PlanningError):
    pass


@dataclass
class PlanningContext:
    """Snapshot of everything a goal may read during one planning event."""

    belief: WorldBelief
    position: Position
    heading: Heading
    projectiles: int
    start: Position
    config: AgentConfig = field(default_factory=AgentConfig)
    _planner: Optional[RoutePlanner] = field(default=None, init=False, repr=False)
    _memo: Dict[str, Optional[Tuple[List[Action], Position]]] = field(
        default_factory=dict, init=False, repr=False
    )

    @property
    def planner(self) -> RoutePlanner:
        """Route tree rooted at the current position, built on first use."""
        if self._planner is None:
            self._planner = RoutePlanner(self.belief, self.config).compute(self.position)
        return self._planner

    def compile(self, path: Sequence[Position]) -> List[Action]:
        return compile_path(self.position, path, self.heading)


class Goal(Protocol):
    name: str

    def applicable(self, ctx: PlanningContext) -> bool: ...

    def plan(self, ctx: PlanningContext) -> List[Action]: ...


class PickupGoal:
    name = "pickup"

    def applicable(self, ctx: PlanningContext) -> bool:
        cell = ctx.belief.cell_at(ctx.position)
        return bool(cell is not None and cell.has_goal_item)

    def plan(self, ctx: PlanningContext) -> List[Action]:
        return [Action.GRAB]


class _SearchGoal:
    """Shared plumbing for goals that search the belief model for a target.

    The search runs at most once per planning context, so ``applicable`` and
    the following ``plan`` call agree on the same target.
    """

    name = "search"

    def _search(self, ctx: PlanningContext) -> Optional[Tuple[List[Action], Position]]:
        raise NotImplementedError

    def _best(self, ctx: PlanningContext) -> Optional[Tuple[List[Action], Position]]:
        if self.name not in ctx._memo:
            ctx._memo[self.name] = self._search(ctx)
        return ctx._memo[self.name]

    def target(self, ctx: PlanningContext) -> Optional[Position]:
        best = self._best(ctx)
        return best[1] if best is not None else None

    def applicable(self, ctx: PlanningContext) -> bool:
        return self._best(ctx) is not None

    def plan(self, ctx: PlanningContext) -> List[Action]:
        best = self._best(ctx)
        if best is None:
            raise PlanningError(f"Goal '{self.name}' has no reachable target.")
        actions, target = best
        self._log_planned(target, actions)
        return list(actions)

    def _log_planned(self, target: Position, actions: List[Action]) -> None:
        log.debug("Goal planned", goal=self.name, target=tuple(target), length=len(actions))


class EliminateHazardGoal(_SearchGoal):
    """Walk next to a likely wumpus, face it and fire.

    Every (candidate cell, adjacent firing position) pair is compiled and the
    shortest resulting sequence wins; earlier-discovered candidates win ties.
    """

    name = "eliminate_hazard"

    def _log_planned(self, target: Position, actions: List[Action]) -> None:
        log.info("Shot planned", goal=self.name, target=tuple(target), length=len(actions))

    def _search(self, ctx: PlanningContext) -> Optional[Tuple[List[Action], Position]]:
        if ctx.projectiles < 1:
            return None
        best: Optional[Tuple[List[Action], Position]] = None
        for cell in ctx.belief:
            if cell.visited or cell.is_wall:
                continue
            if not is_shoot_candidate(ctx.belief, cell.position, ctx.config):
                continue
            for firing_pos in cell.position.neighbors():
                if not ctx.planner.is_admissible(firing_pos):
                    continue
                route = ctx.planner.route_to(firing_pos)
                if route is None:
                    continue
                actions = ctx.compile(route + [cell.position])
                # the last step would walk into the hazard; shoot instead
                actions[-1] = Action.FIRE
                if best is None or len(actions) < len(best[0]):
                    best = (actions, cell.position)
        return best


class ExploreGoal(_SearchGoal):
    """Route to the undiscovered safe cell with the shortest action sequence."""

    name = "explore"

    def _search(self, ctx: PlanningContext) -> Optional[Tuple[List[Action], Position]]:
        best: Optional[Tuple[List[Action], Position]] = None
        for cell in ctx.belief:
            if cell.visited or cell.is_wall:
                continue
            if not is_explorable(ctx.belief, cell.position, ctx.config):
                continue
            route = ctx.planner.route_to(cell.position)
            if route is None:
                continue
            actions = ctx.compile(route)
            if best is None or len(actions) < len(best[0]):
                best = (actions, cell.position)
        return best


class ReturnHomeGoal:
    name = "return_home"

    def applicable(self, ctx: PlanningContext) -> bool:
        return True

    def plan(self, ctx: PlanningContext) -> List[Action]:
        route = ctx.planner.route_to(ctx.start)
        if route is None:
            raise PlanningError(
                f"Start position {tuple(ctx.start)} unreachable from {tuple(ctx.position)}."
            )
        log.info("Planning return home", length=len(route))
        return ctx.compile(route) + [Action.END_EPISODE]


GOALS: Tuple[Goal, ...] = (
    PickupGoal(),
    EliminateHazardGoal(),
    ExploreGoal(),
    ReturnHomeGoal(),
)


def select_goal(ctx: PlanningContext, goals: Sequence[Goal] = GOALS) -> Goal:
    """Return the first applicable goal in priority order."""
    for goal in goals:
        if goal.applicable(ctx):
            log.debug("Goal selected", goal=goal.name, pos=tuple(ctx.position))
            return goal
    raise NoApplicableGoalError("No goal applicable; return-home should always apply.")


__all__ = [
    "PlanningError",
    "NoApplicableGoalError",
    "PlanningContext",
    "Goal",
    "PickupGoal",
    "EliminateHazardGoal",
    "ExploreGoal",
    "ReturnHomeGoal",
    "GOALS",
    "select_goal",
]
