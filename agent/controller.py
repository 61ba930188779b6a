"""Per-step control loop for the cave agent.

Each call to :meth:`WumpusAgent.choose_action` runs the same pipeline:

    percept -> belief update -> (maybe) goal selection -> one action

Belief updates are always applied before any goal is consulted, because goal
applicability and routing read the freshly updated model.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Optional

import structlog

from .actions import Action, Percept
from .belief import WorldBelief
from .config import AgentConfig
from .directions import Heading, turn_left, turn_right
from .goals import PlanningContext, PlanningError, select_goal
from .position import Position

log = structlog.get_logger()


@dataclass
class AgentState:
    """Everything the control loop owns between steps."""

    position: Position
    heading: Heading
    projectiles: int
    plan: Deque[Action] = field(default_factory=deque)
    fire_target: Optional[Position] = None


class WumpusAgent:
    """Belief-driven agent emitting one primitive action per percept."""

    def __init__(
        self,
        start: Position = Position(0, 0),
        heading: Heading = Heading.EAST,
        config: AgentConfig | None = None,
    ):
        self.config: AgentConfig = config or AgentConfig()
        self.reset(start, heading)

    def reset(self, start: Position, heading: Heading) -> None:
        """Discard all episode state and start over at ``start``."""
        self.start: Position = start
        self.belief: WorldBelief = WorldBelief(self.config.bounds)
        self.state: AgentState = AgentState(
            position=start,
            heading=heading,
            projectiles=self.config.projectiles,
        )
        self.belief.ensure_cell(start).visited = True
        self.belief.ensure_neighbors(start)
        self.steps: int = 0
        log.info("Agent reset", start=tuple(start), heading=heading.name)

    # --- Belief Update ---
    def _update_beliefs(self, percept: Percept) -> None:
        state = self.state
        state.projectiles = percept.remaining_projectiles

        if percept.last_action is Action.MOVE_FORWARD:
            target = state.position.step(state.heading)
            if percept.bump:
                self.belief.mark_wall(target)
                if state.plan:
                    log.info("Bumped into wall, discarding plan", target=tuple(target))
                state.plan.clear()
            else:
                state.position = target
        elif percept.last_action is Action.FIRE and state.fire_target is not None:
            if percept.scream:
                self.belief.mark_wumpus_eliminated()
            else:
                self.belief.clear_wumpus_at(state.fire_target)
            state.fire_target = None

        cell = self.belief.apply_sensor_report(
            state.position, percept.stench, percept.breeze, percept.glitter
        )
        self.belief.ensure_neighbors(state.position)

        if cell.has_goal_item and state.plan and state.plan[0] is not Action.GRAB:
            log.info("Goal item sensed, preempting plan", pos=tuple(state.position))
            state.plan.clear()

    # --- Planning ---
    def _replan(self) -> None:
        state = self.state
        ctx = PlanningContext(
            belief=self.belief,
            position=state.position,
            heading=state.heading,
            projectiles=state.projectiles,
            start=self.start,
            config=self.config,
        )
        goal = select_goal(ctx)
        plan = goal.plan(ctx)
        if not plan:
            raise PlanningError(f"Goal '{goal.name}' produced an empty plan.")
        state.plan = deque(plan)
        log.debug("New plan", goal=goal.name, actions=[a.value for a in plan])

    def choose_action(self, percept: Percept) -> Action:
        """Consume one percept and return the next primitive action."""
        self._update_beliefs(percept)
        if not self.state.plan:
            self._replan()

        state = self.state
        action = state.plan.popleft()
        if action is Action.TURN_LEFT:
            state.heading = turn_left(state.heading)
        elif action is Action.TURN_RIGHT:
            state.heading = turn_right(state.heading)
        elif action is Action.FIRE:
            state.fire_target = state.position.step(state.heading)

        self.steps += 1
        log.debug(
            "Agent step",
            step=self.steps,
            pos=tuple(state.position),
            heading=state.heading.name,
            action=action.value,
            pending=len(state.plan),
        )
        return action


__all__ = ["AgentState", "WumpusAgent"]
