# engine/episode_loop.py
from dataclasses import dataclass, field
from typing import List, Self

import structlog

from agent.actions import Action
from agent.controller import WumpusAgent
from agent.goals import PlanningError
from world.cave import CaveWorld

log = structlog.get_logger()

OUTCOME_EXITED = "exited"
OUTCOME_DIED = "died"
OUTCOME_STEP_LIMIT = "step_limit"


@dataclass
class EpisodeResult:
    outcome: str
    steps: int
    score: int
    has_gold: bool
    actions: List[Action] = field(default_factory=list)


class EpisodeLoop:
    """
    Drives a single agent through a single cave episode: percepts from the
    world go to the agent, the agent's action goes back to the world.
    """

    def __init__(self: Self, agent: WumpusAgent, world: CaveWorld, max_steps: int = 1000):
        """
        Args:
            agent: The agent to drive. It is reset to the cave's start.
            world: The cave simulation providing percepts.
            max_steps: Hard cap on actions before the episode is abandoned.
        """
        if max_steps <= 0:
            raise ValueError("max_steps must be a positive integer.")
        self.agent = agent
        self.world = world
        self.max_steps = max_steps
        self.actions: List[Action] = []

    def step(self: Self) -> Action:
        """Run one percept/action exchange and return the action taken."""
        percept = self.world.percept()
        try:
            action = self.agent.choose_action(percept)
        except PlanningError as e:
            log.critical(
                "Agent planning failed",
                pos=tuple(self.agent.state.position),
                error=str(e),
                exc_info=True,
            )
            raise
        try:
            self.world.execute(action)
        except ValueError as e:
            log.error("World rejected action", action=action, error=str(e), exc_info=True)
            raise
        self.actions.append(action)
        return action

    def run(self: Self) -> EpisodeResult:
        cave = self.world.cave
        self.agent.reset(cave.start, cave.start_heading)
        log.info("Episode starting", start=tuple(cave.start), max_steps=self.max_steps)

        while not self.world.done and len(self.actions) < self.max_steps:
            self.step()

        if self.world.exited:
            outcome = OUTCOME_EXITED
        elif not self.world.alive:
            outcome = OUTCOME_DIED
        else:
            outcome = OUTCOME_STEP_LIMIT
            log.warning("Episode hit step limit", steps=len(self.actions))

        result = EpisodeResult(
            outcome=outcome,
            steps=len(self.actions),
            score=self.world.score,
            has_gold=self.world.has_gold,
            actions=list(self.actions),
        )
        log.info(
            "Episode finished",
            outcome=result.outcome,
            steps=result.steps,
            score=result.score,
            has_gold=result.has_gold,
        )
        return result
