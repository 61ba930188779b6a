import os
import sys

import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from agent.actions import Action
from agent.belief import WorldBelief
from agent.config import AgentConfig, Bounds
from agent.danger import danger_estimate, is_shoot_candidate, pit_score, wumpus_score
from agent.directions import Heading
from agent.goals import (
    GOALS,
    EliminateHazardGoal,
    ExploreGoal,
    NoApplicableGoalError,
    PickupGoal,
    PlanningContext,
    PlanningError,
    ReturnHomeGoal,
    select_goal,
)
from agent.position import Position


def visit(belief, x, y, stench=False, breeze=False, gold=False):
    pos = Position(x, y)
    belief.apply_sensor_report(pos, stench, breeze, gold)
    belief.ensure_neighbors(pos)
    return pos


def make_ctx(belief, position, heading=Heading.EAST, projectiles=1, start=Position(0, 0)):
    return PlanningContext(
        belief=belief,
        position=position,
        heading=heading,
        projectiles=projectiles,
        start=start,
    )


def wumpus_corner():
    """Stench on both sides of (1,1); the agent stands at (1,0) facing east."""
    belief = WorldBelief()
    visit(belief, 0, 0)
    visit(belief, 0, 1, stench=True)
    visit(belief, 1, 0, stench=True)
    return belief


def test_goal_priority_order():
    assert [goal.name for goal in GOALS] == [
        "pickup",
        "eliminate_hazard",
        "explore",
        "return_home",
    ]


def test_pickup_preempts_every_other_goal():
    belief = wumpus_corner()
    visit(belief, 1, 0, stench=True, gold=True)
    ctx = make_ctx(belief, Position(1, 0))
    assert EliminateHazardGoal().applicable(ctx)
    assert ExploreGoal().applicable(ctx)
    goal = select_goal(ctx)
    assert isinstance(goal, PickupGoal)
    assert goal.plan(ctx) == [Action.GRAB]


def test_shoot_faces_the_hazard_and_fires():
    belief = wumpus_corner()
    assert is_shoot_candidate(belief, Position(1, 1))
    ctx = make_ctx(belief, Position(1, 0))
    goal = select_goal(ctx)
    assert isinstance(goal, EliminateHazardGoal)
    assert goal.plan(ctx) == [Action.TURN_LEFT, Action.FIRE]


def test_shoot_walks_to_firing_position_first():
    belief = wumpus_corner()
    ctx = make_ctx(belief, Position(0, 0), heading=Heading.NORTH)
    plan = EliminateHazardGoal().plan(ctx)
    # (0,1) is one step north, then face east towards (1,1)
    assert plan == [Action.MOVE_FORWARD, Action.TURN_RIGHT, Action.FIRE]


def test_shoot_is_skipped_without_projectiles():
    belief = wumpus_corner()
    ctx = make_ctx(belief, Position(1, 0), projectiles=0)
    assert not EliminateHazardGoal().applicable(ctx)
    goal = select_goal(ctx)
    assert not isinstance(goal, EliminateHazardGoal)
    assert Action.FIRE not in goal.plan(ctx)


def test_explore_targets_respect_danger_threshold():
    belief = WorldBelief(Bounds.from_size(10, 10))
    visit(belief, 0, 0)
    visit(belief, 1, 0, breeze=True, stench=True)
    visit(belief, 0, 1)
    ctx = make_ctx(belief, Position(0, 1), heading=Heading.NORTH)
    goal = ExploreGoal()
    assert goal.plan(ctx) == [Action.MOVE_FORWARD]
    target = goal.target(ctx)
    assert target == Position(0, 2)
    assert danger_estimate(belief, target) <= 25
    # (2,0) is the only cell with both cues pointing at it
    assert danger_estimate(belief, Position(2, 0)) == 50


def test_explore_prefers_shortest_action_sequence():
    belief = WorldBelief()
    visit(belief, 0, 0)
    ctx = make_ctx(belief, Position(0, 0), heading=Heading.NORTH)
    assert ExploreGoal().plan(ctx) == [Action.MOVE_FORWARD]
    assert ExploreGoal().target(ctx) == Position(0, 1)


def test_explore_not_applicable_when_everything_is_risky():
    belief = WorldBelief(Bounds.from_size(4, 4))
    visit(belief, 0, 0, breeze=True)
    ctx = make_ctx(belief, Position(0, 0))
    assert not ExploreGoal().applicable(ctx)
    assert isinstance(select_goal(ctx), ReturnHomeGoal)


def test_return_home_at_start_ends_episode():
    belief = WorldBelief()
    visit(belief, 0, 0)
    ctx = make_ctx(belief, Position(0, 0))
    assert ReturnHomeGoal().plan(ctx) == [Action.END_EPISODE]


def test_return_home_walks_back_then_ends():
    belief = WorldBelief()
    visit(belief, 0, 0)
    visit(belief, 1, 0)
    visit(belief, 1, 1)
    ctx = make_ctx(belief, Position(1, 1), heading=Heading.NORTH)
    plan = ReturnHomeGoal().plan(ctx)
    assert plan[-1] is Action.END_EPISODE
    assert plan.count(Action.MOVE_FORWARD) == 2


def test_return_home_unreachable_is_fatal():
    belief = WorldBelief()
    visit(belief, 5, 5)
    ctx = make_ctx(belief, Position(5, 5), start=Position(0, 0))
    with pytest.raises(PlanningError):
        ReturnHomeGoal().plan(ctx)


def test_no_applicable_goal_is_fatal():
    belief = WorldBelief()
    visit(belief, 0, 0)
    ctx = make_ctx(belief, Position(0, 0))
    with pytest.raises(NoApplicableGoalError):
        select_goal(ctx, goals=[PickupGoal()])


def test_shoot_requires_low_pit_score():
    belief = WorldBelief()
    visit(belief, 0, 0)
    visit(belief, 0, 1, stench=True, breeze=True)
    visit(belief, 1, 0, stench=True, breeze=True)
    target = Position(1, 1)
    assert wumpus_score(belief, target) >= 50
    assert pit_score(belief, target) >= 50
    ctx = make_ctx(belief, Position(1, 0))
    assert not EliminateHazardGoal().applicable(ctx)


def test_planner_is_shared_within_one_context():
    belief = WorldBelief()
    visit(belief, 0, 0)
    ctx = make_ctx(belief, Position(0, 0), projectiles=1)
    assert ctx.planner is ctx.planner
    assert ctx.config == AgentConfig()


def two_targets(order):
    """Stench around the agent at (1,1): (0,2) and (2,2) both score 50."""
    belief = WorldBelief()
    visit(belief, 1, 1)
    for x, y in order:
        visit(belief, x, y, stench=True)
    return belief


def test_shoot_tie_goes_to_first_discovered_candidate():
    # (0,1) is visited before (2,1), so (0,2) is discovered first
    belief = two_targets([(0, 1), (1, 2), (2, 1)])
    ctx = make_ctx(belief, Position(1, 1), heading=Heading.NORTH)
    goal = EliminateHazardGoal()
    assert is_shoot_candidate(belief, Position(0, 2))
    assert is_shoot_candidate(belief, Position(2, 2))
    assert goal.target(ctx) == Position(0, 2)
    assert goal.plan(ctx) == [Action.MOVE_FORWARD, Action.TURN_LEFT, Action.FIRE]


def test_shoot_tie_follows_discovery_order_not_geometry():
    belief = two_targets([(2, 1), (1, 2), (0, 1)])
    ctx = make_ctx(belief, Position(1, 1), heading=Heading.NORTH)
    goal = EliminateHazardGoal()
    assert goal.target(ctx) == Position(2, 2)
    assert goal.plan(ctx) == [Action.MOVE_FORWARD, Action.TURN_RIGHT, Action.FIRE]


class RecordingLog:
    def __init__(self):
        self.events = []

    def info(self, event, **kw):
        self.events.append(("info", event))

    def debug(self, event, **kw):
        self.events.append(("debug", event))


def test_planned_goals_log_at_their_own_level(monkeypatch):
    recorder = RecordingLog()
    monkeypatch.setattr("agent.goals.log", recorder)
    belief = wumpus_corner()
    EliminateHazardGoal().plan(make_ctx(belief, Position(1, 0)))
    ExploreGoal().plan(make_ctx(belief, Position(1, 0)))
    assert recorder.events == [("info", "Shot planned"), ("debug", "Goal planned")]
