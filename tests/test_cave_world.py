import os
import sys

import numpy as np
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from agent.actions import Action
from agent.directions import Heading
from agent.position import Position
from world.cave import TILE_ID_PIT, CaveMap, CaveWorld

CLASSIC = [
    "...P",
    "WGP.",
    "....",
    "A.P.",
]


def test_layout_is_parsed_north_row_first():
    cave = CaveMap.from_layout(CLASSIC)
    assert (cave.width, cave.height) == (4, 4)
    assert cave.start == Position(0, 0)
    assert cave.wumpus == Position(0, 2)
    assert cave.gold == Position(1, 2)
    assert cave.tiles[0, 2] == TILE_ID_PIT
    assert cave.tiles[3, 3] == TILE_ID_PIT
    assert np.count_nonzero(cave.tiles == TILE_ID_PIT) == 3


def test_bad_layouts_are_rejected():
    with pytest.raises(ValueError):
        CaveMap.from_layout([])
    with pytest.raises(ValueError):
        CaveMap.from_layout(["..", "..."])
    with pytest.raises(ValueError):
        CaveMap.from_layout([".X"])
    with pytest.raises(ValueError):
        CaveMap(0, 3)


def test_percepts_report_neighbouring_hazards():
    world = CaveWorld(CaveMap.from_layout(CLASSIC))
    start = world.percept()
    assert not (start.stench or start.breeze or start.glitter or start.bump)
    assert start.last_action is None

    percept = world.execute(Action.MOVE_FORWARD)
    assert world.position == Position(1, 0)
    assert percept.breeze
    assert not percept.stench
    assert percept.last_action is Action.MOVE_FORWARD


def test_bump_at_the_edge():
    world = CaveWorld(CaveMap.from_layout(CLASSIC))
    world.execute(Action.TURN_RIGHT)
    percept = world.execute(Action.MOVE_FORWARD)
    assert percept.bump
    assert world.position == Position(0, 0)
    assert world.heading is Heading.SOUTH


def test_walking_into_a_pit_is_fatal():
    world = CaveWorld(CaveMap.from_layout(CLASSIC))
    world.execute(Action.MOVE_FORWARD)
    world.execute(Action.MOVE_FORWARD)
    assert not world.alive
    assert world.done
    with pytest.raises(ValueError):
        world.execute(Action.TURN_LEFT)


def test_arrow_kills_wumpus_in_line():
    world = CaveWorld(CaveMap.from_layout(CLASSIC))
    world.execute(Action.TURN_LEFT)
    percept = world.execute(Action.FIRE)
    assert percept.scream
    assert percept.remaining_projectiles == 0
    assert not world.wumpus_alive
    assert world.score == -12
    # no projectiles left: firing again does nothing
    assert not world.execute(Action.FIRE).scream


def test_dead_wumpus_still_stinks_but_is_harmless():
    world = CaveWorld(CaveMap.from_layout(CLASSIC))
    world.execute(Action.TURN_LEFT)
    world.execute(Action.FIRE)
    world.execute(Action.MOVE_FORWARD)
    percept = world.execute(Action.MOVE_FORWARD)
    assert world.position == Position(0, 2)
    assert world.alive
    assert percept.stench


def test_leaving_with_gold_scores():
    cave = CaveMap.from_layout(["AG"])
    world = CaveWorld(cave)
    assert world.execute(Action.MOVE_FORWARD).glitter
    assert not world.execute(Action.GRAB).glitter
    world.execute(Action.END_EPISODE)
    assert not world.exited
    world.execute(Action.TURN_LEFT)
    world.execute(Action.TURN_LEFT)
    world.execute(Action.MOVE_FORWARD)
    world.execute(Action.END_EPISODE)
    assert world.exited
    assert world.has_gold
    assert world.score == 1000 - 7
