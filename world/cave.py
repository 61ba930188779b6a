# world/cave.py
from typing import Final, List, Optional, Sequence

import numpy as np
import structlog

from agent.actions import Action, Percept
from agent.directions import Heading, turn_left, turn_right
from agent.position import Position

log = structlog.get_logger()

TILE_ID_EMPTY: Final[int] = 0
TILE_ID_PIT: Final[int] = 1

SCORE_ACTION: Final[int] = -1
SCORE_FIRE: Final[int] = -10
SCORE_DEATH: Final[int] = -1000
SCORE_GOLD_EXIT: Final[int] = 1000

LAYOUT_CHARS: Final[str] = ".PWGA"


class CaveMap:
    def __init__(self, width: int, height: int):
        """
        Initializes an empty cave. ``tiles`` is indexed ``[y, x]`` with
        ``y = 0`` the southern-most row.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid cave dimensions", width=width, height=height)
            raise ValueError("Cave width and height must be positive integers.")
        self._width = width
        self._height = height
        self.tiles: np.ndarray = np.full(
            (height, width), fill_value=TILE_ID_EMPTY, dtype=np.uint8, order="C"
        )
        self.wumpus: Optional[Position] = None
        self.gold: Optional[Position] = None
        self.start: Position = Position(0, 0)
        self.start_heading: Heading = Heading.EAST

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self._width and 0 <= y < self._height

    def is_pit(self, pos: Position) -> bool:
        return self.in_bounds(pos.x, pos.y) and self.tiles[pos.y, pos.x] == TILE_ID_PIT

    def add_pit(self, pos: Position) -> None:
        if not self.in_bounds(pos.x, pos.y):
            raise ValueError(f"Pit position {tuple(pos)} is outside the cave.")
        self.tiles[pos.y, pos.x] = TILE_ID_PIT

    def adjacent(self, pos: Position) -> List[Position]:
        return [n for n in pos.neighbors() if self.in_bounds(n.x, n.y)]

    @classmethod
    def from_layout(cls, rows: Sequence[str], start_heading: Heading = Heading.EAST) -> "CaveMap":
        """Build a cave from ASCII rows, northern-most row first.

        ``.`` empty, ``P`` pit, ``W`` wumpus, ``G`` gold, ``A`` agent start.
        """
        if not rows:
            raise ValueError("Cave layout must contain at least one row.")
        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise ValueError("All cave layout rows must have the same length.")

        cave = cls(width, len(rows))
        cave.start_heading = start_heading
        for row_index, row in enumerate(rows):
            y = len(rows) - 1 - row_index
            for x, char in enumerate(row):
                if char not in LAYOUT_CHARS:
                    raise ValueError(f"Unknown cave layout character '{char}' at ({x}, {y}).")
                pos = Position(x, y)
                if char == "P":
                    cave.add_pit(pos)
                elif char == "W":
                    cave.wumpus = pos
                elif char == "G":
                    cave.gold = pos
                elif char == "A":
                    cave.start = pos
        log.info(
            "Cave layout parsed",
            width=width,
            height=len(rows),
            pits=int(np.count_nonzero(cave.tiles == TILE_ID_PIT)),
            wumpus=tuple(cave.wumpus) if cave.wumpus else None,
            gold=tuple(cave.gold) if cave.gold else None,
        )
        return cave


class CaveWorld:
    """Deterministic Wumpus cave that turns actions into percepts.

    The wumpus keeps stinking after it dies; walking into its cell is only
    fatal while it is alive.
    """

    def __init__(self, cave_map: CaveMap, projectiles: int = 1):
        self.cave = cave_map
        self.position: Position = cave_map.start
        self.heading: Heading = cave_map.start_heading
        self.projectiles: int = projectiles
        self.wumpus_alive: bool = cave_map.wumpus is not None
        self.has_gold: bool = False
        self.alive: bool = True
        self.exited: bool = False
        self.score: int = 0
        self._bump = False
        self._scream = False
        self._last_action: Optional[Action] = None

    @property
    def done(self) -> bool:
        return not self.alive or self.exited

    def _near(self, target: Optional[Position]) -> bool:
        return target is not None and (
            target == self.position or target in self.cave.adjacent(self.position)
        )

    def percept(self) -> Percept:
        pos = self.position
        breeze = any(self.cave.is_pit(n) for n in self.cave.adjacent(pos))
        return Percept(
            stench=self._near(self.cave.wumpus),
            breeze=breeze,
            glitter=self.cave.gold == pos and not self.has_gold,
            bump=self._bump,
            scream=self._scream,
            last_action=self._last_action,
            remaining_projectiles=self.projectiles,
        )

    def _fire(self) -> None:
        if self.projectiles <= 0:
            log.debug("Fire attempted without projectiles")
            return
        self.projectiles -= 1
        self.score += SCORE_FIRE
        if not self.wumpus_alive:
            return
        pos = self.position.step(self.heading)
        while self.cave.in_bounds(pos.x, pos.y):
            if pos == self.cave.wumpus:
                self.wumpus_alive = False
                self._scream = True
                log.info("Wumpus killed", pos=tuple(pos))
                return
            pos = pos.step(self.heading)

    def _move_forward(self) -> None:
        target = self.position.step(self.heading)
        if not self.cave.in_bounds(target.x, target.y):
            self._bump = True
            return
        self.position = target
        if self.cave.is_pit(target) or (self.wumpus_alive and target == self.cave.wumpus):
            self.alive = False
            self.score += SCORE_DEATH
            log.info("Agent died", pos=tuple(target))

    def execute(self, action: Action) -> Percept:
        """Apply one action and return the resulting percept."""
        if self.done:
            raise ValueError("Cannot act in a finished episode.")
        action = Action(action)
        self._bump = False
        self._scream = False
        self.score += SCORE_ACTION

        if action is Action.MOVE_FORWARD:
            self._move_forward()
        elif action is Action.TURN_LEFT:
            self.heading = turn_left(self.heading)
        elif action is Action.TURN_RIGHT:
            self.heading = turn_right(self.heading)
        elif action is Action.GRAB:
            if self.cave.gold == self.position and not self.has_gold:
                self.has_gold = True
                log.info("Gold picked up", pos=tuple(self.position))
        elif action is Action.FIRE:
            self._fire()
        elif action is Action.END_EPISODE:
            if self.position == self.cave.start:
                self.exited = True
                if self.has_gold:
                    self.score += SCORE_GOLD_EXIT
            else:
                log.debug("End episode requested away from start", pos=tuple(self.position))

        self._last_action = action
        return self.percept()


__all__ = ["TILE_ID_EMPTY", "TILE_ID_PIT", "CaveMap", "CaveWorld"]
