"""Danger estimation over the belief model.

Scores are recomputed on every call because the belief model changes between
steps. Each hazard is scored independently in steps of ``cue_weight`` (one
per neighbouring visited cell reporting the cue), capped naturally at four
neighbours.

A visited, non-wall neighbour that does *not* report the cue is conclusive:
any hazard in the queried cell would have been sensed there, so the score is
zero regardless of what other neighbours report.
"""

from __future__ import annotations

from typing import Optional

import numpy as np
import structlog

from .belief import WorldBelief
from .config import AgentConfig, Bounds
from .position import Position

log = structlog.get_logger()

_DEFAULT_CONFIG = AgentConfig()


def _hazard_score(belief: WorldBelief, pos: Position, cue: str, weight: int) -> int:
    cell = belief.cell_at(pos)
    if cell is not None and cell.visited:
        return 0
    score = 0
    for neighbor_pos in pos.neighbors():
        neighbor = belief.cell_at(neighbor_pos)
        if neighbor is None or not neighbor.visited:
            continue
        if getattr(neighbor, cue):
            score += weight
        elif not neighbor.is_wall:
            return 0
    return score


def wumpus_score(belief: WorldBelief, pos: Position, config: AgentConfig = _DEFAULT_CONFIG) -> int:
    if belief.wumpus_cleared(pos):
        return 0
    return _hazard_score(belief, pos, "has_stench", config.cue_weight)


def pit_score(belief: WorldBelief, pos: Position, config: AgentConfig = _DEFAULT_CONFIG) -> int:
    return _hazard_score(belief, pos, "has_breeze", config.cue_weight)


def danger_estimate(belief: WorldBelief, pos: Position, config: AgentConfig = _DEFAULT_CONFIG) -> int:
    """Combined wumpus + pit score used for routing and goal thresholds."""
    return wumpus_score(belief, pos, config) + pit_score(belief, pos, config)


def is_explorable(belief: WorldBelief, pos: Position, config: AgentConfig = _DEFAULT_CONFIG) -> bool:
    return danger_estimate(belief, pos, config) <= config.acceptable_danger


def is_shoot_candidate(belief: WorldBelief, pos: Position, config: AgentConfig = _DEFAULT_CONFIG) -> bool:
    """True when a wumpus is likely enough at ``pos`` to justify a shot.

    The pit score must stay low as well, otherwise the neighbouring firing
    position is itself not safe to stand on.
    """
    return (
        wumpus_score(belief, pos, config) >= config.acceptable_shoot
        and pit_score(belief, pos, config) < config.acceptable_pit
    )


def danger_grid(
    belief: WorldBelief,
    bounds: Optional[Bounds] = None,
    config: AgentConfig = _DEFAULT_CONFIG,
) -> np.ndarray:
    """Return a ``(height, width)`` array of danger estimates.

    Row ``0`` corresponds to ``bounds.min_y``. Cells the agent has not
    discovered are ``-1``. When ``bounds`` is omitted the belief's own bounds
    are used, falling back to the bounding box of all known cells.
    """
    bounds = bounds or belief.bounds
    if bounds is None:
        positions = belief.positions()
        if not positions:
            return np.zeros((0, 0), dtype=np.int16)
        xs = [p.x for p in positions]
        ys = [p.y for p in positions]
        bounds = Bounds(min(xs), min(ys), max(xs), max(ys))

    grid = np.full((bounds.height, bounds.width), -1, dtype=np.int16)
    for cell in belief:
        x, y = cell.position
        if not bounds.contains(x, y):
            continue
        grid[y - bounds.min_y, x - bounds.min_x] = danger_estimate(
            belief, cell.position, config
        )
    log.debug("Danger grid generated", shape=grid.shape)
    return grid


__all__ = [
    "wumpus_score",
    "pit_score",
    "danger_estimate",
    "is_explorable",
    "is_shoot_candidate",
    "danger_grid",
]
