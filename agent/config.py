"""Tunable agent parameters.

Values mirror the ``agent`` section of ``config/config.yaml``. Every key is
optional; missing keys fall back to the module defaults below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Final, Optional

import structlog

log = structlog.get_logger()

ACCEPTABLE_DANGER: Final[int] = 25
ACCEPTABLE_SHOOT: Final[int] = 50
ACCEPTABLE_PIT: Final[int] = 50
HAZARD_CUE_WEIGHT: Final[int] = 25

ROUTE_COST_UNIFORM: Final[str] = "uniform"
ROUTE_COST_PREFER_UNEXPLORED: Final[str] = "prefer_unexplored"
ROUTE_COST_POLICIES: Final[tuple[str, ...]] = (
    ROUTE_COST_UNIFORM,
    ROUTE_COST_PREFER_UNEXPLORED,
)


@dataclass(frozen=True)
class Bounds:
    """Inclusive rectangle of cells known to lie inside the arena."""

    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @classmethod
    def from_size(cls, width: int, height: int, origin_x: int = 0, origin_y: int = 0) -> "Bounds":
        if width <= 0 or height <= 0:
            raise ValueError("Arena width and height must be positive integers.")
        return cls(origin_x, origin_y, origin_x + width - 1, origin_y + height - 1)

    @property
    def width(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height(self) -> int:
        return self.max_y - self.min_y + 1

    def contains(self, x: int, y: int) -> bool:
        return self.min_x <= x <= self.max_x and self.min_y <= y <= self.max_y


@dataclass(frozen=True)
class AgentConfig:
    acceptable_danger: int = ACCEPTABLE_DANGER
    acceptable_shoot: int = ACCEPTABLE_SHOOT
    acceptable_pit: int = ACCEPTABLE_PIT
    cue_weight: int = HAZARD_CUE_WEIGHT
    route_cost_policy: str = ROUTE_COST_UNIFORM
    projectiles: int = 1
    bounds: Optional[Bounds] = None

    def __post_init__(self):
        if self.route_cost_policy not in ROUTE_COST_POLICIES:
            raise ValueError(
                f"Unknown route cost policy '{self.route_cost_policy}', "
                f"expected one of {ROUTE_COST_POLICIES}."
            )
        if self.projectiles < 0:
            raise ValueError("Starting projectile count cannot be negative.")

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "AgentConfig":
        """Build a config from a parsed YAML mapping."""
        data = data or {}
        bounds = None
        arena = data.get("arena")
        if arena:
            bounds = Bounds.from_size(
                int(arena["width"]),
                int(arena["height"]),
                int(arena.get("origin_x", 0)),
                int(arena.get("origin_y", 0)),
            )
        config = cls(
            acceptable_danger=int(data.get("acceptable_danger", ACCEPTABLE_DANGER)),
            acceptable_shoot=int(data.get("acceptable_shoot", ACCEPTABLE_SHOOT)),
            acceptable_pit=int(data.get("acceptable_pit", ACCEPTABLE_PIT)),
            cue_weight=int(data.get("cue_weight", HAZARD_CUE_WEIGHT)),
            route_cost_policy=str(data.get("route_cost_policy", ROUTE_COST_UNIFORM)),
            projectiles=int(data.get("projectiles", 1)),
            bounds=bounds,
        )
        log.debug("Agent config built", config=config)
        return config


__all__ = [
    "ACCEPTABLE_DANGER",
    "ACCEPTABLE_SHOOT",
    "ACCEPTABLE_PIT",
    "HAZARD_CUE_WEIGHT",
    "ROUTE_COST_UNIFORM",
    "ROUTE_COST_PREFER_UNEXPLORED",
    "AgentConfig",
    "Bounds",
]
