"""Grid coordinates for the agent's world model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from .directions import OFFSETS, Heading, heading_for_offset


@dataclass(frozen=True, order=True)
class Position:
    """Immutable grid coordinate, equal and hashable by value."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def neighbors(self) -> List["Position"]:
        """Return the four axis-aligned neighbours (east, west, north, south)."""
        return [
            Position(self.x + 1, self.y),
            Position(self.x - 1, self.y),
            Position(self.x, self.y + 1),
            Position(self.x, self.y - 1),
        ]

    def step(self, heading: Heading) -> "Position":
        dx, dy = OFFSETS[heading]
        return Position(self.x + dx, self.y + dy)

    def manhattan(self, other: "Position") -> int:
        return abs(self.x - other.x) + abs(self.y - other.y)

    def heading_to(self, other: "Position") -> Heading:
        """Heading of travel from this position to an adjacent ``other``.

        Raises ``ValueError`` when the two positions are not Manhattan-adjacent.
        """
        return heading_for_offset(other.x - self.x, other.y - self.y)


__all__ = ["Position"]
