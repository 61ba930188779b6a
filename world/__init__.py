"""Headless cave simulation used to drive the agent in tests and from the CLI."""

from .cave import TILE_ID_EMPTY, TILE_ID_PIT, CaveMap, CaveWorld

__all__ = ["TILE_ID_EMPTY", "TILE_ID_PIT", "CaveMap", "CaveWorld"]
