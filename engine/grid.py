"""Tile grid, bounds, distance and discovery logic for Emberhymn Server."""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from config import DISCOVERY_RADIUS
from models.dungeon import TileType

if TYPE_CHECKING:
    from models.dungeon import Level


def create_tile_grid(width: int, height: int, fill: TileType = TileType.WALL) -> list[list[TileType]]:
    """Initialize a grid of a single tile type.

    Args:
        width: Number of columns.
        height: Number of rows.
        fill: Tile every cell starts as.

    Returns:
        A 2D list indexed as grid[y][x].
    """
    return [[fill for _ in range(width)] for _ in range(height)]


def create_discovery_grid(width: int, height: int) -> list[list[bool]]:
    """Initialize an all-undiscovered fog-of-war grid, indexed [y][x]."""
    return [[False for _ in range(width)] for _ in range(height)]


def in_bounds(x: int, y: int, width: int, height: int) -> bool:
    """Check if coordinates are within grid bounds."""
    return 0 <= x < width and 0 <= y < height


def euclidean_distance(pos1: tuple[int, int], pos2: tuple[int, int]) -> float:
    """Straight-line distance in tiles."""
    return math.hypot(pos1[0] - pos2[0], pos1[1] - pos2[1])


def manhattan_distance(pos1: tuple[int, int], pos2: tuple[int, int]) -> int:
    """Taxicab distance in tiles."""
    return abs(pos1[0] - pos2[0]) + abs(pos1[1] - pos2[1])


def sign(n: int) -> int:
    """Return -1, 0, or 1 based on the sign of n."""
    if n > 0:
        return 1
    if n < 0:
        return -1
    return 0


def is_blocked(level: Level, x: int, y: int) -> bool:
    """True if (x, y) is off the grid or a wall."""
    if not in_bounds(x, y, level.width, level.height):
        return True
    return level.tiles[y][x] == TileType.WALL


def reveal_area(level: Level, center: tuple[int, int], radius: int = DISCOVERY_RADIUS) -> int:
    """Mark every tile in the square block around center as discovered.

    The block spans (2 * radius + 1) tiles per side and is clipped to the grid.

    Args:
        level: The level whose discovered grid is mutated in place.
        center: (x, y) at the middle of the block.
        radius: Half-width of the block.

    Returns:
        How many tiles were newly discovered.
    """
    cx, cy = center
    newly = 0
    for y in range(max(0, cy - radius), min(level.height, cy + radius + 1)):
        row = level.discovered[y]
        for x in range(max(0, cx - radius), min(level.width, cx + radius + 1)):
            if not row[x]:
                row[x] = True
                newly += 1
    return newly


def count_tiles(tiles: list[list[TileType]], tile_type: TileType) -> int:
    """Count cells of a given type."""
    return sum(1 for row in tiles for tile in row if tile == tile_type)
