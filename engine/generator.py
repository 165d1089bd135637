"""Procedural level generation: rooms, corridors, and population."""

from __future__ import annotations

import logging
import random
from uuid import uuid4

from config import (
    CHEST_CHANCE,
    ELITE_CHANCE,
    LEVEL_HEIGHT,
    LEVEL_WIDTH,
    MAX_ENEMIES_PER_ROOM,
    MAX_EXTRA_ROOM_ATTEMPTS,
    MAX_ROOM_SIZE,
    MAX_ROOMS,
    MIN_ENEMIES_PER_ROOM,
    MIN_ROOM_SIZE,
    MIN_ROOMS,
)
from engine.dice import chance
from engine.grid import create_discovery_grid, create_tile_grid
from models.characters import BossEntity, ChestEntity, EnemyEntity, Entity, Stats
from models.dungeon import THEME_ORDER, THEMES, Level, Room, ThemeId, TileType

logger = logging.getLogger(__name__)

ENEMY_NAME = "Ash Walker"
ELITE_NAME = "Elite Cinderguard"
CHEST_NAME = "Ancient Cache"


def new_entity_id() -> str:
    """Short unique id for a spawned entity."""
    return uuid4().hex[:9]


def theme_for_depth(depth: int) -> ThemeId:
    """Cycle through the theme list, starting at depth 1."""
    return THEME_ORDER[(depth - 1) % len(THEME_ORDER)]


def boss_stats(depth: int) -> Stats:
    """Boss stats scale linearly with depth; pools start full."""
    hp = 200 + 50 * depth
    return Stats(
        hp=hp,
        max_hp=hp,
        stamina=999,
        max_stamina=999,
        ember=100,
        max_ember=100,
        strength=15 + 2 * depth,
    )


def enemy_stats(depth: int, elite: bool) -> Stats:
    """Regular or elite enemy stats for a depth."""
    hp = 60 + 20 * depth if elite else 30 + 10 * depth
    return Stats(
        hp=hp,
        max_hp=hp,
        stamina=50,
        max_stamina=50,
        ember=0,
        max_ember=0,
        strength=8 + depth if elite else 5 + depth,
    )


def _random_room(width: int, height: int, rng: random.Random) -> Room:
    w = rng.randint(MIN_ROOM_SIZE, MAX_ROOM_SIZE)
    h = rng.randint(MIN_ROOM_SIZE, MAX_ROOM_SIZE)
    # Keep a one-tile wall border around the map
    x = rng.randint(1, width - w - 2)
    y = rng.randint(1, height - h - 2)
    return Room(x=x, y=y, w=w, h=h)


def _try_place(room: Room, rooms: list[Room], tiles: list[list[TileType]]) -> bool:
    """Accept and carve a room unless it overlaps one already placed."""
    if any(room.intersects(other) for other in rooms):
        return False
    rooms.append(room)
    for y in range(room.y, room.y + room.h):
        for x in range(room.x, room.x + room.w):
            tiles[y][x] = TileType.FLOOR
    return True


def place_rooms(
    tiles: list[list[TileType]],
    width: int,
    height: int,
    rng: random.Random,
) -> list[Room]:
    """Rejection-sample non-overlapping rooms and carve them to floor.

    Rooms that collide are dropped, not retried, so the result may hold fewer
    rooms than the rolled target. A level needs a start room and an exit room,
    so extra attempts are made only while fewer than two rooms exist.

    Args:
        tiles: Grid to carve (mutated in place).
        width: Grid width.
        height: Grid height.
        rng: Random source.

    Returns:
        Accepted rooms in placement order.
    """
    rooms: list[Room] = []
    target = rng.randint(MIN_ROOMS, MAX_ROOMS)
    for _ in range(target):
        _try_place(_random_room(width, height, rng), rooms, tiles)

    attempts = 0
    while len(rooms) < 2 and attempts < MAX_EXTRA_ROOM_ATTEMPTS:
        _try_place(_random_room(width, height, rng), rooms, tiles)
        attempts += 1

    logger.debug("Placed %d of %d rooms (%d extra attempts)", len(rooms), target, attempts)
    return rooms


def carve_corridor(tiles: list[list[TileType]], room_a: Room, room_b: Room) -> None:
    """Join two rooms with an L-shaped corridor.

    The horizontal leg runs along room_a's center row, the vertical leg along
    room_b's center column.
    """
    ax, ay = room_a.center()
    bx, by = room_b.center()
    for x in range(min(ax, bx), max(ax, bx) + 1):
        tiles[ay][x] = TileType.FLOOR
    for y in range(min(ay, by), max(ay, by) + 1):
        tiles[y][bx] = TileType.FLOOR


def _occupied(entities: list[Entity], pos: tuple[int, int]) -> bool:
    return any(e.position == pos for e in entities)


def populate_room(
    room: Room,
    depth: int,
    tiles: list[list[TileType]],
    entities: list[Entity],
    rng: random.Random,
) -> None:
    """Spawn 1-2 enemies and maybe a chest inside a regular room.

    Positions that land on a non-floor tile or an occupied tile are skipped
    silently.
    """
    count = rng.randint(MIN_ENEMIES_PER_ROOM, MAX_ENEMIES_PER_ROOM)
    for _ in range(count):
        ex = rng.randint(room.x + 1, room.x + room.w - 2)
        ey = rng.randint(room.y + 1, room.y + room.h - 2)
        if tiles[ey][ex] != TileType.FLOOR or _occupied(entities, (ex, ey)):
            continue
        elite = chance(ELITE_CHANCE, rng)
        entities.append(
            EnemyEntity(
                id=new_entity_id(),
                name=ELITE_NAME if elite else ENEMY_NAME,
                position=(ex, ey),
                stats=enemy_stats(depth, elite),
                color="text-red-400" if elite else "text-stone-400",
                elite=elite,
            )
        )

    if chance(CHEST_CHANCE, rng):
        cx = rng.randint(room.x, room.x + room.w - 1)
        cy = rng.randint(room.y, room.y + room.h - 1)
        if tiles[cy][cx] == TileType.FLOOR and not _occupied(entities, (cx, cy)):
            entities.append(
                ChestEntity(
                    id=new_entity_id(),
                    name=CHEST_NAME,
                    position=(cx, cy),
                    stats=Stats(hp=1, max_hp=1, stamina=1, max_stamina=1, strength=1),
                )
            )


def generate_level(
    depth: int,
    rng: random.Random | None = None,
    width: int = LEVEL_WIDTH,
    height: int = LEVEL_HEIGHT,
) -> Level:
    """Build a fully populated level for a depth.

    Layout is random; the structure always holds: one safe start tile, one exit
    door, rooms chained by corridors in placement order, a boss beside the door.

    Args:
        depth: 1-based dungeon depth.
        rng: Optional Random instance for seeded/testing generation.
        width: Grid width in tiles.
        height: Grid height in tiles.

    Returns:
        A new Level with everything undiscovered.

    Raises:
        ValueError: If depth is not positive.
    """
    if depth < 1:
        raise ValueError(f"Depth must be positive, got {depth}")
    rng = rng or random.Random()

    tiles = create_tile_grid(width, height)
    rooms = place_rooms(tiles, width, height, rng)

    for room_a, room_b in zip(rooms, rooms[1:]):
        carve_corridor(tiles, room_a, room_b)

    theme_id = theme_for_depth(depth)

    start = rooms[0].center()
    exit_pos = rooms[-1].center()
    tiles[start[1]][start[0]] = TileType.SAFE_ZONE
    tiles[exit_pos[1]][exit_pos[0]] = TileType.DOOR

    entities: list[Entity] = []
    for index, room in enumerate(rooms):
        if index == 0:
            continue
        if index == len(rooms) - 1:
            entities.append(
                BossEntity(
                    id=new_entity_id(),
                    name=THEMES[theme_id].boss_name,
                    position=(exit_pos[0] - 1, exit_pos[1]),
                    stats=boss_stats(depth),
                )
            )
            continue
        populate_room(room, depth, tiles, entities, rng)

    logger.info(
        "Generated depth %d (%s): %d rooms, %d entities",
        depth, theme_id.value, len(rooms), len(entities),
    )

    return Level(
        depth=depth,
        theme=theme_id,
        width=width,
        height=height,
        tiles=tiles,
        discovered=create_discovery_grid(width, height),
        entities=entities,
        rooms=rooms,
        start_position=start,
        exit_position=exit_pos,
    )
