"""Tile, theme, room and level models for Emberhymn Server."""

from enum import Enum

from pydantic import BaseModel, model_validator

from models.characters import Entity


class TileType(int, Enum):
    """What a single grid cell is made of."""
    WALL = 0
    FLOOR = 1
    VOID = 2
    DOOR = 3                        # Level exit, sealed while the boss lives
    SAFE_ZONE = 4                   # Player start


class ThemeId(str, Enum):
    """Level themes, in the order depths cycle through them."""
    ASH_CAVERNS = "ASH_CAVERNS"
    FORGOTTEN_CATACOMBS = "FORGOTTEN_CATACOMBS"
    EMBER_SANCTUM = "EMBER_SANCTUM"


class Theme(BaseModel):
    """Cosmetic configuration for a theme."""
    id: ThemeId
    name: str
    wall_color: str
    floor_color: str
    ambient_color: str
    boss_name: str


THEMES: dict[ThemeId, Theme] = {
    ThemeId.ASH_CAVERNS: Theme(
        id=ThemeId.ASH_CAVERNS,
        name="Ash Caverns",
        wall_color="bg-stone-800",
        floor_color="bg-stone-700",
        ambient_color="rgba(60, 20, 10, 0.4)",
        boss_name="The Ashbound Knight",
    ),
    ThemeId.FORGOTTEN_CATACOMBS: Theme(
        id=ThemeId.FORGOTTEN_CATACOMBS,
        name="Forgotten Catacombs",
        wall_color="bg-slate-900",
        floor_color="bg-slate-800",
        ambient_color="rgba(10, 20, 50, 0.4)",
        boss_name="Cinder Wyrm",
    ),
    ThemeId.EMBER_SANCTUM: Theme(
        id=ThemeId.EMBER_SANCTUM,
        name="Ember Sanctum",
        wall_color="bg-orange-950",
        floor_color="bg-orange-900",
        ambient_color="rgba(100, 30, 0, 0.5)",
        boss_name="The Ember Choir",
    ),
}

THEME_ORDER: list[ThemeId] = list(THEMES)


class Room(BaseModel):
    """An axis-aligned rectangle of carved floor."""
    x: int
    y: int
    w: int
    h: int

    def center(self) -> tuple[int, int]:
        """Return the (x, y) tile at the middle of the room."""
        return (self.x + self.w // 2, self.y + self.h // 2)

    def intersects(self, other: "Room") -> bool:
        """Strict overlap test; rooms sharing only an edge line do not intersect."""
        return (
            self.x < other.x + other.w
            and self.x + self.w > other.x
            and self.y < other.y + other.h
            and self.y + self.h > other.y
        )

    def contains(self, pos: tuple[int, int]) -> bool:
        """Check whether a tile lies inside the room rectangle."""
        x, y = pos
        return self.x <= x < self.x + self.w and self.y <= y < self.y + self.h


class Level(BaseModel):
    """One generated dungeon depth."""
    depth: int
    theme: ThemeId
    width: int
    height: int
    tiles: list[list[TileType]]         # 2D grid [y][x]
    discovered: list[list[bool]]        # Fog-of-war memory, same shape as tiles
    entities: list[Entity] = []
    rooms: list[Room] = []              # Accepted rooms in placement order
    start_position: tuple[int, int]
    exit_position: tuple[int, int]

    @model_validator(mode="after")
    def _check_dimensions(self) -> "Level":
        if len(self.tiles) != self.height or any(len(row) != self.width for row in self.tiles):
            raise ValueError("tiles do not match level dimensions")
        if len(self.discovered) != self.height or any(
            len(row) != self.width for row in self.discovered
        ):
            raise ValueError("discovered grid does not match level dimensions")
        return self

    def tile_at(self, pos: tuple[int, int]) -> TileType:
        """Return the tile at (x, y). Caller checks bounds."""
        x, y = pos
        return self.tiles[y][x]
