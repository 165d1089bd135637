"""Stats and entity data models for Emberhymn Server."""

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class EntityKind(str, Enum):
    """Every kind of thing that can stand on a tile."""
    PLAYER = "player"
    ENEMY = "enemy"
    BOSS = "boss"
    CHEST = "chest"
    NPC = "npc"                     # Reserved, nothing spawns these yet
    TRAP = "trap"                   # Reserved
    EXIT = "exit"                   # Reserved


class Stats(BaseModel):
    """Resource pools and damage scaling for a creature."""
    hp: int
    max_hp: int
    stamina: int
    max_stamina: int
    ember: int = 0                  # Special-ability resource
    max_ember: int = 0
    strength: int                   # Damage scalar


class _EntityBase(BaseModel):
    """Fields shared by every entity variant."""
    id: str
    name: str
    position: tuple[int, int]       # Grid position (x, y)
    stats: Stats
    is_dead: bool = False
    color: str | None = None
    sprite: str | None = None


class PlayerEntity(_EntityBase):
    """Render-only view of the player; the session owns the real state."""
    kind: Literal[EntityKind.PLAYER] = EntityKind.PLAYER


class EnemyEntity(_EntityBase):
    """A regular or elite dungeon denizen."""
    kind: Literal[EntityKind.ENEMY] = EntityKind.ENEMY
    elite: bool = False


class BossEntity(_EntityBase):
    """The guardian of a level's exit door."""
    kind: Literal[EntityKind.BOSS] = EntityKind.BOSS
    boss_phase: int = 1


class ChestEntity(_EntityBase):
    """A one-shot loot cache. Opening it marks it dead."""
    kind: Literal[EntityKind.CHEST] = EntityKind.CHEST


Entity = Annotated[
    Union[PlayerEntity, EnemyEntity, BossEntity, ChestEntity],
    Field(discriminator="kind"),
]

HOSTILE_KINDS = (EntityKind.ENEMY, EntityKind.BOSS)


def is_hostile(entity: _EntityBase) -> bool:
    """True for entities that fight back (enemies and bosses)."""
    return getattr(entity, "kind", None) in HOSTILE_KINDS
