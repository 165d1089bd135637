"""Player intent and action result models for Emberhymn Server."""

from enum import Enum

from pydantic import BaseModel


class Direction(str, Enum):
    """The four cardinal move intents."""
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"

    @property
    def delta(self) -> tuple[int, int]:
        """Grid offset (dx, dy) for this direction. y grows downward."""
        return _DELTAS[self]


_DELTAS = {
    Direction.UP: (0, -1),
    Direction.DOWN: (0, 1),
    Direction.LEFT: (-1, 0),
    Direction.RIGHT: (1, 0),
}


class ActionType(str, Enum):
    """Everything that can happen as the result of an intent or a tick."""
    MOVE = "move"
    ATTACK = "attack"               # Player melee
    ENEMY_ATTACK = "enemy_attack"
    ENEMY_MOVE = "enemy_move"
    OPEN_CHEST = "open_chest"
    DESCEND = "descend"
    EMBER_BURST = "ember_burst"
    WAIT = "wait"                   # Enemy idles


class MoveRequest(BaseModel):
    """Body for a cardinal move intent."""
    direction: Direction


class TapRequest(BaseModel):
    """Body for a pointer tap on a tile."""
    x: int
    y: int


class ActionResult(BaseModel):
    """The engine's response after processing an action."""
    success: bool
    action_type: ActionType
    description: str                    # Human-readable narrative
    actor_id: str | None = None         # "player" or an entity id
    target_id: str | None = None
    damage_dealt: int | None = None
    target_hp_remaining: int | None = None
    killed: list[str] = []              # Entity ids that died from this action
    position: tuple[int, int] | None = None
    level_cleared: bool = False
    error: str | None = None            # If the action was rejected
