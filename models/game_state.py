"""Session state, message log and snapshot models for Emberhymn Server."""

from datetime import datetime, timezone
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from config import INITIAL_PLAYER_STATS, LOG_LIMIT
from models.characters import Entity, PlayerEntity, Stats
from models.dungeon import Level, Theme, TileType


class GamePhase(str, Enum):
    """Possible phases for a session."""
    MENU = "menu"
    PLAYING = "playing"
    GAME_OVER = "game_over"
    VICTORY = "victory"
    PAUSED = "paused"


class LogCategory(str, Enum):
    """How the UI should style a log line."""
    INFO = "info"
    COMBAT = "combat"
    LOOT = "loot"
    LORE = "lore"


class LogMessage(BaseModel):
    """A single line in the rolling message log."""
    id: str
    text: str
    category: LogCategory = LogCategory.INFO
    timestamp: datetime


class VisualEffects(BaseModel):
    """Ephemeral hints for the renderer. The UI clears them on its own timer."""
    hit_position: tuple[int, int] | None = None
    attacking_id: str | None = None     # "player" or an entity id
    updated_at: datetime | None = None


def initial_player_stats() -> Stats:
    """Fresh stats for a new run."""
    return Stats(**INITIAL_PLAYER_STATS)


class GameState(BaseModel):
    """The single authoritative session state."""
    phase: GamePhase = GamePhase.MENU
    depth: int = 1
    level: Level | None = None
    player_position: tuple[int, int] = (0, 0)
    player_stats: Stats = Field(default_factory=initial_player_stats)
    log: list[LogMessage] = []
    effects: VisualEffects = Field(default_factory=VisualEffects)
    level_cleared: bool = False         # Boss of the current level has fallen

    def add_log(self, text: str, category: LogCategory = LogCategory.INFO) -> LogMessage:
        """Append a message, evicting the oldest beyond LOG_LIMIT."""
        message = LogMessage(
            id=uuid4().hex[:9],
            text=text,
            category=category,
            timestamp=datetime.now(timezone.utc),
        )
        self.log.append(message)
        if len(self.log) > LOG_LIMIT:
            del self.log[: len(self.log) - LOG_LIMIT]
        return message


class GameSnapshot(BaseModel):
    """Everything the presentation layer needs to draw one frame."""
    phase: GamePhase
    depth: int
    theme: Theme | None = None
    width: int = 0
    height: int = 0
    tiles: list[list[TileType]] = []
    discovered: list[list[bool]] = []
    entities: list[Entity] = []
    player: PlayerEntity
    exit_position: tuple[int, int] | None = None
    log: list[LogMessage] = []
    effects: VisualEffects = VisualEffects()
    level_cleared: bool = False
