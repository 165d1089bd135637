"""Session orchestration: game lifecycle, movement, interaction, snapshots."""

from __future__ import annotations

import logging
import random

from config import PLAYER_NAME
from engine.generator import generate_level
from engine.grid import in_bounds, manhattan_distance, reveal_area
from engine.rules import PLAYER_ID, open_chest, resolve_ember_burst, resolve_player_attack
from models.actions import ActionResult, ActionType
from models.characters import EntityKind, PlayerEntity, is_hostile
from models.dungeon import THEMES, TileType
from models.game_state import (
    GamePhase,
    GameSnapshot,
    GameState,
    LogCategory,
    VisualEffects,
    initial_player_stats,
)

logger = logging.getLogger(__name__)

CARDINAL_DELTAS = {(0, -1), (0, 1), (-1, 0), (1, 0)}


def create_game() -> GameState:
    """Create an idle session sitting at the menu."""
    return GameState()


def start_game(game_state: GameState, rng: random.Random | None = None) -> GameState:
    """Begin a fresh run at depth 1.

    Args:
        game_state: The session to (re)initialize in place.
        rng: Optional Random instance for seeded/testing generation.

    Returns:
        The same session, now PLAYING.
    """
    level = generate_level(1, rng)
    game_state.depth = 1
    game_state.level = level
    game_state.player_position = level.start_position
    game_state.player_stats = initial_player_stats()
    game_state.log = []
    game_state.effects = VisualEffects()
    game_state.level_cleared = False
    game_state.phase = GamePhase.PLAYING
    game_state.add_log(f"You enter the {THEMES[level.theme].name}...", LogCategory.LORE)
    logger.info("New run started")
    return game_state


def descend(game_state: GameState, rng: random.Random | None = None) -> ActionResult:
    """Replace the level with the next depth and rest the player.

    HP and stamina refill; ember and strength carry over.
    """
    next_depth = game_state.depth + 1
    level = generate_level(next_depth, rng)
    game_state.depth = next_depth
    game_state.level = level
    game_state.player_position = level.start_position
    game_state.level_cleared = False
    game_state.effects = VisualEffects()

    stats = game_state.player_stats
    stats.hp = stats.max_hp
    stats.stamina = stats.max_stamina

    game_state.add_log(f"Descended to depth {next_depth}.", LogCategory.INFO)
    game_state.add_log("Rested at the checkpoint. Health restored.", LogCategory.INFO)
    logger.info("Descended to depth %d", next_depth)
    return ActionResult(
        success=True,
        action_type=ActionType.DESCEND,
        description=f"You descend to depth {next_depth}.",
        actor_id=PLAYER_ID,
        position=level.start_position,
    )


def _rejected(error: str, action_type: ActionType = ActionType.MOVE) -> ActionResult:
    return ActionResult(
        success=False,
        action_type=action_type,
        description=error,
        actor_id=PLAYER_ID,
        error=error,
    )


def attempt_move(
    game_state: GameState,
    dx: int,
    dy: int,
    rng: random.Random | None = None,
) -> ActionResult:
    """Resolve a cardinal move intent.

    Moving into an enemy attacks it, into a chest opens it, into the door
    descends once the boss is dead. Otherwise the player steps and reveals
    the surrounding block. Invalid intents leave state untouched.

    Args:
        game_state: Current session (mutated in place).
        dx: -1, 0 or 1.
        dy: -1, 0 or 1; exactly one of dx, dy is non-zero.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        ActionResult describing what happened.
    """
    level = game_state.level
    if game_state.phase != GamePhase.PLAYING or level is None:
        return _rejected("Not playing")
    if (dx, dy) not in CARDINAL_DELTAS:
        return _rejected(f"Invalid direction ({dx}, {dy})")

    px, py = game_state.player_position
    tx, ty = px + dx, py + dy
    if not in_bounds(tx, ty, level.width, level.height):
        return _rejected("Out of bounds")
    tile = level.tiles[ty][tx]
    if tile == TileType.WALL:
        return _rejected("Blocked by a wall")

    occupant = next(
        (e for e in level.entities if e.position == (tx, ty) and not e.is_dead),
        None,
    )
    if occupant is not None:
        if is_hostile(occupant):
            return resolve_player_attack(game_state, occupant, rng)
        if occupant.kind == EntityKind.CHEST:
            return open_chest(game_state, occupant)
        return _rejected(f"{occupant.name} is in the way")

    if tile == TileType.DOOR:
        boss_alive = any(
            e.kind == EntityKind.BOSS and not e.is_dead for e in level.entities
        )
        if boss_alive:
            game_state.add_log("The door is sealed by the Boss's presence!", LogCategory.LORE)
            return _rejected("The door is sealed", ActionType.DESCEND)
        return descend(game_state, rng)

    game_state.player_position = (tx, ty)
    reveal_area(level, (tx, ty))
    return ActionResult(
        success=True,
        action_type=ActionType.MOVE,
        description=f"You move to {(tx, ty)}.",
        actor_id=PLAYER_ID,
        position=(tx, ty),
    )


def tap_tile(
    game_state: GameState,
    x: int,
    y: int,
    rng: random.Random | None = None,
) -> ActionResult:
    """Pointer input: a tap on a tile next to the player acts as a move."""
    px, py = game_state.player_position
    if manhattan_distance((px, py), (x, y)) != 1:
        return _rejected("Tap a tile next to you")
    return attempt_move(game_state, x - px, y - py, rng)


def use_special(game_state: GameState) -> ActionResult:
    """Trigger the ember burst."""
    if game_state.phase != GamePhase.PLAYING or game_state.level is None:
        return _rejected("Not playing", ActionType.EMBER_BURST)
    return resolve_ember_burst(game_state)


def pause_game(game_state: GameState) -> GameState:
    """Suspend a running game. No-op outside PLAYING."""
    if game_state.phase == GamePhase.PLAYING:
        game_state.phase = GamePhase.PAUSED
    return game_state


def resume_game(game_state: GameState) -> GameState:
    """Resume a paused game. No-op outside PAUSED."""
    if game_state.phase == GamePhase.PAUSED:
        game_state.phase = GamePhase.PLAYING
    return game_state


def return_to_menu(game_state: GameState) -> GameState:
    """Tear down the run and go back to the menu."""
    game_state.phase = GamePhase.MENU
    game_state.level = None
    game_state.effects = VisualEffects()
    game_state.level_cleared = False
    return game_state


def player_entity(game_state: GameState) -> PlayerEntity:
    """Render view of the player, with pools clamped for display."""
    stats = game_state.player_stats.model_copy()
    stats.hp = max(0, min(stats.hp, stats.max_hp))
    return PlayerEntity(
        id=PLAYER_ID,
        name=PLAYER_NAME,
        position=game_state.player_position,
        stats=stats,
        is_dead=stats.hp <= 0,
    )


def build_snapshot(game_state: GameState) -> GameSnapshot:
    """Capture everything the renderer needs for one frame."""
    level = game_state.level
    snapshot = GameSnapshot(
        phase=game_state.phase,
        depth=game_state.depth,
        player=player_entity(game_state),
        log=list(game_state.log),
        effects=game_state.effects.model_copy(),
        level_cleared=game_state.level_cleared,
    )
    if level is not None:
        snapshot.theme = THEMES[level.theme]
        snapshot.width = level.width
        snapshot.height = level.height
        snapshot.tiles = level.tiles
        snapshot.discovered = level.discovered
        snapshot.entities = list(level.entities)
        snapshot.exit_position = level.exit_position
    return snapshot
