"""Enemy AI: greedy chase-and-strike, evaluated once per AI tick."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING

from pydantic import BaseModel

from config import AI_ATTACK_RANGE, AI_SIGHT_RANGE
from engine.grid import euclidean_distance, is_blocked, sign
from engine.rules import regenerate_stamina, resolve_enemy_attack
from models.actions import ActionResult, ActionType
from models.characters import is_hostile
from models.game_state import GamePhase

if TYPE_CHECKING:
    from models.dungeon import Level
    from models.game_state import GameState

logger = logging.getLogger(__name__)


class EnemyIntent(BaseModel):
    """What one enemy decided to do this tick."""
    entity_id: str
    action_type: ActionType             # WAIT, ENEMY_ATTACK or ENEMY_MOVE
    destination: tuple[int, int] | None = None


def greedy_step(
    position: tuple[int, int],
    player_position: tuple[int, int],
    level: Level,
) -> tuple[int, int] | None:
    """Pick one step toward the player, X axis first, then Y.

    This is not pathfinding. The X destination is taken unless it is blocked;
    only then is the Y destination tried. A zero sign on an axis makes that
    destination the enemy's own tile, so an enemy sharing the player's
    column stays put. When both destinations are walls the enemy also stays,
    even if a detour exists.

    Returns:
        The destination tile, or None to stay in place.
    """
    x, y = position
    step_x = sign(player_position[0] - x)
    step_y = sign(player_position[1] - y)

    if not is_blocked(level, x + step_x, y):
        destination = (x + step_x, y)
    elif not is_blocked(level, x, y + step_y):
        destination = (x, y + step_y)
    else:
        return None

    if destination in (position, player_position):
        return None
    return destination


def decide_enemy_action(
    entity_id: str,
    position: tuple[int, int],
    player_position: tuple[int, int],
    level: Level,
) -> EnemyIntent:
    """Decide an enemy's move from positions captured at tick start.

    Args:
        entity_id: ID of the deciding enemy.
        position: The enemy's (x, y).
        player_position: The player's (x, y).
        level: Level used for wall checks.

    Returns:
        The enemy's intent for this tick.
    """
    dist = euclidean_distance(position, player_position)
    if dist > AI_SIGHT_RANGE:
        return EnemyIntent(entity_id=entity_id, action_type=ActionType.WAIT)
    if dist < AI_ATTACK_RANGE:
        return EnemyIntent(entity_id=entity_id, action_type=ActionType.ENEMY_ATTACK)

    destination = greedy_step(position, player_position, level)
    if destination is None:
        return EnemyIntent(entity_id=entity_id, action_type=ActionType.WAIT)
    return EnemyIntent(
        entity_id=entity_id,
        action_type=ActionType.ENEMY_MOVE,
        destination=destination,
    )


def run_ai_tick(game_state: GameState, rng: random.Random | None = None) -> list[ActionResult]:
    """Advance every living enemy and boss by one AI step.

    All decisions are computed first from a snapshot of positions, then
    applied in entity order. Processing stops as soon as the player falls.

    Args:
        game_state: Current session (mutated in place).
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        Results for every attack and move that happened; idle enemies are
        omitted.
    """
    level = game_state.level
    if game_state.phase != GamePhase.PLAYING or level is None:
        return []

    player_position = game_state.player_position
    snapshot = {
        e.id: e.position for e in level.entities if not e.is_dead and is_hostile(e)
    }
    intents = [
        decide_enemy_action(entity_id, position, player_position, level)
        for entity_id, position in snapshot.items()
    ]

    by_id = {e.id: e for e in level.entities}
    results: list[ActionResult] = []
    for intent in intents:
        if game_state.phase != GamePhase.PLAYING:
            break
        enemy = by_id[intent.entity_id]
        if intent.action_type == ActionType.ENEMY_ATTACK:
            results.append(resolve_enemy_attack(game_state, enemy, rng))
        elif intent.action_type == ActionType.ENEMY_MOVE:
            enemy.position = intent.destination
            results.append(
                ActionResult(
                    success=True,
                    action_type=ActionType.ENEMY_MOVE,
                    description=f"{enemy.name} moves to {intent.destination}.",
                    actor_id=enemy.id,
                    position=intent.destination,
                )
            )

    if results:
        logger.debug("AI tick: %d actions", len(results))
    return results


def run_regen_tick(game_state: GameState) -> int:
    """Passive stamina regeneration. Returns the stamina restored."""
    if game_state.phase != GamePhase.PLAYING:
        return 0
    return regenerate_stamina(game_state.player_stats)
