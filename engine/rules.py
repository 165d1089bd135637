"""Combat rules: damage formulas, resource pools, death, and the ember burst."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from config import (
    CHEST_MAX_HP_BONUS,
    CHEST_STRENGTH_BONUS,
    EMBER_BURST_COST,
    EMBER_BURST_DAMAGE,
    EMBER_BURST_RADIUS,
    EMBER_GAIN_ON_HIT,
    KILL_HEAL,
    STAMINA_REGEN,
)
from engine.dice import roll_scaled
from engine.grid import manhattan_distance
from models.actions import ActionResult, ActionType
from models.characters import EntityKind
from models.game_state import GamePhase, LogCategory

if TYPE_CHECKING:
    from models.characters import BossEntity, ChestEntity, EnemyEntity, Entity, Stats
    from models.game_state import GameState

logger = logging.getLogger(__name__)

PLAYER_ID = "player"

# Damage multiplier ranges: floor(strength * (base + U[0, spread)))
PLAYER_DAMAGE_BASE = 1.0
PLAYER_DAMAGE_SPREAD = 0.5
ENEMY_DAMAGE_BASE = 0.8
ENEMY_DAMAGE_SPREAD = 0.4


# ---------------------------------------------------------------------------
# Resource pools
# ---------------------------------------------------------------------------


def gain_ember(stats: Stats, amount: int = EMBER_GAIN_ON_HIT) -> int:
    """Add ember, capped at max_ember. Returns the amount actually gained."""
    before = stats.ember
    stats.ember = min(stats.max_ember, stats.ember + amount)
    return stats.ember - before


def heal(stats: Stats, amount: int) -> int:
    """Restore hp, capped at max_hp. Returns the amount actually healed."""
    before = stats.hp
    stats.hp = min(stats.max_hp, stats.hp + amount)
    return stats.hp - before


def regenerate_stamina(stats: Stats, amount: int = STAMINA_REGEN) -> int:
    """Restore stamina, capped at max_stamina. Returns the amount restored."""
    before = stats.stamina
    stats.stamina = min(stats.max_stamina, stats.stamina + amount)
    return stats.stamina - before


def apply_damage(stats: Stats, damage: int) -> Stats:
    """Reduce hp by damage, never below zero.

    Args:
        stats: The stats taking damage (mutated in place).
        damage: Amount of damage to deal.

    Returns:
        The updated stats.
    """
    stats.hp = max(0, stats.hp - damage)
    return stats


def check_death(stats: Stats) -> bool:
    """Check if a creature is dead (at 0 HP)."""
    return stats.hp <= 0


def mark_hit(game_state: GameState, position: tuple[int, int], attacker_id: str) -> None:
    """Record the latest hit for the renderer's flash and lunge effects."""
    game_state.effects.hit_position = position
    game_state.effects.attacking_id = attacker_id
    game_state.effects.updated_at = datetime.now(timezone.utc)


def _strike_entity(entity: Entity, damage: int) -> bool:
    """Apply damage to an entity and flag it dead. Returns True on a kill."""
    apply_damage(entity.stats, damage)
    if check_death(entity.stats):
        entity.is_dead = True
        return True
    return False


# ---------------------------------------------------------------------------
# Single-target attacks
# ---------------------------------------------------------------------------


def resolve_player_attack(
    game_state: GameState,
    target: EnemyEntity | BossEntity,
    rng: random.Random | None = None,
) -> ActionResult:
    """Resolve the player's melee strike against an enemy or boss.

    A hit feeds the ember pool. A kill heals the player a little; killing the
    boss also clears the level.

    Args:
        game_state: Current session (mutated in place).
        target: The living entity being struck.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        ActionResult with damage and kill details.
    """
    damage = roll_scaled(
        game_state.player_stats.strength, PLAYER_DAMAGE_BASE, PLAYER_DAMAGE_SPREAD, rng
    ).total
    killed = _strike_entity(target, damage)

    mark_hit(game_state, target.position, PLAYER_ID)
    game_state.add_log(f"Hit {target.name} for {damage} dmg!", LogCategory.COMBAT)
    gain_ember(game_state.player_stats)

    description = f"You hit {target.name} for {damage} damage."
    level_cleared = False
    if killed:
        game_state.add_log(f"{target.name} defeated!", LogCategory.LOOT)
        heal(game_state.player_stats, KILL_HEAL)
        description += f" {target.name} has been slain!"
        if target.kind == EntityKind.BOSS:
            game_state.add_log(f"THE {target.name.upper()} HAS FALLEN!", LogCategory.LORE)
            game_state.level_cleared = True
            level_cleared = True
            logger.info("Boss %s defeated at depth %d", target.name, game_state.depth)

    return ActionResult(
        success=True,
        action_type=ActionType.ATTACK,
        description=description,
        actor_id=PLAYER_ID,
        target_id=target.id,
        damage_dealt=damage,
        target_hp_remaining=target.stats.hp,
        killed=[target.id] if killed else [],
        position=target.position,
        level_cleared=level_cleared,
    )


def resolve_enemy_attack(
    game_state: GameState,
    attacker: EnemyEntity | BossEntity,
    rng: random.Random | None = None,
) -> ActionResult:
    """Resolve an enemy or boss striking the player.

    Dropping the player to 0 HP ends the run.

    Args:
        game_state: Current session (mutated in place).
        attacker: The entity attacking.
        rng: Optional Random instance for seeded/testing rolls.

    Returns:
        ActionResult with damage details.
    """
    damage = roll_scaled(
        attacker.stats.strength, ENEMY_DAMAGE_BASE, ENEMY_DAMAGE_SPREAD, rng
    ).total
    apply_damage(game_state.player_stats, damage)

    mark_hit(game_state, game_state.player_position, attacker.id)
    game_state.add_log(f"{attacker.name} hits you for {damage} dmg!", LogCategory.COMBAT)

    description = f"{attacker.name} hits you for {damage} damage."
    if check_death(game_state.player_stats):
        game_state.phase = GamePhase.GAME_OVER
        game_state.add_log("You have succumbed to the darkness...", LogCategory.COMBAT)
        description += " You have fallen."
        logger.info("Player slain by %s at depth %d", attacker.name, game_state.depth)

    return ActionResult(
        success=True,
        action_type=ActionType.ENEMY_ATTACK,
        description=description,
        actor_id=attacker.id,
        target_id=PLAYER_ID,
        damage_dealt=damage,
        target_hp_remaining=game_state.player_stats.hp,
        position=game_state.player_position,
    )


# ---------------------------------------------------------------------------
# Area attack
# ---------------------------------------------------------------------------


def resolve_ember_burst(game_state: GameState) -> ActionResult:
    """Spend ember to blast every living entity near the player.

    Everything alive within EMBER_BURST_RADIUS (Manhattan) takes a flat
    EMBER_BURST_DAMAGE, unopened chests included. Kills from the burst grant
    no heal and no ember and do not clear the level.

    Args:
        game_state: Current session (mutated in place).

    Returns:
        ActionResult listing the entities killed. Fails without touching
        state when ember is short.
    """
    stats = game_state.player_stats
    if stats.ember < EMBER_BURST_COST:
        game_state.add_log("Not enough Ember!", LogCategory.INFO)
        return ActionResult(
            success=False,
            action_type=ActionType.EMBER_BURST,
            description="Not enough Ember!",
            actor_id=PLAYER_ID,
            error=f"Ember burst needs {EMBER_BURST_COST} ember, have {stats.ember}",
        )

    stats.ember -= EMBER_BURST_COST
    game_state.effects.attacking_id = PLAYER_ID
    game_state.add_log("EMBER BURST!", LogCategory.COMBAT)

    level = game_state.level
    targets = []
    if level is not None:
        targets = [
            e for e in level.entities
            if not e.is_dead
            and manhattan_distance(e.position, game_state.player_position) <= EMBER_BURST_RADIUS
        ]

    killed: list[str] = []
    for target in targets:
        mark_hit(game_state, target.position, PLAYER_ID)
        if _strike_entity(target, EMBER_BURST_DAMAGE):
            killed.append(target.id)
            game_state.add_log(f"{target.name} incinerated!", LogCategory.LOOT)

    logger.debug("Ember burst hit %d targets, killed %d", len(targets), len(killed))
    return ActionResult(
        success=True,
        action_type=ActionType.EMBER_BURST,
        description=f"Ember burst scorches {len(targets)} targets.",
        actor_id=PLAYER_ID,
        damage_dealt=EMBER_BURST_DAMAGE * len(targets),
        killed=killed,
        position=game_state.player_position,
    )


# ---------------------------------------------------------------------------
# Loot
# ---------------------------------------------------------------------------


def open_chest(game_state: GameState, chest: ChestEntity) -> ActionResult:
    """Consume a chest: more max HP, more strength, and a full heal."""
    stats = game_state.player_stats
    stats.max_hp += CHEST_MAX_HP_BONUS
    stats.strength += CHEST_STRENGTH_BONUS
    stats.hp = stats.max_hp
    chest.is_dead = True
    game_state.add_log("Opened a chest! Found Ember essence.", LogCategory.LOOT)
    return ActionResult(
        success=True,
        action_type=ActionType.OPEN_CHEST,
        description=f"You open the {chest.name}.",
        actor_id=PLAYER_ID,
        target_id=chest.id,
        position=chest.position,
    )
