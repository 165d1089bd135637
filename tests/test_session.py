"""Tests for session lifecycle, movement, interaction, and snapshots."""

import random

import pytest

from config import LOG_LIMIT
from engine.grid import create_discovery_grid, create_tile_grid
from engine.npc import run_ai_tick
from engine.session import (
    attempt_move,
    build_snapshot,
    create_game,
    descend,
    pause_game,
    resume_game,
    return_to_menu,
    start_game,
    tap_tile,
    use_special,
)
from models.actions import ActionType
from models.characters import BossEntity, ChestEntity, EnemyEntity, EntityKind, Stats
from models.dungeon import Level, ThemeId, TileType
from models.game_state import GamePhase, GameState, LogCategory


def _stats(hp: int = 30, strength: int = 5) -> Stats:
    return Stats(hp=hp, max_hp=hp, stamina=50, max_stamina=50, strength=strength)


def _make_level(entities=None, size: int = 12) -> Level:
    """Helper: walled room with a door at (9, 5)."""
    tiles = create_tile_grid(size, size, TileType.FLOOR)
    for i in range(size):
        tiles[0][i] = tiles[size - 1][i] = TileType.WALL
        tiles[i][0] = tiles[i][size - 1] = TileType.WALL
    tiles[5][9] = TileType.DOOR
    tiles[5][3] = TileType.SAFE_ZONE
    return Level(
        depth=1,
        theme=ThemeId.ASH_CAVERNS,
        width=size,
        height=size,
        tiles=tiles,
        discovered=create_discovery_grid(size, size),
        entities=entities or [],
        start_position=(3, 5),
        exit_position=(9, 5),
    )


def _make_game(entities=None, player_position=(5, 5)) -> GameState:
    return GameState(
        phase=GamePhase.PLAYING,
        level=_make_level(entities),
        player_position=player_position,
    )


def _boss(position=(8, 4), dead: bool = False) -> BossEntity:
    boss = BossEntity(id="boss", name="The Ashbound Knight", position=position, stats=_stats(hp=250, strength=17))
    boss.is_dead = dead
    return boss


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------


class TestLifecycle:
    """Tests for create_game / start_game / pause / resume / menu."""

    def test_create_game_in_menu(self):
        gs = create_game()
        assert gs.phase == GamePhase.MENU
        assert gs.level is None

    def test_start_game(self):
        gs = start_game(create_game(), random.Random(1))
        assert gs.phase == GamePhase.PLAYING
        assert gs.depth == 1
        assert gs.level is not None
        assert gs.player_position == gs.level.start_position
        assert gs.player_stats.hp == gs.player_stats.max_hp == 100
        assert gs.player_stats.strength == 10
        assert len(gs.log) == 1
        assert gs.log[0].category == LogCategory.LORE
        assert "Ash Caverns" in gs.log[0].text

    def test_restart_resets_stats_and_log(self):
        gs = start_game(create_game(), random.Random(1))
        gs.player_stats.strength = 40
        gs.add_log("old news")
        start_game(gs, random.Random(2))
        assert gs.player_stats.strength == 10
        assert all(m.text != "old news" for m in gs.log)

    def test_pause_and_resume(self):
        gs = start_game(create_game(), random.Random(1))
        pause_game(gs)
        assert gs.phase == GamePhase.PAUSED
        resume_game(gs)
        assert gs.phase == GamePhase.PLAYING

    def test_pause_outside_play_is_noop(self):
        gs = create_game()
        pause_game(gs)
        assert gs.phase == GamePhase.MENU
        resume_game(gs)
        assert gs.phase == GamePhase.MENU

    def test_return_to_menu(self):
        gs = start_game(create_game(), random.Random(1))
        gs.phase = GamePhase.GAME_OVER
        return_to_menu(gs)
        assert gs.phase == GamePhase.MENU
        assert gs.level is None


class TestLog:
    """Tests for the bounded message log."""

    def test_bounded_oldest_first_out(self):
        gs = create_game()
        for i in range(LOG_LIMIT + 5):
            gs.add_log(f"msg {i}")
        assert len(gs.log) == LOG_LIMIT
        assert gs.log[0].text == "msg 5"
        assert gs.log[-1].text == f"msg {LOG_LIMIT + 4}"

    def test_category(self):
        gs = create_game()
        message = gs.add_log("boom", LogCategory.COMBAT)
        assert message.category == LogCategory.COMBAT
        assert message.id


# ---------------------------------------------------------------------------
# Movement
# ---------------------------------------------------------------------------


class TestAttemptMove:
    """Tests for attempt_move()."""

    def test_plain_move(self):
        gs = _make_game()
        result = attempt_move(gs, 1, 0)
        assert result.success
        assert result.action_type == ActionType.MOVE
        assert gs.player_position == (6, 5)

    def test_move_onto_safe_zone(self):
        gs = _make_game(player_position=(4, 5))
        assert attempt_move(gs, -1, 0).success
        assert gs.player_position == (3, 5)

    def test_wall_rejected(self):
        gs = _make_game(player_position=(1, 5))
        result = attempt_move(gs, -1, 0)
        assert not result.success
        assert gs.player_position == (1, 5)

    def test_out_of_bounds_rejected(self):
        gs = _make_game(player_position=(0, 5))
        gs.level.tiles[5][0] = TileType.FLOOR
        result = attempt_move(gs, -1, 0)
        assert not result.success
        assert gs.player_position == (0, 5)

    @pytest.mark.parametrize("dx,dy", [(1, 1), (0, 0), (2, 0)])
    def test_non_cardinal_rejected(self, dx, dy):
        gs = _make_game()
        assert not attempt_move(gs, dx, dy).success
        assert gs.player_position == (5, 5)

    def test_rejected_when_not_playing(self):
        gs = _make_game()
        gs.phase = GamePhase.PAUSED
        assert not attempt_move(gs, 1, 0).success
        assert gs.player_position == (5, 5)

    def test_rejected_without_level(self):
        gs = create_game()
        gs.phase = GamePhase.PLAYING
        assert not attempt_move(gs, 1, 0).success

    def test_discovery_block(self):
        gs = _make_game()
        attempt_move(gs, 1, 0)
        level = gs.level
        for y in range(level.height):
            for x in range(level.width):
                expected = 4 <= x <= 8 and 3 <= y <= 7
                assert level.discovered[y][x] == expected

    def test_discovery_clipped(self):
        gs = _make_game(player_position=(1, 2))
        attempt_move(gs, 0, -1)
        level = gs.level
        assert gs.player_position == (1, 1)
        assert level.discovered[0][0]
        assert level.discovered[3][3]
        assert not level.discovered[4][1]
        assert not level.discovered[1][4]


class TestInteractions:
    """Tests for bumping into entities and the door."""

    def test_bump_enemy_attacks(self):
        enemy = EnemyEntity(id="e", name="Ash Walker", position=(6, 5), stats=_stats(hp=1000))
        gs = _make_game([enemy])
        result = attempt_move(gs, 1, 0, random.Random(1))
        assert result.action_type == ActionType.ATTACK
        assert gs.player_position == (5, 5)
        assert 10 <= 1000 - enemy.stats.hp <= 15

    def test_dead_enemy_does_not_block(self):
        enemy = EnemyEntity(id="e", name="Ash Walker", position=(6, 5), stats=_stats(), is_dead=True)
        gs = _make_game([enemy])
        result = attempt_move(gs, 1, 0)
        assert result.action_type == ActionType.MOVE
        assert gs.player_position == (6, 5)

    def test_bump_chest_opens(self):
        chest = ChestEntity(id="c", name="Ancient Cache", position=(5, 6), stats=_stats(hp=1))
        gs = _make_game([chest])
        gs.player_stats.hp = 20
        result = attempt_move(gs, 0, 1)
        assert result.action_type == ActionType.OPEN_CHEST
        assert chest.is_dead
        assert gs.player_position == (5, 5)
        assert gs.player_stats.max_hp == 110
        assert gs.player_stats.hp == 110
        assert gs.player_stats.strength == 12

    def test_door_sealed_while_boss_lives(self):
        gs = _make_game([_boss()], player_position=(8, 5))
        result = attempt_move(gs, 1, 0)
        assert not result.success
        assert gs.phase == GamePhase.PLAYING
        assert gs.player_position == (8, 5)
        assert gs.depth == 1
        assert "sealed" in gs.log[-1].text

    def test_door_opens_after_boss_dies(self):
        gs = _make_game([_boss(dead=True)], player_position=(8, 5))
        gs.player_stats.hp = 30
        gs.player_stats.stamina = 10
        gs.player_stats.ember = 40
        result = attempt_move(gs, 1, 0, random.Random(5))
        assert result.success
        assert result.action_type == ActionType.DESCEND
        assert gs.depth == 2
        assert gs.level.depth == 2
        assert gs.level.theme == ThemeId.FORGOTTEN_CATACOMBS
        assert gs.player_position == gs.level.start_position
        assert gs.player_stats.hp == gs.player_stats.max_hp
        assert gs.player_stats.stamina == gs.player_stats.max_stamina
        assert gs.player_stats.ember == 40
        assert not any(cell for row in gs.level.discovered for cell in row)

    def test_tap_adjacent_moves(self):
        gs = _make_game()
        assert tap_tile(gs, 5, 4).success
        assert gs.player_position == (5, 4)

    def test_tap_far_ignored(self):
        gs = _make_game()
        assert not tap_tile(gs, 7, 7).success
        assert not tap_tile(gs, 6, 6).success
        assert gs.player_position == (5, 5)

    def test_use_special_requires_play(self):
        gs = _make_game()
        gs.player_stats.ember = 100
        gs.phase = GamePhase.PAUSED
        assert not use_special(gs).success
        assert gs.player_stats.ember == 100

    def test_use_special(self):
        enemy = EnemyEntity(id="e", name="Ash Walker", position=(5, 6), stats=_stats(hp=60))
        gs = _make_game([enemy])
        gs.player_stats.ember = 50
        result = use_special(gs)
        assert result.success
        assert enemy.stats.hp == 10


class TestDescend:
    """Tests for descend()."""

    def test_descend_logs_and_resets_clear(self):
        gs = start_game(create_game(), random.Random(3))
        gs.level_cleared = True
        descend(gs, random.Random(4))
        assert gs.depth == 2
        assert not gs.level_cleared
        texts = [m.text for m in gs.log]
        assert "Descended to depth 2." in texts


class TestEndToEnd:
    """Scenario: fight an enemy, take a counter-attack."""

    def test_fight_and_counter(self):
        enemy = EnemyEntity(id="e", name="Ash Walker", position=(6, 5), stats=_stats(hp=40, strength=5))
        gs = _make_game([enemy])
        rng = random.Random(12)
        attempt_move(gs, 1, 0, rng)
        assert 10 <= 40 - enemy.stats.hp <= 15
        run_ai_tick(gs, rng)
        assert 94 <= gs.player_stats.hp <= 96


class TestSnapshot:
    """Tests for build_snapshot()."""

    def test_menu_snapshot(self):
        snap = build_snapshot(create_game())
        assert snap.phase == GamePhase.MENU
        assert snap.tiles == []
        assert snap.player.kind == EntityKind.PLAYER

    def test_playing_snapshot(self):
        gs = start_game(create_game(), random.Random(1))
        snap = build_snapshot(gs)
        assert snap.theme.name == "Ash Caverns"
        assert snap.width == gs.level.width
        assert len(snap.entities) == len(gs.level.entities)
        assert snap.player.position == gs.player_position
        assert snap.exit_position == gs.level.exit_position

    def test_player_hp_never_negative(self):
        gs = _make_game()
        gs.player_stats.hp = -7
        snap = build_snapshot(gs)
        assert snap.player.stats.hp == 0
        assert snap.player.is_dead

    def test_serializes(self):
        gs = start_game(create_game(), random.Random(1))
        data = build_snapshot(gs).model_dump(mode="json")
        assert data["phase"] == "playing"
        assert data["tiles"][0][0] == TileType.WALL.value
        assert all("kind" in e for e in data["entities"])
