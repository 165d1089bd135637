"""Intent submission and state retrieval endpoints for the renderer."""

from fastapi import APIRouter, HTTPException, Request

from api.ws import notify_snapshot
from engine.session import (
    attempt_move,
    build_snapshot,
    pause_game,
    resume_game,
    return_to_menu,
    start_game,
    tap_tile,
    use_special,
)
from models.actions import ActionResult, MoveRequest, TapRequest
from models.game_state import GamePhase, GameSnapshot, GameState, LogMessage

router = APIRouter()


def _get_game(request: Request) -> GameState:
    """Get the singleton session from app state."""
    return request.app.state.game


def _require_playing(game_state: GameState) -> None:
    if game_state.phase != GamePhase.PLAYING:
        raise HTTPException(
            status_code=409,
            detail=f"Game is not running (phase: {game_state.phase.value})",
        )


async def _after_change(request: Request) -> None:
    """Align the timers with the new phase and push a snapshot."""
    request.app.state.ticker.sync()
    await notify_snapshot(_get_game(request))


@router.get("/state", response_model=GameSnapshot)
async def get_game_state(request: Request) -> GameSnapshot:
    """Full snapshot for rendering."""
    return build_snapshot(_get_game(request))


@router.post("/start", response_model=GameSnapshot)
async def start(request: Request) -> GameSnapshot:
    """Begin a new run at depth 1, from any phase."""
    game_state = _get_game(request)
    start_game(game_state, request.app.state.rng)
    await _after_change(request)
    return build_snapshot(game_state)


@router.post("/move", response_model=ActionResult)
async def move(body: MoveRequest, request: Request) -> ActionResult:
    """Step, attack, loot or descend in a cardinal direction.

    Rejected moves are not errors: they come back with success=false.
    """
    game_state = _get_game(request)
    _require_playing(game_state)
    dx, dy = body.direction.delta
    result = attempt_move(game_state, dx, dy, request.app.state.rng)
    await _after_change(request)
    return result


@router.post("/tap", response_model=ActionResult)
async def tap(body: TapRequest, request: Request) -> ActionResult:
    """Pointer tap on a tile; only tiles next to the player do anything."""
    game_state = _get_game(request)
    _require_playing(game_state)
    result = tap_tile(game_state, body.x, body.y, request.app.state.rng)
    await _after_change(request)
    return result


@router.post("/burst", response_model=ActionResult)
async def burst(request: Request) -> ActionResult:
    """Trigger the ember burst."""
    game_state = _get_game(request)
    _require_playing(game_state)
    result = use_special(game_state)
    await _after_change(request)
    return result


@router.post("/pause", response_model=GameSnapshot)
async def pause(request: Request) -> GameSnapshot:
    """Pause a running game; timers stop."""
    game_state = _get_game(request)
    pause_game(game_state)
    await _after_change(request)
    return build_snapshot(game_state)


@router.post("/resume", response_model=GameSnapshot)
async def resume(request: Request) -> GameSnapshot:
    """Resume a paused game; timers restart from a full interval."""
    game_state = _get_game(request)
    resume_game(game_state)
    await _after_change(request)
    return build_snapshot(game_state)


@router.post("/menu", response_model=GameSnapshot)
async def menu(request: Request) -> GameSnapshot:
    """Abandon the run and return to the menu."""
    game_state = _get_game(request)
    return_to_menu(game_state)
    await _after_change(request)
    return build_snapshot(game_state)


@router.get("/log", response_model=list[LogMessage])
async def get_game_log(request: Request) -> list[LogMessage]:
    """The rolling message log, oldest first."""
    return list(_get_game(request).log)
