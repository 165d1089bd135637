"""WebSocket endpoint that pushes state snapshots to the renderer."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from engine.session import build_snapshot
from models.actions import ActionResult
from models.game_state import GamePhase, GameState

router = APIRouter()

# Connected renderers
connections: list[WebSocket] = []


async def broadcast(message: dict[str, Any]) -> None:
    """Send a message to all connected WebSocket clients.

    Args:
        message: The JSON-serializable message to send.
    """
    disconnected = []
    for i, ws in enumerate(connections):
        try:
            await ws.send_json(message)
        except Exception:
            disconnected.append(i)
    # Clean up disconnected clients
    for i in reversed(disconnected):
        connections.pop(i)


async def notify_snapshot(game_state: GameState) -> None:
    """Push the full state to every renderer."""
    if not connections:
        return
    snapshot = build_snapshot(game_state)
    await broadcast({"type": "snapshot", **snapshot.model_dump(mode="json")})


async def notify_game_over(game_state: GameState) -> None:
    """Tell every renderer the run has ended."""
    await broadcast({"type": "game_over", "depth": game_state.depth})


async def notify_tick(game_state: GameState, results: list[ActionResult]) -> None:
    """Push the state after an AI tick.

    AI ticks only run while PLAYING, so a tick that leaves the session in
    GAME_OVER is the one that ended the run. Only that tick sends the
    game-over notice.
    """
    await notify_snapshot(game_state)
    if results and game_state.phase == GamePhase.GAME_OVER:
        await notify_game_over(game_state)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    """WebSocket endpoint for real-time snapshots.

    Sends the current snapshot on connect, then one after every action and
    AI tick.
    """
    await websocket.accept()
    connections.append(websocket)

    try:
        game_state = websocket.app.state.game
        await websocket.send_json(
            {"type": "snapshot", **build_snapshot(game_state).model_dump(mode="json")}
        )

        # Keep connection alive; inbound messages are ignored
        while True:
            try:
                await websocket.receive_text()
            except WebSocketDisconnect:
                break
    finally:
        if websocket in connections:
            connections.remove(websocket)
