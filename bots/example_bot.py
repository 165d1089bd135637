"""Reference client that plays Emberhymn Server via the REST API.

Starts a run and plays it with simple rules:
  - If an enemy is adjacent, attack it.
  - If two or more enemies are in burst range and ember allows, burst.
  - If an enemy is nearby, step toward it.
  - Otherwise head for the exit door.

Usage:
    1. Start the server:  uvicorn main:app --reload
    2. Run this bot:      python bots/example_bot.py

Environment variables:
    EMBERHYMN_URL: server base URL (default: "http://127.0.0.1:8000")
"""

import os
import time

import httpx

BASE_URL = os.environ.get("EMBERHYMN_URL", "http://127.0.0.1:8000")
MAX_STEPS = 2000
BURST_COST = 50
BURST_RADIUS = 2


def main() -> None:
    """Play until the run ends or the step budget runs out."""
    client = httpx.Client(base_url=BASE_URL, timeout=10.0)

    print("Starting a new run...")
    resp = client.post("/game/start")
    resp.raise_for_status()
    state = resp.json()
    print(f"  Depth {state['depth']}: {state['theme']['name']}")

    deepest = state["depth"]
    for _ in range(MAX_STEPS):
        resp = client.get("/game/state")
        resp.raise_for_status()
        state = resp.json()

        if state["phase"] != "playing":
            break
        if state["depth"] > deepest:
            deepest = state["depth"]
            print(f"  Reached depth {deepest}: {state['theme']['name']}")

        me = state["player"]
        my_pos = tuple(me["position"])
        enemies = [
            e for e in state["entities"]
            if e["kind"] in ("enemy", "boss") and not e["is_dead"]
        ]

        in_burst = [e for e in enemies if _manhattan(my_pos, tuple(e["position"])) <= BURST_RADIUS]
        if me["stats"]["ember"] >= BURST_COST and len(in_burst) >= 2:
            _post(client, "/game/burst")
            continue

        adjacent = [e for e in enemies if _manhattan(my_pos, tuple(e["position"])) == 1]
        if adjacent:
            _step_toward(client, my_pos, tuple(adjacent[0]["position"]))
            continue

        if enemies:
            nearest = min(enemies, key=lambda e: _manhattan(my_pos, tuple(e["position"])))
            if _manhattan(my_pos, tuple(nearest["position"])) <= 8:
                _step_toward(client, my_pos, tuple(nearest["position"]))
                continue

        _step_toward(client, my_pos, tuple(state["exit_position"]))
        time.sleep(0.05)

    print(f"\n*** Run ended: phase={state['phase']} depth={state['depth']} ***")

    print("\n--- MESSAGE LOG ---\n")
    resp = client.get("/game/log")
    resp.raise_for_status()
    for message in resp.json():
        print(f"  [{message['category']}] {message['text']}")

    client.close()


def _step_toward(client: httpx.Client, src: tuple[int, int], dst: tuple[int, int]) -> bool:
    """Try the X axis first, then Y. Returns True if either step succeeded."""
    dx = _sign(dst[0] - src[0])
    dy = _sign(dst[1] - src[1])
    options = []
    if dx:
        options.append("right" if dx > 0 else "left")
    if dy:
        options.append("down" if dy > 0 else "up")
    for direction in options:
        if _post(client, "/game/move", {"direction": direction}):
            return True
    return False


def _post(client: httpx.Client, path: str, payload: dict | None = None) -> bool:
    """Submit an intent and print the result. Returns True if it took effect."""
    resp = client.post(path, json=payload)
    if resp.status_code != 200:
        print(f"  -> FAILED: {resp.json().get('detail', resp.text)}")
        return False
    result = resp.json()
    if result["success"] and result["action_type"] != "move":
        print(f"  -> {result['description']}")
    return result["success"]


def _manhattan(a: tuple[int, int], b: tuple[int, int]) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def _sign(n: int) -> int:
    """Return -1, 0, or 1 based on the sign of n."""
    if n > 0:
        return 1
    if n < 0:
        return -1
    return 0


if __name__ == "__main__":
    main()
