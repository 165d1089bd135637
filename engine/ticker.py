"""Periodic simulation timers: enemy AI and passive regeneration."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import TYPE_CHECKING, Awaitable, Callable

from config import AI_TICK_SECONDS, REGEN_TICK_SECONDS
from engine.npc import run_ai_tick, run_regen_tick
from models.game_state import GamePhase

if TYPE_CHECKING:
    from models.actions import ActionResult
    from models.game_state import GameState

logger = logging.getLogger(__name__)

OnChange = Callable[["list[ActionResult]"], Awaitable[None]]


class Ticker:
    """Owns the AI and regen timers for one session.

    Both timers exist only while the session is PLAYING. Call ``sync()``
    after anything that may change the phase; it starts or cancels the timers
    to match. Each timer also exits by itself when it wakes up to a phase
    other than PLAYING, so a fresh start never inherits a partial interval.

    Steps run synchronously inside the event loop, so they never interleave
    with request handlers that also mutate the session.
    """

    def __init__(
        self,
        game_state: GameState,
        on_change: OnChange | None = None,
        ai_interval: float = AI_TICK_SECONDS,
        regen_interval: float = REGEN_TICK_SECONDS,
        rng: random.Random | None = None,
    ) -> None:
        self.game_state = game_state
        self.on_change = on_change
        self.ai_interval = ai_interval
        self.regen_interval = regen_interval
        self.rng = rng
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        """True only while both timers are alive."""
        return bool(self._tasks) and all(not task.done() for task in self._tasks)

    def sync(self) -> None:
        """Start or stop the timers to match the session phase.

        A timer that exited on its own (say after a defeat) while its partner
        is still sleeping counts as stopped: the leftover is cancelled and both
        restart together. Must be called from inside the running event loop.
        """
        playing = self.game_state.phase == GamePhase.PLAYING
        if playing and not self.running:
            self._cancel()
            self._start()
        elif not playing:
            self._cancel()

    def _start(self) -> None:
        loop = asyncio.get_running_loop()
        self._tasks = [
            loop.create_task(self._run_ai(), name="ai-tick"),
            loop.create_task(self._run_regen(), name="regen-tick"),
        ]
        logger.info("Tick timers started")

    def _cancel(self) -> None:
        if not self._tasks:
            return
        for task in self._tasks:
            task.cancel()
        self._tasks = []
        logger.info("Tick timers stopped")

    async def stop(self) -> None:
        """Cancel both timers and wait for them to finish."""
        tasks = self._tasks
        self._cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _playing(self) -> bool:
        return self.game_state.phase == GamePhase.PLAYING

    async def _run_ai(self) -> None:
        while True:
            await asyncio.sleep(self.ai_interval)
            if not self._playing():
                return
            results = run_ai_tick(self.game_state, self.rng)
            if self.on_change is not None:
                await self.on_change(results)
            if not self._playing():
                logger.info("AI timer exiting, phase is %s", self.game_state.phase.value)
                return

    async def _run_regen(self) -> None:
        while True:
            await asyncio.sleep(self.regen_interval)
            if not self._playing():
                return
            run_regen_tick(self.game_state)
