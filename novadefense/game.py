"""Host-facing session driver.

Wraps `Sim` with the lifecycle a presentation layer needs:

    loop = GameLoop(config, listener=hud)
    loop.start("HARD")          # fresh session, status -> PLAYING
    loop.pointer(x, y)          # queued, applied at the start of the next frame
    loop.frame()                # one tick, dt measured from the clock
    loop.stop()                 # halt; the next start() rebuilds everything

Ticks only run while playing. Reaching a terminal outcome halts the loop the
same way `stop()` does.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, Protocol

from .config import Difficulty, GameConfig
from .sim.sim import Sim
from .sim.state import Outcome, SessionStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    import numpy as np

logger = logging.getLogger(__name__)


class GameListener(Protocol):
    def on_score(self, score: int) -> None: ...

    def on_ammo(self, battery_id: str, ammo: int) -> None: ...

    def on_game_end(self, outcome: Outcome) -> None: ...


class GameLoop:
    def __init__(
        self,
        config: GameConfig | None = None,
        *,
        listener: GameListener | None = None,
        clock: Callable[[], float] = time.perf_counter,
        rng: np.random.Generator | None = None,
    ):
        self.sim = Sim(config, rng=rng)
        self.listener = listener
        self.clock = clock
        self.difficulty = Difficulty.NORMAL
        self._running = False
        self._last_time: float | None = None
        self._pending: deque[tuple[float, float]] = deque()
        self.frames = 0

    @property
    def status(self) -> SessionStatus:
        return self.sim.status

    @property
    def running(self) -> bool:
        return self._running

    @property
    def outcome(self) -> Outcome | None:
        return None if self.sim.state is None else self.sim.state.outcome

    def start(self, difficulty: Difficulty | str = Difficulty.NORMAL) -> None:
        self.difficulty = Difficulty.parse(difficulty)
        self._pending.clear()
        self._dispatch(self.sim.reset(self.difficulty))
        self._dispatch([{"type": "score", "score": 0}])
        self._running = True
        self._last_time = self.clock()
        self.frames = 0

    def stop(self) -> None:
        if self._running:
            logger.info(f"Session stopped after {self.frames} frames")
        self._running = False
        self._last_time = None
        self._pending.clear()

    def pointer(self, x: float, y: float) -> None:
        """Queue a pointer event in field coordinates. Dropped while not running."""
        if self._running:
            self._pending.append((float(x), float(y)))

    def frame(self, now: float | None = None) -> list[dict]:
        """Apply queued input and advance one tick. Returns the frame's events."""
        if not self._running:
            return []
        now = self.clock() if now is None else float(now)
        last = now if self._last_time is None else self._last_time
        dt = max(0.0, now - last)
        self._last_time = now

        events: list[dict] = []
        while self._pending and self.sim.status is SessionStatus.PLAYING:
            x, y = self._pending.popleft()
            _, applied = self.sim.handle_pointer(x, y)
            events.extend(applied)
        events.extend(self.sim.step(dt))
        self.frames += 1
        self._dispatch(events)

        if self.sim.status is not SessionStatus.PLAYING:
            self._running = False
            self._pending.clear()
        return events

    def snapshot(self) -> dict[str, Any]:
        return self.sim.snapshot()

    def _dispatch(self, events: list[dict]) -> None:
        if self.listener is None:
            return
        score: int | None = None
        for ev in events:
            kind = ev.get("type")
            if kind == "score":
                score = int(ev["score"])
            elif kind == "ammo":
                self.listener.on_ammo(str(ev["battery"]), int(ev["ammo"]))
        # Coalesce to one score notification per frame.
        if score is not None:
            self.listener.on_score(score)
        for ev in events:
            if ev.get("type") == "game_end":
                outcome = self.outcome
                if outcome is not None:
                    self.listener.on_game_end(outcome)
