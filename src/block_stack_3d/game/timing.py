from __future__ import annotations

from typing import Optional, Tuple

from .core import BlockStackGame, GameState


BASE_INTERVAL_MS = 3000.0
SPEED_MULTIPLIER = 0.85
MIN_INTERVAL_MS = 100.0


def fall_interval_ms(
    level: int,
    base_interval_ms: float = BASE_INTERVAL_MS,
    multiplier: float = SPEED_MULTIPLIER,
    min_interval_ms: float = MIN_INTERVAL_MS,
) -> float:
    return max(min_interval_ms, base_interval_ms * multiplier ** (level - 1))


class FallTimer:
    """Polled gravity timer for a host loop.

    Call :meth:`update` with the current time in milliseconds every frame.
    The timer re-arms whenever the game's state or level changes, and only
    drops the piece if the game is still playing when the deadline passes.
    """

    def __init__(
        self,
        game: BlockStackGame,
        base_interval_ms: float = BASE_INTERVAL_MS,
        multiplier: float = SPEED_MULTIPLIER,
        min_interval_ms: float = MIN_INTERVAL_MS,
    ) -> None:
        self.game = game
        self.base_interval_ms = base_interval_ms
        self.multiplier = multiplier
        self.min_interval_ms = min_interval_ms
        self._armed_for: Optional[Tuple[GameState, int]] = None
        self._deadline: Optional[float] = None

    @property
    def interval_ms(self) -> float:
        return fall_interval_ms(self.game.level, self.base_interval_ms, self.multiplier, self.min_interval_ms)

    @property
    def running(self) -> bool:
        return self._deadline is not None

    def update(self, now_ms: float) -> bool:
        """Advance the timer; returns True if a gravity tick fired."""
        key = (self.game.state, self.game.level)
        if key != self._armed_for:
            self._armed_for = key
            self._deadline = now_ms + self.interval_ms if self.game.is_playing else None
        if self._deadline is None or now_ms < self._deadline:
            return False
        self._deadline = now_ms + self.interval_ms
        if not self.game.is_playing:
            return False
        self.game.tick()
        return True
