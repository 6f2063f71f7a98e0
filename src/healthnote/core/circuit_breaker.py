"""Circuit breaker for the remote mirror.

Counts consecutive failures per collection and opens the circuit (skips
further calls) once the threshold is hit. The circuit closes again on its
own after a cool-down, or immediately on the next recorded success.
"""

import time
from collections import deque
from dataclasses import dataclass


@dataclass
class CircuitBreakerConfig:
    """Configuration for circuit breaker behavior."""

    failure_threshold: int = 3
    """Consecutive failures required to open the circuit."""

    open_duration: float = 300.0
    """Seconds to keep the circuit open before allowing calls again."""

    history_size: int = 20
    """Rolling window of call outcomes to retain."""


class CircuitBreaker:
    """Track remote success/failure per collection.

    Usage::

        cb = CircuitBreaker()
        if cb.is_available("logs"):
            try:
                backend.insert_log(row)
                cb.record("logs", success=True)
            except RemoteError:
                cb.record("logs", success=False)
        else:
            # Circuit is open: treat as unreachable without calling out
            ...
    """

    def __init__(self, config: CircuitBreakerConfig | None = None, clock=time.monotonic):
        self.config = config or CircuitBreakerConfig()
        self._clock = clock
        self._history: dict[str, deque] = {}
        self._open_until: dict[str, float] = {}

    def record(self, name: str, *, success: bool) -> None:
        """Record a call outcome for *name*."""
        if name not in self._history:
            self._history[name] = deque(maxlen=self.config.history_size)
        self._history[name].append((self._clock(), success))

        if success:
            self._open_until.pop(name, None)
            return

        recent = list(self._history[name])[-self.config.failure_threshold :]
        if len(recent) >= self.config.failure_threshold and not any(ok for _, ok in recent):
            self._open_until[name] = self._clock() + self.config.open_duration

    def is_available(self, name: str) -> bool:
        """Return True if the circuit for *name* is closed."""
        return self._clock() >= self._open_until.get(name, 0.0)

    def reset(self, name: str | None = None) -> None:
        """Close one circuit, or all of them."""
        if name is None:
            self._open_until.clear()
        else:
            self._open_until.pop(name, None)

    def get_status(self) -> dict[str, dict]:
        """Return debug info about all tracked collections."""
        status: dict[str, dict] = {}
        for name, hist in self._history.items():
            successes = sum(1 for _, ok in hist if ok)
            status[name] = {
                "total_calls": len(hist),
                "successes": successes,
                "failures": len(hist) - successes,
                "circuit_open": not self.is_available(name),
            }
        return status
