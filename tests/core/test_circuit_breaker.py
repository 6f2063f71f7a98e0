"""Tests for healthnote.core.circuit_breaker."""

from healthnote.core.circuit_breaker import CircuitBreaker, CircuitBreakerConfig


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class TestCircuitBreaker:
    def test_initially_available(self):
        assert CircuitBreaker().is_available("logs")

    def test_opens_after_consecutive_failures(self):
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=3, open_duration=60))
        cb.record("logs", success=False)
        cb.record("logs", success=False)
        assert cb.is_available("logs")  # Only 2, need 3
        cb.record("logs", success=False)
        assert not cb.is_available("logs")

    def test_success_resets_consecutive_count(self):
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=3))
        cb.record("logs", success=False)
        cb.record("logs", success=False)
        cb.record("logs", success=True)
        cb.record("logs", success=False)
        assert cb.is_available("logs")

    def test_closes_after_open_duration(self):
        clock = FakeClock()
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=2, open_duration=30), clock=clock)
        cb.record("logs", success=False)
        cb.record("logs", success=False)
        assert not cb.is_available("logs")
        clock.now += 31
        assert cb.is_available("logs")

    def test_manual_reset(self):
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=2, open_duration=999))
        cb.record("profiles", success=False)
        cb.record("profiles", success=False)
        cb.record("logs", success=False)
        cb.record("logs", success=False)
        cb.reset("profiles")
        assert cb.is_available("profiles")
        assert not cb.is_available("logs")
        cb.reset()
        assert cb.is_available("logs")

    def test_independent_collections(self):
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=2))
        cb.record("profiles", success=False)
        cb.record("profiles", success=False)
        cb.record("logs", success=True)
        assert not cb.is_available("profiles")
        assert cb.is_available("logs")

    def test_get_status(self):
        cb = CircuitBreaker(CircuitBreakerConfig(failure_threshold=2))
        cb.record("logs", success=True)
        cb.record("logs", success=False)
        status = cb.get_status()["logs"]
        assert status == {"total_calls": 2, "successes": 1, "failures": 1, "circuit_open": False}

    def test_custom_history_size(self):
        cb = CircuitBreaker(CircuitBreakerConfig(history_size=5))
        for _ in range(10):
            cb.record("logs", success=True)
        assert cb.get_status()["logs"]["total_calls"] == 5
