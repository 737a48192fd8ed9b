"""Tests for the generic polling service loop."""

import threading

import pytest

from hygro.lib.polling import PollingService


class CountingService(PollingService[int]):
    """Polls increasing integers, persisting only the even ones."""

    def __init__(self, limit: int, frequency_sec: float = 0.001) -> None:
        super().__init__(name="counter", frequency_sec=frequency_sec)
        self.limit = limit
        self.count = 0
        self.persisted: list[int] = []
        self.errors: list[Exception] = []
        self.initialized = False
        self.cleaned_up = False

    def initialize(self) -> None:
        self.initialized = True

    def cleanup(self) -> None:
        self.cleaned_up = True

    def poll(self) -> int | None:
        self.count += 1
        if self.count == 3:
            raise ValueError("flaky")
        if self.count >= self.limit:
            self.request_stop()
        return self.count

    def audit(self, reading: int) -> int | None:
        return reading if reading % 2 == 0 else None

    def persist(self, reading: int) -> None:
        self.persisted.append(reading)

    def on_poll_error(self, error: Exception) -> None:
        self.errors.append(error)
        super().on_poll_error(error)


class TestPollingService:
    """Tests for the poll → audit → persist loop."""

    def test_run_loop_cycles_until_stopped(self):
        service = CountingService(limit=6)

        thread = service.start()
        thread.join(timeout=5)

        assert not thread.is_alive()
        assert service.initialized
        assert service.cleaned_up
        assert service.persisted == [2, 4, 6]

    def test_errors_are_handled_and_loop_continues(self, caplog):
        service = CountingService(limit=5)

        service.start().join(timeout=5)

        assert [str(e) for e in service.errors] == ["flaky"]
        assert service.count == 5
        assert "counter poll error: flaky" in caplog.text

    def test_default_frequency_from_settings(self, test_settings):
        service = CountingService(limit=1, frequency_sec=None)
        assert service.frequency_sec == test_settings.sampling.read_wait_sec

    def test_stop_wakes_sleeping_loop(self):
        service = CountingService(limit=100, frequency_sec=60)

        thread = service.start()
        service.stop(timeout=5)

        assert not thread.is_alive()
        assert service.cleaned_up
        assert not service.is_running

    def test_stop_from_polling_thread_does_not_deadlock(self):
        service = CountingService(limit=100, frequency_sec=60)
        stopped = threading.Event()

        def poll_and_stop() -> int:
            service.stop(timeout=1)
            stopped.set()
            return 0

        service.poll = poll_and_stop  # type: ignore[method-assign]
        thread = service.start()

        assert stopped.wait(timeout=5)
        thread.join(timeout=5)
        assert not thread.is_alive()

    def test_cleanup_runs_after_persist_error(self):
        service = CountingService(limit=100)

        def broken_persist(reading: int) -> None:
            service.request_stop()
            raise RuntimeError("disk full")

        service.persist = broken_persist  # type: ignore[method-assign]
        service.start().join(timeout=5)

        assert service.cleaned_up
        assert [str(e) for e in service.errors] == ["disk full"]

    def test_cannot_start_twice(self):
        service = CountingService(limit=100, frequency_sec=60)
        service.start()
        try:
            with pytest.raises(RuntimeError):
                service.start()
        finally:
            service.stop(timeout=5)
