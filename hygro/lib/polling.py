"""Generic threaded polling service abstraction.

Provides a reusable base class for sensor polling services that follow
the poll → audit → persist pattern with a fixed interval, running on a
dedicated background thread.
"""
import signal
import threading
import time
from abc import ABC, abstractmethod
from types import FrameType

from hygro.lib.config import get_settings
from hygro.logging import get_logger

logger = get_logger("lib.polling")


class PollingService[T](ABC):
    """Abstract base class for threaded sensor polling services.

    Implements the common polling loop pattern with:
    - Configurable polling frequency
    - Cancellation between cycles (and during the sleep)
    - Error recovery
    """

    def __init__(
        self,
        name: str,
        frequency_sec: float | None = None,
    ) -> None:
        """Initialize the polling service.

        Args:
            name: Service name for logging.
            frequency_sec: Polling frequency in seconds.
        """
        self.name = name
        if frequency_sec is None:
            frequency_sec = get_settings().sampling.read_wait_sec
        self.frequency_sec = frequency_sec
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._logger = get_logger(f"polling.{name}")

    @abstractmethod
    def initialize(self) -> None:
        """Initialize any resources needed before polling starts.

        Called once at the start of the loop, on the polling thread.
        """

    @abstractmethod
    def cleanup(self) -> None:
        """Clean up resources before exit.

        Called once when the polling loop exits. Should release hardware.
        """

    @abstractmethod
    def poll(self) -> T | None:
        """Poll the sensor for a new reading.

        Returns:
            A reading object, or None if the reading failed and should be skipped.
        """

    @abstractmethod
    def audit(self, reading: T) -> T | None:
        """Decide what, if anything, gets persisted after a poll.

        Args:
            reading: The freshly polled reading.

        Returns:
            The reading to persist (not necessarily the one passed in),
            or None to skip persisting this cycle.
        """

    @abstractmethod
    def persist(self, reading: T) -> None:
        """Persist an audited reading.

        Args:
            reading: The reading returned by audit().
        """

    def on_poll_error(self, error: Exception) -> None:
        """Handle an error that occurred during a poll cycle.

        Override to customize error handling. Default logs the error.
        """
        self._logger.warning("%s poll error: %s", self.name, error)

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    @property
    def is_running(self) -> bool:
        """Whether the background polling thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def request_stop(self) -> None:
        """Ask the loop to exit after the current cycle."""
        self._stop_event.set()

    def _handle_shutdown(self, signum: int, frame: FrameType | None) -> None:
        """Handle shutdown signals gracefully."""
        signal_name = signal.Signals(signum).name
        self._logger.info("Received %s, initiating graceful shutdown...", signal_name)
        self.request_stop()

    def _setup_signal_handlers(self) -> None:
        """Register signal handlers for graceful shutdown."""
        signal.signal(signal.SIGTERM, self._handle_shutdown)
        signal.signal(signal.SIGINT, self._handle_shutdown)

    def _poll_cycle(self) -> None:
        """Execute a single poll → audit → persist cycle."""
        reading = self.poll()
        if reading is not None:
            audited = self.audit(reading)
            if audited is not None:
                self.persist(audited)

    def _run_loop(self) -> None:
        """Run the polling loop with precise timing."""
        self.initialize()
        self._logger.info("%s polling service started", self.name)

        try:
            while not self._stop_event.is_set():
                cycle_start = time.monotonic()

                try:
                    self._poll_cycle()
                except Exception as e:
                    self.on_poll_error(e)

                if self._stop_event.is_set():
                    break

                # Sleep only the remaining time to maintain consistent intervals
                elapsed = time.monotonic() - cycle_start
                sleep_time = max(0, self.frequency_sec - elapsed)
                if sleep_time > 0:
                    self._stop_event.wait(sleep_time)
        finally:
            self._logger.info("Cleaning up resources...")
            self.cleanup()
            self._logger.info("%s shutdown complete", self.name)

    def start(self) -> threading.Thread:
        """Start the polling loop on a background daemon thread."""
        if self.is_running:
            raise RuntimeError(f"{self.name} polling service already running")
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run_loop, name=f"{self.name}-poller", daemon=True
        )
        self._thread.start()
        return self._thread

    def stop(self, timeout: float | None = None) -> None:
        """Stop the background loop and wait for it to finish."""
        self.request_stop()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def run(self) -> None:
        """Run the polling loop in the foreground.

        This is the entry point for running without a server. It:
        1. Sets up signal handlers for graceful shutdown
        2. Calls initialize()
        3. Enters the polling loop (poll → audit → persist)
        4. Calls cleanup() on exit
        """
        self._setup_signal_handlers()
        self._run_loop()
