"""
Mock Framework Implementation

Simulated process supervisor for testing drivers without ffmpeg.

This is a "Fake" (test double) - it follows the framework state machine
and completion-future contract, but spawns nothing. Tests drive the
process lifecycle by hand:
    framework.simulate_exit()              # clean spontaneous exit
    framework.simulate_exit(ProcessExitError(1))
"""

import logging
import threading
from concurrent.futures import Future
from typing import Optional

from streaming.config_node import ConfigNode
from streaming.constants import FrameworkState
from streaming.interfaces.framework_interface import (
    FrameworkInterface,
    NotStartableError,
    NotStoppableError,
    ProcessError,
    SpawnFailedError,
    resolved_future,
    settle_future,
)


class MockFramework(FrameworkInterface):
    """
    Mock framework for testing.

    Usage:
        framework = MockFramework(ConfigNode.from_dict({"name": "mock"}))
        framework.start()
        done = framework.wait()
        framework.simulate_exit()
        assert done.result() is None
    """

    def __init__(self, options: Optional[ConfigNode] = None, **kwargs):
        """
        Args:
            options: Framework config block (kept for inspection)
            **kwargs: Named arguments from the registry (unused)
        """
        self.logger = logging.getLogger(__name__)
        self.options = options if options is not None else ConfigNode()

        self._lock = threading.Lock()
        self._running = False
        self._done: Future = resolved_future()

        # Counters for assertions
        self.start_count = 0
        self.stop_count = 0

        # Configuration for test scenarios
        self._should_fail_start = False
        self._should_fail_stop = False

        self.logger.debug("[MOCK] Framework initialized")

    def start(self) -> None:
        with self._lock:
            if self._running:
                raise NotStartableError("mock framework already running")
            if self._should_fail_start:
                self.logger.error("[MOCK] Simulated spawn failure")
                raise SpawnFailedError("Simulated spawn failure")

            self._running = True
            self._done = Future()
            self.start_count += 1
            self.logger.info("[MOCK] Framework started")

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                raise NotStoppableError("mock framework not running")

            self._running = False
            self.stop_count += 1
            settle_future(self._done, None)
            self.logger.info("[MOCK] Framework stopped")

            if self._should_fail_stop:
                raise ProcessError("Simulated stop failure")

    def wait(self) -> Future:
        with self._lock:
            return self._done

    def state(self) -> FrameworkState:
        with self._lock:
            return FrameworkState.RUNNING if self._running else FrameworkState.IDLE

    def cleanup(self) -> None:
        with self._lock:
            if self._running:
                self._running = False
                settle_future(self._done, None)

    # =========================================================================
    # TESTING HELPER METHODS (not part of FrameworkInterface)
    # =========================================================================

    def simulate_start_failure(self) -> None:
        """
        Configure mock to fail on the next start() call.

        Example:
            mock.simulate_start_failure()
            with pytest.raises(SpawnFailedError):
                mock.start()
        """
        self._should_fail_start = True
        self.logger.debug("[MOCK] Configured to fail on start")

    def simulate_stop_failure(self) -> None:
        """Configure mock to raise ProcessError from stop() (after stopping)"""
        self._should_fail_stop = True
        self.logger.debug("[MOCK] Configured to fail on stop")

    def reset_test_config(self) -> None:
        self._should_fail_start = False
        self._should_fail_stop = False
        self.logger.debug("[MOCK] Test configuration reset")

    def simulate_exit(self, error: Optional[BaseException] = None) -> bool:
        """
        Simulate the process exiting on its own.

        Returns:
            True if a running process "exited", False if idle
        """
        with self._lock:
            if not self._running:
                return False

            self._running = False
            settle_future(self._done, error)
            self.logger.info(f"[MOCK] Simulated exit (error: {error})")
            return True
