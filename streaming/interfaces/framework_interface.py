"""
Framework Interface

Abstract interface for process supervisors ("frameworks").
A framework owns exactly one external encoding process at a time.

Camera drivers depend on this abstraction, not on FFmpeg directly,
so a MockFramework can stand in during tests.

Lifecycle: IDLE -> start() -> RUNNING -> stop() | process exit -> IDLE
"""

from abc import ABC, abstractmethod
from concurrent.futures import Future, InvalidStateError
from typing import List, Optional

from streaming.constants import FrameworkState


def settle_future(future: Future, error: Optional[BaseException]) -> bool:
    """
    Resolve a run's completion future exactly once.

    Returns:
        True if this call resolved it, False if it was already done
        (resolved earlier or cancelled by a subscriber)
    """
    try:
        if error is None:
            future.set_result(None)
        else:
            future.set_exception(error)
    except InvalidStateError:
        return False
    return True


def resolved_future() -> Future:
    """Completion future for a framework that never ran"""
    future: Future = Future()
    future.set_result(None)
    return future


class FrameworkInterface(ABC):
    """
    Abstract base class for process supervisors.

    Implementations must serialize start/stop/exit handling with a single
    lock and must never block while holding it.
    """

    @abstractmethod
    def start(self) -> None:
        """
        Build the command line and spawn the process.

        NON-BLOCKING - returns as soon as the process is spawned.
        A background thread watches for the process exit.

        Raises:
            NotStartableError: If a process is already running
            ConfigError: If the command cannot be built (nothing spawned)
            SpawnFailedError: If the OS refused to spawn the process
        """

    @abstractmethod
    def stop(self) -> None:
        """
        Send a single termination signal to the running process.

        Resolves the current run's completion future with None and
        returns to IDLE without waiting for the process to go away.

        Raises:
            NotStoppableError: If no process is running
        """

    @abstractmethod
    def wait(self) -> Future:
        """
        Get the completion future of the current (or most recent) run.

        All callers of the same run share one future. It resolves with
        None for a clean exit or an explicit stop, and with an exception
        (ProcessExitError) when the process dies on its own with an error.
        A caller arriving after the run ended gets the resolved future.

        Example:
            done = framework.wait()
            error = done.exception()  # blocks until the run ends
        """

    @abstractmethod
    def state(self) -> FrameworkState:
        """Get current state (IDLE or RUNNING)"""

    @abstractmethod
    def cleanup(self) -> None:
        """
        Stop any running process. Never raises.
        """


class StreamingError(Exception):
    """
    Base exception for the streaming component.

    Hosts catch this to turn any driver/framework failure into a
    response for the caller.
    """
    pass


class ConfigError(StreamingError):
    """
    Missing or invalid configuration field.

    Always raised before any process is spawned or anything is published.
    Carries the full dotted path of the offending field.
    """

    def __init__(self, path: str, reason: Optional[str] = None):
        self.path = path
        self.reason = reason
        message = f"invalid config: {path}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class UnknownNameError(StreamingError):
    """No constructor registered under the requested name"""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"invalid {kind}: {name!r}")


class StateError(StreamingError):
    """Operation invoked in the wrong state. Nothing was changed."""
    pass


class NotStartableError(StateError):
    """Start requested while already running"""

    def __init__(self, message: str = "not startable"):
        super().__init__(message)


class NotStoppableError(StateError):
    """Stop requested while not running"""

    def __init__(self, message: str = "not stoppable"):
        super().__init__(message)


class ProcessError(StreamingError):
    """Error spawning, signalling or waiting for the external process"""
    pass


class SpawnFailedError(ProcessError):
    """The OS could not spawn the process (shell missing, permissions...)"""
    pass


class ProcessExitError(ProcessError):
    """The process exited on its own with a non-zero status"""

    def __init__(self, returncode: int, stderr_tail: Optional[List[str]] = None):
        self.returncode = returncode
        self.stderr_tail = list(stderr_tail or [])
        message = f"process exited with code {returncode}"
        if self.stderr_tail:
            message += f": {self.stderr_tail[-1]}"
        super().__init__(message)
