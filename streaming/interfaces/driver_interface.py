"""
Camera Driver Interface

Abstract interface for camera drivers.

A driver is the top-level state machine the host talks to. It derives the
process configuration, owns the running process (directly or through a
framework) and mirrors the process lifecycle into published objects:
    - "rtmp": current stream endpoint (removed on stop)
    - "state": "on" / "off"
"""

from abc import ABC, abstractmethod
from typing import Optional

from streaming.constants import DriverState
from streaming.interfaces.framework_interface import NotStoppableError


class CameraDriverInterface(ABC):
    """
    Abstract base class for camera drivers.

    Lifecycle: OFF -> start() -> ON -> stop() | process exit -> OFF
    """

    @abstractmethod
    def start(self) -> None:
        """
        Start streaming.

        Returns once the encoding process is spawned and the stream
        endpoint is published.

        Raises:
            NotStartableError: If already ON
            ConfigError: If configuration is incomplete (nothing spawned)
            UnknownNameError: If the configured framework is not registered
            ProcessError: If the process could not be spawned
        """

    @abstractmethod
    def stop(self) -> None:
        """
        Stop streaming and retract published objects.

        Failure to stop the process itself is logged, not raised.

        Raises:
            NotStoppableError: If already OFF
        """

    @abstractmethod
    def state(self) -> DriverState:
        """Get current driver state"""

    @abstractmethod
    def stream_endpoint(self) -> Optional[str]:
        """Get the endpoint of the running stream, or None when OFF"""

    def cleanup(self) -> None:
        """
        Stop streaming if ON. Never raises.

        Called by the host on shutdown.
        """
        if self.state() is DriverState.ON:
            try:
                self.stop()
            except NotStoppableError:
                # Lost a race with the exit watcher; already OFF
                pass
