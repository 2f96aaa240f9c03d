"""
Base Camera Driver

State and published-object handling shared by the camera drivers.

Publishing is a two-step, best-effort operation: the endpoint and the
state flag are separate sink writes. A failing write is logged and the
driver carries on; its own state stays authoritative.
"""

import logging
import threading
from typing import Optional

from streaming.constants import SINK_KEY_STATE, SINK_KEY_STREAM, DriverState
from streaming.interfaces.driver_interface import CameraDriverInterface
from streaming.interfaces.object_sink_interface import ObjectSinkInterface


class BaseCameraDriver(CameraDriverInterface):
    """
    Lock, state and sink plumbing for drivers.

    Subclasses implement start()/stop() and call _publish_on() and
    _reset() while holding self._lock.
    """

    def __init__(self, sink: ObjectSinkInterface):
        self.logger = logging.getLogger(self.__class__.__module__)
        self.sink = sink

        self._lock = threading.Lock()
        self._state = DriverState.OFF
        self._endpoint: Optional[str] = None
        self._watcher: Optional[threading.Thread] = None

    def state(self) -> DriverState:
        with self._lock:
            return self._state

    def stream_endpoint(self) -> Optional[str]:
        with self._lock:
            return self._endpoint

    def _publish_on(self, endpoint: str) -> None:
        """Publish endpoint and state=on. Must hold self._lock."""
        try:
            self.sink.put_objects({
                SINK_KEY_STREAM: endpoint.encode("utf-8"),
                SINK_KEY_STATE: DriverState.ON.value.encode("utf-8"),
            })
        except Exception as e:
            self.logger.warning(f"Failed to publish stream objects: {e}")

    def _retract(self) -> None:
        """Remove endpoint and publish state=off. Must hold self._lock."""
        try:
            self.sink.remove_object(SINK_KEY_STREAM)
        except Exception as e:
            self.logger.warning(f"Failed to remove {SINK_KEY_STREAM} object: {e}")

        try:
            self.sink.put_object(SINK_KEY_STATE, DriverState.OFF.value.encode("utf-8"))
        except Exception as e:
            self.logger.warning(f"Failed to write off state: {e}")

    def _start_watcher(self, target, *args) -> None:
        """Run target(*args) in a daemon thread. Must hold self._lock."""
        self._watcher = threading.Thread(
            target=target,
            args=args,
            daemon=True,
            name=f"{self.__class__.__name__}-watcher",
        )
        self._watcher.start()
