"""
Memory Sink Implementation

In-process object sink. Used by tests and by hosts that read published
objects directly instead of from disk.
"""

import logging
import threading
from typing import Dict, List, Optional, Set, Tuple

from streaming.interfaces.object_sink_interface import ObjectSinkInterface, SinkError


class MemorySink(ObjectSinkInterface):
    """
    Thread-safe dict-backed sink.

    Keeps a history of operations so tests can check that each object was
    published or retracted exactly once.

    Usage:
        sink = MemorySink()
        sink.put_object("state", b"on")
        assert sink.get_object("state") == b"on"
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._objects: Dict[str, bytes] = {}

        # ("put" | "remove", key) in call order
        self.history: List[Tuple[str, str]] = []

        # Configuration for test scenarios
        self._failing_keys: Set[str] = set()

    def put_object(self, key: str, data: bytes) -> None:
        with self._lock:
            if key in self._failing_keys:
                raise SinkError(f"Simulated put failure: {key}")
            self._objects[key] = bytes(data)
            self.history.append(("put", key))

    def remove_object(self, key: str) -> None:
        with self._lock:
            if key in self._failing_keys:
                raise SinkError(f"Simulated remove failure: {key}")
            self._objects.pop(key, None)
            self.history.append(("remove", key))

    def get_object(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._objects.get(key)

    def keys(self) -> List[str]:
        """Published keys, sorted"""
        with self._lock:
            return sorted(self._objects)

    def count(self, operation: str, key: str) -> int:
        """Number of times operation ("put"/"remove") hit key"""
        with self._lock:
            return self.history.count((operation, key))

    def fail_on(self, *keys: str) -> None:
        """Make put/remove of these keys raise SinkError"""
        with self._lock:
            self._failing_keys.update(keys)

    def clear_history(self) -> None:
        with self._lock:
            self.history.clear()
