"""
Object Sink Interface

Key/value publishing collaborator used by drivers to report stream
metadata to the managing host.

Writes are NOT transactional: put_objects() writes key by key, so a
failure part-way leaves earlier keys written. Drivers log such failures
and keep their own state authoritative.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from streaming.interfaces.framework_interface import StreamingError


class ObjectSinkInterface(ABC):
    """
    Abstract base class for object sinks.
    """

    @abstractmethod
    def put_object(self, key: str, data: bytes) -> None:
        """
        Publish one object.

        Raises:
            SinkError: If the object could not be written
        """

    @abstractmethod
    def remove_object(self, key: str) -> None:
        """
        Retract one object. Removing a missing key is not an error.

        Raises:
            SinkError: If the object could not be removed
        """

    @abstractmethod
    def get_object(self, key: str) -> Optional[bytes]:
        """Read back an object, or None if not published"""

    def put_objects(self, objects: Dict[str, bytes]) -> None:
        """
        Publish several objects, one at a time.

        Stops at the first failure; keys written before it stay written.

        Raises:
            SinkError: From the first failing put_object()
        """
        for key, data in objects.items():
            self.put_object(key, data)


class SinkError(StreamingError):
    """Object could not be published or retracted"""
    pass
