"""
Streaming Interfaces Package

Exposes abstract interfaces and exceptions for streaming components.
"""

from streaming.interfaces.driver_interface import CameraDriverInterface
from streaming.interfaces.framework_interface import (
    ConfigError,
    FrameworkInterface,
    NotStartableError,
    NotStoppableError,
    ProcessError,
    ProcessExitError,
    SpawnFailedError,
    StateError,
    StreamingError,
    UnknownNameError,
)
from streaming.interfaces.object_sink_interface import (
    ObjectSinkInterface,
    SinkError,
)

# Public API
__all__ = [
    # Interfaces
    "CameraDriverInterface",
    # Exceptions
    "ConfigError",
    "FrameworkInterface",
    "NotStartableError",
    "NotStoppableError",
    "ObjectSinkInterface",
    "ProcessError",
    "ProcessExitError",
    "SinkError",
    "SpawnFailedError",
    "StateError",
    "StreamingError",
    "UnknownNameError",
]
