"""
Streaming Module

Live streaming of a camera feed through an external ffmpeg process.

Pluggable layers:
- Camera drivers ("simple", "ffmpeg_simple"): state machines the host
  starts and stops; they publish the stream endpoint and on/off state
- Frameworks ("ffmpeg", "mock"): own one encoding process each

Public API:
    - StreamingFactory: Registries and driver creation
    - ConfigNode: Hierarchical configuration accessor
    - Registry: Name -> constructor table
    - CameraDriverInterface / FrameworkInterface / ObjectSinkInterface
    - FileObjectSink / MemorySink: Object sinks
    - StreamingError: Base exception (ConfigError, UnknownNameError, ...)

Usage:
    from streaming import ConfigNode, MemorySink, StreamingFactory

    root = ConfigNode.from_yaml("config/camera.yaml")
    driver = StreamingFactory.create_driver(root.descend("driver"), MemorySink())
    driver.start()
"""

from streaming.config_node import ConfigNode
from streaming.constants import DriverState, FrameworkState
from streaming.controllers.ffmpeg_simple_driver import FFmpegSimpleCameraDriver
from streaming.controllers.simple_driver import SimpleCameraDriver
from streaming.factory import StreamingFactory, create_driver_from_file
from streaming.implementations.ffmpeg_framework import FFmpegFramework
from streaming.implementations.file_sink import FileObjectSink
from streaming.implementations.memory_sink import MemorySink
from streaming.implementations.mock_framework import MockFramework
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
from streaming.interfaces.object_sink_interface import ObjectSinkInterface, SinkError
from streaming.registry import Registry

__all__ = [
    "CameraDriverInterface",
    "ConfigError",
    "ConfigNode",
    "DriverState",
    "FFmpegFramework",
    "FFmpegSimpleCameraDriver",
    "FileObjectSink",
    "FrameworkInterface",
    "FrameworkState",
    "MemorySink",
    "MockFramework",
    "NotStartableError",
    "NotStoppableError",
    "ObjectSinkInterface",
    "ProcessError",
    "ProcessExitError",
    "Registry",
    "SimpleCameraDriver",
    "SinkError",
    "SpawnFailedError",
    "StateError",
    "StreamingError",
    "StreamingFactory",
    "UnknownNameError",
    "create_driver_from_file",
]
