"""
Streaming Factory

Builds the driver and framework registries and creates the configured
camera driver. Single place that knows every implementation name.

Registries are created eagerly and passed by reference; nothing here is
module-level state.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from streaming.config_node import ConfigNode
from streaming.constants import (
    DRIVER_FFMPEG_SIMPLE,
    DRIVER_SIMPLE,
    FRAMEWORK_FFMPEG,
    FRAMEWORK_MOCK,
)
from streaming.controllers.ffmpeg_simple_driver import FFmpegSimpleCameraDriver
from streaming.controllers.simple_driver import SimpleCameraDriver
from streaming.implementations.ffmpeg_framework import FFmpegFramework
from streaming.implementations.mock_framework import MockFramework
from streaming.interfaces.driver_interface import CameraDriverInterface
from streaming.interfaces.object_sink_interface import ObjectSinkInterface
from streaming.options import require_block, require_string
from streaming.registry import Registry


class StreamingFactory:
    """
    Factory for registries and camera drivers.

    Usage:
        frameworks = StreamingFactory.create_framework_registry()
        drivers = StreamingFactory.create_driver_registry()
        driver = StreamingFactory.create_driver(
            root.descend("driver"), sink, frameworks=frameworks, drivers=drivers,
        )
    """

    _logger = logging.getLogger(__name__)

    @classmethod
    def create_framework_registry(cls) -> Registry:
        """Registry with "ffmpeg" and "mock" frameworks"""
        registry = Registry("framework")
        registry.register(FRAMEWORK_FFMPEG, FFmpegFramework)
        registry.register(FRAMEWORK_MOCK, MockFramework)
        cls._logger.debug(f"Framework registry ready: {registry.names()}")
        return registry

    @classmethod
    def create_driver_registry(cls) -> Registry:
        """Registry with "simple" and "ffmpeg_simple" drivers"""
        registry = Registry("camera driver")
        registry.register(DRIVER_SIMPLE, SimpleCameraDriver)
        registry.register(DRIVER_FFMPEG_SIMPLE, FFmpegSimpleCameraDriver)
        cls._logger.debug(f"Driver registry ready: {registry.names()}")
        return registry

    @classmethod
    def create_driver(
        cls,
        options: ConfigNode,
        sink: ObjectSinkInterface,
        frameworks: Optional[Registry] = None,
        drivers: Optional[Registry] = None,
    ) -> CameraDriverInterface:
        """
        Create the driver named by options["name"].

        Args:
            options: Driver config block
            sink: Object sink handed to the driver
            frameworks: Framework registry (None = default registry)
            drivers: Driver registry (None = default registry)

        Raises:
            ConfigError: If name is missing or the driver config is invalid
            UnknownNameError: If no driver is registered under name
        """
        name = require_string(options, "name")
        frameworks = frameworks if frameworks is not None else cls.create_framework_registry()
        drivers = drivers if drivers is not None else cls.create_driver_registry()

        driver = drivers.resolve(name, options, sink=sink, frameworks=frameworks)
        cls._logger.info(f"Camera driver created: {name}")
        return driver


# Convenience functions for quick creation

def create_driver_from_file(
    config_path: Union[str, Path],
    sink: ObjectSinkInterface,
) -> CameraDriverInterface:
    """
    Load a YAML config and create the driver from its `driver` block.

    Example:
        driver = create_driver_from_file("config/camera.yaml", MemorySink())
    """
    root = ConfigNode.from_yaml(config_path)
    return StreamingFactory.create_driver(require_block(root, "driver"), sink)
