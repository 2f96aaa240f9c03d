"""
Streaming Controllers Package

Camera drivers: the state machines the host talks to.
"""

from streaming.controllers.base_driver import BaseCameraDriver
from streaming.controllers.ffmpeg_simple_driver import FFmpegSimpleCameraDriver
from streaming.controllers.simple_driver import SimpleCameraDriver

# Public API
__all__ = [
    "BaseCameraDriver",
    "FFmpegSimpleCameraDriver",
    "SimpleCameraDriver",
]
