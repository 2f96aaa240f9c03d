"""
Streaming Implementations Package

Exposes concrete frameworks and object sinks.
"""

from streaming.implementations.ffmpeg_framework import FFmpegFramework
from streaming.implementations.file_sink import FileObjectSink
from streaming.implementations.memory_sink import MemorySink
from streaming.implementations.mock_framework import MockFramework

# Public API
__all__ = [
    "FFmpegFramework",
    "FileObjectSink",
    "MemorySink",
    "MockFramework",
]
