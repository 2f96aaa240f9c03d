"""
Streaming Utilities Package

Exposes command building and process helpers.
"""

from streaming.utils.command_builder import (
    build_ffmpeg_arguments,
    build_ffmpeg_command,
    generate_stream_id,
    make_stream_endpoint,
    render_ffmpeg_template,
    resolve_output_file,
)
from streaming.utils.process_utils import (
    drain_and_wait,
    exit_error,
    resolve_stop_signal,
    send_stop_signal,
    spawn_shell_command,
)

# Public API
__all__ = [
    "build_ffmpeg_arguments",
    "build_ffmpeg_command",
    "drain_and_wait",
    "exit_error",
    "generate_stream_id",
    "make_stream_endpoint",
    "render_ffmpeg_template",
    "resolve_output_file",
    "resolve_stop_signal",
    "send_stop_signal",
    "spawn_shell_command",
]
