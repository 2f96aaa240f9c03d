"""
Streaming Constants

Enums, registry names, published object keys and FFmpeg defaults.

Note: Tunable values (binary, shell, stop signal, id length) live in
config/settings.py. This file only holds fixed protocol values and
re-exports what the streaming modules need.
"""

import string
from enum import Enum

from config.settings import (
    FFMPEG_BINARY,
    FFMPEG_SHELL,
    FFMPEG_STDERR_TAIL_LINES,
    FFMPEG_STOP_SIGNAL,
    STREAM_ID_LENGTH,
)

# =============================================================================
# STATES
# =============================================================================


class DriverState(Enum):
    """
    Camera driver state, published verbatim under the "state" key.

    Lifecycle: OFF -> ON -> OFF
    """

    ON = "on"
    OFF = "off"


class FrameworkState(Enum):
    """
    Process supervisor state.

    Lifecycle: IDLE -> RUNNING -> IDLE
    """

    IDLE = "idle"
    RUNNING = "running"


# =============================================================================
# REGISTRY NAMES
# =============================================================================

DRIVER_SIMPLE = "simple"
DRIVER_FFMPEG_SIMPLE = "ffmpeg_simple"

FRAMEWORK_FFMPEG = "ffmpeg"
FRAMEWORK_MOCK = "mock"

# =============================================================================
# PUBLISHED OBJECTS
# =============================================================================

# Stream endpoint, removed on stop
SINK_KEY_STREAM = "rtmp"

# Literal "on" / "off"
SINK_KEY_STATE = "state"

# =============================================================================
# STREAM ENDPOINTS
# =============================================================================

# Alphabet of the random live id appended to output prefixes
STREAM_ID_LETTERS = string.ascii_lowercase + string.ascii_uppercase + string.digits

# =============================================================================
# FFMPEG TEMPLATE (ffmpeg_simple driver)
# =============================================================================

# Triple braces: values are shell arguments, not HTML
FFMPEG_SIMPLE_DEFAULT_TEMPLATE = (
    "{{{ffmpeg_file}}} -y"
    " -f {{{video_input_format}}} -i {{{video_input_file}}}"
    " -s {{{video_input_frame_size}}} -r {{{video_input_frame_rate}}}"
    " -c:v {{{video_input_codec_name}}} -b:v {{{video_input_codec_bit_rate}}}"
    " {{{video_input_codec_extra}}}"
    " -f {{{output_format}}} {{{output_file}}}"
)

__all__ = [
    "DRIVER_FFMPEG_SIMPLE",
    "DRIVER_SIMPLE",
    "FFMPEG_BINARY",
    "FFMPEG_SHELL",
    "FFMPEG_SIMPLE_DEFAULT_TEMPLATE",
    "FFMPEG_STDERR_TAIL_LINES",
    "FFMPEG_STOP_SIGNAL",
    "FRAMEWORK_FFMPEG",
    "FRAMEWORK_MOCK",
    "SINK_KEY_STATE",
    "SINK_KEY_STREAM",
    "STREAM_ID_LENGTH",
    "STREAM_ID_LETTERS",
    "DriverState",
    "FrameworkState",
]
