"""
Command Builder

Turns stream options into an ffmpeg command line.

Two strategies:
- Direct assembly (ffmpeg framework): flags concatenated in fixed order
- Template rendering (ffmpeg_simple driver): mustache placeholders

Both produce a single string run through the shell, so configured extra
arguments may use shell syntax. Values are inserted verbatim.
"""

import logging
import posixpath
import secrets
from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

import chevron

from streaming.constants import STREAM_ID_LENGTH, STREAM_ID_LETTERS
from streaming.interfaces.framework_interface import ConfigError
from streaming.options import FFmpegOptions, OutputOptions

logger = logging.getLogger(__name__)


# =============================================================================
# STREAM ENDPOINTS
# =============================================================================


def generate_stream_id(length: int = STREAM_ID_LENGTH) -> str:
    """
    Generate a random alphanumeric live id.

    Example:
        generate_stream_id()  # 64 chars from [a-zA-Z0-9]
    """
    return "".join(secrets.choice(STREAM_ID_LETTERS) for _ in range(length))


def make_stream_endpoint(
    prefix: str,
    config_path: str = "file_prefix",
    stream_id: Optional[str] = None,
) -> str:
    """
    Append a fresh live id to an output prefix.

    The path part is normalized so repeated separators and `.`/`..`
    segments cannot corrupt the endpoint.

    Args:
        prefix: Output prefix, like `rtmp://rtmp-server:1935/live`
        config_path: Dotted config path of the prefix, for errors
        stream_id: Live id to use (None = generate one)

    Returns:
        Endpoint like `rtmp://rtmp-server:1935/live/<64 chars>`

    Raises:
        ConfigError: If the prefix cannot be parsed as a URL or path

    Example:
        make_stream_endpoint("rtmp://r//app/")  # rtmp://r/app/Xy3...
    """
    live_id = stream_id or generate_stream_id()
    try:
        parts = urlsplit(f"{prefix}/{live_id}")
        # Port is validated lazily by urllib
        parts.port
    except ValueError as e:
        raise ConfigError(config_path, str(e)) from e

    path = posixpath.normpath(parts.path)
    if path.startswith("//"):
        path = "/" + path.lstrip("/")

    return urlunsplit(parts._replace(path=path))


# =============================================================================
# DIRECT ASSEMBLY
# =============================================================================


def resolve_output_file(output: OutputOptions) -> str:
    """Full output file, generating an endpoint for prefix outputs"""
    if output.file:
        return output.file
    path = f"{output.path}.file_prefix" if output.path else "file_prefix"
    return make_stream_endpoint(output.file_prefix, path)


def build_ffmpeg_arguments(options: FFmpegOptions) -> List[str]:
    """
    Assemble ffmpeg arguments in fixed order.

    Order:
        <binary> -y
        per input:  -f <format> -i <file> -s <frame_size> -r <frame_rate>
        video:      -c:v <name> -b:v <bit_rate> <extra...>
        audio:      -c:a <name> <extra...>   (or -an without audio block)
        per output: -f <format> <file>

    Optional values are left out when empty.
    """
    args = [options.binary, "-y"]

    for stream_input in options.inputs:
        if stream_input.format:
            args += ["-f", stream_input.format]
        args += ["-i", stream_input.file]
        if stream_input.frame_size:
            args += ["-s", stream_input.frame_size]
        if stream_input.frame_rate:
            args += ["-r", stream_input.frame_rate]

    args += ["-c:v", options.video_codec.name]
    if options.video_codec.bit_rate:
        args += ["-b:v", options.video_codec.bit_rate]
    args += options.video_codec.extra

    if options.audio_codec is None:
        args.append("-an")
    else:
        args += ["-c:a", options.audio_codec.name]
        args += options.audio_codec.extra

    for output in options.outputs:
        args += ["-f", output.format, resolve_output_file(output)]

    return args


def build_ffmpeg_command(options: FFmpegOptions) -> str:
    """
    Build the shell command for the ffmpeg framework.

    Prefix outputs get a new endpoint on every call.

    Example:
        build_ffmpeg_command(FFmpegOptions.from_node(node))
        # ffmpeg -y -f v4l2 -i /dev/video0 -c:v h264 -an -f flv rtmp://...
    """
    return " ".join(build_ffmpeg_arguments(options))


# =============================================================================
# TEMPLATE RENDERING
# =============================================================================


def render_ffmpeg_template(template: str, values: Dict[str, str]) -> str:
    """
    Render a mustache command template.

    Unknown placeholders render empty. Surrounding whitespace (trailing
    newline of a YAML block scalar) is stripped.

    Example:
        render_ffmpeg_template("{{{ffmpeg_file}}} -y", {"ffmpeg_file": "ffmpeg"})
    """
    command = chevron.render(template, values).strip()
    logger.debug(f"Rendered ffmpeg template: {command}")
    return command
