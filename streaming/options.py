"""
Stream Options

Typed views of the driver and framework configuration.

Each dataclass is parsed once from a ConfigNode when its owner is
constructed. Missing required fields raise ConfigError naming the exact
dotted path; optional fields default to "" / [] / None.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import chevron

from streaming.config_node import ConfigNode
from streaming.constants import FFMPEG_BINARY, FFMPEG_SIMPLE_DEFAULT_TEMPLATE
from streaming.interfaces.framework_interface import ConfigError


def require_block(node: ConfigNode, key: str) -> ConfigNode:
    """Get a sub-block or raise ConfigError naming it"""
    block = node.descend(key)
    if block is None:
        raise ConfigError(node.path_of(key))
    return block


def require_string(node: ConfigNode, key: str) -> str:
    """Get a non-empty scalar or raise ConfigError naming it"""
    value = node.get_string(key)
    if not value:
        raise ConfigError(node.path_of(key))
    return value


def first_block(node: ConfigNode) -> Tuple[str, ConfigNode]:
    """
    Get the first indexed block of node.

    Returns:
        (key, block) for the lowest child key

    Raises:
        ConfigError: If node has no child blocks
    """
    keys = node.next_keys()
    if not keys:
        raise ConfigError(node.path, "no entries")
    return keys[0], node.descend(keys[0])


# =============================================================================
# FFMPEG FRAMEWORK
# =============================================================================


@dataclass
class InputOptions:
    """
    One ffmpeg input (-f/-i/-s/-r).

    Without a format ffmpeg probes the input.
    """

    file: str
    format: str = ""
    frame_size: str = ""  # 640x480
    frame_rate: str = ""  # 30

    @classmethod
    def from_node(cls, node: ConfigNode) -> "InputOptions":
        return cls(
            file=require_string(node, "file"),
            format=node.get_string("format"),
            frame_size=node.get_string("frame_size"),
            frame_rate=node.get_string("frame_rate"),
        )


@dataclass
class CodecOptions:
    """Video or audio codec (-c:v/-b:v or -c:a plus extra arguments)"""

    name: str
    bit_rate: str = ""
    extra: List[str] = field(default_factory=list)

    @classmethod
    def from_node(cls, node: ConfigNode) -> "CodecOptions":
        return cls(
            name=require_string(node, "name"),
            bit_rate=node.get_string("bit_rate"),
            extra=node.get_list("extra"),
        )


@dataclass
class OutputOptions:
    """
    One ffmpeg output.

    Either a full `file`, or a `file_prefix` that gets a fresh random
    live id on every start.
    """

    format: str
    file: str = ""
    file_prefix: str = ""
    path: str = ""  # Dotted config path, for endpoint errors

    @classmethod
    def from_node(cls, node: ConfigNode) -> "OutputOptions":
        output_format = require_string(node, "format")
        output_file = node.get_string("file")
        file_prefix = node.get_string("file_prefix")
        if not output_file and not file_prefix:
            raise ConfigError(node.path_of("file"))
        return cls(
            format=output_format,
            file=output_file,
            file_prefix=file_prefix,
            path=node.path,
        )


@dataclass
class FFmpegOptions:
    """
    Complete ffmpeg framework configuration.

    Example YAML (under driver.framework):
        name: ffmpeg
        binary: ffmpeg
        inputs:
          0: {format: v4l2, frame_size: 640x480, frame_rate: 30}
        video:
          codec: {name: h264_omx, bit_rate: 2000k, extra: [-g, "60"]}
        audio:              # absent => -an
          codec: {name: aac}
        outputs:
          0: {format: flv}  # file set by the driver
    """

    binary: str
    inputs: List[InputOptions]
    video_codec: CodecOptions
    audio_codec: Optional[CodecOptions]
    outputs: List[OutputOptions]

    @classmethod
    def from_node(cls, node: ConfigNode) -> "FFmpegOptions":
        """
        Parse and validate.

        Raises:
            ConfigError: On the first missing required field
        """
        inputs_node = require_block(node, "inputs")
        inputs = [
            InputOptions.from_node(inputs_node.descend(k))
            for k in inputs_node.next_keys()
        ]
        if not inputs:
            raise ConfigError(inputs_node.path, "no entries")

        video = require_block(node, "video")
        video_codec = CodecOptions.from_node(require_block(video, "codec"))

        # Audio block absent disables audio; present but incomplete is an error
        audio_codec = None
        audio = node.descend("audio")
        if audio is not None:
            audio_codec = CodecOptions.from_node(require_block(audio, "codec"))

        outputs_node = require_block(node, "outputs")
        outputs = [
            OutputOptions.from_node(outputs_node.descend(k))
            for k in outputs_node.next_keys()
        ]
        if not outputs:
            raise ConfigError(outputs_node.path, "no entries")

        return cls(
            binary=node.get_string("binary") or FFMPEG_BINARY,
            inputs=inputs,
            video_codec=video_codec,
            audio_codec=audio_codec,
            outputs=outputs,
        )


# =============================================================================
# SIMPLE DRIVER
# =============================================================================


@dataclass
class SimpleDriverOptions:
    """
    Configuration of the "simple" driver.

    Only the first input and first output block are used. The rest of
    the framework block is handed to the framework untouched.
    """

    input_key: str
    input_file: str
    output_key: str
    file_prefix: str
    file_prefix_path: str
    framework_name: str
    framework: ConfigNode

    @classmethod
    def from_node(cls, node: ConfigNode) -> "SimpleDriverOptions":
        input_key, input_block = first_block(require_block(node, "inputs"))
        output_key, output_block = first_block(require_block(node, "outputs"))
        framework = require_block(node, "framework")

        return cls(
            input_key=input_key,
            input_file=require_string(input_block, "file"),
            output_key=output_key,
            file_prefix=require_string(output_block, "file_prefix"),
            file_prefix_path=output_block.path_of("file_prefix"),
            framework_name=require_string(framework, "name"),
            framework=framework,
        )


# =============================================================================
# FFMPEG SIMPLE DRIVER
# =============================================================================


@dataclass
class FFmpegSimpleOptions:
    """
    Configuration of the "ffmpeg_simple" driver (template strategy).

    Every field the default template uses is required, except the codec
    extra arguments.
    """

    ffmpeg_file: str
    template: str
    video_input_format: str
    video_input_file: str
    video_input_frame_size: str
    video_input_frame_rate: str
    video_input_codec_name: str
    video_input_codec_bit_rate: str
    video_input_codec_extra: str
    output_format: str
    output_file_prefix: str
    output_file_prefix_path: str

    @classmethod
    def from_node(cls, node: ConfigNode) -> "FFmpegSimpleOptions":
        video_input = require_block(node, "video_input")
        codec = require_block(video_input, "codec")
        output = require_block(node, "output")

        options = cls(
            ffmpeg_file=node.get_string("ffmpeg_file") or FFMPEG_BINARY,
            template=node.get_string("ffmpeg_template") or FFMPEG_SIMPLE_DEFAULT_TEMPLATE,
            video_input_format=require_string(video_input, "format"),
            video_input_file=require_string(video_input, "file"),
            video_input_frame_size=require_string(video_input, "frame_size"),
            video_input_frame_rate=require_string(video_input, "frame_rate"),
            video_input_codec_name=require_string(codec, "name"),
            video_input_codec_bit_rate=require_string(codec, "bit_rate"),
            video_input_codec_extra=" ".join(codec.get_list("extra")),
            output_format=require_string(output, "format"),
            output_file_prefix=require_string(output, "file_prefix"),
            output_file_prefix_path=output.path_of("file_prefix"),
        )

        # A broken template must fail here, not on every start
        try:
            chevron.render(options.template, options.template_values(options.output_file_prefix))
        except chevron.ChevronError as e:
            raise ConfigError(node.path_of("ffmpeg_template"), str(e)) from e

        return options

    def template_values(self, output_file: str) -> dict:
        """Placeholder values for one start"""
        return {
            "ffmpeg_file": self.ffmpeg_file,
            "video_input_format": self.video_input_format,
            "video_input_file": self.video_input_file,
            "video_input_frame_size": self.video_input_frame_size,
            "video_input_frame_rate": self.video_input_frame_rate,
            "video_input_codec_name": self.video_input_codec_name,
            "video_input_codec_bit_rate": self.video_input_codec_bit_rate,
            "video_input_codec_extra": self.video_input_codec_extra,
            "output_format": self.output_format,
            "output_file": output_file,
        }
