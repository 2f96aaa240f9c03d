"""
FFmpeg Simple Camera Driver

Driver "ffmpeg_simple": renders a command template and owns the ffmpeg
process itself, without a framework. Generates a random live id per
start, for livego-style RTMP servers.

Options:
    driver:
      name: ffmpeg_simple
      [ffmpeg_file: ffmpeg]          # ffmpeg binary path
      video_input:
        format: <format>             # like `v4l2`
        file: <path>                 # like `/dev/video0`
        frame_size: <w>x<h>          # like `640x480`
        frame_rate: <rate>           # like `30`
        codec:
          name: <codec>              # like `h264_omx` on Raspberry Pi
          bit_rate: <rate>           # like `2000k`
          [extra: [...]]             # extra codec arguments
      output:
        format: <format>             # like `flv`
        file_prefix: <prefix>        # like `rtmp://rtmp-server:1935/live`
      [ffmpeg_template: <template>]  # default: FFMPEG_SIMPLE_DEFAULT_TEMPLATE
"""

import subprocess
from typing import Optional

from streaming.config_node import ConfigNode
from streaming.constants import (
    FFMPEG_STDERR_TAIL_LINES,
    FFMPEG_STOP_SIGNAL,
    DriverState,
)
from streaming.controllers.base_driver import BaseCameraDriver
from streaming.interfaces.framework_interface import (
    NotStartableError,
    NotStoppableError,
    ProcessError,
)
from streaming.interfaces.object_sink_interface import ObjectSinkInterface
from streaming.options import FFmpegSimpleOptions
from streaming.utils.command_builder import make_stream_endpoint, render_ffmpeg_template
from streaming.utils.process_utils import (
    drain_and_wait,
    exit_error,
    resolve_stop_signal,
    send_stop_signal,
    spawn_shell_command,
)


class FFmpegSimpleCameraDriver(BaseCameraDriver):
    """
    Template-based camera driver.

    Usage:
        driver = FFmpegSimpleCameraDriver(options, sink=sink)
        driver.start()
        driver.stop()
    """

    def __init__(self, options: ConfigNode, sink: ObjectSinkInterface, **kwargs):
        """
        Initialize and validate configuration.

        Args:
            options: Driver config block
            sink: Where rtmp/state objects are published
            **kwargs: Other named arguments from the registry (frameworks),
                      not needed by this driver

        Raises:
            ConfigError: If a required field is missing
        """
        super().__init__(sink)
        self.options = FFmpegSimpleOptions.from_node(options)
        self.stop_signal = resolve_stop_signal(FFMPEG_STOP_SIGNAL)
        self._process: Optional[subprocess.Popen] = None

        self.logger.info(
            f"FFmpeg simple camera driver initialized "
            f"(input: {self.options.video_input_file})",
        )

    def start(self) -> None:
        with self._lock:
            if self._state is DriverState.ON:
                raise NotStartableError("camera already on")

            endpoint = make_stream_endpoint(
                self.options.output_file_prefix,
                self.options.output_file_prefix_path,
            )
            command = render_ffmpeg_template(
                self.options.template,
                self.options.template_values(endpoint),
            )
            process = spawn_shell_command(command)

            self._publish_on(endpoint)

            self._process = process
            self._endpoint = endpoint
            self._state = DriverState.ON
            self._start_watcher(self._watch_process, process)

            self.logger.info(f"FFmpeg started (PID: {process.pid}), streaming to {endpoint}")

    def _watch_process(self, process: subprocess.Popen) -> None:
        """
        Background thread: wait for ffmpeg to exit, then reset.

        Does nothing if stop() already reset the driver or a newer
        process has been started since.
        """
        try:
            returncode, stderr_tail = drain_and_wait(process, FFMPEG_STDERR_TAIL_LINES)
            error = exit_error(returncode, stderr_tail)
        except OSError as e:
            error = ProcessError(f"Failed to wait for ffmpeg: {e}")

        with self._lock:
            if self._state is DriverState.OFF or self._process is not process:
                self.logger.debug(f"FFmpeg (PID: {process.pid}) exited after stop")
                return

            if error is not None:
                self.logger.warning(f"FFmpeg exited unexpectedly: {error}")
            else:
                self.logger.info("FFmpeg exited, camera off")

            self._reset()

    def stop(self) -> None:
        with self._lock:
            if self._state is DriverState.OFF:
                raise NotStoppableError("camera already off")

            try:
                send_stop_signal(self._process, self.stop_signal)
            except ProcessError as e:
                self.logger.warning(f"Failed to stop ffmpeg: {e}")

            self._reset()
            self.logger.info("Camera stopped")

    def pid(self) -> Optional[int]:
        """PID of the running ffmpeg, or None when OFF"""
        with self._lock:
            return self._process.pid if self._process else None

    def _reset(self) -> None:
        """Retract published objects and go OFF. Must hold self._lock."""
        self._retract()
        self._process = None
        self._endpoint = None
        self._state = DriverState.OFF
