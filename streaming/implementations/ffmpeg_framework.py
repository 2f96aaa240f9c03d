"""
FFmpeg Framework Implementation

Process supervisor that owns one ffmpeg process at a time.

Options (under driver.framework):
    name: ffmpeg
    [binary: ffmpeg]                 # ffmpeg binary path
    inputs:
      0:
        [format: <format>]           # like `v4l2`
        file: <path>                 # like `/dev/video0`, set by the driver
        [frame_size: <w>x<h>]        # like `640x480`
        [frame_rate: <rate>]         # like `30`
    video:
      codec:
        name: <codec>                # like `h264_omx` on Raspberry Pi
        [bit_rate: <rate>]           # like `2000k`
        [extra: [...]]               # extra codec arguments
    [audio:                          # absent => audio disabled (-an)
      codec:
        name: <codec>                # like `copy` for rtsp -> rtmp
        [extra: [...]]]
    outputs:
      0:
        format: <format>             # like `flv`
        file: <path> | file_prefix: <prefix>
"""

import logging
import subprocess
import threading
from concurrent.futures import Future
from typing import Optional

from streaming.config_node import ConfigNode
from streaming.constants import (
    FFMPEG_STDERR_TAIL_LINES,
    FFMPEG_STOP_SIGNAL,
    FrameworkState,
)
from streaming.interfaces.framework_interface import (
    FrameworkInterface,
    NotStartableError,
    NotStoppableError,
    ProcessError,
    resolved_future,
    settle_future,
)
from streaming.options import FFmpegOptions
from streaming.utils.command_builder import build_ffmpeg_command
from streaming.utils.process_utils import (
    drain_and_wait,
    exit_error,
    resolve_stop_signal,
    send_stop_signal,
    spawn_shell_command,
)


class FFmpegFramework(FrameworkInterface):
    """
    Supervises an ffmpeg process built by direct command assembly.

    start() returns right after the spawn; a daemon thread drains stderr,
    waits for the exit and resolves the run's completion future.
    stop() sends one signal and resolves the future immediately.

    Usage:
        framework = FFmpegFramework(options)
        framework.start()
        done = framework.wait()
        ...
        framework.stop()
    """

    def __init__(self, options: ConfigNode, **kwargs):
        """
        Initialize and validate configuration.

        Args:
            options: Framework config block
            **kwargs: Named arguments from the registry (unused)

        Raises:
            ConfigError: If a required field is missing
        """
        self.logger = logging.getLogger(__name__)
        self.options = FFmpegOptions.from_node(options)
        self.stop_signal = resolve_stop_signal(FFMPEG_STOP_SIGNAL)

        self._lock = threading.Lock()
        self._process: Optional[subprocess.Popen] = None
        self._command: Optional[str] = None
        self._done: Future = resolved_future()
        self._watcher: Optional[threading.Thread] = None

        self.logger.debug(
            f"FFmpeg framework initialized "
            f"(binary: {self.options.binary}, inputs: {len(self.options.inputs)}, "
            f"outputs: {len(self.options.outputs)})",
        )

    def start(self) -> None:
        with self._lock:
            if self._process is not None:
                self.logger.debug("FFmpeg not startable, already running")
                raise NotStartableError("ffmpeg already running")

            command = build_ffmpeg_command(self.options)
            process = spawn_shell_command(command)

            done: Future = Future()
            self._process = process
            self._command = command
            self._done = done

            self._watcher = threading.Thread(
                target=self._watch_process,
                args=(process, done),
                daemon=True,
                name=f"FFmpegFramework-{process.pid}",
            )
            self._watcher.start()

            self.logger.info(f"FFmpeg started (PID: {process.pid})")
            self.logger.debug(f"FFmpeg command: {command}")

    def _watch_process(self, process: subprocess.Popen, done: Future) -> None:
        """
        Background thread: block until the process exits, then broadcast.

        Blocks without the lock; re-checks that this process is still the
        active one before touching state, since stop() may have run.
        """
        try:
            returncode, stderr_tail = drain_and_wait(process, FFMPEG_STDERR_TAIL_LINES)
            error: Optional[ProcessError] = exit_error(returncode, stderr_tail)
        except OSError as e:
            returncode = None
            error = ProcessError(f"Failed to wait for ffmpeg: {e}")

        with self._lock:
            if self._process is not process:
                self.logger.debug(
                    f"FFmpeg (PID: {process.pid}) exited after stop "
                    f"(code: {returncode})",
                )
                return

            if error is not None:
                self.logger.warning(f"FFmpeg exited unexpectedly: {error}")
            else:
                self.logger.info("FFmpeg exited cleanly")

            settle_future(done, error)
            self._process = None

    def stop(self) -> None:
        with self._lock:
            if self._process is None:
                self.logger.debug("FFmpeg not stoppable, not running")
                raise NotStoppableError("ffmpeg not running")

            process = self._process
            # Clear first: a failed signal still ends this run
            self._process = None
            settle_future(self._done, None)
            send_stop_signal(process, self.stop_signal)

            self.logger.info(
                f"FFmpeg stopped (PID: {process.pid}, signal: {self.stop_signal.name})",
            )

    def wait(self) -> Future:
        with self._lock:
            return self._done

    def state(self) -> FrameworkState:
        with self._lock:
            if self._process is None:
                return FrameworkState.IDLE
            return FrameworkState.RUNNING

    def pid(self) -> Optional[int]:
        """PID of the running process, or None when idle"""
        with self._lock:
            return self._process.pid if self._process else None

    def command(self) -> Optional[str]:
        """Command line of the current or most recent run"""
        with self._lock:
            return self._command

    def cleanup(self) -> None:
        self.logger.info("Cleaning up FFmpeg framework")
        try:
            if self.state() is FrameworkState.RUNNING:
                self.stop()
        except (NotStoppableError, ProcessError) as e:
            self.logger.warning(f"Error during ffmpeg cleanup: {e}")
