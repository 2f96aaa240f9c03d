"""
Simple Camera Driver

Driver "simple": streams the first configured input to a fresh endpoint
under the first configured output prefix, through a pluggable framework.
Made for livego-style RTMP servers, where every live id is a new stream.

Options:
    driver:
      name: simple
      inputs:
        0:
          file: <path>             # like `/dev/video0`
      outputs:
        0:
          file_prefix: <prefix>    # like `rtmp://rtmp-server:1935/live`
      framework:
        name: <framework>          # like `ffmpeg`
        ...                        # framework options

On each start the driver overlays `inputs.<n>.file` and
`outputs.<n>.file` onto the framework block, so the framework never
needs to know about prefixes or live ids.
"""

from concurrent.futures import CancelledError, Future
from typing import Optional

from streaming.config_node import ConfigNode
from streaming.constants import DriverState
from streaming.controllers.base_driver import BaseCameraDriver
from streaming.interfaces.framework_interface import (
    FrameworkInterface,
    NotStartableError,
    NotStoppableError,
)
from streaming.interfaces.object_sink_interface import ObjectSinkInterface
from streaming.options import SimpleDriverOptions
from streaming.registry import Registry
from streaming.utils.command_builder import make_stream_endpoint


class SimpleCameraDriver(BaseCameraDriver):
    """
    Framework-backed camera driver.

    Usage:
        driver = SimpleCameraDriver(options, sink=sink, frameworks=frameworks)
        driver.start()   # publishes rtmp + state=on
        driver.stop()    # removes rtmp, state=off
    """

    def __init__(
        self,
        options: ConfigNode,
        sink: ObjectSinkInterface,
        frameworks: Registry,
        **kwargs,
    ):
        """
        Initialize and validate the driver's own configuration.

        The framework block is validated by the framework itself on
        start, once the per-start values are overlaid.

        Args:
            options: Driver config block
            sink: Where rtmp/state objects are published
            frameworks: Framework registry to resolve framework.name

        Raises:
            ConfigError: If inputs/outputs/framework.name are missing
        """
        super().__init__(sink)
        self.options = SimpleDriverOptions.from_node(options)
        self.frameworks = frameworks
        self._framework: Optional[FrameworkInterface] = None

        # Clear whatever a previous instance left published
        with self._lock:
            self._reset()

        self.logger.info(
            f"Simple camera driver initialized "
            f"(input: {self.options.input_file}, "
            f"framework: {self.options.framework_name})",
        )

    @property
    def framework(self) -> Optional[FrameworkInterface]:
        """Framework of the current run, or None when OFF"""
        with self._lock:
            return self._framework

    def start(self) -> None:
        with self._lock:
            if self._state is DriverState.ON:
                raise NotStartableError("camera already on")

            endpoint = make_stream_endpoint(
                self.options.file_prefix,
                self.options.file_prefix_path,
            )
            framework_options = self.options.framework.overlay({
                f"inputs.{self.options.input_key}.file": self.options.input_file,
                f"outputs.{self.options.output_key}.file": endpoint,
            })

            framework = self.frameworks.resolve(
                self.options.framework_name,
                framework_options,
            )
            framework.start()

            self._publish_on(endpoint)

            self._framework = framework
            self._endpoint = endpoint
            self._state = DriverState.ON
            self._start_watcher(self._watch_framework, framework, framework.wait())

            self.logger.info(f"Camera started, streaming to {endpoint}")

    def _watch_framework(self, framework: FrameworkInterface, done: Future) -> None:
        """
        Background thread: wait for the framework run to end, then reset.

        Does nothing if stop() already reset the driver, or if the driver
        has moved on to a newer run.
        """
        try:
            error = done.exception()
        except CancelledError:
            error = None

        with self._lock:
            if self._state is DriverState.OFF or self._framework is not framework:
                self.logger.debug("Framework finished after driver reset")
                return

            if error is not None:
                self.logger.warning(f"Framework exited with error: {error}")
            else:
                self.logger.info("Framework exited, camera off")

            self._reset()

    def stop(self) -> None:
        with self._lock:
            if self._state is DriverState.OFF:
                raise NotStoppableError("camera already off")

            try:
                self._framework.stop()
            except Exception as e:
                self.logger.warning(f"Failed to stop camera in framework: {e}")

            self._reset()
            self.logger.info("Camera stopped")

    def _reset(self) -> None:
        """Retract published objects and go OFF. Must hold self._lock."""
        self._retract()
        self._framework = None
        self._endpoint = None
        self._state = DriverState.OFF
