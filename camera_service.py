"""
Camera Service

Host process for the camera live stream. Loads the stream config, creates
the camera driver and exposes start/stop to the outside world.

Architecture:
- CameraService: start/stop/status handlers around one driver
- StreamingService: main loop (control file, heartbeat, signals)

State Flow:
    OFF → (START) → ON → (STOP | ffmpeg exits) → OFF

Remote control:
- echo START > /tmp/camera_control.cmd
- or: python scripts/remote_control.py start
"""

import json
import logging
import logging.handlers
import os
import signal
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from config.settings import (
    AUTO_START,
    CONTROL_FILE,
    HEARTBEAT_FILE,
    HEARTBEAT_INTERVAL,
    LOG_BACKUP_DAYS,
    LOG_DIR,
    LOG_FALLBACK_DIR,
    LOG_SERVICE_FILE,
    OBJECT_SINK_DIR,
    SERVICE_LOOP_INTERVAL,
    STREAM_CONFIG_FILE,
)
from streaming import (
    CameraDriverInterface,
    ConfigNode,
    DriverState,
    FileObjectSink,
    ObjectSinkInterface,
    StreamingError,
    StreamingFactory,
)
from streaming.options import require_block


class CameraService:
    """
    Start/stop handlers for one camera driver.

    Driver errors are logged here and re-raised to the caller unchanged.

    Usage:
        camera = CameraService(driver)
        camera.start()
        camera.status()  # {"state": "on", "stream_endpoint": "rtmp://..."}
        camera.stop()
    """

    def __init__(self, driver: CameraDriverInterface):
        self.logger = logging.getLogger(__name__)
        self.driver = driver

    def start(self) -> None:
        """
        Start streaming.

        Raises:
            StreamingError: Whatever the driver raised
        """
        try:
            self.driver.start()
        except StreamingError as e:
            self.logger.error(f"Failed to start camera: {e}")
            raise

        self.logger.info(f"Camera started: {self.driver.stream_endpoint()}")

    def stop(self) -> None:
        """
        Stop streaming.

        Raises:
            StreamingError: Whatever the driver raised
        """
        try:
            self.driver.stop()
        except StreamingError as e:
            self.logger.error(f"Failed to stop camera: {e}")
            raise

        self.logger.info("Camera stopped")

    def status(self) -> dict:
        return {
            "state": self.driver.state().value,
            "stream_endpoint": self.driver.stream_endpoint(),
        }

    def cleanup(self) -> None:
        self.driver.cleanup()


class StreamingService:
    """
    Main service coordinator.

    Wires together:
    - Stream config (YAML) and the driver/framework registries
    - Camera driver and object sink
    - Remote control file and heartbeat

    Usage:
        service = StreamingService()
        service.run()  # Blocks until shutdown
    """

    def __init__(
        self,
        config_path: Union[str, Path] = STREAM_CONFIG_FILE,
        sink: Optional[ObjectSinkInterface] = None,
        control_file: Union[str, Path] = CONTROL_FILE,
        heartbeat_file: Union[str, Path] = HEARTBEAT_FILE,
        auto_start: bool = AUTO_START,
    ):
        """
        Load config and create the camera driver.

        Args:
            config_path: YAML stream config with a `driver` block
            sink: Object sink (None = FileObjectSink in OBJECT_SINK_DIR)
            control_file: File polled for START/STOP/STATUS commands
            heartbeat_file: JSON liveness file
            auto_start: Start streaming when run() begins

        Raises:
            ConfigError: If the config cannot be loaded or is invalid
            UnknownNameError: If the driver or framework name is unknown
        """
        self.logger = logging.getLogger(__name__)
        self.logger.info("Initializing Streaming Service...")

        self.running = False
        self.auto_start = auto_start
        self.start_time = time.time()
        self.error_count = 0

        self.control_file = Path(control_file)
        self.heartbeat_file = Path(heartbeat_file)
        self.last_heartbeat = 0.0

        # Registries are built once, before any lookup
        self.frameworks = StreamingFactory.create_framework_registry()
        self.drivers = StreamingFactory.create_driver_registry()

        root = ConfigNode.from_yaml(config_path)
        self.sink = sink if sink is not None else FileObjectSink(OBJECT_SINK_DIR)
        driver = StreamingFactory.create_driver(
            require_block(root, "driver"),
            self.sink,
            frameworks=self.frameworks,
            drivers=self.drivers,
        )
        self.camera = CameraService(driver)

        self.logger.info("Streaming Service initialized successfully")

    def run(self):
        """
        Main service loop.

        Runs until shutdown signal received.
        """
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        self.running = True
        self.logger.info("Starting Streaming Service main loop...")

        if self.auto_start:
            self.process_command("START")

        try:
            while self.running:
                self._update_loop()
                time.sleep(SERVICE_LOOP_INTERVAL)
        except KeyboardInterrupt:
            self.logger.info("Keyboard interrupt received")
        finally:
            self._shutdown()

    def _update_loop(self):
        current_time = time.time()
        if current_time - self.last_heartbeat >= HEARTBEAT_INTERVAL:
            self._write_heartbeat()
            self.last_heartbeat = current_time

        self._check_control_commands()

    def _write_heartbeat(self):
        """
        Write heartbeat for liveness detection.

        Atomic write (tmp file, then rename) so readers never see partial
        JSON.

        Heartbeat data includes:
        - timestamp: Current time (ISO format)
        - uptime_seconds: Time since service started
        - state: Camera state (on/off)
        - stream_endpoint: Current endpoint, None when off
        - pid: Service process ID
        - error_count: Failed commands since service start
        """
        try:
            status = self.camera.status()
            heartbeat = {
                "timestamp": datetime.now().isoformat(),
                "uptime_seconds": time.time() - self.start_time,
                "state": status["state"],
                "stream_endpoint": status["stream_endpoint"],
                "pid": os.getpid(),
                "error_count": self.error_count,
            }

            tmp_file = self.heartbeat_file.with_suffix(".tmp")
            tmp_file.write_text(json.dumps(heartbeat, indent=2))
            tmp_file.rename(self.heartbeat_file)

        except Exception as e:
            # Heartbeat is for monitoring only
            self.logger.warning(f"Failed to write heartbeat: {e}")

    def _check_control_commands(self):
        """
        Check for and process remote control commands.

        Supported commands:
        - START: Start streaming
        - STOP: Stop streaming
        - STATUS: Log current state and endpoint
        """
        if not self.control_file.exists():
            return

        try:
            command = self.control_file.read_text().strip().upper()
            self.control_file.unlink()
        except OSError as e:
            self.logger.error(f"Failed to read control command: {e}")
            return

        self.logger.info(f"Remote command received: {command}")
        self.process_command(command)

    def process_command(self, command: str) -> bool:
        """
        Process a remote command.

        Args:
            command: START, STOP or STATUS

        Returns:
            True if the command was carried out
        """
        if command == "START":
            if self.camera.driver.state() is DriverState.ON:
                self.logger.warning("Remote START ignored - camera is already on")
                return False
            return self._run_handler(self.camera.start)

        if command == "STOP":
            if self.camera.driver.state() is DriverState.OFF:
                self.logger.warning("Remote STOP ignored - camera is already off")
                return False
            return self._run_handler(self.camera.stop)

        if command == "STATUS":
            status = self.camera.status()
            self.logger.info(
                f"Remote STATUS → state: {status['state']}, "
                f"endpoint: {status['stream_endpoint']}",
            )
            return True

        self.logger.warning(f"Unknown remote command: {command}")
        return False

    def _run_handler(self, handler) -> bool:
        try:
            handler()
        except StreamingError:
            # Already logged by CameraService
            self.error_count += 1
            return False
        return True

    def _signal_handler(self, signum, _frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            _frame: Current stack frame (unused, required by signal API)
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received signal {signal_name}, shutting down...")
        self.running = False

    def _shutdown(self):
        """Stop the stream if it is on and write a final heartbeat."""
        self.logger.info("Shutting down Streaming Service...")
        self.camera.cleanup()
        self._write_heartbeat()
        self.logger.info("Streaming Service shutdown complete")


def setup_logging():
    """
    Setup logging with rotation.

    Logs to both console and file, rotated daily and kept LOG_BACKUP_DAYS
    days. Falls back to a local logs/ directory when LOG_DIR is not
    writable.
    """
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(logging.Formatter("%(message)s | %(name)s"))
    logger.addHandler(console_handler)

    file_format = logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s | %(name)s",
    )

    log_file = Path(LOG_DIR) / LOG_SERVICE_FILE
    try:
        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(log_file),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
    except (PermissionError, FileNotFoundError):
        logs_dir = Path(LOG_FALLBACK_DIR)
        logs_dir.mkdir(exist_ok=True)

        fallback_log = logs_dir / "camera-service.log"
        logger.warning(
            f"Cannot write to {log_file}, using fallback: {fallback_log}",
        )
        logger.info(
            f"To fix: sudo mkdir -p {LOG_DIR} && "
            f"sudo chown $(whoami) {LOG_DIR}",
        )

        file_handler = logging.handlers.TimedRotatingFileHandler(
            str(fallback_log),
            when="midnight",
            interval=1,
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )

    file_handler.setLevel(logging.INFO)
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)


def main():
    """
    Main entry point for the service.

    Sets up logging and runs the service.
    """
    setup_logging()

    logger = logging.getLogger(__name__)
    logger.info("=" * 60)
    logger.info("Camera Streaming Service Starting")
    logger.info("=" * 60)

    try:
        service = StreamingService()
        service.run()
    except Exception as e:
        logger.critical(f"Fatal error in main: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
