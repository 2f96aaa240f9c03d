"""
Central Configuration File

ALL configuration values live here. This is the single source of truth.

Guidelines:
- Secrets (stream keys, credentials) should be in .env, NOT here
- Import these settings in modules: from config.settings import FFMPEG_BINARY
- Per-camera stream layout (inputs, codecs, outputs) lives in the YAML
  file pointed to by STREAM_CONFIG_FILE, not here
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# =============================================================================
# FFMPEG CONFIGURATION
# =============================================================================

# Binary used when the stream config does not name one
FFMPEG_BINARY = os.getenv("FFMPEG_BINARY", "ffmpeg")

# Commands are rendered as a single string and run through this shell
FFMPEG_SHELL = os.getenv("FFMPEG_SHELL", "/bin/bash")

# Signal sent once to the ffmpeg process group on stop.
# SIGTERM lets ffmpeg flush and close the RTMP connection.
FFMPEG_STOP_SIGNAL = os.getenv("FFMPEG_STOP_SIGNAL", "SIGTERM")

# Number of trailing stderr lines kept for error reports
FFMPEG_STDERR_TAIL_LINES = 20

# =============================================================================
# STREAM CONFIGURATION
# =============================================================================

# Length of the random live id appended to output prefixes
STREAM_ID_LENGTH = 64

# Component config (driver/framework tree)
STREAM_CONFIG_FILE = os.getenv("STREAM_CONFIG_FILE", "config/camera.yaml")

# Start streaming as soon as the service is up
AUTO_START = os.getenv("AUTO_START", "false").lower() in ("1", "true", "yes")

# Directory where published objects (rtmp, state) are written
OBJECT_SINK_DIR = os.getenv(
    "OBJECT_SINK_DIR",
    "/tmp/camera_objects",  # noqa: S108
)

# =============================================================================
# MONITORING CONFIGURATION
# =============================================================================

# Main loop period
SERVICE_LOOP_INTERVAL = 0.1  # seconds

# Heartbeat Configuration
HEARTBEAT_INTERVAL = float(os.getenv("HEARTBEAT_INTERVAL", "1.0"))  # seconds
# /tmp is intentional - standard location for watchdog monitoring
HEARTBEAT_FILE = os.getenv(
    "HEARTBEAT_FILE",
    "/tmp/camera_heartbeat.json",  # noqa: S108
)

# Remote Control Configuration
# File-based control for triggering actions via SSH/scripts
# Commands: START, STOP, STATUS
CONTROL_FILE = os.getenv(
    "CONTROL_FILE",
    "/tmp/camera_control.cmd",  # noqa: S108
)

# Logging Configuration
LOG_DIR = "/var/log/camera"
LOG_SERVICE_FILE = "service.log"
LOG_FALLBACK_DIR = "logs"
LOG_BACKUP_DAYS = 7
