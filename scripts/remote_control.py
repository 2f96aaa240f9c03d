#!/usr/bin/env python3
"""
Remote Control Script

Send commands to the camera streaming service (via SSH or locally).

Usage:
    python scripts/remote_control.py start      # Start streaming
    python scripts/remote_control.py stop       # Stop streaming
    python scripts/remote_control.py status     # Log state + endpoint

Or directly:
    echo START > /tmp/camera_control.cmd

The service polls the control file every loop iteration and deletes it
after processing.
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from config.settings import CONTROL_FILE  # noqa: E402

VALID_COMMANDS = ["START", "STOP", "STATUS"]


def send_command(command: str, control_file=CONTROL_FILE) -> bool:
    """
    Send a command to the streaming service.

    Args:
        command: START, STOP or STATUS (case-insensitive)
        control_file: Control file the service polls

    Returns:
        True if command was written, False otherwise
    """
    command = command.upper()

    if command not in VALID_COMMANDS:
        print(f"Invalid command: {command}")
        print(f"Valid commands: {', '.join(VALID_COMMANDS)}")
        return False

    try:
        Path(control_file).write_text(command)
    except OSError as e:
        print(f"Failed to send command: {e}")
        return False

    print(f"Command sent: {command}")
    return True


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Send commands to the camera streaming service",
        epilog="""
Examples:
  %(prog)s start      # Start streaming
  %(prog)s stop       # Stop streaming
  %(prog)s status     # Show current state in service logs
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "command",
        choices=[c.lower() for c in VALID_COMMANDS],
        help="Command to send to the streaming service",
    )
    parser.add_argument(
        "--control-file",
        default=CONTROL_FILE,
        help=f"Control file path (default: {CONTROL_FILE})",
    )

    args = parser.parse_args()

    success = send_command(args.command, args.control_file)
    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
