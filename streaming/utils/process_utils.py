"""
Process Utilities

Spawning, signalling and reaping the external encoding process.
Shared by the ffmpeg framework and the ffmpeg_simple driver.
"""

import logging
import os
import signal
import subprocess
from collections import deque
from typing import List, Optional, Tuple

from streaming.constants import FFMPEG_SHELL, FFMPEG_STDERR_TAIL_LINES
from streaming.interfaces.framework_interface import (
    ConfigError,
    ProcessError,
    ProcessExitError,
    SpawnFailedError,
)

logger = logging.getLogger(__name__)


def resolve_stop_signal(name: str) -> signal.Signals:
    """
    Map a signal name ("SIGTERM", "TERM", "15") to a signal.

    Raises:
        ConfigError: If the name is not a known signal
    """
    value = name.strip().upper()
    try:
        if value.isdigit():
            return signal.Signals(int(value))
        if not value.startswith("SIG"):
            value = "SIG" + value
        return signal.Signals[value]
    except (KeyError, ValueError):
        raise ConfigError("FFMPEG_STOP_SIGNAL", f"unknown signal {name!r}") from None


def spawn_shell_command(command: str, shell: str = FFMPEG_SHELL) -> subprocess.Popen:
    """
    Spawn `<shell> -c <command>` in its own process group.

    stdin is closed so ffmpeg never waits for keyboard input, stdout is
    discarded and stderr is piped for error reports. The pipe MUST be
    drained (see drain_and_wait) or ffmpeg blocks once it fills.

    Raises:
        SpawnFailedError: If the OS could not start the shell
    """
    try:
        process = subprocess.Popen(
            [shell, "-c", command],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            start_new_session=True,  # pgid == pid, see send_stop_signal
        )
    except OSError as e:
        raise SpawnFailedError(f"Failed to spawn {shell}: {e}") from e

    logger.debug(f"Spawned process (PID: {process.pid}): {command}")
    return process


def send_stop_signal(process: subprocess.Popen, sig: signal.Signals) -> None:
    """
    Send one signal to the process group of process.

    The whole group is signalled so the encoder gets it even when the
    shell did not exec it directly. A group that is already gone is not
    an error.

    Raises:
        ProcessError: If the signal could not be delivered
    """
    try:
        os.killpg(process.pid, sig)
    except ProcessLookupError:
        logger.debug(f"Process group {process.pid} already gone")
    except OSError as e:
        raise ProcessError(f"Failed to signal process {process.pid}: {e}") from e


def drain_and_wait(
    process: subprocess.Popen,
    tail_lines: int = FFMPEG_STDERR_TAIL_LINES,
) -> Tuple[int, List[str]]:
    """
    Read stderr to EOF, then reap the process.

    Blocks until the process exits. Only the last tail_lines lines of
    stderr are kept.

    Returns:
        (returncode, stderr tail)
    """
    tail: deque = deque(maxlen=tail_lines)
    if process.stderr is not None:
        with process.stderr:
            for raw in process.stderr:
                line = raw.decode("utf-8", errors="ignore").strip()
                if line:
                    tail.append(line)

    returncode = process.wait()
    return returncode, list(tail)


def exit_error(returncode: int, stderr_tail: List[str]) -> Optional[ProcessExitError]:
    """Exit result as broadcast to waiters: None for a clean exit"""
    if returncode == 0:
        return None
    return ProcessExitError(returncode, stderr_tail)
