"""
Streaming Test Configuration and Fixtures

Shared fixtures for streaming module tests.

Tests that need a real process use fake encoder binaries such as
"sleep 30 #": the command is run through the shell, so `#` comments out
the ffmpeg arguments that follow.
"""

import os
import shutil
import tempfile
import time
from pathlib import Path

import pytest

from streaming.config_node import ConfigNode
from streaming.constants import FFMPEG_SHELL
from streaming.controllers.simple_driver import SimpleCameraDriver
from streaming.implementations.memory_sink import MemorySink
from streaming.implementations.mock_framework import MockFramework
from streaming.registry import Registry

# =============================================================================
# CONFIG FIXTURES
# =============================================================================


@pytest.fixture
def simple_driver_config():
    """
    Provide a "simple" driver config backed by the mock framework.

    Returns a fresh dict per test, so tests may edit it.
    """
    return {
        "name": "simple",
        "inputs": {"0": {"file": "/dev/video0"}},
        "outputs": {"0": {"file_prefix": "rtmp://r/app"}},
        "framework": {
            "name": "mock",
            "video": {"codec": {"name": "h264"}},
            "outputs": {"0": {"format": "flv"}},
        },
    }


@pytest.fixture
def ffmpeg_framework_config():
    """
    Provide a complete ffmpeg framework config factory.

    Usage:
        def test_run(ffmpeg_framework_config):
            node = ConfigNode.from_dict(ffmpeg_framework_config("sleep 30 #"))
    """

    def make(binary: str = "ffmpeg") -> dict:
        return {
            "name": "ffmpeg",
            "binary": binary,
            "inputs": {"0": {"format": "v4l2", "file": "/dev/video0"}},
            "video": {"codec": {"name": "h264"}},
            "outputs": {"0": {"format": "flv", "file": "rtmp://r/app/live"}},
        }

    return make


# =============================================================================
# SINK / REGISTRY FIXTURES
# =============================================================================


@pytest.fixture
def memory_sink():
    """Provide an empty MemorySink"""
    return MemorySink()


@pytest.fixture
def mock_frameworks():
    """Provide a framework registry with only the mock framework"""
    registry = Registry("framework")
    registry.register("mock", MockFramework)
    return registry


# =============================================================================
# DRIVER FIXTURES
# =============================================================================


@pytest.fixture
def simple_driver(simple_driver_config, memory_sink, mock_frameworks):
    """
    Provide a SimpleCameraDriver on the mock framework.

    Usage:
        def test_driver(simple_driver):
            simple_driver.start()
            simple_driver.framework.simulate_exit()
    """
    driver = SimpleCameraDriver(
        ConfigNode.from_dict(simple_driver_config),
        sink=memory_sink,
        frameworks=mock_frameworks,
    )
    memory_sink.clear_history()
    yield driver
    driver.cleanup()


# =============================================================================
# PROCESS FIXTURES
# =============================================================================


@pytest.fixture
def require_bash():
    """Skip the test when the shell used to run commands is missing"""
    if not os.path.exists(FFMPEG_SHELL):
        pytest.skip(f"{FFMPEG_SHELL} not available")


@pytest.fixture
def wait_for():
    """
    Provide a polling helper for background-thread effects.

    Usage:
        assert wait_for(lambda: driver.state() is DriverState.OFF)
    """

    def poll(predicate, timeout: float = 5.0, interval: float = 0.01) -> bool:
        deadline = time.time() + timeout
        while time.time() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return poll


# =============================================================================
# TEMPORARY FILE/DIRECTORY FIXTURES
# =============================================================================


@pytest.fixture
def temp_dir():
    """Provide a temporary directory, removed after the test"""
    path = Path(tempfile.mkdtemp())
    yield path
    if path.exists():
        shutil.rmtree(path)


# =============================================================================
# PYTEST CONFIGURATION
# =============================================================================


def pytest_configure(config):
    """
    Configure pytest with custom markers for streaming tests.
    """
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "unit_integration: Integration tests")
    config.addinivalue_line("markers", "slow: Slow tests")
    config.addinivalue_line("markers", "requires_bash: Tests requiring /bin/bash")
