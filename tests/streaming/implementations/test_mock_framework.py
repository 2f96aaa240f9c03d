"""
Mock Framework Tests

Tests for MockFramework: it must honour the same state machine and
completion-future contract as the real framework.

To run:
    pytest tests/streaming/implementations/test_mock_framework.py -v
"""

import pytest

from streaming.constants import FrameworkState
from streaming.implementations.mock_framework import MockFramework
from streaming.interfaces.framework_interface import (
    NotStartableError,
    NotStoppableError,
    ProcessError,
    ProcessExitError,
    SpawnFailedError,
)


@pytest.fixture
def framework():
    mock = MockFramework()
    yield mock
    mock.cleanup()


@pytest.mark.unit
def test_start_stop(framework):
    """Test basic lifecycle and counters."""
    framework.start()
    done = framework.wait()

    assert framework.state() is FrameworkState.RUNNING
    assert not done.done()

    framework.stop()

    assert framework.state() is FrameworkState.IDLE
    assert done.result() is None
    assert framework.start_count == 1
    assert framework.stop_count == 1


@pytest.mark.unit
def test_state_errors(framework):
    """Test wrong-state calls."""
    with pytest.raises(NotStoppableError):
        framework.stop()

    framework.start()
    with pytest.raises(NotStartableError):
        framework.start()


@pytest.mark.unit
def test_simulate_exit(framework):
    """Test a simulated exit resolves waiters and returns to idle."""
    framework.start()
    done = framework.wait()

    assert framework.simulate_exit(ProcessExitError(1)) is True

    assert isinstance(done.exception(), ProcessExitError)
    assert framework.state() is FrameworkState.IDLE
    assert framework.simulate_exit() is False


@pytest.mark.unit
def test_simulate_start_failure(framework):
    """Test configured spawn failure."""
    framework.simulate_start_failure()

    with pytest.raises(SpawnFailedError):
        framework.start()
    assert framework.state() is FrameworkState.IDLE

    framework.reset_test_config()
    framework.start()
    assert framework.state() is FrameworkState.RUNNING


@pytest.mark.unit
def test_simulate_stop_failure(framework):
    """Test stop failure still ends the run."""
    framework.start()
    done = framework.wait()
    framework.simulate_stop_failure()

    with pytest.raises(ProcessError):
        framework.stop()

    assert framework.state() is FrameworkState.IDLE
    assert done.done()
