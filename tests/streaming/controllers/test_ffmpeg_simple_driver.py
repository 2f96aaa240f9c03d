"""
FFmpeg Simple Camera Driver Tests

Tests for FFmpegSimpleCameraDriver (template strategy, no framework).
Fake binaries stand in for ffmpeg, so these tests only need bash.

To run:
    pytest tests/streaming/controllers/test_ffmpeg_simple_driver.py -v
"""

import re

import pytest

from streaming.config_node import ConfigNode
from streaming.constants import DriverState
from streaming.controllers.ffmpeg_simple_driver import FFmpegSimpleCameraDriver
from streaming.factory import StreamingFactory
from streaming.interfaces.framework_interface import (
    ConfigError,
    NotStartableError,
    NotStoppableError,
)

ENDPOINT = re.compile(r"^rtmp://r/live/[A-Za-z0-9]{64}$")


def driver_config(ffmpeg_file: str = "sleep 30 #") -> dict:
    return {
        "name": "ffmpeg_simple",
        "ffmpeg_file": ffmpeg_file,
        "video_input": {
            "format": "v4l2",
            "file": "/dev/video0",
            "frame_size": "640x480",
            "frame_rate": 30,
            "codec": {"name": "h264_omx", "bit_rate": "2000k"},
        },
        "output": {"format": "flv", "file_prefix": "rtmp://r/live"},
    }


@pytest.fixture
def make_driver(memory_sink):
    """Provide FFmpegSimpleCameraDriver instances, cleaned up after the test"""
    created = []

    def make(ffmpeg_file: str = "sleep 30 #") -> FFmpegSimpleCameraDriver:
        driver = FFmpegSimpleCameraDriver(
            ConfigNode.from_dict(driver_config(ffmpeg_file)),
            sink=memory_sink,
        )
        created.append(driver)
        return driver

    yield make

    for driver in created:
        driver.cleanup()


# =============================================================================
# INITIALIZATION TESTS
# =============================================================================


@pytest.mark.unit
def test_created_by_factory(memory_sink):
    """Test the factory resolves "ffmpeg_simple"."""
    driver = StreamingFactory.create_driver(
        ConfigNode.from_dict(driver_config()),
        memory_sink,
    )

    assert isinstance(driver, FFmpegSimpleCameraDriver)
    assert driver.state() is DriverState.OFF


@pytest.mark.unit
def test_missing_field_rejected(memory_sink):
    """Test required template fields are checked at construction."""
    data = driver_config()
    del data["video_input"]["codec"]["name"]

    with pytest.raises(ConfigError) as exc_info:
        FFmpegSimpleCameraDriver(ConfigNode.from_dict(data, prefix="driver"), sink=memory_sink)

    assert exc_info.value.path == "driver.video_input.codec.name"
    assert memory_sink.history == []


@pytest.mark.unit
def test_broken_template_rejected(memory_sink):
    """Test an unclosed template section fails at construction, not on start."""
    data = driver_config()
    data["ffmpeg_template"] = "{{{ffmpeg_file}}} -y {{#x}}"

    with pytest.raises(ConfigError) as exc_info:
        FFmpegSimpleCameraDriver(ConfigNode.from_dict(data, prefix="driver"), sink=memory_sink)

    assert exc_info.value.path == "driver.ffmpeg_template"
    assert memory_sink.history == []


@pytest.mark.unit
def test_custom_template_accepted(memory_sink):
    """Test a well-formed custom template is kept as written."""
    data = driver_config()
    data["ffmpeg_template"] = "{{{ffmpeg_file}}} -i {{{video_input_file}}} {{{output_file}}}"

    driver = FFmpegSimpleCameraDriver(ConfigNode.from_dict(data), sink=memory_sink)

    assert driver.options.template == data["ffmpeg_template"]


# =============================================================================
# LIFECYCLE TESTS
# =============================================================================


@pytest.mark.unit_integration
@pytest.mark.requires_bash
def test_start_stop(make_driver, memory_sink, require_bash):
    """Test start spawns and publishes, stop signals and retracts."""
    driver = make_driver()

    driver.start()

    assert driver.state() is DriverState.ON
    assert driver.pid() is not None
    assert ENDPOINT.match(driver.stream_endpoint())
    assert memory_sink.get_object("rtmp") == driver.stream_endpoint().encode()
    assert memory_sink.get_object("state") == b"on"

    driver.stop()

    assert driver.state() is DriverState.OFF
    assert driver.pid() is None
    assert memory_sink.get_object("rtmp") is None
    assert memory_sink.get_object("state") == b"off"


@pytest.mark.unit_integration
@pytest.mark.requires_bash
def test_state_errors(make_driver, require_bash):
    """Test wrong-state calls."""
    driver = make_driver()

    with pytest.raises(NotStoppableError):
        driver.stop()

    driver.start()
    with pytest.raises(NotStartableError):
        driver.start()


@pytest.mark.unit_integration
@pytest.mark.requires_bash
def test_distinct_endpoints(make_driver, require_bash):
    """Test each start gets a new live id."""
    driver = make_driver()

    driver.start()
    first = driver.stream_endpoint()
    driver.stop()
    driver.start()

    assert driver.stream_endpoint() != first


@pytest.mark.unit_integration
@pytest.mark.requires_bash
def test_process_exit_resets(make_driver, memory_sink, wait_for, require_bash):
    """Test ffmpeg dying on its own turns the driver off."""
    driver = make_driver("exit 3 #")

    driver.start()

    assert wait_for(lambda: driver.state() is DriverState.OFF)
    driver._watcher.join(timeout=5)
    assert memory_sink.get_object("rtmp") is None
    assert memory_sink.get_object("state") == b"off"
    assert memory_sink.count("remove", "rtmp") == 1


@pytest.mark.unit_integration
@pytest.mark.requires_bash
def test_stop_retracts_once(make_driver, memory_sink, require_bash):
    """Test the watcher does not reset again after stop."""
    driver = make_driver()
    driver.start()

    driver.stop()
    driver._watcher.join(timeout=5)

    assert memory_sink.count("remove", "rtmp") == 1
