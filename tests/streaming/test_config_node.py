"""
Config Node Tests

Tests for ConfigNode showing:
- Missing values give defaults, never errors
- Dotted paths for error messages
- Indexed blocks (next_keys)
- Overlay leaves the source untouched
- YAML loading

To run:
    pytest tests/streaming/test_config_node.py -v
"""

import pytest

from streaming.config_node import ConfigNode
from streaming.interfaces.framework_interface import ConfigError


@pytest.fixture
def node():
    return ConfigNode.from_dict({
        "name": "ffmpeg",
        "inputs": {
            "1": {"file": "/dev/video1"},
            "0": {"file": "/dev/video0", "frame_rate": 30},
            "10": {"file": "/dev/video10"},
        },
        "video": {"codec": {"name": "h264", "extra": ["-g", 60]}},
        "enabled": True,
    })


# =============================================================================
# ACCESSOR TESTS
# =============================================================================


@pytest.mark.unit
def test_get_string_returns_value(node):
    """Test scalar lookup by dotted key."""
    assert node.get_string("name") == "ffmpeg"
    assert node.get_string("video.codec.name") == "h264"


@pytest.mark.unit
def test_get_string_stringifies_scalars(node):
    """Test numbers and booleans come back as strings."""
    assert node.get_string("inputs.0.frame_rate") == "30"
    assert node.get_string("enabled") == "true"


@pytest.mark.unit
def test_missing_values_give_defaults(node):
    """Test missing paths never raise."""
    assert node.get_string("video.codec.bit_rate") == ""
    assert node.get_string("nope.nope", "fallback") == "fallback"
    assert node.get_list("audio.codec.extra") == []
    assert node.get("missing") is None
    assert node.descend("audio") is None


@pytest.mark.unit
def test_missing_values_on_empty_node():
    """Test an empty node gives the default for any path, nested or not."""
    empty = ConfigNode.from_dict({})

    assert empty.get_string("video.codec.name") == ""
    assert empty.get_string("binary") == ""
    assert empty.get_string("binary", "ffmpeg") == "ffmpeg"


@pytest.mark.unit
def test_block_is_not_a_string(node):
    """Test asking for a block as a scalar gives the default."""
    assert node.get_string("video") == ""


@pytest.mark.unit
def test_get_list(node):
    """Test list values are stringified, strings are split."""
    assert node.get_list("video.codec.extra") == ["-g", "60"]

    spaced = ConfigNode.from_dict({"extra": "-preset veryfast"})
    assert spaced.get_list("extra") == ["-preset", "veryfast"]


@pytest.mark.unit
def test_keys_are_case_insensitive():
    """Test keys are lower-cased on load and lookup."""
    node = ConfigNode.from_dict({"Video": {"Codec": {"Name": "h264"}}})

    assert node.get_string("video.codec.name") == "h264"
    assert node.get_string("VIDEO.CODEC.NAME") == "h264"


@pytest.mark.unit
def test_get_returns_copy(node):
    """Test callers cannot mutate the node through get()."""
    codec = node.get("video.codec")
    codec["name"] = "changed"

    assert node.get_string("video.codec.name") == "h264"


# =============================================================================
# PATH TESTS
# =============================================================================


@pytest.mark.unit
def test_descend_tracks_path(node):
    """Test descended nodes know their dotted path."""
    codec = node.descend("video").descend("codec")

    assert codec.path == "video.codec"
    assert codec.path_of("name") == "video.codec.name"
    assert node.path_of("name") == "name"


@pytest.mark.unit
def test_prefix_is_kept_through_descend():
    """Test a node built with a prefix reports full paths."""
    node = ConfigNode.from_dict({"codec": {"name": "h264"}}, prefix="driver.framework")

    assert node.descend("codec").path_of("name") == "driver.framework.codec.name"


# =============================================================================
# KEY ENUMERATION TESTS
# =============================================================================


@pytest.mark.unit
def test_next_keys_numeric_order(node):
    """Test indexed blocks come back deduplicated in numeric order."""
    assert node.descend("inputs").next_keys() == ["0", "1", "10"]


@pytest.mark.unit
def test_next_keys_only_blocks(node):
    """Test leaf keys are not child blocks."""
    assert node.next_keys() == ["inputs", "video"]


@pytest.mark.unit
def test_all_keys(node):
    """Test flattened leaf keys."""
    keys = node.descend("video").all_keys()

    assert sorted(keys) == ["codec.extra", "codec.name"]


@pytest.mark.unit
def test_list_of_mappings_is_indexed():
    """Test a YAML-style list of blocks reads like inputs.0, inputs.1."""
    node = ConfigNode.from_dict({"inputs": [{"file": "a"}, {"file": "b"}]})

    assert node.descend("inputs").next_keys() == ["0", "1"]
    assert node.get_string("inputs.1.file") == "b"


# =============================================================================
# OVERLAY TESTS
# =============================================================================


@pytest.mark.unit
def test_overlay_returns_new_node(node):
    """Test overlay sets values and creates blocks without touching the source."""
    result = node.overlay({
        "inputs.0.file": "/dev/video9",
        "outputs.0.file": "rtmp://r/app/x",
    })

    assert result.get_string("inputs.0.file") == "/dev/video9"
    assert result.get_string("outputs.0.file") == "rtmp://r/app/x"
    assert result.get_string("inputs.0.frame_rate") == "30"

    assert node.get_string("inputs.0.file") == "/dev/video0"
    assert node.descend("outputs") is None


@pytest.mark.unit
def test_overlay_keeps_prefix():
    """Test overlay result still reports full paths."""
    node = ConfigNode.from_dict({}, prefix="framework")

    result = node.overlay({"video.codec.name": "h264"})

    assert result.descend("video").path == "framework.video"


# =============================================================================
# YAML TESTS
# =============================================================================


@pytest.mark.unit
def test_from_yaml(temp_dir):
    """Test YAML loading with integer keys."""
    config_file = temp_dir / "camera.yaml"
    config_file.write_text(
        "driver:\n"
        "  name: simple\n"
        "  inputs:\n"
        "    0:\n"
        "      file: /dev/video0\n",
    )

    node = ConfigNode.from_yaml(config_file)

    assert node.get_string("driver.name") == "simple"
    assert node.descend("driver.inputs").next_keys() == ["0"]


@pytest.mark.unit
def test_from_yaml_empty_file(temp_dir):
    """Test an empty file gives an empty node."""
    config_file = temp_dir / "empty.yaml"
    config_file.write_text("")

    assert ConfigNode.from_yaml(config_file).all_keys() == []


@pytest.mark.unit
def test_from_yaml_missing_file(temp_dir):
    """Test a missing file is a ConfigError naming the file."""
    missing = temp_dir / "missing.yaml"

    with pytest.raises(ConfigError) as exc_info:
        ConfigNode.from_yaml(missing)

    assert exc_info.value.path == str(missing)


@pytest.mark.unit
def test_from_yaml_not_a_mapping(temp_dir):
    """Test a top-level list is rejected."""
    config_file = temp_dir / "list.yaml"
    config_file.write_text("- a\n- b\n")

    with pytest.raises(ConfigError):
        ConfigNode.from_yaml(config_file)


@pytest.mark.unit
def test_from_yaml_invalid_syntax(temp_dir):
    """Test broken YAML is a ConfigError."""
    config_file = temp_dir / "broken.yaml"
    config_file.write_text("driver: [unclosed\n")

    with pytest.raises(ConfigError):
        ConfigNode.from_yaml(config_file)
