"""
Config Node

Read-only view over a hierarchical, dotted key space.

Drivers and frameworks receive their configuration as a ConfigNode:
    node.get_string("video.codec.name")   # "" when missing
    node.get_list("video.codec.extra")    # [] when missing
    node.descend("inputs")                # None when missing
    node.next_keys()                      # ["0", "1", ...]

Missing values are never errors here. Callers that require a field check
for emptiness and raise ConfigError(node.path_of(key)) so the message
names the exact dotted path from the root of the configuration.

Keys are case-insensitive (lower-cased on load), and YAML integer keys
such as `0:` become "0". A YAML sequence of mappings is treated as an
indexed block, so `inputs: [{...}, {...}]` reads like `inputs.0`, `inputs.1`.
"""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import yaml

from streaming.interfaces.framework_interface import ConfigError

_MISSING = object()


def _normalize(value: Any) -> Any:
    """Lower-case keys, stringify integer keys, index lists of mappings"""
    if isinstance(value, Mapping):
        return {str(k).lower(): _normalize(v) for k, v in value.items()}
    if isinstance(value, list):
        if value and all(isinstance(item, Mapping) for item in value):
            return {str(i): _normalize(item) for i, item in enumerate(value)}
        return [_normalize(item) for item in value]
    return value


def _key_order(key: str):
    # Numeric keys first in numeric order, then the rest alphabetically
    if key.isdigit():
        return (0, int(key), "")
    return (1, 0, key)


def _to_string(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class ConfigNode:
    """
    Immutable hierarchical configuration accessor.

    The only way to derive different values is overlay(), which returns
    a new node and leaves this one untouched.

    Usage:
        root = ConfigNode.from_yaml(Path("config/camera.yaml"))
        driver = root.descend("driver")
        name = driver.get_string("name")
    """

    def __init__(self, data: Optional[Mapping[str, Any]] = None, prefix: str = ""):
        """
        Initialize config node.

        Args:
            data: Nested mapping (copied and normalized)
            prefix: Dotted path of this node from the configuration root,
                    used only for error messages
        """
        self._data: Dict[str, Any] = _normalize(copy.deepcopy(dict(data or {})))
        self._prefix = prefix

    # =========================================================================
    # LOADERS
    # =========================================================================

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], prefix: str = "") -> "ConfigNode":
        """Build a node from a nested mapping"""
        return cls(data, prefix)

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "ConfigNode":
        """
        Load a node from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or is not a mapping
        """
        config_path = Path(path)
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(config_path), str(e)) from e

        if not isinstance(raw, Mapping):
            raise ConfigError(str(config_path), "top level must be a mapping")

        logging.getLogger(__name__).info(f"Loaded config from {config_path}")
        return cls(raw)

    # =========================================================================
    # ACCESSORS
    # =========================================================================

    @property
    def path(self) -> str:
        """Dotted path of this node ("" for the root)"""
        return self._prefix

    def path_of(self, key: str) -> str:
        """Full dotted path of a key below this node"""
        key = key.lower()
        return f"{self._prefix}.{key}" if self._prefix else key

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.lower().split("."):
            if not isinstance(current, dict) or part not in current:
                return _MISSING
            current = current[part]
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get raw value (copied), or default when missing"""
        value = self._lookup(key)
        if value is _MISSING:
            return default
        return copy.deepcopy(value)

    def get_string(self, key: str, default: str = "") -> str:
        """
        Get scalar value as string.

        Numbers are stringified (frame_rate: 30 -> "30"), booleans become
        "true"/"false". Missing values and blocks give the default.
        """
        value = self._lookup(key)
        if value is _MISSING:
            return default
        value = _to_string(value)
        if value is None:
            return default
        return value

    def get_list(self, key: str) -> List[str]:
        """
        Get value as a list of strings.

        A plain string is split on whitespace. Missing values give [].
        """
        value = self._lookup(key)
        if value is _MISSING or value is None or isinstance(value, dict):
            return []
        if isinstance(value, list):
            return [s for s in (_to_string(item) for item in value) if s is not None]
        if isinstance(value, str):
            return value.split()
        return [_to_string(value)]

    def descend(self, key: str) -> Optional["ConfigNode"]:
        """
        Get the sub-block at key.

        Returns:
            ConfigNode for the block, or None if the path does not exist
            or does not hold a block
        """
        value = self._lookup(key)
        if not isinstance(value, dict):
            return None
        return ConfigNode(value, self.path_of(key))

    def all_keys(self) -> List[str]:
        """Flattened dotted keys of every leaf value"""
        keys: List[str] = []

        def walk(node: Dict[str, Any], prefix: str) -> None:
            for k, v in node.items():
                full = f"{prefix}.{k}" if prefix else k
                if isinstance(v, dict):
                    walk(v, full)
                else:
                    keys.append(full)

        walk(self._data, "")
        return keys

    def next_keys(self) -> List[str]:
        """
        Immediate child keys that hold blocks.

        Derived from the flattened key space: only keys with at least two
        segments contribute their first segment. Used to iterate indexed
        blocks (inputs.0, inputs.1, ...) without assuming a count.

        Returns:
            Deduplicated keys, numeric ones first in numeric order
        """
        seen = set()
        for key in self.all_keys():
            head, sep, _ = key.partition(".")
            if sep:
                seen.add(head)
        return sorted(seen, key=_key_order)

    def overlay(self, values: Mapping[str, Any]) -> "ConfigNode":
        """
        Return a new node with dotted keys set.

        Intermediate blocks are created as needed; a scalar in the way is
        replaced by a block. This node is not modified.

        Example:
            fw = node.descend("framework").overlay({"inputs.0.file": "/dev/video0"})
        """
        data = copy.deepcopy(self._data)
        for key, value in values.items():
            parts = key.lower().split(".")
            current = data
            for part in parts[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]
            current[parts[-1]] = _normalize(copy.deepcopy(value))
        return ConfigNode(data, self._prefix)

    def to_dict(self) -> Dict[str, Any]:
        """Deep copy of the underlying data"""
        return copy.deepcopy(self._data)

    def __contains__(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def __repr__(self) -> str:
        return f"ConfigNode(prefix={self._prefix!r}, keys={self.all_keys()!r})"
