"""
Plugin Registry

Name -> constructor lookup table for pluggable implementations.
Two instances exist at runtime: one for camera drivers, one for
frameworks. Both are built eagerly by StreamingFactory and passed by
reference to whoever needs to resolve names.

Usage precondition: register everything at startup, before any lookup
can run concurrently. Lookups are plain dict reads and take no lock.
"""

import logging
from typing import Any, Callable, Dict, List

from streaming.config_node import ConfigNode
from streaming.interfaces.framework_interface import UnknownNameError

# Constructor signature: (options, **named_args) -> instance
Constructor = Callable[..., Any]


class Registry:
    """
    Name -> constructor table.

    Registering an existing name replaces the earlier constructor
    (last registration wins). There is no deregistration.

    Usage:
        frameworks = Registry("framework")
        frameworks.register("ffmpeg", FFmpegFramework)
        framework = frameworks.resolve("ffmpeg", options)
    """

    def __init__(self, kind: str):
        """
        Args:
            kind: What is registered ("driver", "framework"), for errors
        """
        self.kind = kind
        self.logger = logging.getLogger(__name__)
        self._constructors: Dict[str, Constructor] = {}

    def register(self, name: str, constructor: Constructor) -> None:
        """Register constructor under name, replacing any earlier one"""
        if name in self._constructors:
            self.logger.debug(f"Replacing {self.kind} constructor: {name}")
        self._constructors[name] = constructor

    def resolve(self, name: str, options: ConfigNode, **kwargs) -> Any:
        """
        Construct the implementation registered under name.

        Args:
            name: Registered name
            options: Configuration handed to the constructor
            **kwargs: Named arguments for the constructor (sink, ...)

        Raises:
            UnknownNameError: If nothing is registered under name
            ConfigError: From the constructor's validation
        """
        constructor = self._constructors.get(name)
        if constructor is None:
            raise UnknownNameError(self.kind, name)

        self.logger.debug(f"Creating {self.kind}: {name}")
        return constructor(options, **kwargs)

    def names(self) -> List[str]:
        """Registered names, sorted"""
        return sorted(self._constructors)

    def __contains__(self, name: str) -> bool:
        return name in self._constructors

    def __len__(self) -> int:
        return len(self._constructors)
