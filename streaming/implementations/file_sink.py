"""
File Object Sink Implementation

Publishes each object as a file in a directory, so a managing host (or
`cat /tmp/camera_objects/rtmp`) can read the current stream endpoint
and state.
"""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from streaming.interfaces.object_sink_interface import ObjectSinkInterface, SinkError


class FileObjectSink(ObjectSinkInterface):
    """
    One file per key under a base directory.

    Writes are atomic per key (write to temp file, then rename) so a
    reader never sees a partial value. Across keys there is no atomicity.

    Usage:
        sink = FileObjectSink(Path("/tmp/camera_objects"))
        sink.put_objects({"rtmp": b"rtmp://...", "state": b"on"})
    """

    def __init__(self, directory: Union[str, Path]):
        """
        Args:
            directory: Base directory, created if missing

        Raises:
            SinkError: If the directory cannot be created
        """
        self.logger = logging.getLogger(__name__)
        self.directory = Path(directory)

        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError(f"Cannot create sink directory {self.directory}: {e}") from e

        self.logger.info(f"File object sink initialized ({self.directory})")

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or key in (".", "..") or key.startswith("."):
            raise SinkError(f"Invalid object key: {key!r}")
        return self.directory / key

    def put_object(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        tmp_path = path.with_name(f".{key}.tmp")
        try:
            tmp_path.write_bytes(data)
            os.replace(tmp_path, path)
        except OSError as e:
            raise SinkError(f"Failed to write object {key}: {e}") from e

        self.logger.debug(f"Object published: {key}")

    def remove_object(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as e:
            raise SinkError(f"Failed to remove object {key}: {e}") from e

        self.logger.debug(f"Object removed: {key}")

    def get_object(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise SinkError(f"Failed to read object {key}: {e}") from e
