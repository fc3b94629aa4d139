from __future__ import annotations

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional

from starlette.concurrency import run_in_threadpool

from src.app.domain.errors import StorageBackendError
from src.app.infra.storage.base import KeyValueStore

logger = logging.getLogger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileKeyValueStore(KeyValueStore):
    """
    Stores each key as ``<directory>/<key>.json``.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace``, so a reader never sees a half-written value.
    """

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        logger.info("FileKeyValueStore initialized at %s", self.directory)

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise StorageBackendError(key, "invalid key")
        return self.directory / f"{key}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        try:
            data = path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise StorageBackendError(key, str(exc)) from exc
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            # undecodable bytes become U+FFFD and the JSON layer decides
            logger.warning("%s is not valid UTF-8 (%s)", path, exc)
            return data.decode("utf-8", errors="replace")

    def _write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{key}.", suffix=".tmp", dir=self.directory)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(value)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageBackendError(key, str(exc)) from exc

    async def get_item(self, key: str) -> Optional[str]:
        return await run_in_threadpool(self._read, key)

    async def set_item(self, key: str, value: str) -> None:
        await run_in_threadpool(self._write, key, value)
