# 📄 File: substore/shared/infrastructure/storage/file_store.py

# 🧭 Purpose (Layman Explanation):
# Saves the subscription as small files in a folder on disk, one file per saved name,
# so a single-device install keeps its data without running a database.

# 🧪 Purpose (Technical Summary):
# KeyValueStore implementation mapping each key to a file inside a directory.
# Writes go to a temporary sibling and are moved into place with os.replace so
# a reader never sees a half-written envelope. Blocking file calls run in a thread.

# 🔗 Dependencies:
# - pathlib / os / tempfile: File handling
# - hashlib: Filesystem-safe key encoding
# - asyncio: Offloading blocking I/O

# 🔄 Connected Modules / Calls From:
# Created by: substore.shared.infrastructure.storage.create_key_value_store
# Used by: subscription store when STORAGE_BACKEND=file

import asyncio
import hashlib
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from substore.shared.core.exceptions import StorageIOError
from substore.shared.infrastructure.storage.key_value import KeyValueStore
from substore.shared.utils.logging import get_logger

logger = get_logger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def key_to_filename(key: str) -> str:
    """
    Map a storage key to a filesystem-safe file name.

    Unsafe characters are replaced and a short digest keeps distinct keys distinct.
    """
    safe = _UNSAFE_CHARS.sub("_", key).strip("._") or "key"
    digest = hashlib.sha256(key.encode("utf-8")).hexdigest()[:12]
    return f"{safe}.{digest}.json"


class FileKeyValueStore(KeyValueStore):
    """Directory-of-files key/value store."""

    def __init__(self, directory: Union[str, Path]):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / key_to_filename(key)

    def _read(self, key: str) -> Optional[bytes]:
        path = self._path(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None

    def _write(self, key: str, value: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=".tmp-")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(value)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    async def get(self, key: str) -> Optional[bytes]:
        try:
            return await asyncio.to_thread(self._read, key)
        except OSError as e:
            logger.warning(f"File read failed for {key}: {e}", key=key)
            raise StorageIOError(f"File read failed: {e}", operation="get", key=key) from e

    async def set(self, key: str, value: bytes) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            logger.warning(f"File write failed for {key}: {e}", key=key)
            raise StorageIOError(f"File write failed: {e}", operation="set", key=key) from e

    async def delete(self, key: str) -> None:
        try:
            await asyncio.to_thread(self._remove, key)
        except OSError as e:
            logger.warning(f"File delete failed for {key}: {e}", key=key)
            raise StorageIOError(f"File delete failed: {e}", operation="delete", key=key) from e
