"""
File Byte Store

DESIGN DECISION: A directory of files is the desktop equivalent of the
browser's local storage:
1. One file per key, content is the raw blob
2. No database setup required
3. Users can back up or inspect the directory directly

TRADEOFFS:
- One writer per directory; concurrent processes would overwrite each other
- Every write replaces the whole file (fine for personal-scale logs)

Writes go to a temporary file in the same directory and are then moved
over the target with os.replace, so a crash never leaves a half-written
snapshot behind.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional, Union

from expense_ledger.services.storage.interface import (
    ByteStoreInterface,
    PersistenceError,
)


class FileByteStore(ByteStoreInterface):
    """Directory-backed implementation of the byte store."""

    def __init__(self, directory: Union[Path, str]):
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def _path_for(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key or key in {".", ".."}:
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self._directory / key

    def get(self, key: str) -> Optional[bytes]:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self._path_for(key)
        tmp_name = None
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{key}.", suffix=".tmp", dir=self._directory
            )
            with os.fdopen(fd, "wb") as fh:
                fh.write(value)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, path)
            tmp_name = None
        except OSError as e:
            raise PersistenceError(f"Failed to write {path}: {e}") from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            raise PersistenceError(f"Failed to delete {path}: {e}") from e
