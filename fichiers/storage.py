from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from fichiers.core.errors import FileMissingError, InvalidFilenameError, StorageIOError

logger = logging.getLogger("fichiers.storage")

STAGING_PREFIX = ".staging-"
CREATION_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class FileStorage:
    """Flat directory of uploaded files, keyed by their original filename."""

    def __init__(self, root: str | os.PathLike[str]) -> None:
        path = Path(root)
        if not path.exists():
            # Any failure here (permissions, a file in the way) aborts startup.
            path.mkdir(parents=True, exist_ok=True)
            logger.info("event=storage_root_created path=%s", path)
        elif not path.is_dir():
            raise NotADirectoryError(f"Storage root {path} is not a directory")
        self.root = path.resolve()

    def _resolve(self, filename: str | None) -> Path:
        if not filename:
            raise InvalidFilenameError(filename)
        path = (self.root / filename).resolve()
        try:
            path.relative_to(self.root)
        except ValueError:
            raise InvalidFilenameError(filename) from None
        if path == self.root:
            raise InvalidFilenameError(filename)
        return path

    def _existing(self, filename: str) -> Path:
        # In-flight staging files are never addressable by name.
        if filename and filename.startswith(STAGING_PREFIX):
            raise FileMissingError(filename)
        try:
            return self._resolve(filename)
        except InvalidFilenameError:
            raise FileMissingError(filename) from None

    def path_for(self, filename: str) -> Path:
        return self._resolve(filename)

    def stage(self, data: bytes, filename: str) -> Path:
        """Write ``data`` to a hidden temporary file inside the root.

        The staged file only becomes visible under ``filename`` once
        :meth:`commit` replaces the target with it.
        """
        self._resolve(filename)
        try:
            fd, tmp_name = tempfile.mkstemp(prefix=STAGING_PREFIX, suffix=".part", dir=self.root)
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)
        except OSError as exc:
            raise StorageIOError(f"Could not stage {filename}: {exc}") from exc
        return Path(tmp_name)

    def commit(self, staged: Path, filename: str) -> Path:
        target = self._resolve(filename)
        try:
            os.replace(staged, target)
        except OSError as exc:
            raise StorageIOError(f"Could not store {filename}: {exc}") from exc
        return target

    def discard(self, staged: Path) -> None:
        try:
            staged.unlink(missing_ok=True)
        except OSError as exc:
            logger.warning("event=staging_cleanup_failed path=%s error=%s", staged, exc)

    def write(self, filename: str, data: bytes) -> Path:
        target = self._resolve(filename)
        try:
            target.write_bytes(data)
        except OSError as exc:
            raise StorageIOError(f"Could not write {filename}: {exc}") from exc
        return target

    def list_all(self) -> list[str]:
        try:
            names = os.listdir(self.root)
        except OSError as exc:
            raise StorageIOError(f"Could not list {self.root}: {exc}") from exc
        return [name for name in names if not name.startswith(STAGING_PREFIX)]

    def exists(self, filename: str) -> bool:
        try:
            return self._existing(filename).exists()
        except FileMissingError:
            return False

    def attributes(self, filename: str) -> dict[str, object]:
        path = self._existing(filename)
        try:
            stat = path.stat()
        except FileNotFoundError:
            raise FileMissingError(filename) from None
        except OSError as exc:
            raise StorageIOError(f"Could not read attributes of {filename}: {exc}") from exc

        created = getattr(stat, "st_birthtime", stat.st_ctime)
        return {
            "name": filename,
            "size": stat.st_size,
            "creation_time": datetime.fromtimestamp(created).strftime(CREATION_TIME_FORMAT),
            "last_modified_time": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
        }

    def open_for_download(self, filename: str) -> Path:
        path = self._existing(filename)
        if not path.is_file() or not os.access(path, os.R_OK):
            raise FileMissingError(filename)
        return path

    def delete(self, filename: str) -> None:
        path = self._existing(filename)
        if not path.exists():
            raise FileMissingError(filename)
        try:
            path.unlink()
        except OSError as exc:
            raise StorageIOError(f"Could not delete {filename}: {exc}") from exc
