"""Storage collaborator protocol and a file-system implementation.

The resolver and upload services consume exactly three storage
operations:

1. :meth:`ResourceStorage.get` -- metadata lookup by path.
2. :meth:`ResourceStorage.list_entries` -- enumerate every entry.
3. :meth:`ResourceStorage.read_bytes` -- read full content by path.

:class:`FileSystemStorage` serves a vault directory from disk.  Paths are
POSIX-style and relative to the vault root; anything that would escape
the root is treated as absent.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from pathlib import Path, PurePosixPath
from typing import Protocol, runtime_checkable

from imgcast.errors import ImgcastStorageError
from imgcast.models import StorageEntry
from imgcast.observability import get_logger

log = get_logger("imgcast.storage")


@runtime_checkable
class ResourceStorage(Protocol):
    """Protocol that any storage backend must satisfy."""

    def get(self, path: str) -> StorageEntry | None:
        """Return metadata for *path*, or ``None`` if it does not exist."""
        ...

    def list_entries(self) -> Iterable[StorageEntry]:
        """Yield every leaf entry in storage."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Return the full content of *path*.

        Raises
        ------
        ImgcastStorageError
            If the entry is missing or cannot be read.
        """
        ...


def _split_name(name: str) -> str:
    suffix = PurePosixPath(name).suffix
    return suffix[1:] if suffix else ""


class FileSystemStorage:
    """Serve a vault directory from the local file system.

    Parameters
    ----------
    root:
        Vault root directory.  Resolved to an absolute path once.
    skip_hidden:
        Skip dot-prefixed directories (``.obsidian``, ``.git``) and files
        during enumeration.
    """

    def __init__(self, root: str | os.PathLike[str], skip_hidden: bool = True) -> None:
        self._root = Path(root).resolve()
        self._skip_hidden = skip_hidden

    @property
    def root(self) -> Path:
        return self._root

    def _to_absolute(self, path: str) -> Path | None:
        if not path:
            return None
        candidate = Path(path)
        if not (candidate.is_absolute() and candidate.is_relative_to(self._root)):
            # A leading slash means vault-relative, not file-system absolute.
            candidate = self._root / path.lstrip("/")
        try:
            resolved = candidate.resolve()
        except (OSError, ValueError) as exc:
            # Embedded NUL bytes, overlong names and symlink loops.
            log.debug(
                "Unusable storage path",
                extra={"extra_fields": {"op": "get", "path": path, "error": str(exc)}},
            )
            return None
        if not resolved.is_relative_to(self._root):
            log.debug(
                "Path outside vault root",
                extra={"extra_fields": {"op": "get", "path": path}},
            )
            return None
        return resolved

    def _entry_for(self, absolute: Path) -> StorageEntry:
        rel = absolute.relative_to(self._root).as_posix()
        is_dir = absolute.is_dir()
        return StorageEntry(
            path=rel,
            name=absolute.name,
            extension="" if is_dir else _split_name(absolute.name),
            is_dir=is_dir,
        )

    def get(self, path: str) -> StorageEntry | None:
        absolute = self._to_absolute(path)
        if absolute is None or absolute == self._root:
            return None
        try:
            if not absolute.exists():
                return None
            return self._entry_for(absolute)
        except (OSError, ValueError) as exc:
            log.debug(
                "Unusable storage path",
                extra={"extra_fields": {"op": "get", "path": path, "error": str(exc)}},
            )
            return None

    def list_entries(self) -> Iterator[StorageEntry]:
        for dirpath, dirnames, filenames in os.walk(self._root):
            if self._skip_hidden:
                dirnames[:] = [d for d in dirnames if not d.startswith(".")]
            for filename in filenames:
                if self._skip_hidden and filename.startswith("."):
                    continue
                yield self._entry_for(Path(dirpath) / filename)

    def read_bytes(self, path: str) -> bytes:
        absolute = self._to_absolute(path)
        if absolute is None:
            raise ImgcastStorageError(
                message=f"Path {path!r} is not a usable vault path",
                context={"path": path},
            )
        try:
            return absolute.read_bytes()
        except (OSError, ValueError) as exc:
            raise ImgcastStorageError(
                message=f"Failed to read {path!r}: {exc}",
                context={"path": path},
                cause=exc,
            ) from exc
