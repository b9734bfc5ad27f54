"""Destination checks performed before anything is written."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from webseed.core.errors import ConflictExists, NotWritable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DestinationState:
    """Snapshot of the destination directory. Recomputed on every validation."""

    path: Path
    exists: bool
    is_empty: bool
    is_writable: bool


def _nearest_existing(path: Path) -> Path:
    for candidate in (path, *path.parents):
        if candidate.exists():
            return candidate
    return Path(path.anchor or ".")


def _entries(path: Path) -> list[str]:
    return sorted(f"{p.name}/" if p.is_dir() else p.name for p in path.iterdir())


class TargetValidator:
    """Check a destination for write permission and conflicting files.

    Args:
        enforce_permissions: Whether permission bits are meaningful on this
            platform. When False the write probe is skipped and every path counts
            as writable.
    """

    def __init__(self, *, enforce_permissions: bool | None = None) -> None:
        if enforce_permissions is None:
            enforce_permissions = os.name != "nt"
        self.enforce_permissions = enforce_permissions

    def _writable(self, path: Path) -> bool:
        if not self.enforce_permissions:
            return True
        return os.access(_nearest_existing(path), os.W_OK)

    def inspect(self, path: Path) -> DestinationState:
        """Describe *path* without touching it."""
        exists = path.exists()
        is_empty = not exists or (path.is_dir() and not any(path.iterdir()))
        return DestinationState(
            path=path,
            exists=exists,
            is_empty=is_empty,
            is_writable=self._writable(path),
        )

    def validate(self, path: Path) -> DestinationState:
        """Prepare *path* to receive a project, creating it if absent.

        Raises:
            NotWritable: The destination (or its nearest existing parent) is not
                writable by the current user.
            ConflictExists: The destination already holds entries, or is a file.
        """
        path = path.resolve()
        state = self.inspect(path)

        if not state.is_writable:
            raise NotWritable(path)

        if state.exists and not path.is_dir():
            raise ConflictExists(path, [path.name])
        if not state.is_empty:
            raise ConflictExists(path, _entries(path))

        if not state.exists:
            try:
                path.mkdir(parents=True)
            except PermissionError as exc:
                raise NotWritable(path) from exc
            logger.debug("Created destination %s", path)
            state = self.inspect(path)

        return state
