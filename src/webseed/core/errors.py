"""Error taxonomy for template resolution and project creation.

Every error carries a stable message substring so callers can tell the failure
classes apart without inspecting types, and an ``exit_code`` the CLI reports.
"""

from __future__ import annotations

from pathlib import Path


class WebseedError(Exception):
    """Base class for all unrecoverable project-creation failures."""

    exit_code: int = 1


class InvalidReference(WebseedError):
    """The template reference names no known example or is a malformed URL."""


class FetchFailed(WebseedError):
    """A template could not be retrieved, even after retrying.

    Attributes:
        not_found: True when the repository, ref or subpath does not exist, as
            opposed to transport errors or unreadable archives.
    """

    def __init__(self, message: str, *, not_found: bool = False) -> None:
        super().__init__(message)
        self.not_found = not_found


class ConflictExists(WebseedError):
    """The destination already holds entries that could be overwritten."""

    def __init__(self, path: Path, entries: list[str]) -> None:
        listing = "\n".join(f"  {e}" for e in entries)
        super().__init__(
            f"The directory {path.name} contains files that could conflict:\n"
            f"{listing}\n"
            "Either try using a new directory name, or remove the files listed above."
        )
        self.path = path
        self.entries = entries


class NotWritable(WebseedError):
    """The current user lacks write permission on the destination."""

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"The application path {path} is not writable, "
            "you do not have write permissions for this folder. "
            "Please check the permissions and try again."
        )
        self.path = path


class WriteFailed(WebseedError):
    """An I/O error interrupted materialization. Partial output may remain."""


class InvalidProjectName(WebseedError):
    """The project name violates package naming rules."""

    def __init__(self, name: str, problems: list[str]) -> None:
        details = "\n".join(f"  - {p}" for p in problems)
        super().__init__(
            f"Could not create a project called {name!r} because of naming restrictions:\n"
            f"{details}"
        )
        self.name = name
        self.problems = problems


class InstallFailed(WebseedError):
    """The package manager's install command exited unsuccessfully."""
