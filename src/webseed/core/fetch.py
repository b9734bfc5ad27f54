"""Retrieve template file trees into a staging area."""

from __future__ import annotations

import gzip
import importlib.resources as ilr
import logging
import shutil
import tarfile
import tempfile
import zlib
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath
from types import TracebackType

import httpx

from webseed.core.config import FetchConfig
from webseed.core.errors import FetchFailed
from webseed.core.source import BUNDLED_DESCRIPTOR, FetchDescriptor

logger = logging.getLogger(__name__)

ConfirmFallback = Callable[[FetchFailed], bool]
"""Asked whether to use the default template after a not-found failure."""

_CHUNK_SIZE = 64 * 1024


@dataclass
class StagedTree:
    """
    Fetched template files waiting to be materialized.

    Attributes:
        root: Top of the template tree.
        source: Descriptor the files were actually retrieved from. Differs from the
            requested descriptor after a fallback to the default template.
    """

    root: Traversable
    source: FetchDescriptor
    _workdir: tempfile.TemporaryDirectory[str] | None = field(default=None, repr=False)

    @property
    def bundled(self) -> bool:
        return self.source.is_bundled

    def discard(self) -> None:
        """Remove the staging directory, if this tree owns one."""
        if self._workdir is not None:
            self._workdir.cleanup()
            self._workdir = None

    def __enter__(self) -> StagedTree:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.discard()


def bundled_tree() -> StagedTree:
    """Stage the default template shipped inside the package."""
    return StagedTree(
        root=ilr.files("webseed.templates").joinpath("default"),
        source=BUNDLED_DESCRIPTOR,
    )


def _member_path(member: tarfile.TarInfo, subpath: tuple[str, ...]) -> tuple[str, ...] | None:
    """Path of *member* relative to *subpath*, or None if it lies outside it.

    GitHub archives wrap everything in a single ``<repo>-<ref>/`` directory, which
    is dropped first.
    """
    parts = PurePosixPath(member.name).parts[1:]
    if parts[: len(subpath)] != subpath:
        return None
    return parts[len(subpath) :]


def _extract(archive: Path, dest: Path, descriptor: FetchDescriptor) -> int:
    """Extract the members under the descriptor's subpath. Returns the file count."""
    subpath = PurePosixPath(descriptor.subpath).parts if descriptor.subpath else ()
    matched = False
    files = 0

    try:
        with tarfile.open(archive, "r:gz") as tar:
            for member in tar:
                rel = _member_path(member, subpath)
                if rel is None:
                    continue
                matched = True
                if not rel:
                    continue
                if ".." in rel or PurePosixPath(*rel).is_absolute():
                    logger.debug("Skipping unsafe archive member %s", member.name)
                    continue

                target = dest.joinpath(*rel)
                if member.isdir():
                    target.mkdir(parents=True, exist_ok=True)
                elif member.isfile():
                    stream = tar.extractfile(member)
                    if stream is None:
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with stream, target.open("wb") as out:
                        shutil.copyfileobj(stream, out)
                    target.chmod(0o755 if member.mode & 0o111 else 0o644)
                    files += 1
                else:
                    logger.debug("Skipping non-regular archive member %s", member.name)
    except (tarfile.TarError, gzip.BadGzipFile, EOFError, zlib.error) as exc:
        raise FetchFailed(
            f"Failed to fetch {descriptor.describe()}: the downloaded archive is corrupt ({exc})."
        ) from exc

    if not matched:
        raise FetchFailed(
            f"Failed to fetch {descriptor.describe()}: "
            f"the path {descriptor.subpath!r} does not exist in the repository.",
            not_found=True,
        )
    return files


class TemplateFetcher:
    """Fetch template trees with a single retry and an optional fallback.

    Args:
        client: HTTP client used for remote downloads. A short-lived client is
            created per download when omitted.
        config: Timeouts, retry count and tarball host.
        confirm_fallback: Asked, after the retry fails with a not-found error,
            whether the default template should be used instead. ``None`` declines.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        config: FetchConfig | None = None,
        confirm_fallback: ConfirmFallback | None = None,
    ) -> None:
        self._client = client
        self._config = config or FetchConfig()
        self._confirm_fallback = confirm_fallback

    def fetch(self, descriptor: FetchDescriptor) -> StagedTree:
        """Stage the files for *descriptor*.

        Raises:
            FetchFailed: Both attempts failed and no fallback was accepted, or the
                fetched tree holds no files.
        """
        if descriptor.is_bundled:
            return bundled_tree()

        attempts = 1 + self._config.retries
        failure: FetchFailed | None = None
        for attempt in range(1, attempts + 1):
            try:
                return self._fetch_remote(descriptor)
            except FetchFailed as exc:
                failure = exc
                logger.warning("Attempt %d/%d failed: %s", attempt, attempts, exc)

        assert failure is not None
        if failure.not_found and self._confirm_fallback is not None:
            if self._confirm_fallback(failure):
                logger.info("Falling back to the default template")
                return bundled_tree()
        raise failure

    def _tarball_url(self, descriptor: FetchDescriptor) -> str:
        host = self._config.codeload_host.rstrip("/")
        return f"{host}/{descriptor.owner}/{descriptor.repo}/tar.gz/{descriptor.ref}"

    def _fetch_remote(self, descriptor: FetchDescriptor) -> StagedTree:
        workdir = tempfile.TemporaryDirectory(prefix="webseed-")
        try:
            base = Path(workdir.name)
            archive = base / "template.tar.gz"
            root = base / "tree"
            root.mkdir()

            self._download(self._tarball_url(descriptor), archive, descriptor)
            files = _extract(archive, root, descriptor)
            archive.unlink()
            if files == 0:
                raise FetchFailed(f"Failed to fetch {descriptor.describe()}: the template has no files.")
        except OSError as exc:
            workdir.cleanup()
            raise FetchFailed(
                f"Failed to fetch {descriptor.describe()}: could not stage the template ({exc})."
            ) from exc
        except Exception:
            workdir.cleanup()
            raise

        logger.debug("Staged %d files from %s in %s", files, descriptor.describe(), root)
        return StagedTree(root=root, source=descriptor, _workdir=workdir)

    def _download(self, url: str, archive: Path, descriptor: FetchDescriptor) -> None:
        client = self._client or httpx.Client()
        logger.debug("Downloading %s", url)
        try:
            with client.stream(
                "GET", url, timeout=self._config.timeout, follow_redirects=True
            ) as response:
                if response.status_code == 404:
                    raise FetchFailed(
                        f"Failed to fetch {descriptor.describe()}: repository or ref not found.",
                        not_found=True,
                    )
                if response.status_code != 200:
                    raise FetchFailed(
                        f"Failed to fetch {descriptor.describe()}: "
                        f"server responded with HTTP {response.status_code}."
                    )
                with archive.open("wb") as out:
                    for chunk in response.iter_bytes(chunk_size=_CHUNK_SIZE):
                        out.write(chunk)
        except httpx.HTTPError as exc:
            raise FetchFailed(f"Failed to fetch {descriptor.describe()}: {exc}") from exc
        finally:
            if self._client is None:
                client.close()
