"""Shared fixtures for the webseed test suite."""

from __future__ import annotations

import io
import tarfile
from collections.abc import Callable
from pathlib import Path

import httpx
import pytest

from webseed.core.package_manager import Environment

TarballFactory = Callable[..., bytes]
ClientFactory = Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]

EXAMPLE_FILES: dict[str, str] = {
    "README.md": "# next.js\n",
    "examples/basic-css/package.json": (
        '{\n  "private": true,\n  "scripts": {"dev": "next", "build": "next build"},\n'
        '  "dependencies": {"next": "latest", "react": "^18", "react-dom": "^18"}\n}\n'
    ),
    "examples/basic-css/pages/index.js": "export default function Home() { return null }\n",
    "examples/basic-css/gitignore": "/node_modules\n",
    "examples/hello-world/package.json": '{"name": "hello-world", "private": true}\n',
    "examples/hello-world/pages/index.js": "export default () => 'hello'\n",
    "examples/hello-world/pages/about.js": "export default () => 'about'\n",
}


def build_tarball(files: dict[str, str | bytes], top: str = "next.js-canary") -> bytes:
    """Build a gzipped tarball shaped like a GitHub archive: everything under *top*/."""
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        root = tarfile.TarInfo(top)
        root.type = tarfile.DIRTYPE
        root.mode = 0o755
        tar.addfile(root)
        for name, content in files.items():
            data = content.encode() if isinstance(content, str) else content
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o644
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


@pytest.fixture
def tarball() -> TarballFactory:
    return build_tarball


@pytest.fixture
def example_archive() -> bytes:
    return build_tarball(EXAMPLE_FILES)


@pytest.fixture
def client_for() -> ClientFactory:
    def factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(handler))

    return factory


@pytest.fixture
def serving(example_archive: bytes, client_for: ClientFactory) -> httpx.Client:
    """Client whose every request returns the example archive."""
    return client_for(lambda request: httpx.Response(200, content=example_archive))


@pytest.fixture
def not_found(client_for: ClientFactory) -> httpx.Client:
    return client_for(lambda request: httpx.Response(404))


@pytest.fixture
def bare_environment() -> Environment:
    return Environment()


def tree_snapshot(root: Path) -> dict[str, bytes]:
    """Relative path -> content for every file under *root*."""
    return {
        p.relative_to(root).as_posix(): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, bytes]]:
    return tree_snapshot
