"""Copy a staged template into the destination and rewrite its manifest."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from importlib.resources.abc import Traversable
from pathlib import Path, PurePosixPath
from typing import Any

from webseed.core.errors import WriteFailed
from webseed.core.fetch import StagedTree
from webseed.core.types import ManifestVariant

logger = logging.getLogger(__name__)

MANIFEST = "package.json"
GITIGNORE = ".gitignore"

# Files starting with a dot are dropped by some packaging tools, so templates
# may ship them under these names. Only applied at the top of the template.
_RENAMES: dict[str, str] = {
    "gitignore": GITIGNORE,
}

_DEPENDENCIES: list[str] = [
    "next",
    "react",
    "react-dom",
]

_DEV_DEPENDENCIES: list[str] = [
    "eslint",
    "eslint-config-next",
]

_TYPESCRIPT_DEV_DEPENDENCIES: list[str] = [
    "@types/node",
    "@types/react",
    "@types/react-dom",
    "typescript",
]

DEFAULT_GITIGNORE = """\
# dependencies
/node_modules
/.pnp
.pnp.js

# testing
/coverage

# production
/.next/
/out/
/build

# misc
.DS_Store
*.pem

# debug
npm-debug.log*
yarn-debug.log*
yarn-error.log*
.pnpm-debug.log*

# local env files
.env*.local

# typescript
*.tsbuildinfo
next-env.d.ts
"""


def variant_dependencies(variant: ManifestVariant) -> tuple[list[str], list[str]]:
    """Sorted dependency and dev-dependency names for the bundled template."""
    dev = _DEV_DEPENDENCIES + (
        _TYPESCRIPT_DEV_DEPENDENCIES if variant is ManifestVariant.TYPESCRIPT else []
    )
    return sorted(_DEPENDENCIES), sorted(dev)


def _variant_root(root: Traversable, variant: ManifestVariant) -> Traversable:
    """Select the variant sub-tree when the template ships one per variant."""
    if all(root.joinpath(v.directory).is_dir() for v in ManifestVariant):
        return root.joinpath(variant.directory)
    return root


def _walk(node: Traversable, prefix: PurePosixPath) -> Iterator[tuple[PurePosixPath, Traversable]]:
    for child in sorted(node.iterdir(), key=lambda c: c.name):
        rel = prefix / child.name
        if child.is_dir():
            yield from _walk(child, rel)
        else:
            yield rel, child


def _destination_name(rel: PurePosixPath) -> PurePosixPath:
    if len(rel.parts) == 1:
        return PurePosixPath(_RENAMES.get(rel.name, rel.name))
    return rel


def _rewrite_manifest(
    raw: bytes | None,
    project_name: str,
    variant: ManifestVariant,
    bundled: bool,
) -> str:
    manifest: dict[str, Any]
    if raw is None:
        manifest = {"name": project_name, "version": "0.1.0", "private": True}
    else:
        try:
            manifest = json.loads(raw)
        except ValueError as exc:
            raise WriteFailed(f"Failed to write {MANIFEST}: template manifest is not valid JSON ({exc}).") from exc
        if not isinstance(manifest, dict):
            raise WriteFailed(f"Failed to write {MANIFEST}: template manifest is not a JSON object.")
        # Keep "name" as the first key.
        manifest = {"name": project_name, **{k: v for k, v in manifest.items() if k != "name"}}

    if bundled:
        deps, dev_deps = variant_dependencies(variant)
        manifest["dependencies"] = {d: "latest" for d in deps}
        manifest["devDependencies"] = {d: "latest" for d in dev_deps}

    return json.dumps(manifest, indent=2) + "\n"


def materialize(
    tree: StagedTree,
    destination: Path,
    variant: ManifestVariant,
    project_name: str,
) -> list[str]:
    """Write the staged template into *destination*.

    The destination must already have passed validation. There is no rollback:
    files written before a failure stay on disk.

    Returns:
        Sorted relative paths of every written file.

    Raises:
        WriteFailed: Any I/O error while copying, or an unreadable manifest.
    """
    root = _variant_root(tree.root, variant)
    written: list[str] = []
    manifest_raw: bytes | None = None

    try:
        for rel, source in _walk(root, PurePosixPath()):
            if rel == PurePosixPath(MANIFEST):
                manifest_raw = source.read_bytes()
                continue

            out_rel = _destination_name(rel)
            if out_rel != rel and root.joinpath(out_rel.name).is_file():
                logger.debug("Skipping %s, the template also ships %s", rel, out_rel)
                continue
            target = destination.joinpath(*out_rel.parts)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(source.read_bytes())
            if isinstance(source, Path) and source.stat().st_mode & 0o111:
                target.chmod(0o755)
            written.append(out_rel.as_posix())

        if GITIGNORE not in written:
            (destination / GITIGNORE).write_text(DEFAULT_GITIGNORE, encoding="utf-8")
            written.append(GITIGNORE)

        manifest = _rewrite_manifest(manifest_raw, project_name, variant, tree.bundled)
        (destination / MANIFEST).write_text(manifest, encoding="utf-8")
        written.append(MANIFEST)
    except OSError as exc:
        raise WriteFailed(f"Failed to write the project to {destination}: {exc}") from exc

    logger.debug("Materialized %d files into %s", len(written), destination)
    return sorted(written)
