"""Enums shared across the core and the CLI."""

from enum import Enum


class ManifestVariant(str, Enum):
    """Template flavor selecting a typed or untyped file and dependency set."""

    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"

    @property
    def directory(self) -> str:
        directories: dict[ManifestVariant, str] = {
            ManifestVariant.JAVASCRIPT: "js",
            ManifestVariant.TYPESCRIPT: "ts",
        }
        return directories[self]

    @property
    def label(self) -> str:
        labels: dict[ManifestVariant, str] = {
            ManifestVariant.JAVASCRIPT: "JavaScript",
            ManifestVariant.TYPESCRIPT: "TypeScript",
        }
        return labels[self]


class PackageManager(str, Enum):
    """Package manager identities the installer knows how to drive."""

    NPM = "npm"
    PNPM = "pnpm"
    YARN = "yarn"

    @property
    def lockfile(self) -> str:
        lockfiles: dict[PackageManager, str] = {
            PackageManager.NPM: "package-lock.json",
            PackageManager.PNPM: "pnpm-lock.yaml",
            PackageManager.YARN: "yarn.lock",
        }
        return lockfiles[self]

    @property
    def run_command(self) -> str:
        """Prefix used to run a manifest script, e.g. ``npm run dev``."""
        return "yarn" if self is PackageManager.YARN else f"{self.value} run"
