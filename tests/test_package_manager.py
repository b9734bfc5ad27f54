"""Tests for package manager selection."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from webseed.core.package_manager import Environment, responds, select_package_manager
from webseed.core.types import PackageManager

ALL = frozenset(PackageManager)

posix_only = pytest.mark.skipif(os.name == "nt", reason="uses shell scripts as fake binaries")


def _fake_binary(bin_dir: Path, name: str, exit_code: int) -> None:
    script = bin_dir / name
    script.write_text(f"#!/bin/sh\necho 1.0.0\nexit {exit_code}\n")
    script.chmod(0o755)


@pytest.fixture
def bin_dir(tmp_path: Path) -> Path:
    path = tmp_path / "bin"
    path.mkdir()
    return path


class TestSelect:
    """Priority order of the selector."""

    @pytest.mark.parametrize("explicit", list(PackageManager))
    def test_explicit_wins(self, explicit: PackageManager) -> None:
        """An explicit flag beats both the user agent and what is installed."""
        env = Environment(user_agent="yarn/1.22.19 npm/? node/v18.0.0", available=ALL)
        assert select_package_manager(explicit, env) is explicit

    @pytest.mark.parametrize(
        ("user_agent", "expected"),
        [
            ("pnpm/8.6.0 npm/? node/v20.3.0 linux x64", PackageManager.PNPM),
            ("yarn/1.22.19 npm/? node/v18.12.0 darwin arm64", PackageManager.YARN),
            ("npm/9.6.7 node/v20.3.0 linux x64 workspaces/false", PackageManager.NPM),
        ],
    )
    def test_user_agent(self, user_agent: str, expected: PackageManager) -> None:
        """The tool that launched the process is reused."""
        env = Environment(user_agent=user_agent, available=ALL)
        assert select_package_manager(None, env) is expected

    def test_unknown_user_agent_falls_through(self) -> None:
        env = Environment(user_agent="bun/1.0.0", available=frozenset({PackageManager.YARN}))
        assert select_package_manager(None, env) is PackageManager.YARN

    def test_probe_order(self) -> None:
        """pnpm is preferred over yarn when both are installed."""
        assert select_package_manager(None, Environment(available=ALL)) is PackageManager.PNPM

    def test_yarn_when_only_yarn(self) -> None:
        env = Environment(available=frozenset({PackageManager.NPM, PackageManager.YARN}))
        assert select_package_manager(None, env) is PackageManager.YARN

    def test_fallback_is_npm(self, bare_environment: Environment) -> None:
        assert select_package_manager(None, bare_environment) is PackageManager.NPM


class TestCapture:
    """Building the environment snapshot."""

    def test_reads_snapshot(self) -> None:
        env = Environment.capture(
            {"npm_config_user_agent": "pnpm/8.0.0", "CI": "true"},
            probe=lambda name: name == "yarn",
        )
        assert env.user_agent == "pnpm/8.0.0"
        assert env.available == frozenset({PackageManager.YARN})
        assert env.ci

    @pytest.mark.parametrize("value", ["", "0", "false", "False"])
    def test_ci_falsy_values(self, value: str) -> None:
        """CI is off for empty, zero and false values."""
        assert not Environment.capture({"CI": value}, probe=lambda name: False).ci

    def test_empty_user_agent_is_none(self) -> None:
        env = Environment.capture({"npm_config_user_agent": ""}, probe=lambda name: False)
        assert env.user_agent is None

    @posix_only
    def test_broken_binary_is_not_available(self, bin_dir: Path) -> None:
        """A yarn that is on PATH but exits non-zero is ignored, so npm is used."""
        _fake_binary(bin_dir, "yarn", exit_code=1)

        env = Environment.capture({"PATH": str(bin_dir), "npm_config_user_agent": ""})

        assert PackageManager.YARN not in env.available
        assert select_package_manager(None, env) is PackageManager.NPM

    @posix_only
    def test_working_binary_is_available(self, bin_dir: Path) -> None:
        _fake_binary(bin_dir, "pnpm", exit_code=0)
        _fake_binary(bin_dir, "yarn", exit_code=1)

        env = Environment.capture({"PATH": str(bin_dir)})

        assert env.available == frozenset({PackageManager.PNPM})
        assert select_package_manager(None, env) is PackageManager.PNPM


class TestResponds:
    """Running ``<name> --version`` to check a binary."""

    def test_missing_binary(self, bin_dir: Path) -> None:
        assert not responds("yarn", str(bin_dir))

    @posix_only
    def test_failing_binary(self, bin_dir: Path) -> None:
        _fake_binary(bin_dir, "yarn", exit_code=1)
        assert not responds("yarn", str(bin_dir))

    @posix_only
    def test_working_binary(self, bin_dir: Path) -> None:
        _fake_binary(bin_dir, "yarn", exit_code=0)
        assert responds("yarn", str(bin_dir))


class TestPackageManager:
    """Properties of the package manager enum."""

    def test_lockfiles(self) -> None:
        assert PackageManager.NPM.lockfile == "package-lock.json"
        assert PackageManager.PNPM.lockfile == "pnpm-lock.yaml"
        assert PackageManager.YARN.lockfile == "yarn.lock"

    def test_run_command(self) -> None:
        assert PackageManager.NPM.run_command == "npm run"
        assert PackageManager.YARN.run_command == "yarn"
