"""Choose the package manager the installer should drive."""

from __future__ import annotations

import functools
import logging
import os
import shutil
import subprocess
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from webseed.core.types import PackageManager

logger = logging.getLogger(__name__)

USER_AGENT_ENV = "npm_config_user_agent"

PROBE_ORDER: tuple[PackageManager, ...] = (PackageManager.PNPM, PackageManager.YARN)
FALLBACK = PackageManager.NPM

_PROBE_TIMEOUT = 10.0


@dataclass(frozen=True, kw_only=True)
class Environment:
    """
    Process-wide state consulted by the selector, captured once per invocation.

    Attributes:
        user_agent: Value of ``npm_config_user_agent``, set by the package manager
            that launched this process (e.g. ``"pnpm/8.6.0 npm/? node/v20.3.0"``).
        available: Package managers found on the search path that run.
        ci: Whether the process runs in a CI environment.
    """

    user_agent: str | None = None
    available: frozenset[PackageManager] = frozenset()
    ci: bool = False

    @classmethod
    def capture(
        cls,
        env: Mapping[str, str] | None = None,
        probe: Callable[[str], bool] | None = None,
    ) -> Environment:
        env = os.environ if env is None else env
        probe = probe or functools.partial(responds, search_path=env.get("PATH"))
        return cls(
            user_agent=env.get(USER_AGENT_ENV) or None,
            available=frozenset(pm for pm in PackageManager if probe(pm.value)),
            ci=env.get("CI", "").lower() not in ("", "0", "false"),
        )


def responds(name: str, search_path: str | None = None) -> bool:
    """Whether *name* is on the search path and answers ``--version`` successfully."""
    executable = shutil.which(name, path=search_path)
    if executable is None:
        return False
    try:
        subprocess.run(
            [executable, "--version"],
            check=True,
            capture_output=True,
            timeout=_PROBE_TIMEOUT,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.debug("Ignoring %s: %s", name, exc)
        return False
    return True


def _from_user_agent(user_agent: str) -> PackageManager | None:
    name = user_agent.split("/", 1)[0].strip().lower()
    try:
        return PackageManager(name)
    except ValueError:
        return None


def select_package_manager(
    explicit: PackageManager | None,
    environment: Environment,
) -> PackageManager:
    """Pick a package manager: explicit flag, then invoking tool, then what is installed."""
    if explicit is not None:
        return explicit

    if environment.user_agent:
        if (chosen := _from_user_agent(environment.user_agent)) is not None:
            logger.debug("Using %s from %s", chosen.value, USER_AGENT_ENV)
            return chosen

    for candidate in PROBE_ORDER:
        if candidate in environment.available:
            logger.debug("Using %s found on PATH", candidate.value)
            return candidate

    return FALLBACK
