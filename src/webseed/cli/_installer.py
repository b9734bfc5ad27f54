"""Run the selected package manager's install command."""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
from pathlib import Path

from webseed.core.errors import InstallFailed
from webseed.core.types import PackageManager

logger = logging.getLogger(__name__)

_INSTALL_ENV: dict[str, str] = {
    "ADBLOCK": "1",
    "DISABLE_OPENCOLLECTIVE": "1",
    "NODE_ENV": "development",
}


def install_command(package_manager: PackageManager) -> list[str]:
    return [package_manager.value, "install"]


def install(package_manager: PackageManager, project_dir: Path) -> None:
    """Install the dependencies declared in *project_dir*'s manifest.

    Raises:
        InstallFailed: The package manager is missing or exits non-zero.
    """
    command = install_command(package_manager)
    executable = shutil.which(command[0])
    if executable is None:
        raise InstallFailed(
            f"Failed to install dependencies: {package_manager.value} was not found on PATH."
        )

    logger.debug("Running %s in %s", " ".join(command), project_dir)
    try:
        subprocess.run(
            [executable, *command[1:]],
            cwd=project_dir,
            env={**os.environ, **_INSTALL_ENV},
            check=True,
        )
    except subprocess.CalledProcessError as exc:
        raise InstallFailed(
            f"Failed to install dependencies: `{' '.join(command)}` exited with code {exc.returncode}."
        ) from exc
