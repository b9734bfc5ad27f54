"""webseed: bootstrap web-application projects from templates."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("webseed")
except PackageNotFoundError:
    __version__ = "0.0.0"
