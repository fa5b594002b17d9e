"""envwarp - resolve env files and secrets, render templates, exec the service."""

from importlib.metadata import PackageNotFoundError, version as _package_version

DEV_VERSION = "v0.0.0-dev"


def get_version() -> str:
    try:
        return _package_version("envwarp")
    except PackageNotFoundError:
        return DEV_VERSION


__version__ = get_version()
