"""Version information for azdo-branches."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("azdo-branches")
except PackageNotFoundError:
    # Running from a source checkout that was never installed
    __version__ = "0.0.0+unknown"
