"""PulseBoard: analytics dashboard API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pulseboard")
except PackageNotFoundError:  # running from a source checkout
    __version__ = "0.0.0+local"
