"""iupgen - IUP element binding generator."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("iupgen")
except PackageNotFoundError:
    __version__ = "(local)"
