"""Travel Gallery - photo gallery backed by a JSON metadata store."""

from .version import __version__

__all__ = ["__version__"]
