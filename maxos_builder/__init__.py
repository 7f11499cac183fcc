"""Build, package and boot the MaxOS kernel as a hybrid BIOS/UEFI ISO."""

from .__version__ import __version__

__all__ = ["__version__"]
