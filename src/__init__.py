"""sitestack — static site infrastructure provisioner."""

from sitestack.version import __version__

__all__ = ["__version__"]
