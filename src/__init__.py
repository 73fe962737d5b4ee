"""meshsearch: workspace-scoped semantic people search."""

from meshsearch.version import __version__

__all__ = ["__version__"]
