"""
DNS Overlay
Layered, scoped hostname resolution with per-context overrides
"""

from .version import __author__, __version__

__all__ = ["__author__", "__version__"]
