"""Loom of Society sentiment backend: cached market, tech and society mood."""

__version__ = "1.0.0"
