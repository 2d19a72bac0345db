"""Normalize provider reference documentation and assemble multi-language examples."""

__version__ = "0.1.0"
