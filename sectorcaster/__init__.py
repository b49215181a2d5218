"""A sector-and-portal software renderer and small first person shooter."""

__version__ = "0.1.0"