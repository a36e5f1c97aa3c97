"""Spatio-temporal kernel density estimation over regular space-time grids."""

__version__ = "0.1.0"

__all__ = ["__version__"]