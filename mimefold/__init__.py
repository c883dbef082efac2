"""Helpers for locating, folding, unfolding and quoting mail header fields."""

__version__ = "0.1.0"
__all__ = ["headerutil"]