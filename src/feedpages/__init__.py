"""Aggregate syndication feeds into per-page article listings."""

__version__ = "0.1.0"
