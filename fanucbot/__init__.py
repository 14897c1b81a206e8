"""FANUC simple-message channels, pose geometry, mesh loading and point tables."""

__version__ = "0.1.0"