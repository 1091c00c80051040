"""modkeeper: safe on-disk lifecycle management for mod files."""

__version__ = "0.1.0"
