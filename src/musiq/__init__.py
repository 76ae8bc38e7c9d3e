"""musiq - a CLI music library with numeric tags."""

__version__ = "0.1.0"
