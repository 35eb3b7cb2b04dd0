"""Version information for travel-gallery."""

__version__ = "1.0.0"
