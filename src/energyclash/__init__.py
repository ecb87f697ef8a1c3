"""Energy Clash: hex-grid territory game core."""

__version__ = "0.1.0"
