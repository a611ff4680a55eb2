"""Chat command router that answers game-server status queries."""

__version__ = "0.1.0"
