"""Version information for hokku."""

__version__ = "0.1.0"
