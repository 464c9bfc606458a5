"""Version information for neo-permissions."""

__version__ = "0.1.0"
