"""
Custom exceptions for the All That Glitters rules engine.
"""


class InvalidConfigException(Exception):
    """Raised when a GameConfig cannot describe a playable game."""
    pass
