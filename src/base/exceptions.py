"""Grid-specific exceptions for consistent error handling."""

from typing import Any


class GridError(Exception):
    """Base grid error."""
    pass


class GridConfigurationError(GridError, ValueError):
    """Raised when a grid is constructed with invalid settings."""

    def __init__(self, setting: str, value: Any, message: str = "must be positive"):
        super().__init__(f"The {setting} {message}, got: {value}")
        self.setting = setting
        self.value = value


class InvalidSnappingModeError(GridError, ValueError):
    """Raised when a snapping mode contains bits that are not snapping targets."""

    def __init__(self, mode: int):
        super().__init__(f"Invalid snapping mode: {mode:#x}")
        self.mode = mode


class InvalidCoordinatesError(GridError, ValueError):
    """Raised when coordinates violate the contract of a grid operation."""
    pass
