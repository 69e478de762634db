"""Errors reported by the inspector."""

from __future__ import annotations


class InspectorError(Exception):
    """Base class of every error the inspector reports."""

    message = "The inspector failed."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.message)


class IOFailure(InspectorError):
    """An input or output operation failed."""

    def __init__(self, error: OSError) -> None:
        self.error = error
        super().__init__(f"An IO operation failed: {error}")


class SmallAreaError(InspectorError):
    """The terminal is too small to show the main window."""

    message = "Area too small, main window might not display correctly."


class RunCargoMetadataError(InspectorError):
    """``cargo metadata`` could not be started."""

    message = "Failed to run cargo metadata."


class ParseMetadataError(InspectorError):
    """The output of ``cargo metadata`` was not valid JSON."""

    message = "Failed to parse metadata."


class CargoTomlNotFoundError(InspectorError):
    """The inspected directory holds no manifest."""

    message = "Cargo.toml not found."