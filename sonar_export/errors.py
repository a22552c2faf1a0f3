"""Error types shared across the SonarQube export package."""

from __future__ import annotations

__all__ = [
    "ExportError",
    "InputError",
    "InvalidArgumentError",
    "OutputUnavailableError",
    "ReportDataError",
]


class ExportError(RuntimeError):
    """Base class for failures reported by the exporter."""


class OutputUnavailableError(ExportError):
    """Raised when the report destination cannot be opened for writing."""


class InvalidArgumentError(ExportError, ValueError):
    """Raised when the plugin argument does not name an output file."""


class InputError(ExportError):
    """Raised when an input coverage report cannot be read or parsed."""


class ReportDataError(ExportError):
    """Raised when coverage data cannot be represented in the XML report."""
