"""Export plugin interface and the SonarQube implementation.

A coverage host drives exporters through four operations: validate the
optional argument, describe it, report the plugin interface version and run
the export. :func:`create_plugin` is the factory a host calls to obtain the
SonarQube exporter; it is also published as the ``sonarqube`` entry point in
the ``sonar_export.plugins`` group.
"""

from __future__ import annotations

import logging
import re
import typing as typ

from .aggregate import aggregate
from .config import ExportConfig
from .errors import InvalidArgumentError
from .paths import PathCanonicalizer
from .writer import write_report

if typ.TYPE_CHECKING:  # pragma: no cover - type hints only
    import collections.abc as cabc
    from pathlib import Path

    from .model import CoverageData
    from .paths import SegmentResolver

__all__ = [
    "CURRENT_EXPORT_PLUGIN_VERSION",
    "ExportPlugin",
    "SonarQubeExport",
    "create_plugin",
    "has_file_name",
]

logger = logging.getLogger(__name__)

CURRENT_EXPORT_PLUGIN_VERSION = 1
ARGUMENT_HELP = "output file (optional)"

_SEPARATORS = re.compile(r"[\\/]")
_NON_FILE_NAMES = {"", ".", ".."}


class ExportPlugin(typ.Protocol):
    """Operations a coverage host expects from an exporter."""

    def export(
        self, coverage_data: CoverageData, argument: str | None
    ) -> Path | None:
        """Write the report and return where it was written."""
        ...

    def check_argument(self, argument: str | None) -> None:
        """Raise :class:`InvalidArgumentError` when ``argument`` is unusable."""
        ...

    def get_argument_help_description(self) -> str:
        """Describe the optional argument for the host's help output."""
        ...

    def get_export_plugin_version(self) -> int:
        """Return the plugin interface version implemented."""
        ...


def has_file_name(argument: str) -> bool:
    """Return True when ``argument`` ends in a file-name component.

    Both ``/`` and ``\\`` count as separators and a bare drive such as
    ``C:`` has no file name, whatever the current platform.
    """
    if len(argument) >= 2 and argument[1] == ":":
        argument = argument[2:]
    return _SEPARATORS.split(argument)[-1] not in _NON_FILE_NAMES


class SonarQubeExport:
    """Exporter producing SonarQube generic coverage XML."""

    def __init__(
        self,
        *,
        encoding: str | None = None,
        collate: object = None,
        resolver_factory: cabc.Callable[[], SegmentResolver] | None = None,
        sep: str | None = None,
    ) -> None:
        self.encoding = encoding
        self.collate = collate
        self.resolver_factory = resolver_factory
        self.sep = sep

    def _canonicalizer(self) -> PathCanonicalizer:
        resolver = self.resolver_factory() if self.resolver_factory else None
        if self.sep is None:
            return PathCanonicalizer(resolver)
        return PathCanonicalizer(resolver, sep=self.sep)

    def export(self, coverage_data: CoverageData, argument: str | None) -> Path:
        """Aggregate ``coverage_data`` and write the report.

        Parameters
        ----------
        coverage_data
            Coverage model supplied by the host. It is only read.
        argument
            Optional destination override. Defaults to ``SonarQube.xml`` in
            the working directory.

        Returns
        -------
        Path
            The resolved location of the written report.

        Raises
        ------
        OutputUnavailableError
            Raised when the destination cannot be opened for writing.
        ReportDataError
            Raised, before the destination is opened, when a file path holds
            characters that XML cannot carry.
        """
        config = ExportConfig.from_argument(
            argument, encoding=self.encoding, collate=self.collate
        )
        coverage = aggregate(coverage_data.modules)
        logger.debug(
            "Aggregated %d file(s) from %d module(s) for %s",
            len(coverage),
            len(coverage_data.modules),
            coverage_data.name,
        )
        return write_report(
            coverage,
            config.output,
            canonicalize=self._canonicalizer(),
            encoding=config.encoding,
            collate=config.collate,
        )

    def check_argument(self, argument: str | None) -> None:
        """Reject an override that does not name a file."""
        if argument is not None and not has_file_name(argument):
            msg = f"Invalid argument for SonarQube export: {argument!r}"
            raise InvalidArgumentError(msg)

    def get_argument_help_description(self) -> str:
        """Return the help text for the optional argument."""
        return ARGUMENT_HELP

    def get_export_plugin_version(self) -> int:
        """Return :data:`CURRENT_EXPORT_PLUGIN_VERSION`."""
        return CURRENT_EXPORT_PLUGIN_VERSION


def create_plugin() -> ExportPlugin:
    """Return a new SonarQube exporter with default settings."""
    return SonarQubeExport()
