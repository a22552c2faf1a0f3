"""Export collated code coverage as SonarQube generic coverage XML.

The package folds the modules, files and lines reported by a coverage host
into one line map per source file, rebuilds each file path from the names
stored on disk so that differently cased reports collate, and writes the
result in the ``<coverage version="1">`` format understood by SonarQube.
"""

from __future__ import annotations

from .aggregate import AggregatedCoverage, aggregate, merge_line_maps
from .config import ExportConfig
from .errors import (
    ExportError,
    InputError,
    InvalidArgumentError,
    OutputUnavailableError,
    ReportDataError,
)
from .model import CoverageData, FileCoverage, LineCoverage, ModuleCoverage
from .paths import DirectoryListingResolver, PathCanonicalizer, canonicalize
from .plugin import (
    CURRENT_EXPORT_PLUGIN_VERSION,
    ExportPlugin,
    SonarQubeExport,
    create_plugin,
)
from .writer import REPORT_FORMAT_VERSION, write_report

__all__ = [
    "CURRENT_EXPORT_PLUGIN_VERSION",
    "REPORT_FORMAT_VERSION",
    "AggregatedCoverage",
    "CoverageData",
    "DirectoryListingResolver",
    "ExportConfig",
    "ExportError",
    "ExportPlugin",
    "FileCoverage",
    "InputError",
    "InvalidArgumentError",
    "LineCoverage",
    "ModuleCoverage",
    "OutputUnavailableError",
    "PathCanonicalizer",
    "ReportDataError",
    "SonarQubeExport",
    "aggregate",
    "canonicalize",
    "create_plugin",
    "merge_line_maps",
    "write_report",
]
