"""Read-only coverage model handed to the exporter by the host."""

from __future__ import annotations

import dataclasses
import os
import typing as typ

__all__ = [
    "CoverageData",
    "FileCoverage",
    "LineCoverage",
    "ModuleCoverage",
    "RawPath",
]

RawPath: typ.TypeAlias = str | os.PathLike[str]


@dataclasses.dataclass(slots=True, frozen=True)
class LineCoverage:
    """Execution status of a single source line."""

    line_number: int
    has_been_executed: bool


@dataclasses.dataclass(slots=True)
class FileCoverage:
    """Lines measured for one source file.

    ``path`` is kept exactly as the host reported it. It is deliberately not
    converted to :class:`pathlib.Path`, which would normalise separators and
    repeated slashes and so change the aggregation key.
    """

    path: RawPath
    lines: list[LineCoverage] = dataclasses.field(default_factory=list)

    @property
    def raw_path(self) -> str:
        """Return the path as the string used for aggregation."""
        return os.fspath(self.path)


@dataclasses.dataclass(slots=True)
class ModuleCoverage:
    """Files reported by one instrumented module (binary or library)."""

    path: RawPath
    files: list[FileCoverage] = dataclasses.field(default_factory=list)


@dataclasses.dataclass(slots=True)
class CoverageData:
    """Root of the coverage model for one measurement session."""

    name: str
    modules: list[ModuleCoverage] = dataclasses.field(default_factory=list)
    exit_code: int = 0
