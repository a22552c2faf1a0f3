"""Builders shared by the SonarQube export tests."""

from __future__ import annotations

import dataclasses

from sonar_export.model import CoverageData, FileCoverage, LineCoverage, ModuleCoverage


@dataclasses.dataclass
class FakeResolver:
    """In-memory segment resolver keyed by ``(parent, name)``."""

    stored: dict[tuple[str, str], str] = dataclasses.field(default_factory=dict)
    calls: list[tuple[str, str]] = dataclasses.field(default_factory=list)

    def __call__(self, parent: str, name: str) -> str | None:
        self.calls.append((parent, name))
        return self.stored.get((parent, name))


def make_file(path: str, *lines: tuple[int, bool]) -> FileCoverage:
    """Build a :class:`FileCoverage` from ``(line, executed)`` pairs."""
    return FileCoverage(
        path=path,
        lines=[LineCoverage(number, executed) for number, executed in lines],
    )


def make_data(*modules: list[FileCoverage]) -> CoverageData:
    """Build a :class:`CoverageData` with one module per file list."""
    return CoverageData(
        name="test",
        modules=[
            ModuleCoverage(path=f"module{index}.dll", files=files)
            for index, files in enumerate(modules)
        ],
    )
