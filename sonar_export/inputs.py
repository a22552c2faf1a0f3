"""Build the coverage model from Cobertura and lcov reports on disk.

These readers let the exporter run without a native coverage host: each
report file is treated as one measurement run, so files reported by several
runs are collated by the aggregator exactly as they would be for a host.
"""

from __future__ import annotations

import enum
import logging
import typing as typ
from pathlib import Path

from lxml import etree

from .errors import InputError
from .model import CoverageData, FileCoverage, LineCoverage, ModuleCoverage

if typ.TYPE_CHECKING:  # pragma: no cover - type hints only
    import collections.abc as cabc

__all__ = [
    "InputFormat",
    "detect_format",
    "load_cobertura",
    "load_coverage",
    "load_lcov",
]

logger = logging.getLogger(__name__)

LCOV_SUFFIXES = frozenset({".info", ".lcov"})


class InputFormat(enum.StrEnum):
    """Supported input report formats."""

    COBERTURA = "cobertura"
    LCOV = "lcov"


def detect_format(path: Path) -> InputFormat:
    """Guess the report format of ``path`` from its suffix."""
    if path.suffix.lower() in LCOV_SUFFIXES:
        return InputFormat.LCOV
    return InputFormat.COBERTURA


def _parse_xml(xml_file: Path) -> etree._Element:
    # lxml reports a missing file as a generic OSError.
    if not xml_file.is_file():
        msg = f"Coverage file not found: {xml_file}"
        raise InputError(msg)
    try:
        return etree.parse(str(xml_file)).getroot()
    except PermissionError as exc:
        msg = f"Permission denied reading coverage file: {xml_file}"
        raise InputError(msg) from exc
    except etree.XMLSyntaxError as exc:
        msg = f"Invalid XML in coverage file {xml_file}: {exc}"
        raise InputError(msg) from exc
    except OSError as exc:
        msg = f"Failed to read coverage file {xml_file}: {exc}"
        raise InputError(msg) from exc


def _int_attr(node: etree._Element, name: str, xml_file: Path) -> int:
    value = node.get(name)
    try:
        return int(value) if value is not None else 0
    except ValueError as exc:
        msg = (
            f"Malformed {name}={value!r} on line {node.sourceline} "
            f"of {xml_file}"
        )
        raise InputError(msg) from exc


def load_cobertura(xml_file: Path) -> CoverageData:
    """Return the coverage model described by a Cobertura XML report.

    Parameters
    ----------
    xml_file : Path
        Cobertura report to read.

    Returns
    -------
    CoverageData
        One module per ``<package>`` and one file per ``<class>``. A line is
        executed when its ``hits`` attribute is positive.

    Raises
    ------
    InputError
        Raised when the report is missing, unreadable, not XML or carries
        non-numeric line attributes.
    """
    root = _parse_xml(xml_file)
    modules: list[ModuleCoverage] = []
    for package in root.iter("package"):
        module = ModuleCoverage(path=package.get("name") or str(xml_file))
        for cls in package.iter("class"):
            filename = cls.get("filename")
            if not filename:
                logger.warning(
                    "Skipping class without filename on line %s of %s",
                    cls.sourceline,
                    xml_file,
                )
                continue
            lines = [
                LineCoverage(
                    line_number=_int_attr(line, "number", xml_file),
                    has_been_executed=_int_attr(line, "hits", xml_file) > 0,
                )
                for line in cls.iterfind("lines/line")
            ]
            module.files.append(FileCoverage(path=filename, lines=lines))
        modules.append(module)
    return CoverageData(name=str(xml_file), modules=modules)


def _parse_lcov_line(value: str, lcov_file: Path, lineno: int) -> LineCoverage:
    fields = value.split(",")
    try:
        number, hits = int(fields[0]), int(fields[1])
    except (IndexError, ValueError) as exc:
        msg = f"Malformed lcov data on line {lineno} of {lcov_file}: DA:{value}"
        raise InputError(msg) from exc
    return LineCoverage(line_number=number, has_been_executed=hits > 0)


def load_lcov(lcov_file: Path) -> CoverageData:
    """Return the coverage model described by an ``lcov.info`` report."""
    try:
        text = lcov_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"Could not read {lcov_file}: {exc}"
        raise InputError(msg) from exc

    module = ModuleCoverage(path=str(lcov_file))
    current: FileCoverage | None = None
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        tag, _, value = line.partition(":")
        if tag == "SF":
            current = FileCoverage(path=value)
            module.files.append(current)
        elif tag == "DA":
            if current is None:
                logger.warning(
                    "Ignoring DA record outside a file on line %d of %s",
                    lineno,
                    lcov_file,
                )
                continue
            current.lines.append(_parse_lcov_line(value, lcov_file, lineno))
        elif line == "end_of_record":
            current = None

    if not module.files:
        logger.warning("No source files found in lcov data %s", lcov_file)
    return CoverageData(name=str(lcov_file), modules=[module])


def load_coverage(
    paths: cabc.Iterable[Path], fmt: InputFormat | str | None = None
) -> CoverageData:
    """Load every report in ``paths`` into a single coverage model.

    ``fmt`` forces the format of all inputs; when omitted it is detected per
    file with :func:`detect_format`.
    """
    forced = InputFormat(fmt) if fmt else None
    data = CoverageData(name="")
    names: list[str] = []
    for path in paths:
        match forced or detect_format(path):
            case InputFormat.LCOV:
                loaded = load_lcov(path)
            case InputFormat.COBERTURA:
                loaded = load_cobertura(path)
        data.modules.extend(loaded.modules)
        names.append(loaded.name)
    data.name = ", ".join(names)
    return data
