"""Serialise aggregated coverage in the SonarQube generic coverage format."""

from __future__ import annotations

import logging
import textwrap
import typing as typ
from pathlib import Path

from lxml import etree

from .aggregate import merge_line_maps
from .errors import OutputUnavailableError, ReportDataError

if typ.TYPE_CHECKING:  # pragma: no cover - type hints only
    import collections.abc as cabc

    from .aggregate import AggregatedCoverage, LineMap

__all__ = [
    "REPORT_FORMAT_VERSION",
    "collate_report",
    "stream_report",
    "write_report",
]

logger = logging.getLogger(__name__)

REPORT_FORMAT_VERSION = 1
INDENT = "  "


def collate_report(
    coverage: AggregatedCoverage,
    canonicalize: cabc.Callable[[str], str],
    *,
    collate: bool = True,
) -> list[tuple[str, LineMap]]:
    """Pair each aggregated file with its canonical path.

    Parameters
    ----------
    coverage
        Aggregated coverage keyed by raw path.
    canonicalize
        Callable returning the canonical form of a raw path.
    collate
        When true, raw paths sharing a canonical path are merged into a
        single entry at the position of the first one. When false, every raw
        path keeps its own entry even if the canonical paths repeat.

    Returns
    -------
    list[tuple[str, LineMap]]
        Report entries in aggregation order with ascending line numbers.
    """
    if not collate:
        return [(canonicalize(raw), lines) for raw, lines in coverage.items()]

    entries: dict[str, LineMap] = {}
    folded: dict[str, str] = {}
    for raw, lines in coverage.items():
        path = canonicalize(raw)
        if path in entries:
            logger.info("Collating %r into %r", raw, path)
            merged = merge_line_maps(entries[path], lines)
            entries[path] = {number: merged[number] for number in sorted(merged)}
            continue
        entries[path] = dict(lines)
        other = folded.setdefault(path.casefold(), path)
        if other != path:
            logger.warning(
                "Possible duplicate report entry: %r and %r differ only in case",
                other,
                path,
            )
    return list(entries.items())


def _file_element(path: str, lines: LineMap) -> etree._Element:
    file_node = etree.Element("file")
    file_node.set("path", path)
    for number, executed in lines.items():
        line_node = etree.SubElement(file_node, "lineToCover")
        line_node.set("lineNumber", str(number))
        line_node.set("covered", "true" if executed else "false")
    return file_node


def _render_file(path: str, lines: LineMap) -> str:
    """Return the indented ``<file>`` block for one report entry."""
    try:
        element = _file_element(path, lines)
    except ValueError as exc:
        msg = f"Cannot write path {path!r} to the coverage report: {exc}"
        raise ReportDataError(msg) from exc
    fragment = etree.tostring(element, encoding="unicode", pretty_print=True)
    return textwrap.indent(fragment, INDENT)


def _write_fragments(fragments: cabc.Iterable[str], sink: typ.TextIO) -> int:
    written = 0
    sink.write(f'<coverage version="{REPORT_FORMAT_VERSION}">\n')
    for fragment in fragments:
        sink.write(fragment)
        written += 1
    sink.write("</coverage>\n")
    return written


def stream_report(
    entries: cabc.Iterable[tuple[str, LineMap]], sink: typ.TextIO
) -> int:
    """Write ``entries`` to the open text ``sink`` and return the file count.

    Raises
    ------
    ReportDataError
        Raised when a path holds characters XML cannot represent. Output
        already written to ``sink`` is left in place.
    """
    return _write_fragments(
        (_render_file(path, lines) for path, lines in entries), sink
    )


def write_report(
    coverage: AggregatedCoverage,
    destination: Path,
    *,
    canonicalize: cabc.Callable[[str], str],
    encoding: str = "utf-8",
    collate: bool = True,
) -> Path:
    """Create or overwrite ``destination`` with the coverage report.

    Parameters
    ----------
    coverage
        Aggregated coverage keyed by raw path.
    destination
        File to write. Existing content is replaced.
    canonicalize
        Callable returning the canonical form of a raw path.
    encoding
        Text encoding of the report.
    collate
        Merge entries whose raw paths share a canonical path.

    Returns
    -------
    Path
        The resolved location of the written report.

    Raises
    ------
    ReportDataError
        Raised before ``destination`` is touched when a path holds characters
        XML cannot represent.
    OutputUnavailableError
        Raised when ``destination`` cannot be opened for writing. Nothing is
        cleaned up if writing fails part way through.
    """
    entries = collate_report(coverage, canonicalize, collate=collate)
    fragments = [_render_file(path, lines) for path, lines in entries]
    try:
        handle = destination.open("w", encoding=encoding)
    except (OSError, LookupError) as exc:
        msg = f"Cannot create the output file {destination}: {exc}"
        raise OutputUnavailableError(msg) from exc
    with handle:
        count = _write_fragments(fragments, handle)
    logger.debug("Wrote %d file(s) to %s", count, destination)
    return destination.resolve()
