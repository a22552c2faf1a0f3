"""Collate coverage observations into one line map per source file."""

from __future__ import annotations

import logging
import typing as typ

if typ.TYPE_CHECKING:  # pragma: no cover - type hints only
    import collections.abc as cabc

    from .model import ModuleCoverage

__all__ = ["AggregatedCoverage", "LineMap", "aggregate", "merge_line_maps"]

logger = logging.getLogger(__name__)

LineMap: typ.TypeAlias = dict[int, bool]
AggregatedCoverage: typ.TypeAlias = dict[str, LineMap]


def merge_line_maps(target: LineMap, source: cabc.Mapping[int, bool]) -> LineMap:
    """OR every flag in ``source`` into ``target`` and return ``target``.

    A line that has been executed once stays executed, so the merge is
    commutative, associative and idempotent.
    """
    for line_number, executed in source.items():
        target[line_number] = target.get(line_number, False) or executed
    return target


def _sorted_lines(lines: LineMap) -> LineMap:
    return {number: lines[number] for number in sorted(lines)}


def aggregate(modules: cabc.Iterable[ModuleCoverage]) -> AggregatedCoverage:
    """Fold module coverage into a map of raw path to line flags.

    Parameters
    ----------
    modules
        Modules reported by the host. Duplicate files and duplicate lines,
        with or without conflicting flags, are expected.

    Returns
    -------
    AggregatedCoverage
        One entry per distinct raw path in first-seen order. Each line map is
        ordered by ascending line number. Modules without files and files
        without lines contribute nothing.
    """
    coverage: AggregatedCoverage = {}
    for module in modules:
        if not module.files:
            logger.debug("Skipping module without files: %s", module.path)
            continue
        for file in module.files:
            if not file.lines:
                logger.debug("Skipping file without lines: %s", file.path)
                continue
            entry = coverage.setdefault(file.raw_path, {})
            for line in file.lines:
                entry[line.line_number] = (
                    entry.get(line.line_number, False) or line.has_been_executed
                )
    return {path: _sorted_lines(lines) for path, lines in coverage.items()}
