"""Resolve the on-disk spelling of source file paths.

Hosts and compilers do not agree on the letter case of the paths they report,
so the same file can arrive as ``c:\\src\\Foo.cpp`` and ``C:\\Src\\foo.cpp``.
The helpers here rebuild each path from the names the filesystem actually
stores so that both spellings end up under a single report entry.

The splitting and drive/share handling is plain string logic. Looking up the
stored name of a single segment is delegated to a :class:`SegmentResolver`,
which lets tests exercise Windows path forms on any platform.
"""

from __future__ import annotations

import logging
import os
import typing as typ

__all__ = [
    "DirectoryListingResolver",
    "PathCanonicalizer",
    "SegmentResolver",
    "canonicalize",
]

logger = logging.getLogger(__name__)

DRIVE_SEPARATOR = ":"
# Server and share names of a UNC path are passed through untouched.
SHARE_SEGMENTS = 2


class SegmentResolver(typ.Protocol):
    """Return the stored name of ``name`` inside ``parent`` or ``None``."""

    def __call__(self, parent: str, name: str) -> str | None:
        """Resolve a single path segment."""
        ...


class DirectoryListingResolver:
    """Resolve segment names by listing the parent directory.

    An exact match wins; otherwise the single entry matching without regard
    to case is returned. Ambiguous matches, missing directories and any
    ``OSError`` resolve to ``None``. Listings are cached per instance, so a
    fresh resolver should be used for every export.
    """

    def __init__(self) -> None:
        self._listings: dict[str, tuple[str, ...] | None] = {}

    def _list(self, parent: str) -> tuple[str, ...] | None:
        if parent not in self._listings:
            try:
                with os.scandir(parent or os.curdir) as entries:
                    self._listings[parent] = tuple(entry.name for entry in entries)
            except OSError as exc:
                logger.debug("Cannot list %r: %s", parent, exc)
                self._listings[parent] = None
        return self._listings[parent]

    def __call__(self, parent: str, name: str) -> str | None:
        """Return the stored spelling of ``name`` within ``parent``."""
        names = self._list(parent)
        if names is None:
            return None
        if name in names:
            return name
        folded = name.casefold()
        matches = [candidate for candidate in names if candidate.casefold() == folded]
        if len(matches) == 1:
            return matches[0]
        return None


def _split_prefix(raw_path: str, sep: str) -> tuple[str, str]:
    """Split ``raw_path`` into a verbatim prefix and the part to resolve."""
    if raw_path.startswith(sep * 2):
        index = 2
        skipped = 0
        while index < len(raw_path) and skipped < SHARE_SEGMENTS:
            if raw_path[index] == sep:
                skipped += 1
            index += 1
        return raw_path[:index], raw_path[index:]
    if len(raw_path) >= 2 and raw_path[1] == DRIVE_SEPARATOR:
        prefix = raw_path[0].upper() + DRIVE_SEPARATOR
        if raw_path[2:3] == sep:
            return prefix + sep, raw_path[3:]
        return prefix, raw_path[2:]
    return "", raw_path


def canonicalize(
    raw_path: str,
    *,
    resolver: SegmentResolver | None = None,
    sep: str = os.sep,
) -> str:
    """Return ``raw_path`` rebuilt from the names stored on disk.

    Parameters
    ----------
    raw_path
        Path exactly as reported by the host.
    resolver
        Segment lookup to use. Defaults to a new
        :class:`DirectoryListingResolver`.
    sep
        Path separator used to split and join segments.

    Returns
    -------
    str
        The canonical path. Each segment is looked up inside its already
        canonical parent. Segments that cannot be resolved are kept verbatim,
        so this never fails and is idempotent.

    Examples
    --------
    >>> stored = {("C:\\\\", "temp"): "Temp"}
    >>> canonicalize(
    ...     "c:\\\\temp\\\\file.cpp",
    ...     resolver=lambda parent, name: stored.get((parent, name)),
    ...     sep="\\\\",
    ... )
    'C:\\\\Temp\\\\file.cpp'
    """
    lookup = DirectoryListingResolver() if resolver is None else resolver
    prefix, remainder = _split_prefix(raw_path, sep)
    if not remainder:
        return prefix

    segments = remainder.split(sep)
    resolved: list[str] = []
    for index, segment in enumerate(segments):
        if not segment:
            resolved.append(segment)
            continue
        parent = prefix + sep.join(resolved)
        if index:
            parent += sep
        try:
            name = lookup(parent, segment)
        except OSError:
            name = None
        resolved.append(name or segment)
    return prefix + sep.join(resolved)


class PathCanonicalizer:
    """Canonicalize paths for a single export, caching each result."""

    def __init__(
        self,
        resolver: SegmentResolver | None = None,
        *,
        sep: str = os.sep,
    ) -> None:
        self.resolver = DirectoryListingResolver() if resolver is None else resolver
        self.sep = sep
        self._cache: dict[str, str] = {}

    def __call__(self, raw_path: str) -> str:
        """Return the canonical form of ``raw_path``."""
        if raw_path not in self._cache:
            canonical = canonicalize(raw_path, resolver=self.resolver, sep=self.sep)
            if canonical != raw_path:
                logger.debug("Canonicalized %r to %r", raw_path, canonical)
            self._cache[raw_path] = canonical
        return self._cache[raw_path]
