"""Tests for :mod:`sonar_export.writer`."""

from __future__ import annotations

import io
import logging
from pathlib import Path

import pytest

from sonar_export.errors import OutputUnavailableError, ReportDataError
from sonar_export.writer import (
    REPORT_FORMAT_VERSION,
    collate_report,
    stream_report,
    write_report,
)


def _identity(path: str) -> str:
    return path


class TestStreamReport:
    """Tests for the stream_report function."""

    def test_empty_report_has_bare_root(self) -> None:
        """No files produce the root element and its closing tag only."""
        sink = io.StringIO()
        assert stream_report([], sink) == 0
        assert sink.getvalue() == '<coverage version="1">\n</coverage>\n'

    def test_layout_matches_generic_coverage_format(self) -> None:
        """Files and lines are indented and newline terminated."""
        sink = io.StringIO()
        count = stream_report(
            [("src/a.cpp", {3: True, 10: False}), ("b.cpp", {1: False})], sink
        )
        assert count == 2
        assert sink.getvalue() == (
            '<coverage version="1">\n'
            '  <file path="src/a.cpp">\n'
            '    <lineToCover lineNumber="3" covered="true"/>\n'
            '    <lineToCover lineNumber="10" covered="false"/>\n'
            "  </file>\n"
            '  <file path="b.cpp">\n'
            '    <lineToCover lineNumber="1" covered="false"/>\n'
            "  </file>\n"
            "</coverage>\n"
        )

    def test_path_attribute_is_escaped(self) -> None:
        """Markup characters in paths are escaped."""
        sink = io.StringIO()
        stream_report([('dir&"x"/<a.cpp', {1: True})], sink)
        assert '<file path="dir&amp;&quot;x&quot;/&lt;a.cpp">' in sink.getvalue()

    def test_version_constant(self) -> None:
        """The report format version is fixed at one."""
        assert REPORT_FORMAT_VERSION == 1


class TestCollateReport:
    """Tests for the collate_report function."""

    def test_merges_paths_with_same_canonical_form(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Raw spellings of one file become a single ORed entry."""
        coverage = {
            "c:/src/a.cpp": {10: False, 20: True},
            "b.cpp": {1: True},
            "C:/Src/A.cpp": {5: False, 10: True},
        }
        canonical = {"c:/src/a.cpp": "C:/Src/a.cpp", "C:/Src/A.cpp": "C:/Src/a.cpp"}
        with caplog.at_level(logging.INFO, logger="sonar_export.writer"):
            entries = collate_report(coverage, lambda raw: canonical.get(raw, raw))
        assert entries == [
            ("C:/Src/a.cpp", {5: False, 10: True, 20: True}),
            ("b.cpp", {1: True}),
        ]
        assert list(entries[0][1]) == [5, 10, 20]
        assert "Collating 'C:/Src/A.cpp'" in caplog.text

    def test_warns_about_case_only_differences(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Unresolved spellings stay separate but are flagged."""
        coverage = {"gone/a.cpp": {1: True}, "Gone/A.cpp": {1: False}}
        with caplog.at_level(logging.WARNING, logger="sonar_export.writer"):
            entries = collate_report(coverage, _identity)
        assert [path for path, _ in entries] == ["gone/a.cpp", "Gone/A.cpp"]
        assert "Possible duplicate report entry" in caplog.text

    def test_collation_can_be_disabled(self) -> None:
        """Without collation every raw path keeps its own entry."""
        coverage = {"a.cpp": {1: False}, "A.cpp": {1: True}}
        entries = collate_report(coverage, str.lower, collate=False)
        assert entries == [("a.cpp", {1: False}), ("a.cpp", {1: True})]

    def test_input_is_not_modified(self) -> None:
        """Collation does not alter the aggregated line maps."""
        first = {1: False}
        coverage = {"x.cpp": first, "X.cpp": {1: True}}
        collate_report(coverage, str.lower)
        assert first == {1: False}


class TestWriteReport:
    """Tests for the write_report function."""

    def test_writes_and_returns_resolved_path(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The report is written and its absolute location returned."""
        monkeypatch.chdir(tmp_path)
        result = write_report(
            {"a.cpp": {1: True}}, Path("out.xml"), canonicalize=_identity
        )
        assert result == (tmp_path / "out.xml").resolve()
        assert '<lineToCover lineNumber="1" covered="true"/>' in result.read_text(
            encoding="utf-8"
        )

    def test_overwrites_existing_file(self, tmp_path: Path) -> None:
        """Existing reports are replaced rather than appended to."""
        destination = tmp_path / "report.xml"
        destination.write_text("stale content\n")
        write_report({}, destination, canonicalize=_identity)
        assert destination.read_text(encoding="utf-8") == (
            '<coverage version="1">\n</coverage>\n'
        )

    def test_honours_encoding(self, tmp_path: Path) -> None:
        """The report can be written as UTF-16."""
        destination = tmp_path / "report.xml"
        write_report(
            {"é.cpp": {2: False}},
            destination,
            canonicalize=_identity,
            encoding="utf-16",
        )
        assert '<file path="é.cpp">' in destination.read_text(encoding="utf-16")

    @pytest.mark.parametrize("name", ["missing/out.xml", "."])
    def test_unavailable_destination(self, tmp_path: Path, name: str) -> None:
        """Destinations that cannot be opened raise OutputUnavailableError."""
        with pytest.raises(OutputUnavailableError, match="Cannot create"):
            write_report({"a.cpp": {1: True}}, tmp_path / name, canonicalize=_identity)

    def test_unrepresentable_path_leaves_destination_untouched(
        self, tmp_path: Path
    ) -> None:
        """Paths with XML control characters fail before the file is opened."""
        destination = tmp_path / "report.xml"
        destination.write_text("previous report\n")
        coverage = {"ok.cpp": {1: True}, "bad\x01.cpp": {1: False}}
        with pytest.raises(ReportDataError, match="bad"):
            write_report(coverage, destination, canonicalize=_identity)
        assert destination.read_text(encoding="utf-8") == "previous report\n"

    def test_unrepresentable_path_creates_no_file(self, tmp_path: Path) -> None:
        """No partial report is left behind for unrepresentable paths."""
        destination = tmp_path / "report.xml"
        with pytest.raises(ReportDataError):
            write_report(
                {"bad\x01.cpp": {1: True}}, destination, canonicalize=_identity
            )
        assert not destination.exists()
