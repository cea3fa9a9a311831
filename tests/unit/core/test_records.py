"""Unit tests for package record list I/O."""

from pathlib import Path
from unittest.mock import patch

import pytest
from fakes import FakeShell

from tarbs.core.errors import RecordParseError
from tarbs.core.records import download_records, edit_records, load_records, parse_records
from tarbs.models.config import ProvisioningConfig
from tarbs.models.record import PackageTag

SAMPLE = """TAG,NAME IN REPO (or git url),PURPOSE
,firefox,"is a web browser."
A,visual-studio-code-bin,"is an editor, with plugins."
G,https://example.com/foo.git,"is a tool."
"""


class TestParseRecords:
    """Tests for parse_records()."""

    def test_parses_rows_in_order(self) -> None:
        """Header is skipped and rows keep their order."""
        records = parse_records(SAMPLE)

        assert [r.tag for r in records] == [PackageTag.OFFICIAL, PackageTag.AUR, PackageTag.GIT]
        assert [r.name for r in records] == [
            "firefox",
            "visual-studio-code-bin",
            "https://example.com/foo.git",
        ]

    def test_quoted_description_keeps_commas(self) -> None:
        """Quoted descriptions may contain commas."""
        records = parse_records(SAMPLE)

        assert records[1].description == "is an editor, with plugins."

    def test_blank_lines_ignored(self) -> None:
        """Blank lines between rows are skipped."""
        records = parse_records("TAG,NAME,PURPOSE\n\n,htop,monitor\n\n")

        assert len(records) == 1
        assert records[0].name == "htop"

    def test_missing_description(self) -> None:
        """The description column is optional."""
        records = parse_records("TAG,NAME,PURPOSE\n,htop\n")

        assert records[0].description == ""

    def test_header_only(self) -> None:
        """A list with only a header has no records."""
        assert parse_records("TAG,NAME,PURPOSE\n") == []

    def test_unknown_tag(self) -> None:
        """Unknown tags are parse errors naming the line."""
        with pytest.raises(RecordParseError, match="Line 3"):
            parse_records("TAG,NAME,PURPOSE\n,htop,x\nX,foo,y\n")

    def test_empty_name(self) -> None:
        """Rows without a name are parse errors."""
        with pytest.raises(RecordParseError, match="cannot be empty"):
            parse_records("TAG,NAME,PURPOSE\nA,,y\n")

    def test_single_column(self) -> None:
        """Rows with a single column are parse errors."""
        with pytest.raises(RecordParseError, match="Line 2"):
            parse_records("TAG,NAME,PURPOSE\nhtop\n")


class TestRecordFiles:
    """Tests for loading, downloading and editing the record list."""

    def test_load_records(self, tmp_path: Path) -> None:
        """load_records() reads and parses a file."""
        path = tmp_path / "packages.csv"
        path.write_text(SAMPLE)

        assert len(load_records(path)) == 3

    def test_load_missing_file(self, tmp_path: Path) -> None:
        """A missing file is a parse error."""
        with pytest.raises(RecordParseError, match="Failed to read"):
            load_records(tmp_path / "missing.csv")

    def test_download_when_missing(self, tmp_path: Path, fake_shell: FakeShell) -> None:
        """The list is downloaded with curl when no local copy exists."""
        target = tmp_path / "packages.csv"
        config = ProvisioningConfig(username="alice", packages_file=target)

        result = download_records(config, fake_shell)

        assert result is not None and result.success
        assert fake_shell.commands == [
            ("curl", "-fsSL", "-o", str(target), config.packages_url),
        ]

    def test_no_download_when_present(self, tmp_path: Path, fake_shell: FakeShell) -> None:
        """A local copy is used as is."""
        target = tmp_path / "packages.csv"
        target.write_text(SAMPLE)
        config = ProvisioningConfig(username="alice", packages_file=target)

        assert download_records(config, fake_shell) is None
        assert fake_shell.calls == []

    def test_edit_records_uses_editor(self, tmp_path: Path) -> None:
        """The configured editor is opened on the list."""
        target = tmp_path / "packages.csv"
        config = ProvisioningConfig(username="alice", editor="nano", packages_file=target)

        with patch("tarbs.core.records.run_interactive", return_value=0) as mock_run:
            assert edit_records(config) == 0

        mock_run.assert_called_once_with(["nano", str(target)])
