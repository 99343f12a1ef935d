"""Unit tests for the deleted command."""

import json
from pathlib import Path

from snapvers.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def _tree(tmp_path: Path, write_file) -> tuple[Path, Path]:
    backup = tmp_path / "backup"
    live_root = tmp_path / "live"
    (live_root / "docs").mkdir(parents=True)
    write_file(live_root / "kept.txt", b"k", 0)
    write_file(backup / ".zfs/snapshot/s1/kept.txt", b"k", 0)
    write_file(backup / ".zfs/snapshot/s1/gone.txt", b"gone", 5)
    write_file(backup / ".zfs/snapshot/s2/docs/old.md", b"old", 7)
    return backup, live_root


class TestDeletedCommand:
    """Tests for snapvers deleted."""

    def test_json(self, tmp_path: Path, write_file) -> None:
        """Only the requested directory is reported without --recursive."""
        backup, live_root = _tree(tmp_path, write_file)

        result = runner.invoke(
            app,
            [
                "deleted",
                str(live_root),
                "--snap-dir",
                str(backup),
                "--local-dir",
                str(live_root),
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [d["directory"] for d in data] == [str(live_root)]
        assert [Path(e["path"]).name for e in data[0]["deleted"]] == ["gone.txt"]

    def test_recursive_json(self, tmp_path: Path, write_file) -> None:
        """--recursive also reports subdirectories."""
        backup, live_root = _tree(tmp_path, write_file)

        result = runner.invoke(
            app,
            [
                "deleted",
                str(live_root),
                "-r",
                "--snap-dir",
                str(backup),
                "--local-dir",
                str(live_root),
                "-f",
                "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [d["directory"] for d in data] == [str(live_root), str(live_root / "docs")]

    def test_table_summary(self, tmp_path: Path, write_file) -> None:
        """Table output ends with a summary line."""
        backup, live_root = _tree(tmp_path, write_file)

        result = runner.invoke(
            app,
            ["deleted", str(live_root), "--snap-dir", str(backup), "--local-dir", str(live_root)],
        )

        assert result.exit_code == 0, result.output
        assert "Deleted from" in result.stdout
        assert "Found 1 deleted entries in 1 directories" in result.stdout

    def test_directory_is_normalized(self, tmp_path: Path, write_file) -> None:
        """Directories containing ".." are normalized before lookup."""
        backup, live_root = _tree(tmp_path, write_file)

        result = runner.invoke(
            app,
            [
                "deleted",
                str(live_root / "docs" / ".." / "docs"),
                "--snap-dir",
                str(backup),
                "--local-dir",
                str(live_root),
                "--format",
                "json",
            ],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert [d["directory"] for d in data] == [str(live_root / "docs")]
        assert [Path(e["path"]).name for e in data[0]["deleted"]] == ["old.md"]

    def test_quiet_suppresses_empty_message(self, tmp_path: Path) -> None:
        """--quiet hides the 'no deleted files' message."""
        backup = tmp_path / "backup"
        (backup / ".zfs/snapshot/s1").mkdir(parents=True)
        live_root = tmp_path / "live"
        live_root.mkdir()
        args = ["deleted", str(live_root), "--snap-dir", str(backup), "--local-dir", str(live_root)]

        loud = runner.invoke(app, args)
        quiet = runner.invoke(app, ["--quiet", *args])

        assert "No deleted files found" in loud.stdout
        assert quiet.exit_code == 0
        assert "No deleted files found" not in quiet.stdout

    def test_missing_directory(self, tmp_path: Path) -> None:
        """A missing live directory exits with code 1."""
        backup = tmp_path / "backup"
        (backup / ".zfs/snapshot").mkdir(parents=True)

        result = runner.invoke(
            app,
            [
                "deleted",
                str(tmp_path / "nope"),
                "--snap-dir",
                str(backup),
                "--local-dir",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 1
        assert "Error" in result.output
