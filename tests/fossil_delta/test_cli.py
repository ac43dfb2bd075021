"""Tests for the command line tool."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from fossil_delta.__main__ import describe_delta, main
from fossil_delta.encoding import encode_int


@pytest.fixture(autouse=True)
def restore_logging() -> Iterator[None]:
    """Undo the root logger changes main() makes."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def files(tmp_path: Path, source_text: bytes, revised_text: bytes) -> tuple[Path, Path]:
    """Source and target files on disk."""
    source = tmp_path / "old.txt"
    target = tmp_path / "new.txt"
    source.write_bytes(source_text)
    target.write_bytes(revised_text)
    return source, target


class TestCreateAndApply:
    """Tests for the create and apply commands."""

    def test_roundtrip_through_files(self, tmp_path: Path, files: tuple[Path, Path]) -> None:
        """A delta written by create is accepted by apply."""
        source, target = files
        delta = tmp_path / "new.delta"
        rebuilt = tmp_path / "rebuilt.txt"

        assert main(["create", str(source), str(target), "-o", str(delta)]) == 0
        assert main(["apply", str(source), str(delta), "-o", str(rebuilt)]) == 0

        assert rebuilt.read_bytes() == target.read_bytes()
        assert delta.stat().st_size < target.stat().st_size

    def test_create_to_stdout(
        self, files: tuple[Path, Path], capsysbinary: pytest.CaptureFixture[bytes]
    ) -> None:
        """Without -o the delta goes to stdout."""
        source, target = files
        assert main(["create", str(source), str(target)]) == 0
        out = capsysbinary.readouterr().out
        assert out.startswith(encode_int(len(target.read_bytes())) + b"\n")

    def test_corrupt_delta(self, tmp_path: Path, files: tuple[Path, Path]) -> None:
        """A corrupt delta exits with status 1 and writes nothing."""
        source, _ = files
        delta = tmp_path / "bad.delta"
        delta.write_bytes(b"3\n3:abc1;")
        output = tmp_path / "out.txt"

        assert main(["apply", str(source), str(delta), "-o", str(output)]) == 1
        assert not output.exists()

    def test_missing_file(self, tmp_path: Path) -> None:
        """Unreadable inputs exit with status 1."""
        missing = tmp_path / "missing"
        assert main(["create", str(missing), str(missing)]) == 1

    def test_invalid_environment(
        self, files: tuple[Path, Path], monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A bad configuration variable exits with status 1."""
        monkeypatch.setenv("FOSSIL_DELTA_MAX_CANDIDATES", "many")
        source, target = files
        assert main(["create", str(source), str(target)]) == 1


class TestInfo:
    """Tests for the info command."""

    def test_describe(self) -> None:
        """The summary lists sizes, record counts and the checksum."""
        summary = describe_delta(b"11\nW@W,1:BW@W,1M51GG;")
        assert "output size:   65" in summary
        assert "inserts:       1 (1 bytes)" in summary
        assert "copies:        2 (64 bytes)" in summary
        assert "checksum:      0x56141410" in summary

    def test_info_command(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """info prints the summary of a delta file."""
        delta = tmp_path / "d.delta"
        delta.write_bytes(b"0\n0;")
        assert main(["info", str(delta)]) == 0
        assert "output size:   0" in capsys.readouterr().out

    def test_info_malformed(self, tmp_path: Path) -> None:
        """info rejects malformed deltas."""
        delta = tmp_path / "d.delta"
        delta.write_bytes(b"garbage")
        assert main(["info", str(delta)]) == 1

