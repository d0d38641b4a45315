from __future__ import annotations

from pathlib import Path

import pytest

from repo_dump.exceptions import OutputWriteError
from repo_dump.output import (
    is_safe_to_wipe,
    prepare_output_directory,
    resolve_output_path,
    wipe_output_directory,
    write_chunk,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    ("pattern", "index", "expected"),
    [
        ("dump/dump_*.txt", 2, Path("dump/dump_2.txt")),
        ("dump/all.txt", 3, Path("dump/all_3.txt")),
        ("dump/all", 1, Path("dump/all_1")),
        ("dump/{type}_*.txt", 1, Path("dump/.php_1.txt")),
        ("dump/out{type}", 4, Path("dump/out_4.php")),
    ],
)
def test_resolve_output_path(pattern: str, index: int, expected: Path) -> None:
    assert resolve_output_path(pattern, ".php", index) == expected


@pytest.mark.unit
def test_is_safe_to_wipe() -> None:
    src = Path("/work/project/src")

    assert is_safe_to_wipe(Path("/work/dump"), src) is True
    assert is_safe_to_wipe(Path("/work/project/src/dump"), src) is True
    assert is_safe_to_wipe(src, src) is False
    assert is_safe_to_wipe(Path("/work/project"), src) is False
    assert is_safe_to_wipe(Path("/"), src) is False
    assert is_safe_to_wipe(None, src) is False
    assert is_safe_to_wipe(Path("/work/dump"), None) is False


@pytest.mark.unit
def test_wipe_output_directory_refuses_source_ancestor(tmp_path: Path) -> None:
    src = tmp_path / "src"
    src.mkdir()
    (src / "keep.php").write_text("<?php", encoding="utf-8")

    assert wipe_output_directory(tmp_path.resolve(), src.resolve()) is False
    assert (src / "keep.php").exists()


@pytest.mark.unit
def test_prepare_output_directory_wipes_sibling(tmp_path: Path) -> None:
    src = tmp_path / "src"
    out = tmp_path / "out"
    src.mkdir()
    out.mkdir()
    (out / "stale.txt").write_text("old", encoding="utf-8")

    prepare_output_directory(str(out / "dump_*.txt"), src)

    assert out.is_dir()
    assert list(out.iterdir()) == []


@pytest.mark.unit
def test_prepare_output_directory_keeps_directory_containing_source(tmp_path: Path) -> None:
    project = tmp_path / "project"
    src = project / "src"
    src.mkdir(parents=True)
    (project / "notes.txt").write_text("keep", encoding="utf-8")

    prepare_output_directory(str(project / "dump_*.txt"), src)

    assert (project / "notes.txt").read_text(encoding="utf-8") == "keep"


@pytest.mark.unit
def test_prepare_output_directory_creates_missing_directory(tmp_path: Path) -> None:
    out = tmp_path / "nested" / "dump"

    prepare_output_directory(str(out / "{type}_*.txt"), tmp_path / "src", ".php")

    assert out.is_dir()


@pytest.mark.unit
def test_write_chunk_creates_parents(tmp_path: Path) -> None:
    target = tmp_path / "a" / "b" / "dump_1.txt"

    write_chunk(target, "héllo")

    assert target.read_text(encoding="utf-8") == "héllo"


@pytest.mark.unit
def test_write_chunk_failure_reports_path(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    target = blocker / "dump_1.txt"

    with pytest.raises(OutputWriteError) as exc_info:
        write_chunk(target, "data")

    assert exc_info.value.path == target
    assert str(target) in str(exc_info.value)


@pytest.mark.unit
def test_write_chunk_keeps_line_endings(tmp_path: Path) -> None:
    target = tmp_path / "dump_1.txt"

    write_chunk(target, "a\r\nb\rc\n")

    assert target.read_bytes() == b"a\r\nb\rc\n"
