from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from repo_dump.aggregator import ChunkAggregator, byte_size, file_header

if TYPE_CHECKING:
    from pathlib import Path


def section_size(name: str, content: str) -> int:
    """Size in bytes of one file section as written by the aggregator."""
    return byte_size(file_header(name)) + byte_size(content) + 1


@pytest.mark.unit
def test_file_header_format() -> None:
    assert file_header("src/app.php") == "\n--- FILE: src/app.php ---\n"


@pytest.mark.unit
def test_chunks_never_exceed_limit_and_keep_every_byte(tmp_path: Path) -> None:
    limit = 120
    preamble = "PREAMBLE\n"
    contents = {f"f{i}.php": "é" * (5 + 7 * i) for i in range(8)}
    agg = ChunkAggregator(str(tmp_path / "out" / "dump_*.txt"), ".php", limit)

    agg.seed(preamble)
    for name, content in contents.items():
        assert agg.add(name, content) is True
    parts = agg.finish()

    assert parts == len(agg.written) > 1
    assert agg.written[0] == tmp_path / "out" / "dump_1.txt"
    total = 0
    for path in agg.written:
        data = path.read_text(encoding="utf-8")
        size = byte_size(data)
        total += size
        if size > limit:
            assert data.count("--- FILE: ") == 1
    expected = byte_size(preamble) + sum(section_size(n, c) for n, c in contents.items())
    assert total == expected


@pytest.mark.unit
def test_oversized_file_gets_its_own_chunk(tmp_path: Path) -> None:
    agg = ChunkAggregator(str(tmp_path / "dump.txt"), ".php", 60)

    agg.add("small.php", "a")
    agg.add("big.php", "b" * 200)
    agg.add("tail.php", "c")

    assert agg.finish() == 3
    assert [p.name for p in agg.written] == ["dump_1.txt", "dump_2.txt", "dump_3.txt"]
    middle = agg.written[1].read_text(encoding="utf-8")
    assert middle == "\n--- FILE: big.php ---\n" + "b" * 200 + "\n"


@pytest.mark.unit
def test_flush_happens_before_append_not_after(tmp_path: Path) -> None:
    first = section_size("a.php", "x" * 10)
    agg = ChunkAggregator(str(tmp_path / "d_*.txt"), ".php", first * 2)

    agg.add("a.php", "x" * 10)
    agg.add("b.php", "y" * 10)

    assert agg.written == []
    assert agg.size == first * 2
    agg.add("c.php", "z")
    assert len(agg.written) == 1
    assert agg.index == 2


@pytest.mark.unit
def test_empty_content_is_not_added(tmp_path: Path) -> None:
    agg = ChunkAggregator(str(tmp_path / "d_*.txt"), ".php", 100)

    assert agg.add("empty.php", "") is False
    assert agg.finish() == 0
    assert agg.written == []
