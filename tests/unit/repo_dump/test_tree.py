from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from repo_dump.tree import build_preamble, build_tree_lines, render_tree

if TYPE_CHECKING:
    from pathlib import Path


def make_tree(root: Path, files: list[str]) -> None:
    """Create files under ``root``."""
    for rel in files:
        p = root / rel
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text("x\n", encoding="utf-8")


@pytest.mark.unit
def test_build_tree_lines_orders_dirs_first_and_hides_excluded(tmp_path: Path) -> None:
    make_tree(
        tmp_path,
        ["src/app.php", "src/lib/util.php", "README.md", ".hidden/x.php", ".env", "vendor/pkg.php"],
    )

    lines = build_tree_lines(tmp_path, ["vendor"])

    assert lines == [
        "├── src/",
        "│   ├── lib/",
        "│   │   └── util.php",
        "│   └── app.php",
        "└── README.md",
    ]


@pytest.mark.unit
def test_render_tree_is_deterministic(tmp_path: Path) -> None:
    make_tree(tmp_path, ["b/z.txt", "b/a.txt", "a/c.txt", "top.txt"])

    first = render_tree(tmp_path)
    second = render_tree(tmp_path)

    assert first == second
    assert first.endswith("└── top.txt\n")


@pytest.mark.unit
def test_build_tree_lines_does_not_follow_symlink_cycle(tmp_path: Path) -> None:
    root = tmp_path / "proj"
    (root / "a").mkdir(parents=True)
    try:
        os.symlink(root, root / "a" / "loop", target_is_directory=True)
    except (OSError, NotImplementedError) as e:
        pytest.skip(f"symlinks unavailable: {e}")

    assert build_tree_lines(root) == ["└── a/", "    └── loop/"]


@pytest.mark.unit
def test_build_tree_lines_caps_depth(tmp_path: Path) -> None:
    make_tree(tmp_path, ["a/b/c/d.txt"])

    assert build_tree_lines(tmp_path, max_depth=1) == ["└── a/", "    └── b/"]


@pytest.mark.unit
def test_unreadable_root_renders_empty(tmp_path: Path) -> None:
    assert render_tree(tmp_path / "missing") == ""


@pytest.mark.unit
def test_build_preamble_wraps_tree_in_banner(tmp_path: Path) -> None:
    preamble = build_preamble(tmp_path, "└── a.php\n")
    rule = "=" * 42

    assert preamble == f"PROJECT STRUCTURE: {tmp_path.as_posix()}\n{rule}\n└── a.php\n\n{rule}\n\n"


@pytest.mark.unit
@pytest.mark.skipif(not hasattr(os, "geteuid") or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
def test_unreadable_directory_renders_without_children(tmp_path: Path) -> None:
    make_tree(tmp_path, ["locked/secret.txt", "a.txt"])
    locked = tmp_path / "locked"
    locked.chmod(0)
    try:
        lines = build_tree_lines(tmp_path)
    finally:
        locked.chmod(0o755)

    assert lines == ["├── locked/", "└── a.txt"]


@pytest.mark.unit
def test_render_tree_hides_exclude_with_trailing_separator(tmp_path: Path) -> None:
    make_tree(tmp_path, ["node_modules/x.js", "a.js"])

    assert render_tree(tmp_path, ["node_modules/"]) == "└── a.js\n"
