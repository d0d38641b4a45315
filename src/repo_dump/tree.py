from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING

from repo_dump.config import BANNER_RULE, TREE_MAX_DEPTH
from repo_dump.selection import canonical, exclude_rules, is_excluded, posix, relpath

if TYPE_CHECKING:
    from collections.abc import Sequence

    from repo_dump.selection import PathRule


def _list_dir(directory: Path, root: Path, rules: Sequence[PathRule]) -> list[tuple[bool, str, Path]]:
    try:
        with os.scandir(directory) as it:
            raw = list(it)
    except OSError:
        return []
    entries: list[tuple[bool, str, Path]] = []
    for entry in raw:
        if entry.name.startswith("."):
            continue
        path = directory / entry.name
        if is_excluded(posix(path), Path(relpath(path, root)).parts, rules):
            continue
        try:
            is_dir = entry.is_dir()
        except OSError:
            is_dir = False
        entries.append((is_dir, entry.name, path))
    entries.sort(key=lambda e: (not e[0], e[1]))
    return entries


def build_tree_lines(root: Path, excludes: Sequence[str] = (), max_depth: int = TREE_MAX_DEPTH) -> list[str]:
    """Build a visual tree representation of a directory on disk.

    Directories come before files and each group is sorted by name. Hidden
    entries and excluded paths are left out. A directory whose canonical path
    was already rendered is listed but not expanded again, so symlink cycles
    terminate; recursion also stops below ``max_depth``.

    Args:
        root (Path): the directory to render
        excludes (Sequence[str]): exclude patterns, matched as by the file selector
        max_depth (int): the deepest directory level that is expanded

    Returns:
        list[str]: one string per entry, suitable for printing
    """
    rules = exclude_rules(excludes)
    visited: set[Path] = set()
    lines: list[str] = []

    def walk(directory: Path, prefix: str, depth: int) -> None:
        if depth > max_depth:
            return
        real = canonical(directory)
        if real is not None:
            if real in visited:
                return
            visited.add(real)
        entries = _list_dir(directory, root, rules)
        for idx, (is_dir, name, path) in enumerate(entries):
            last = idx == len(entries) - 1
            branch = "└── " if last else "├── "
            lines.append(prefix + branch + name + ("/" if is_dir else ""))
            if is_dir:
                ext = "    " if last else "│   "
                walk(path, prefix + ext, depth + 1)

    walk(root, "", 0)
    return lines


def render_tree(root: Path, excludes: Sequence[str] = (), max_depth: int = TREE_MAX_DEPTH) -> str:
    """Render the directory tree of ``root`` as text, one entry per line."""
    lines = build_tree_lines(root, excludes, max_depth)
    return "".join(f"{ln}\n" for ln in lines)


def build_preamble(root: Path, tree: str) -> str:
    """Wrap a tree rendering in the project structure banner that opens the first chunk.

    Args:
        root (Path): the scanned root, as given by the caller
        tree (str): the rendered tree

    Returns:
        str: the banner text
    """
    return f"PROJECT STRUCTURE: {posix(root)}\n{BANNER_RULE}\n{tree}\n{BANNER_RULE}\n\n"
