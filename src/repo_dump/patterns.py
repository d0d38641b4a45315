"""Load include/exclude patterns and expand brace groups."""

from __future__ import annotations

from collections import deque
from pathlib import Path
from typing import TYPE_CHECKING

from repo_dump.exceptions import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

COMMENT_MARKER = "#"


def split_pattern_list(values: Iterable[str]) -> list[str]:
    """Split comma-separated pattern arguments, keeping commas inside brace groups.

    Args:
        values (Iterable[str]): raw command-line values, e.g. ``["a,b", "src/{x,y}"]``

    Returns:
        list[str]: the trimmed, non-empty patterns in the order given
    """
    out: list[str] = []
    for value in values:
        depth = 0
        current: list[str] = []
        for ch in value or "":
            if ch == "{":
                depth += 1
            elif ch == "}" and depth:
                depth -= 1
            if ch == "," and depth == 0:
                out.append("".join(current))
                current = []
                continue
            current.append(ch)
        out.append("".join(current))
    return [p.strip() for p in out if p.strip()]


def load_pattern_file(path: Path) -> list[str]:
    """Read one pattern per line from a pattern file.

    Blank lines and lines starting with ``#`` are skipped.

    Args:
        path (Path): the pattern file to read

    Raises:
        ConfigurationError: if the file cannot be read as UTF-8 text.

    Returns:
        list[str]: the trimmed patterns, in file order
    """
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(message=f"Cannot read pattern file ({e})", path=Path(path)) from e
    patterns: list[str] = []
    for ln in lines:
        s = ln.strip()
        if not s or s.startswith(COMMENT_MARKER):
            continue
        patterns.append(s)
    return patterns


def _innermost_group(pattern: str) -> tuple[int, int] | None:
    start = -1
    for i, ch in enumerate(pattern):
        if ch == "{":
            start = i
        elif ch == "}" and start >= 0:
            return start, i
    return None


def expand_braces(patterns: Iterable[str]) -> list[str]:
    """Expand ``prefix{a,b,c}suffix`` groups into one pattern per item.

    One group is resolved per pass and the produced patterns are requeued, so
    sequential and nested groups expand fully. Unbalanced braces pass through.

    Args:
        patterns (Iterable[str]): the patterns to expand

    Returns:
        list[str]: the expanded patterns, deduplicated and sorted
    """
    queue = deque(patterns)
    done: set[str] = set()
    while queue:
        pat = queue.popleft()
        group = _innermost_group(pat)
        if group is None:
            if pat:
                done.add(pat)
            continue
        start, end = group
        prefix, body, suffix = pat[:start], pat[start + 1 : end], pat[end + 1 :]
        queue.extend(f"{prefix}{item.strip()}{suffix}" for item in body.split(","))
    return sorted(done)


def resolve_patterns(patterns: Sequence[str], pattern_files: Sequence[Path] = ()) -> list[str]:
    """Merge literal patterns with pattern files and brace-expand the result.

    Args:
        patterns (Sequence[str]): literal patterns
        pattern_files (Sequence[Path]): files holding extra patterns, one per line

    Returns:
        list[str]: the expanded, deduplicated and sorted patterns
    """
    merged = [p.strip() for p in patterns if p and p.strip()]
    for pf in pattern_files:
        merged.extend(load_pattern_file(pf))
    return expand_braces(merged)
