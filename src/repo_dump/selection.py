from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field

from repo_dump.config import ALWAYS_EXCLUDED, MatchStrategy
from repo_dump.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence


def posix(path: str | Path) -> str:
    """Render a path with POSIX separators, for pattern matching and headers.

    Args:
        path (str | Path): the path to render

    Returns:
        str: the path as a string using ``/`` separators
    """
    return str(path).replace("\\", "/")


def has_separator(pattern: str) -> bool:
    """Check if a pattern spans several path components."""
    return "/" in pattern or "\\" in pattern


def relpath(path: Path, root: Path) -> str:
    """Send the relative path of path from root.

    Args:
        path (Path): the path to "relativise"
        root (Path): the root to relativise from

    Returns:
        str: the relative path from root to path, with POSIX separators.
            If path is not under root, returns the original path as a string.
    """
    try:
        return posix(path.relative_to(root))
    except ValueError:
        return posix(path)


def canonical(path: Path) -> Path | None:
    """Resolve a path to its symlink-free absolute form, or None when it cannot be resolved."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        return None


def is_regular_file(path: Path) -> bool:
    """Check if a file is regular.

    Args:
        path (Path): path to test.

    Returns:
        bool: True if the file is regular, False otherwise.
    """
    try:
        st = path.stat()
    except OSError:
        return False
    return stat.S_ISREG(st.st_mode)


class PathRule(BaseModel):
    """A pattern paired with the single strategy used to match it."""

    model_config = ConfigDict(frozen=True)

    pattern: str
    strategy: MatchStrategy

    def matches(self, full_path: str, rel_parts: Sequence[str] = ()) -> bool:
        """Match this rule against a path.

        Args:
            full_path (str): the path as walked (root joined with the relative part), POSIX form
            rel_parts (Sequence[str]): the components of the path relative to the walked root

        Returns:
            bool: True when the path satisfies the rule
        """
        match self.strategy:
            case MatchStrategy.COMPONENT:
                return self.pattern in rel_parts
            case MatchStrategy.SUBSTRING:
                return self.pattern in full_path
            case MatchStrategy.FILE_NAME:
                return full_path.rsplit("/", 1)[-1] == self.pattern
            case MatchStrategy.SUFFIX:
                return full_path.endswith(self.pattern)
        return False


def exclude_rules(patterns: Iterable[str]) -> list[PathRule]:
    """Build exclusion rules: substring match for patterns with a separator, exact component otherwise.

    Trailing separators are dropped, so ``node_modules/`` names the folder itself.
    The version-control metadata folder is always part of the result.
    """
    rules = [PathRule(pattern=name, strategy=MatchStrategy.COMPONENT) for name in sorted(ALWAYS_EXCLUDED)]
    for raw in patterns:
        pat = raw.rstrip("/\\")
        if not pat:
            continue
        if has_separator(pat):
            rules.append(PathRule(pattern=posix(pat), strategy=MatchStrategy.SUBSTRING))
        else:
            rules.append(PathRule(pattern=pat, strategy=MatchStrategy.COMPONENT))
    return rules


def include_rules(pattern: str) -> list[PathRule]:
    """Build the rules under which an include pattern selects a file: exact name or path suffix."""
    return [
        PathRule(pattern=pattern, strategy=MatchStrategy.FILE_NAME),
        PathRule(pattern=posix(pattern), strategy=MatchStrategy.SUFFIX),
    ]


def is_excluded(full_path: str, rel_parts: Sequence[str], rules: Sequence[PathRule]) -> bool:
    """Check if any exclusion rule matches a path."""
    return any(rule.matches(full_path, rel_parts) for rule in rules)


class Selection(BaseModel):
    """Files picked for processing.

    Attributes:
        files: ordered, deduplicated paths to process.
        unmatched_includes: include patterns that selected nothing.
        external: explicit includes added from outside the walked tree.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    files: list[Path] = Field(default_factory=list, description="Files to process")
    unmatched_includes: list[str] = Field(default_factory=list, description="Includes that matched nothing")
    external: list[Path] = Field(default_factory=list, description="Includes added from outside the root")


def walk_files(root: Path, excludes: Sequence[PathRule]) -> Iterable[Path]:
    """Walk ``root`` following symlinks, pruning excluded entries before descending.

    Directories whose canonical path was already walked are pruned, so symlink
    cycles terminate. Unreadable entries are skipped.

    Args:
        root (Path): the directory to walk
        excludes (Sequence[PathRule]): exclusion rules

    Yields:
        Path: every surviving regular file, in sorted walk order
    """
    visited: set[Path] = set()
    root_canonical = canonical(root)
    if root_canonical is not None:
        visited.add(root_canonical)
    for current, dirs, files in os.walk(root, followlinks=True):
        here = Path(current)
        kept: list[str] = []
        for d in sorted(dirs):
            sub = here / d
            parts = Path(relpath(sub, root)).parts
            if is_excluded(posix(sub), parts, excludes):
                continue
            real = canonical(sub)
            if real is None or real in visited:
                continue
            visited.add(real)
            kept.append(d)
        dirs[:] = kept
        for f in sorted(files):
            p = here / f
            if is_excluded(posix(p), Path(relpath(p, root)).parts, excludes):
                continue
            if is_regular_file(p):
                yield p


def select_files(
    root: Path,
    target_ext: str,
    excludes: Sequence[str] = (),
    includes: Sequence[str] = (),
) -> Selection:
    """Pick the files to process under ``root``.

    - A walked file is selected when its lowercased extension equals ``target_ext``,
      when its name equals an include pattern, or when its path ends with one.
    - Include patterns naming an existing regular file are added afterwards,
      even outside ``root``, unless the same canonical file is already selected.

    Args:
        root (Path): the directory to walk
        target_ext (str): the extension to select, without leading dot
        excludes (Sequence[str]): exclude patterns (already expanded)
        includes (Sequence[str]): include patterns (already expanded)

    Returns:
        Selection: the selected files and the include patterns that matched nothing
    """
    target = target_ext.lstrip(".").lower()
    ex_rules = exclude_rules(excludes)
    inc_rules = {inc: include_rules(inc) for inc in includes}

    files: list[Path] = []
    seen: set[Path] = set()
    matched: set[str] = set()

    def add(path: Path) -> bool:
        key = canonical(path) or path.absolute()
        if key in seen:
            return False
        seen.add(key)
        files.append(path)
        return True

    for path in walk_files(root, ex_rules):
        full = posix(path)
        selected = path.suffix[1:].lower() == target
        for inc, rules in inc_rules.items():
            if any(rule.matches(full) for rule in rules):
                matched.add(inc)
                selected = True
        if selected:
            add(path)

    external: list[Path] = []
    for inc in includes:
        inc_path = Path(inc)
        if not is_regular_file(inc_path) or canonical(inc_path) is None:
            continue
        matched.add(inc)
        if add(inc_path):
            external.append(inc_path)
            logger.info("external_include_added", path=posix(inc_path))

    unmatched = [inc for inc in includes if inc not in matched]
    for inc in unmatched:
        logger.warning("include_not_found", pattern=inc)
    return Selection(files=files, unmatched_includes=unmatched, external=external)
