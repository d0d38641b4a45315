from __future__ import annotations

import shutil
from pathlib import Path

from repo_dump.exceptions import OutputDirectoryError, OutputWriteError
from repo_dump.logging import logger

WILDCARD = "*"
TYPE_PLACEHOLDER = "{type}"


def resolve_output_path(pattern: str, display_ext: str, index: int) -> Path:
    """Turn the output pattern into the concrete path of one chunk.

    - ``{type}`` is replaced by the display extension (e.g. ``.php``).
    - ``*`` is replaced by the chunk index.
    - Without ``*``, ``_<index>`` is inserted before the extension, or appended when there is none.

    Args:
        pattern (str): the output path pattern
        display_ext (str): dot-prefixed target extension
        index (int): 1-based chunk index

    Returns:
        Path: the chunk path
    """
    filename = pattern.replace(TYPE_PLACEHOLDER, display_ext)
    if WILDCARD in filename:
        return Path(filename.replace(WILDCARD, str(index)))
    path = Path(filename)
    return path.with_name(f"{path.stem}_{index}{path.suffix}")


def write_chunk(path: Path, content: str) -> None:
    """Persist one chunk, creating parent directories as needed.

    Args:
        path (Path): the chunk path
        content (str): the buffer content

    Raises:
        OutputWriteError: if the file cannot be created or written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8", newline="")
    except OSError as e:
        raise OutputWriteError(path=path, message=f"Failed to write output file ({e.strerror or e})") from e
    logger.info("chunk_saved", path=str(path), bytes=len(content.encode("utf-8")))


def is_safe_to_wipe(output_dir: Path | None, source_root: Path | None) -> bool:
    """Check that deleting ``output_dir`` cannot delete ``source_root``.

    Both paths must already be canonical. A missing path means canonicalization
    failed and the answer is always False.

    Args:
        output_dir (Path | None): canonical output directory
        source_root (Path | None): canonical source root

    Returns:
        bool: True when the output directory is neither the source root nor one of its ancestors
    """
    if output_dir is None or source_root is None:
        return False
    return not source_root.is_relative_to(output_dir)


def wipe_output_directory(output_dir: Path | None, source_root: Path | None) -> bool:
    """Recursively delete and recreate ``output_dir`` when it is safe to do so.

    This is the only place where the output directory is ever deleted.

    Args:
        output_dir (Path | None): canonical output directory
        source_root (Path | None): canonical source root

    Raises:
        OutputDirectoryError: if the directory cannot be removed or recreated.

    Returns:
        bool: True when the directory was wiped, False when the deletion was skipped
    """
    if not is_safe_to_wipe(output_dir, source_root):
        logger.warning(
            "output_wipe_skipped",
            output_dir=str(output_dir),
            source_root=str(source_root),
            reason="output directory contains the source tree",
        )
        return False
    logger.warning("output_wipe", output_dir=str(output_dir))
    try:
        shutil.rmtree(output_dir)
    except OSError as e:
        raise OutputDirectoryError(path=output_dir, message="Failed to delete output directory") from e
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(path=output_dir, message="Failed to recreate output directory") from e
    return True


def prepare_output_directory(out_pattern: str, source_root: Path, display_ext: str = "") -> None:
    """Make the output directory of ``out_pattern`` empty and ready for writing.

    An existing directory is wiped through :func:`wipe_output_directory`; a missing
    one is created. The working directory itself (empty or ``.`` parent) is never wiped.

    Args:
        out_pattern (str): the output path pattern
        source_root (Path): the scanned root
        display_ext (str): dot-prefixed target extension, substituted for ``{type}``

    Raises:
        OutputDirectoryError: if the directory cannot be created.
    """
    parent = Path(out_pattern.replace(TYPE_PLACEHOLDER, display_ext)).parent
    if str(parent) in {"", "."}:
        return
    if parent.is_dir():
        try:
            out_canonical = parent.resolve(strict=True)
            src_canonical = Path(source_root).resolve(strict=True)
        except (OSError, RuntimeError):
            out_canonical = src_canonical = None
        wipe_output_directory(out_canonical, src_canonical)
        return
    try:
        parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise OutputDirectoryError(path=parent, message="Failed to create output directory") from e
