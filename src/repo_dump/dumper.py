from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from tqdm import tqdm

from repo_dump.aggregator import ChunkAggregator
from repo_dump.logging import logger
from repo_dump.output import prepare_output_directory
from repo_dump.patterns import resolve_patterns
from repo_dump.sanitizer import sanitize
from repo_dump.selection import posix, select_files
from repo_dump.tree import build_preamble, render_tree

if TYPE_CHECKING:
    from repo_dump.settings import Settings


class DumpReport(BaseModel):
    """Outcome of one dump run.

    Attributes:
        files_found: number of files selected for processing.
        files_written: number of files that produced a section in the output.
        parts: number of chunk files written.
        outputs: the chunk file paths, in index order.
        unmatched_includes: include patterns that selected nothing.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    files_found: int = Field(default=0, ge=0, description="Files selected")
    files_written: int = Field(default=0, ge=0, description="Files present in the output")
    parts: int = Field(default=0, ge=0, description="Chunk files written")
    outputs: list[Path] = Field(default_factory=list, description="Chunk file paths")
    unmatched_includes: list[str] = Field(default_factory=list, description="Includes that matched nothing")


def read_text(path: Path) -> str | None:
    """Read a candidate file as UTF-8 text, keeping its line endings as they are.

    Args:
        path (Path): the file to read

    Returns:
        str | None: the file content, or None when it cannot be opened or decoded
    """
    try:
        return path.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.info("file_skipped", path=posix(path), error=str(e))
        return None


def run(settings: Settings) -> DumpReport:
    """Dump the source tree described by ``settings`` into chunk files.

    Steps: resolve patterns, prepare the output directory, select files,
    render the tree preamble, then sanitize and aggregate each file in order.

    Args:
        settings (Settings): the resolved configuration

    Returns:
        DumpReport: counts and paths describing what was written
    """
    root = Path(settings.path)
    excludes = resolve_patterns(settings.exclude, settings.exclude_file)
    includes = resolve_patterns(settings.include, settings.include_file)

    prepare_output_directory(settings.out, root, settings.display_ext)

    logger.info(
        "scan_started",
        path=posix(root),
        type=settings.display_ext,
        includes=includes,
        excludes=excludes,
    )
    selection = select_files(root, settings.type, excludes=excludes, includes=includes)
    logger.info("files_found", count=len(selection.files))

    if not selection.files:
        return DumpReport(unmatched_includes=selection.unmatched_includes)

    aggregator = ChunkAggregator(settings.out, settings.display_ext, settings.limit)
    aggregator.seed(build_preamble(root, render_tree(root, excludes)))

    files_written = 0
    for path in tqdm(selection.files, disable=not settings.progress, unit="file"):
        content = read_text(path)
        if content is None:
            continue
        processed = sanitize(content, path, clean=settings.clean)
        if aggregator.add(posix(path), processed):
            files_written += 1

    parts = aggregator.finish()
    logger.info("processing_complete", parts=parts, files=files_written)
    return DumpReport(
        files_found=len(selection.files),
        files_written=files_written,
        parts=parts,
        outputs=aggregator.written,
        unmatched_includes=selection.unmatched_includes,
    )
