from __future__ import annotations

from typing import TYPE_CHECKING

from repo_dump.output import resolve_output_path, write_chunk

if TYPE_CHECKING:
    from pathlib import Path


def file_header(display_path: str) -> str:
    """Return the header line announcing one file in a chunk."""
    return f"\n--- FILE: {display_path} ---\n"


def byte_size(text: str) -> int:
    """Return the UTF-8 encoded size of ``text``."""
    return len(text.encode("utf-8"))


class ChunkAggregator:
    """Accumulate file sections and flush them into size-capped chunk files.

    The limit is checked before each file is appended: when the buffer is not
    empty and the next section would push it past ``limit`` bytes, the buffer is
    written out first. A section is never split, so a single oversized file
    ends up alone in its own chunk.

    Attributes:
        out_pattern: output path pattern, resolved per chunk index.
        display_ext: dot-prefixed target extension for ``{type}``.
        limit: byte budget per chunk.
        index: 1-based index of the chunk currently being filled.
        written: paths of the chunks written so far.
    """

    def __init__(self, out_pattern: str, display_ext: str, limit: int) -> None:
        self.out_pattern = out_pattern
        self.display_ext = display_ext
        self.limit = limit
        self.index = 1
        self.written: list[Path] = []
        self._parts: list[str] = []
        self._size = 0

    @property
    def size(self) -> int:
        """Current buffer size in bytes."""
        return self._size

    def _append(self, text: str) -> None:
        self._parts.append(text)
        self._size += byte_size(text)

    def seed(self, preamble: str) -> None:
        """Start the buffer with the project structure banner."""
        self._append(preamble)

    def add(self, display_path: str, content: str) -> bool:
        """Append one file section, flushing the buffer first if it would overflow.

        Args:
            display_path (str): the path shown in the file header
            content (str): the (possibly sanitized) file content

        Returns:
            bool: True when the section was added, False for empty content
        """
        if not content:
            return False
        section = f"{file_header(display_path)}{content}\n"
        if self._size and self._size + byte_size(section) > self.limit:
            self.flush()
        self._append(section)
        return True

    def flush(self) -> Path | None:
        """Write the buffer to the next chunk file and reset it.

        Returns:
            Path | None: the written chunk, or None when the buffer was empty
        """
        if not self._size:
            return None
        path = resolve_output_path(self.out_pattern, self.display_ext, self.index)
        write_chunk(path, "".join(self._parts))
        self.written.append(path)
        self.index += 1
        self._parts = []
        self._size = 0
        return path

    def finish(self) -> int:
        """Flush what is left and return the number of chunks written."""
        self.flush()
        return len(self.written)
