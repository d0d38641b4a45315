"""repo_dump: dump a source tree into size-capped plain-text chunks."""

__version__ = "0.1.0"
