from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class RepoDumpError(Exception):
    """Base exception for errors in the repo_dump module."""

    def __str__(self) -> str:
        message = getattr(self, "message", "") or self.__class__.__name__
        path = getattr(self, "path", None)
        return f"{message}: {path}" if path is not None else message


@dataclass(frozen=True)
class ConfigurationError(RepoDumpError):
    """Raised when the configuration cannot be interpreted as intended."""

    message: str
    path: Path | None = None


@dataclass(frozen=True)
class OutputDirectoryError(RepoDumpError):
    """Raised when the output directory cannot be removed or (re)created."""

    path: Path
    message: str = "Failed to prepare output directory"


@dataclass(frozen=True)
class OutputWriteError(RepoDumpError):
    """Raised when an output chunk file cannot be created or written."""

    path: Path
    message: str = "Failed to write output file"
