from __future__ import annotations

from pathlib import Path

from dotenv import find_dotenv
from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

ENV_FILE = find_dotenv(usecwd=True)

DEFAULT_LIMIT = 110_000


class Settings(BaseModel):
    """Configuration settings for the repo_dump module."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True, extra="forbid")

    path: Path = Field(..., description="Source directory to scan.")
    type: str = Field(..., description="Main file extension to select (e.g. php or .php).")
    out: str = Field(..., description='Output path pattern (e.g. "dump/dump_*.txt").')
    clean: bool = Field(default=False, description="Remove comments and empty lines.")
    progress: bool = Field(default=False, description="Show a progress bar.")
    limit: int = Field(default=DEFAULT_LIMIT, gt=0, description="Byte limit per output file.")

    exclude: list[str] = Field(default_factory=list, description="Exclude patterns.")
    exclude_file: list[Path] = Field(
        default_factory=list,
        description="Files holding one exclude pattern per line.",
    )
    include: list[str] = Field(
        default_factory=list,
        description="File names or path suffixes to include as well.",
    )
    include_file: list[Path] = Field(
        default_factory=list,
        description="Files holding one include pattern per line.",
    )
    log_file: str = Field(default="", description="Log file path.")

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        """Strip leading dots and lowercase the target extension.

        Raises:
            ValueError: if nothing is left once the dots are stripped.
        """
        ext = value.strip().lstrip(".").lower()
        if not ext:
            msg = "type must name a file extension"
            raise ValueError(msg)
        return ext

    @field_validator("out")
    @classmethod
    def require_out(cls, value: str) -> str:
        """Reject a blank output pattern.

        Raises:
            ValueError: if the pattern is empty.
        """
        if not value.strip():
            msg = "out must be a non-empty path pattern"
            raise ValueError(msg)
        return value

    @computed_field
    @property
    def display_ext(self) -> str:
        """Dot-prefixed target extension, substituted for ``{type}`` in ``out``."""
        return f".{self.type}"
