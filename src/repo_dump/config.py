from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class StyleFamily(StrEnum):
    """Comment/string syntax conventions used to pick a sanitization ruleset."""

    C_STYLE = "c-style"
    SCRIPT_STYLE = "script-style"
    PHP_STYLE = "php-style"
    NONE = "none"


class MatchStrategy(StrEnum):
    """How a single pattern is compared against a path.

    - COMPONENT: the pattern equals one of the path components.
    - SUBSTRING: the pattern occurs anywhere in the full path.
    - FILE_NAME: the pattern equals the file name.
    - SUFFIX: the full path ends with the pattern.
    """

    COMPONENT = "component"
    SUBSTRING = "substring"
    FILE_NAME = "file_name"
    SUFFIX = "suffix"


class CommentSyntax(BaseModel):
    """Token classes that count as comments or protected literals for a style family.

    Attributes:
        line: markers that open a comment running to the end of the line.
        block: (open, close) delimiter pairs of block comments.
        literals: single-character delimiters of protected string/template spans.
        escape: character that turns the following character into an escaped unit.
    """

    model_config = ConfigDict(frozen=True)

    line: tuple[str, ...] = Field(default=(), description="Line comment markers")
    block: tuple[tuple[str, str], ...] = Field(default=(), description="Block comment delimiters")
    literals: tuple[str, ...] = Field(default=(), description="Literal delimiters")
    escape: str = Field(default="\\", description="Escape character inside literals")


COMMENT_SYNTAX: dict[StyleFamily, CommentSyntax] = {
    StyleFamily.SCRIPT_STYLE: CommentSyntax(line=("#",), literals=("'", '"')),
    StyleFamily.C_STYLE: CommentSyntax(
        line=("//",),
        block=(("/*", "*/"),),
        literals=('"', "'", "`"),
    ),
    StyleFamily.PHP_STYLE: CommentSyntax(
        line=("//", "#"),
        block=(("/*", "*/"),),
        literals=('"', "'", "`"),
    ),
}

# Extension-less conventions, matched on the exact file name.
NAME2STYLE: dict[str, StyleFamily] = {
    ".dockerignore": StyleFamily.SCRIPT_STYLE,
    ".env": StyleFamily.SCRIPT_STYLE,
    ".gitattributes": StyleFamily.SCRIPT_STYLE,
    ".gitignore": StyleFamily.SCRIPT_STYLE,
    "Containerfile": StyleFamily.SCRIPT_STYLE,
    "Dockerfile": StyleFamily.SCRIPT_STYLE,
    "Gemfile": StyleFamily.SCRIPT_STYLE,
    "GNUmakefile": StyleFamily.SCRIPT_STYLE,
    "Makefile": StyleFamily.SCRIPT_STYLE,
    "Procfile": StyleFamily.SCRIPT_STYLE,
    "Rakefile": StyleFamily.SCRIPT_STYLE,
    "Vagrantfile": StyleFamily.SCRIPT_STYLE,
    "makefile": StyleFamily.SCRIPT_STYLE,
}

EXT2STYLE: dict[str, StyleFamily] = {
    "bash": StyleFamily.SCRIPT_STYLE,
    "c": StyleFamily.C_STYLE,
    "cc": StyleFamily.C_STYLE,
    "cjs": StyleFamily.C_STYLE,
    "conf": StyleFamily.SCRIPT_STYLE,
    "cpp": StyleFamily.C_STYLE,
    "cs": StyleFamily.C_STYLE,
    "css": StyleFamily.C_STYLE,
    "cxx": StyleFamily.C_STYLE,
    "dart": StyleFamily.C_STYLE,
    "env": StyleFamily.SCRIPT_STYLE,
    "go": StyleFamily.C_STYLE,
    "gradle": StyleFamily.C_STYLE,
    "h": StyleFamily.C_STYLE,
    "hpp": StyleFamily.C_STYLE,
    "java": StyleFamily.C_STYLE,
    "js": StyleFamily.C_STYLE,
    "jsonc": StyleFamily.C_STYLE,
    "jsx": StyleFamily.C_STYLE,
    "kt": StyleFamily.C_STYLE,
    "kts": StyleFamily.C_STYLE,
    "less": StyleFamily.C_STYLE,
    "mjs": StyleFamily.C_STYLE,
    "mk": StyleFamily.SCRIPT_STYLE,
    "php": StyleFamily.PHP_STYLE,
    "phtml": StyleFamily.PHP_STYLE,
    "pl": StyleFamily.SCRIPT_STYLE,
    "pm": StyleFamily.SCRIPT_STYLE,
    "ps1": StyleFamily.SCRIPT_STYLE,
    "py": StyleFamily.SCRIPT_STYLE,
    "pyi": StyleFamily.SCRIPT_STYLE,
    "r": StyleFamily.SCRIPT_STYLE,
    "rb": StyleFamily.SCRIPT_STYLE,
    "rs": StyleFamily.C_STYLE,
    "scala": StyleFamily.C_STYLE,
    "scss": StyleFamily.C_STYLE,
    "sh": StyleFamily.SCRIPT_STYLE,
    "swift": StyleFamily.C_STYLE,
    "toml": StyleFamily.SCRIPT_STYLE,
    "ts": StyleFamily.C_STYLE,
    "tsx": StyleFamily.C_STYLE,
    "vue": StyleFamily.C_STYLE,
    "yaml": StyleFamily.SCRIPT_STYLE,
    "yml": StyleFamily.SCRIPT_STYLE,
    "zsh": StyleFamily.SCRIPT_STYLE,
}

# Version-control metadata is never walked nor rendered, whatever the user excludes.
ALWAYS_EXCLUDED = frozenset({".git"})

TREE_MAX_DEPTH = 20
BANNER_RULE = "=" * 42
