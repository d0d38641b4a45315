"""Comment stripping that keeps string and template literals intact.

The scanner is a single left-to-right pass over four states: normal text,
inside a literal, inside a line comment and inside a block comment. At each
position a literal opener wins over a comment opener, which wins over an
ordinary character. Literals are copied verbatim with their delimiters;
comments are dropped, except for the line break ending a line comment.
"""

from __future__ import annotations

import re
from pathlib import Path

from repo_dump.config import COMMENT_SYNTAX, EXT2STYLE, NAME2STYLE, CommentSyntax, StyleFamily

_BLANK_LINES = re.compile(r"^[^\S\n]*\n(?:[^\S\n]*\n)*", re.MULTILINE)


def style_for(path: str | Path) -> StyleFamily:
    """Classify a file into a style family from its exact name, then its extension.

    Args:
        path (str | Path): the file path (only the name is used)

    Returns:
        StyleFamily: the family, or ``StyleFamily.NONE`` for unknown files
    """
    p = Path(path)
    if p.name in NAME2STYLE:
        return NAME2STYLE[p.name]
    return EXT2STYLE.get(p.suffix[1:].lower(), StyleFamily.NONE)


def _starts_with_any(text: str, i: int, markers: tuple[str, ...]) -> str:
    for marker in markers:
        if text.startswith(marker, i):
            return marker
    return ""


def strip_comments(text: str, syntax: CommentSyntax) -> str:
    """Remove the comments described by ``syntax`` from ``text``.

    Unterminated literals and block comments run to the end of the text.

    Args:
        text (str): the source text
        syntax (CommentSyntax): the comment and literal conventions to apply

    Returns:
        str: the text with comments removed and literals untouched
    """
    out: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]

        if ch in syntax.literals:
            j = i + 1
            while j < n and text[j] != ch:
                j += 2 if text[j] == syntax.escape else 1
            end = min(j + 1, n)
            out.append(text[i:end])
            i = end
            continue

        block_close = ""
        for opener, closer in syntax.block:
            if text.startswith(opener, i):
                block_close = closer
                i += len(opener)
                break
        if block_close:
            j = text.find(block_close, i)
            i = n if j < 0 else j + len(block_close)
            continue

        if _starts_with_any(text, i, syntax.line):
            j = text.find("\n", i)
            i = n if j < 0 else j
            continue

        out.append(ch)
        i += 1
    return "".join(out)


def collapse_blank_lines(text: str) -> str:
    """Collapse each run of whitespace-only lines into one line break, then trim.

    Args:
        text (str): the text to tidy

    Returns:
        str: the collapsed and trimmed text
    """
    return _BLANK_LINES.sub("\n", text).strip()


def sanitize(text: str, path: str | Path, *, clean: bool) -> str:
    """Return the text to dump for one file.

    Files of the ``none`` family, or any file when ``clean`` is off, come back unchanged.

    Args:
        text (str): the full file content
        path (str | Path): the file path, used to pick the style family
        clean (bool): whether comments and blank lines should be removed

    Returns:
        str: the original or sanitized text; empty when nothing is left
    """
    if not clean:
        return text
    family = style_for(path)
    if family is StyleFamily.NONE:
        return text
    return collapse_blank_lines(strip_comments(text, COMMENT_SYNTAX[family]))
