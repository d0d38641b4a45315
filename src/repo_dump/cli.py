#  -*- coding: utf-8 -*-
"""
repo_dump — Dump a source tree into size-capped text files for an LLM.

Overview
--------
Walks a directory, selects files by extension (``--type``) and explicit
inclusion (``--include``), optionally strips comments while keeping string
and template literals (``--clean``), and concatenates everything into chunk
files of at most ``--limit`` bytes. The first chunk opens with a tree of the
project.

The output directory (parent of ``--out``) is wiped before the run, unless
that would delete the scanned tree.

Usage
-----
Run ``python -m repo_dump.cli --help`` for full options. Common examples:
    - PHP sources without comments, 110 kB chunks:
        repo-dump --path site03 --type php --clean --out "dump/dump_*.txt"

    - Add a file from outside the scanned tree and skip vendor code:
        repo-dump --path site03 --type php --out "dump/{type}.txt" --include site03/.env --exclude vendor,cache

    - Read defaults from a YAML file:
        repo-dump --config dump.yaml --progress
"""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from repo_dump import __version__
from repo_dump.dumper import run
from repo_dump.exceptions import ConfigurationError, RepoDumpError
from repo_dump.logging import logger, setup_logging
from repo_dump.patterns import split_pattern_list
from repo_dump.settings import DEFAULT_LIMIT, ENV_FILE, Settings

if TYPE_CHECKING:
    from collections.abc import Sequence

LIST_KEYS = ("exclude", "exclude_file", "include", "include_file")


def load_config_file(path: Path) -> dict[str, Any]:
    """Load setting defaults from a YAML mapping.

    Keys are setting names (``path``, ``type``, ``out``, ``limit``...). Dashes in
    keys are accepted and turned into underscores.

    Args:
        path (Path): the YAML file

    Raises:
        ConfigurationError: if the file cannot be read, does not hold a mapping
            or names an unknown setting.

    Returns:
        dict[str, Any]: the settings found in the file
    """
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(message=f"Cannot load config file ({e})", path=path) from e
    if not isinstance(data, dict):
        raise ConfigurationError(message="Config file must hold a mapping", path=path)
    out: dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).replace("-", "_")
        if name not in Settings.model_fields:
            raise ConfigurationError(message=f"Unknown config key {key!r}", path=path)
        if name in LIST_KEYS and isinstance(value, str):
            value = [value]  # noqa: PLW2901
        out[name] = value
    return out


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Returns:
        argparse.ArgumentParser: the parser
    """
    p = argparse.ArgumentParser(
        prog="repo-dump",
        description="Dump a source tree into size-capped text files.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--config", type=Path, default=None, help="YAML file with setting defaults.")
    p.add_argument("--path", type=str, default=None, help="Source directory path to search.")
    p.add_argument(
        "--type",
        type=str,
        default=None,
        metavar="EXTENSION",
        help="Main file extension to select (e.g. .php).",
    )
    p.add_argument(
        "--clean",
        action="store_true",
        default=None,
        help="Clean content (remove comments and empty lines).",
    )
    p.add_argument(
        "--out",
        type=str,
        default=None,
        help='Output path pattern (e.g. "dump/dump_*.txt"); {type} is replaced by the extension.',
    )
    p.add_argument("--progress", action="store_true", default=None, help="Show progress bar.")
    p.add_argument(
        "--limit",
        type=int,
        default=None,
        help=f"Byte limit per output file (default {DEFAULT_LIMIT}, or REPO_DUMP_LIMIT).",
    )
    p.add_argument(
        "--exclude",
        action="append",
        default=None,
        help="Exclude path components or substrings (comma separated, repeatable).",
    )
    p.add_argument(
        "--exclude-file",
        action="append",
        type=Path,
        default=None,
        help="File with one exclude pattern per line (repeatable).",
    )
    p.add_argument(
        "--include",
        action="append",
        default=None,
        help="Also include these file names or path suffixes (comma separated, repeatable).",
    )
    p.add_argument(
        "--include-file",
        action="append",
        type=Path,
        default=None,
        help="File with one include pattern per line (repeatable).",
    )
    p.add_argument("--log-file", type=str, default=None, help="Log file path (or REPO_DUMP_LOG_FILE).")
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse command-line arguments into settings.

    Precedence: command-line flags, then the ``--config`` file, then
    ``REPO_DUMP_*`` environment variables (a ``.env`` file is loaded first),
    then built-in defaults.

    Args:
        argv (Sequence[str] | None): the arguments, defaults to ``sys.argv[1:]``

    Returns:
        Settings: the validated settings
    """
    p = build_parser()
    args = p.parse_args(argv)

    if ENV_FILE:
        load_dotenv(ENV_FILE, override=False)
    values: dict[str, Any] = {}
    if env_limit := os.environ.get("REPO_DUMP_LIMIT"):
        values["limit"] = env_limit
    if env_log := os.environ.get("REPO_DUMP_LOG_FILE"):
        values["log_file"] = env_log

    if args.config is not None:
        try:
            values.update(load_config_file(args.config))
        except ConfigurationError as e:
            p.error(str(e))

    values.update({k: v for k, v in vars(args).items() if v is not None and k != "config"})
    for key in ("exclude", "include"):
        if key in values:
            values[key] = split_pattern_list(values[key])

    try:
        settings = Settings(**values)
    except ValidationError as e:
        p.error(str(e))
    return settings


def main(argv: Sequence[str] | None = None) -> int:
    settings = parse_args(argv)
    if settings.log_file:
        setup_logging(settings.log_file)

    try:
        report = run(settings)
    except RepoDumpError as e:
        logger.error("run_aborted", error=str(e), path=str(getattr(e, "path", "")))
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if report.unmatched_includes:
        print(f"Warning: {len(report.unmatched_includes)} include pattern(s) not found: {report.unmatched_includes}")
    print(f"Found {report.files_found} files, wrote {report.files_written} into {report.parts} part(s)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
