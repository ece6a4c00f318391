"""
prepx: consolidate a Git repository into one text file for LLM context.

Overview
--------
Run from the repository root or any subdirectory. prepx asks git for the
tracked files (plus untracked files that are not ignored), then writes
`llm_context.txt` into the current directory. The file contains:

1) a directory tree of the files below the current directory;
2) the content of every repository file, labelled relative to the current
   directory (files outside it get `../` labels). Binary files and
   unreadable files are replaced by a one-line marker.

Usage
-----
    prepx
    prepx --output-name context.txt --verbose
    prepx --repo ../other-checkout --log-file prepx.log
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from prepx import __version__
from prepx.core import process
from prepx.exceptions import PrepxError
from prepx.file_manipulation import LocalStorage
from prepx.git import GitRepositoryLister
from prepx.logging import logger, setup_logging
from prepx.settings import load_settings

if TYPE_CHECKING:
    from collections.abc import Sequence

    from prepx.settings import Settings


def build_parser() -> argparse.ArgumentParser:
    """Build the command-line parser.

    Returns:
        argparse.ArgumentParser: Configured parser.
    """
    p = argparse.ArgumentParser(
        prog="prepx",
        description="Consolidate a Git repository into a single text file for LLM context.",
    )
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument(
        "--repo",
        type=Path,
        default=None,
        help="Repository root (default: detected with git).",
    )
    p.add_argument(
        "--output-name",
        type=str,
        default=None,
        help="Output file name in the current directory (default: llm_context.txt).",
    )
    p.add_argument(
        "--sniff-bytes",
        type=int,
        default=None,
        help="Bytes inspected for NUL when detecting binary files (>= 1024).",
    )
    p.add_argument("--encoding", type=str, default=None, help="Text encoding.")
    p.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML settings file (default: .prepx.yaml if present).",
    )
    p.add_argument("--log-file", type=str, default=None, help="Log file path.")
    p.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Log progress at INFO level.",
    )
    return p


def parse_args(argv: Sequence[str] | None = None) -> Settings:
    """Parse CLI arguments and merge them with file and environment settings.

    Args:
        argv (Sequence[str] | None): Optional CLI arguments.

    Raises:
        ConfigError: if the settings file or the merged values are invalid.

    Returns:
        Settings: the run settings.
    """
    args = vars(build_parser().parse_args(argv))
    config_file = args.pop("config")
    return load_settings(args, config_file=config_file)


def main(argv: Sequence[str] | None = None) -> int:
    """Create the LLM context file for the current directory.

    Args:
        argv (Sequence[str] | None): Optional CLI arguments.

    Returns:
        int: Process exit code.
    """
    try:
        settings = parse_args(argv)
        if settings.log_file or settings.verbose:
            level = logging.INFO if settings.verbose else logging.WARNING
            setup_logging(settings.log_file or None, level=level, force=True)
        output_path = process(settings, GitRepositoryLister(), LocalStorage())
    except PrepxError as e:
        logger.error("prepx failed", error=str(e))
        sys.stderr.write(f"Error: {e}\n")
        return 1

    sys.stdout.write(f"Successfully created LLM context file at: {output_path}\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
