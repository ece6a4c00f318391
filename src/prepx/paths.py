"""Lexical path relativization between the repository root and the working directory.

Git reports tracked files relative to the repository root, while the output
document labels them relative to the directory prepx was invoked from. The
two are related purely lexically: both sides are split into segments, the
longest common prefix is dropped, and every remaining working-directory
segment becomes one `..`. Nothing here touches the filesystem, so symlinks
are never resolved and containment is never assumed.
"""

from __future__ import annotations

import os
from pathlib import Path, PurePath, PurePosixPath
from typing import TYPE_CHECKING

from prepx.config import ResolvedFile
from prepx.exceptions import UnsupportedPathError

if TYPE_CHECKING:
    from collections.abc import Iterable


def _segments(path: PurePath | str) -> tuple[str, ...]:
    p = PurePath(path)
    if not p.is_absolute():
        msg = f"expected an absolute path, got {str(path)!r}"
        raise ValueError(msg)
    return PurePath(os.path.normpath(p)).parts


def relative_between(target: PurePath | str, start: PurePath | str) -> str:
    """Express an absolute `target` relative to an absolute `start` directory.

    Args:
        target (PurePath | str): absolute path to reach
        start (PurePath | str): absolute directory to start from

    Raises:
        ValueError: if either path is not absolute

    Returns:
        str: a POSIX-style relative path, possibly starting with `../`;
            "." when both paths are the same
    """
    target_parts = _segments(target)
    start_parts = _segments(start)

    common = 0
    for a, b in zip(target_parts, start_parts, strict=False):
        if a != b:
            break
        common += 1

    parts = [".."] * (len(start_parts) - common)
    parts.extend(target_parts[common:])
    return "/".join(parts) or "."


def check_tracked_path(tracked_path: str) -> PurePosixPath:
    """Validate a root-relative path reported by the repository lister.

    Args:
        tracked_path (str): path relative to the repository root, `/`-separated

    Raises:
        UnsupportedPathError: if the path is empty, absolute, or has a `..` segment

    Returns:
        PurePosixPath: the path as a pure POSIX path
    """
    if not tracked_path:
        raise UnsupportedPathError(path=tracked_path, reason="empty path")
    p = PurePosixPath(tracked_path)
    if p.is_absolute():
        raise UnsupportedPathError(path=tracked_path, reason="path is absolute")
    if ".." in p.parts:
        raise UnsupportedPathError(path=tracked_path, reason="path contains a '..' segment")
    return p


def resolve_relative(tracked_path: str, repo_root: Path, working_dir: Path) -> str:
    """Map a repository-root-relative path to a working-directory-relative one.

    Args:
        tracked_path (str): path relative to `repo_root`, as reported by git
        repo_root (Path): absolute repository root
        working_dir (Path): absolute directory the tool runs from

    Returns:
        str: the path of the file relative to `working_dir`, using `/` separators
    """
    p = check_tracked_path(tracked_path)
    return relative_between(Path(repo_root).joinpath(*p.parts), working_dir)


def resolve_files(
    tracked_paths: Iterable[str],
    repo_root: Path,
    working_dir: Path,
) -> list[ResolvedFile]:
    """Resolve every tracked path, preserving the lister's order.

    Args:
        tracked_paths (Iterable[str]): paths relative to `repo_root`
        repo_root (Path): absolute repository root
        working_dir (Path): absolute directory the tool runs from

    Returns:
        list[ResolvedFile]: one record per tracked path
    """
    out: list[ResolvedFile] = []
    for tracked in tracked_paths:
        p = check_tracked_path(tracked)
        absolute = Path(repo_root).joinpath(*p.parts)
        out.append(
            ResolvedFile(
                absolute_path=absolute,
                root_relative=tracked,
                label=relative_between(absolute, working_dir),
            ),
        )
    return out
