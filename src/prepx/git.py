from __future__ import annotations

import subprocess  # noqa: S404
from pathlib import Path
from typing import Protocol

from prepx.exceptions import GitCommandError, NotAGitRepositoryError
from prepx.logging import logger


class RepositoryLister(Protocol):
    """Source of the files that belong to the repository snapshot."""

    def repo_root(self, start: Path) -> Path: ...

    def list_tracked_paths(self, root: Path) -> list[str]: ...

    def is_repo_path(self, path: Path) -> bool: ...


def run_git(args: list[str], cwd: Path) -> subprocess.CompletedProcess[str]:
    """Run a git command in `cwd` and capture its output.

    Args:
        args (list[str]): git arguments, without the leading "git"
        cwd (Path): working directory of the command

    Raises:
        NotAGitRepositoryError: if the git executable cannot be started

    Returns:
        subprocess.CompletedProcess[str]: the finished process; the exit code is not checked
    """
    try:
        return subprocess.run(
            ["git", *args],  # noqa: S607
            cwd=str(cwd),
            text=True,
            capture_output=True,
            check=False,
        )
    except OSError as e:
        raise NotAGitRepositoryError(folder=cwd, detail=f"cannot run git: {e}") from e


class GitRepositoryLister:
    """Repository lister backed by the git command line."""

    def repo_root(self, start: Path) -> Path:
        """Get the root directory of the Git repository containing `start`.

        Args:
            start (Path): a directory inside the repository

        Raises:
            NotAGitRepositoryError: if `start` is not inside a Git repository

        Returns:
            Path: the absolute repository root
        """
        out = run_git(["rev-parse", "--show-toplevel"], cwd=start)
        if out.returncode != 0:
            raise NotAGitRepositoryError(folder=start, detail=(out.stderr or out.stdout).strip())
        root = Path(out.stdout.strip())
        logger.info("found repository root", root=str(root))
        return root

    def list_tracked_paths(self, root: Path) -> list[str]:
        """Get files tracked by Git plus untracked files that are not ignored.

        Args:
            root (Path): the repository root

        Raises:
            GitCommandError: if `git ls-files` fails

        Returns:
            list[str]: paths relative to `root`, in git's order
        """
        args = ["ls-files", "-co", "--exclude-standard"]
        out = run_git(args, cwd=root)
        if out.returncode != 0:
            raise GitCommandError(
                command="git " + " ".join(args),
                returncode=out.returncode,
                stdout=out.stdout,
                stderr=out.stderr,
            )
        files = [line for line in out.stdout.splitlines() if line.strip()]
        logger.info("listed repository files", root=str(root), files=len(files))
        return files

    def is_repo_path(self, path: Path) -> bool:
        """Check if a path is inside a Git repository and not git-ignored.

        Args:
            path (Path): an absolute path; it does not need to exist

        Returns:
            bool: True if the path is in a repository and not ignored, False otherwise
        """
        try:
            root = self.repo_root(path.parent)
        except NotAGitRepositoryError:
            return False
        # check-ignore exits 0 when the path is ignored, 1 when it is not
        out = run_git(["check-ignore", "-q", str(path)], cwd=root)
        return out.returncode == 1
