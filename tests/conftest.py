from __future__ import annotations

import errno
from collections.abc import Callable
from pathlib import Path

import pytest


class FakeLister:
    """Repository lister with canned answers."""

    def __init__(self, root: Path, paths: list[str], *, not_ignored: bool = False) -> None:
        self.root = root
        self.paths = paths
        self.not_ignored = not_ignored
        self.root_calls: list[Path] = []

    def repo_root(self, start: Path) -> Path:
        self.root_calls.append(start)
        return self.root

    def list_tracked_paths(self, root: Path) -> list[str]:
        assert root == self.root
        return list(self.paths)

    def is_repo_path(self, path: Path) -> bool:  # noqa: ARG002
        return self.not_ignored


class FakeStorage:
    """In-memory storage: `files` maps absolute paths to their bytes."""

    def __init__(self, cwd: Path, files: dict[Path, bytes] | None = None) -> None:
        self.cwd = cwd
        self.files = dict(files or {})
        self.directories: set[Path] = set()
        self.broken_links: set[Path] = set()
        self.unreadable: set[Path] = set()
        self.writes: list[tuple[Path, bytes]] = []

    def _check(self, path: Path) -> None:
        if path in self.unreadable:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        if path not in self.files:
            raise FileNotFoundError(errno.ENOENT, "No such file or directory", str(path))

    def read(self, path: Path) -> bytes:
        self._check(path)
        return self.files[path]

    def read_prefix(self, path: Path, size: int) -> bytes:
        self._check(path)
        return self.files[path][:size]

    def write(self, path: Path, data: bytes) -> None:
        self.writes.append((path, data))
        self.files[path] = data

    def is_regular_file(self, path: Path) -> bool:
        return path in self.files

    def is_directory(self, path: Path) -> bool:
        return path in self.directories

    def is_broken_link(self, path: Path) -> bool:
        return path in self.broken_links

    def current_directory(self) -> Path:
        return self.cwd


@pytest.fixture
def make_lister() -> Callable[..., FakeLister]:
    return FakeLister


@pytest.fixture
def make_storage() -> Callable[..., FakeStorage]:
    return FakeStorage
