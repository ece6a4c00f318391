from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from prepx.config import BRANCH, LAST_BRANCH, PIPE_INDENT, SPACE_INDENT
from prepx.exceptions import TreeConstructionError
from prepx.logging import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(frozen=True)
class FileNode:
    """Leaf of the directory tree."""

    name: str


@dataclass
class DirectoryNode:
    """Directory of the tree; `children` maps entry names to nodes."""

    name: str = ""
    children: dict[str, DirectoryNode | FileNode] = field(default_factory=dict)

    def subdirectory(self, name: str) -> DirectoryNode:
        """Return the child directory `name`, creating it (or promoting a file) if needed."""
        child = self.children.get(name)
        if isinstance(child, DirectoryNode):
            return child
        if child is None:
            _warn_case_collision(self, name)
        sub = DirectoryNode(name=name)
        self.children[name] = sub
        return sub

    def add_file(self, name: str) -> None:
        """Insert a file leaf; an existing directory of the same name is kept."""
        if name in self.children:
            return
        _warn_case_collision(self, name)
        self.children[name] = FileNode(name=name)


def _warn_case_collision(parent: DirectoryNode, name: str) -> None:
    folded = name.casefold()
    for other in parent.children:
        if other.casefold() == folded:
            logger.warning(
                "unsupported case-insensitive name collision",
                directory=parent.name or ".",
                names=sorted([other, name]),
            )
            return


def split_relative(path: str) -> list[str]:
    """Split a working-directory-relative path into its segments.

    Args:
        path (str): a `/`-separated relative path without upward escapes

    Raises:
        TreeConstructionError: if the path is empty or has an empty, `.` or `..` segment

    Returns:
        list[str]: the path segments
    """
    parts = path.split("/")
    for part in parts:
        if part in {"", ".", ".."}:
            raise TreeConstructionError(path=path, reason=f"invalid segment {part!r}")
    return parts


def build_file_tree(relative_paths: Iterable[str]) -> DirectoryNode:
    """Fold relative file paths into a nested directory tree.

    Directory nodes are never demoted to file nodes: a file whose name is
    already taken by a directory is dropped, and a directory needed where a
    file was recorded replaces that file.

    Args:
        relative_paths (Iterable[str]): `/`-separated paths relative to the working directory

    Raises:
        TreeConstructionError: if a path is malformed or cannot be inserted

    Returns:
        DirectoryNode: the root of the tree, standing for the working directory
    """
    root = DirectoryNode()
    for rp in relative_paths:
        parts = split_relative(rp)
        try:
            cur = root
            for part in parts[:-1]:
                cur = cur.subdirectory(part)
            cur.add_file(parts[-1])
        except Exception as e:
            raise TreeConstructionError(path=rp, reason=str(e)) from e
    return root


def iter_tree_lines(node: DirectoryNode, prefix: str = "") -> Iterator[str]:
    """Yield the display lines of a directory's descendants, depth-first.

    Args:
        node (DirectoryNode): the directory whose entries are rendered
        prefix (str): indentation accumulated from the ancestors

    Yields:
        str: one line per entry, e.g. "│   ├── main.py"
    """
    names = sorted(node.children)
    for idx, name in enumerate(names):
        last = idx == len(names) - 1
        yield prefix + (LAST_BRANCH if last else BRANCH) + name
        child = node.children[name]
        if isinstance(child, DirectoryNode):
            yield from iter_tree_lines(child, prefix + (SPACE_INDENT if last else PIPE_INDENT))


def format_tree(tree: DirectoryNode) -> list[str]:
    """Render a tree as box-drawing lines.

    Entries are sorted by name with directories and files interleaved;
    the root itself is not printed.

    Args:
        tree (DirectoryNode): the tree root

    Returns:
        list[str]: the rendered lines, empty for an empty tree
    """
    return list(iter_tree_lines(tree))
