from __future__ import annotations

from enum import StrEnum, auto
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, computed_field

_ = Path()

OUTPUT_FILENAME = "llm_context.txt"
CONFIG_FILENAME = ".prepx.yaml"
ENV_PREFIX = "PREPX_"

MIN_SNIFF_BYTES = 1024
FENCE = "```"

TREE_HEADING = "Directory Tree:"
CONTENTS_HEADING = "File Contents:"

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "


class ContentKind(StrEnum):
    """How a file's content is represented in the output document.

    The classifier only ever answers TEXT or BINARY; READ_ERROR is produced
    when a file classified as text cannot be read in full.
    """

    TEXT = auto()
    BINARY = auto()
    READ_ERROR = auto()


def is_upward_escape(label: str) -> bool:
    """Check whether a relative label leaves the working directory.

    Args:
        label (str): a working-directory-relative path using POSIX separators

    Returns:
        bool: True if the label starts with a `..` segment
    """
    return label == ".." or label.startswith("../")


class ResolvedFile(BaseModel):
    """A tracked file located both from the repository root and from the working directory.

    Attributes:
        absolute_path: Absolute path to the file on disk.
        root_relative: Path relative to the repository root, as reported by git.
        label: Path relative to the working directory; may start with `../`.
        escapes_working_dir: Whether the file lives outside the working directory subtree.
    """

    model_config = ConfigDict(frozen=True)

    absolute_path: Path = Field(..., description="Absolute file path")
    root_relative: str = Field(..., description="File path relative to the repository root")
    label: str = Field(..., description="File path relative to the working directory")

    @computed_field
    @property
    def escapes_working_dir(self) -> bool:
        """Whether the label climbs above the working directory."""
        return is_upward_escape(self.label)


class ContentBlock(BaseModel):
    """Content section for a single file of the output document."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(..., description="Working-directory-relative label")
    kind: ContentKind = Field(..., description="How the file is represented")
    payload: str | None = Field(
        default=None,
        description="Text content, or the fault description for read errors",
    )
