from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PrepxError(Exception):
    """Base exception for errors in the prepx package."""


@dataclass(frozen=True)
class DiscoveryError(PrepxError):
    """Raised when the repository file list cannot be obtained."""


@dataclass(frozen=True)
class NotAGitRepositoryError(DiscoveryError):
    """Raised when the specified directory is not inside a Git repository."""

    folder: Path
    detail: str = ""

    def __str__(self) -> str:
        msg = f"Not a Git repository: {self.folder}"
        return f"{msg} ({self.detail})" if self.detail else msg


@dataclass(frozen=True)
class GitCommandError(DiscoveryError):
    """Raised when a git command fails."""

    command: str
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        return f"`{self.command}` failed with exit code {self.returncode}: {self.stderr.strip()}"


@dataclass(frozen=True)
class UnsupportedPathError(DiscoveryError):
    """Raised when a tracked path cannot be expressed relative to the working directory."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"Unsupported tracked path {self.path!r}: {self.reason}"


@dataclass(frozen=True)
class TreeConstructionError(PrepxError):
    """Raised when a relative path cannot be inserted into the file tree."""

    path: str
    reason: str

    def __str__(self) -> str:
        return f"Failed to build file tree at {self.path!r}: {self.reason}"


@dataclass(frozen=True)
class FileReadError(PrepxError):
    """Raised when a file cannot be read as text."""

    path: Path
    detail: str

    def __str__(self) -> str:
        return f"Error reading {self.path}: {self.detail}"


@dataclass(frozen=True)
class WriteError(PrepxError):
    """Raised when the output document cannot be written."""

    path: Path
    detail: str

    def __str__(self) -> str:
        return f"Failed to write {self.path}: {self.detail}"


@dataclass(frozen=True)
class ConfigError(PrepxError):
    """Raised when a configuration file is unreadable or invalid."""

    path: Path | None
    detail: str

    def __str__(self) -> str:
        where = f" in {self.path}" if self.path else ""
        return f"Invalid configuration{where}: {self.detail}"
