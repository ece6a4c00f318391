from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import Protocol

from prepx.config import MIN_SNIFF_BYTES, ContentKind
from prepx.exceptions import FileReadError
from prepx.logging import logger


class Storage(Protocol):
    """Byte-level filesystem operations used while assembling the document."""

    def read(self, path: Path) -> bytes: ...

    def read_prefix(self, path: Path, size: int) -> bytes: ...

    def write(self, path: Path, data: bytes) -> None: ...

    def is_regular_file(self, path: Path) -> bool: ...

    def is_directory(self, path: Path) -> bool: ...

    def is_broken_link(self, path: Path) -> bool: ...

    def current_directory(self) -> Path: ...


class LocalStorage:
    """Storage backed by the local filesystem."""

    def read(self, path: Path) -> bytes:
        return path.read_bytes()

    def read_prefix(self, path: Path, size: int) -> bytes:
        with path.open("rb") as f:
            return f.read(size)

    def write(self, path: Path, data: bytes) -> None:
        """Replace `path` with `data` through a temporary file in the same directory.

        The result keeps the mode of the file it replaces; a new file gets
        the usual `0o666` masked by the process umask.

        Args:
            path (Path): the destination file
            data (bytes): the full file content
        """
        mode = _target_mode(path)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=str(path.parent))
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.chmod(tmp, mode)
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def is_regular_file(self, path: Path) -> bool:
        """Check if a file is regular.

        Args:
            path (Path): path to test.

        Returns:
            bool: True if the file is regular, False otherwise.
        """
        try:
            st = path.stat()
        except OSError:
            return False
        return stat.S_ISREG(st.st_mode)

    def is_directory(self, path: Path) -> bool:
        return path.is_dir()

    def is_broken_link(self, path: Path) -> bool:
        """True for a symbolic link whose target does not exist."""
        return path.is_symlink() and not path.exists()

    def current_directory(self) -> Path:
        return Path.cwd()


def _target_mode(path: Path) -> int:
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def has_nul_byte(chunk: bytes) -> bool:
    """Check a chunk of bytes for the NUL byte that marks binary content."""
    return b"\0" in chunk


def classify_file(path: Path, storage: Storage, sniff_bytes: int = MIN_SNIFF_BYTES) -> ContentKind:
    """Decide whether a regular file is emitted as text or skipped as binary.

    Only the first `sniff_bytes` bytes are inspected, so the cost does not
    grow with file size. A file that cannot be opened is treated as binary
    so unreadable bytes are never emitted as text.

    Args:
        path (Path): a regular file
        storage (Storage): storage used to read the prefix
        sniff_bytes (int, optional): number of bytes to inspect. Defaults to 1024.

    Returns:
        ContentKind: ContentKind.BINARY if a NUL byte was found or the file is
            unreadable, ContentKind.TEXT otherwise (including empty files)
    """
    try:
        chunk = storage.read_prefix(path, max(sniff_bytes, MIN_SNIFF_BYTES))
    except OSError as e:
        logger.info("cannot sniff file, treating as binary", path=str(path), error=str(e))
        return ContentKind.BINARY
    return ContentKind.BINARY if has_nul_byte(chunk) else ContentKind.TEXT


def describe_os_error(error: OSError) -> str:
    """Short, stable description of an I/O fault for inline markers.

    Args:
        error (OSError): the fault

    Returns:
        str: e.g. "No such file or directory"
    """
    return error.strerror or str(error) or type(error).__name__


def read_text(path: Path, storage: Storage, encoding: str = "utf-8") -> str:
    """Read a whole file as text, keeping undecodable bytes as surrogates.

    Args:
        path (Path): the file to read
        storage (Storage): storage used to read the bytes
        encoding (str, optional): text encoding. Defaults to "utf-8".

    Raises:
        FileReadError: if the file cannot be read

    Returns:
        str: the file content
    """
    try:
        data = storage.read(path)
    except OSError as e:
        raise FileReadError(path=path, detail=describe_os_error(e)) from e
    return data.decode(encoding, errors="surrogateescape")
