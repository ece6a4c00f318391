from __future__ import annotations

from typing import TYPE_CHECKING

from prepx.config import (
    CONTENTS_HEADING,
    FENCE,
    MIN_SNIFF_BYTES,
    TREE_HEADING,
    ContentBlock,
    ContentKind,
)
from prepx.exceptions import FileReadError
from prepx.file_manipulation import classify_file, read_text
from prepx.logging import logger
from prepx.tree import format_tree

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from prepx.config import ResolvedFile
    from prepx.file_manipulation import Storage
    from prepx.tree import DirectoryNode


def build_content_block(
    rec: ResolvedFile,
    storage: Storage,
    *,
    sniff_bytes: int = MIN_SNIFF_BYTES,
    encoding: str = "utf-8",
) -> ContentBlock:
    """Classify and read one file into its content block.

    A file that is no longer a regular file (e.g. deleted after listing) is
    not sniffed; the full read is attempted so the fault shows up as a
    read error rather than a binary skip.

    Args:
        rec (ResolvedFile): the file to render
        storage (Storage): storage used for reading
        sniff_bytes (int, optional): prefix size for binary detection. Defaults to 1024.
        encoding (str, optional): text encoding. Defaults to "utf-8".

    Returns:
        ContentBlock: a TEXT, BINARY or READ_ERROR block labelled with `rec.label`
    """
    path = rec.absolute_path
    if storage.is_regular_file(path) and classify_file(path, storage, sniff_bytes) is ContentKind.BINARY:
        return ContentBlock(label=rec.label, kind=ContentKind.BINARY)
    try:
        text = read_text(path, storage, encoding)
    except FileReadError as e:
        logger.warning("cannot read file", path=rec.label, error=e.detail)
        return ContentBlock(label=rec.label, kind=ContentKind.READ_ERROR, payload=e.detail)
    return ContentBlock(label=rec.label, kind=ContentKind.TEXT, payload=text)


def format_block(block: ContentBlock) -> list[str]:
    """Format a content block as document lines.

    Args:
        block (ContentBlock): the block to format

    Returns:
        list[str]: the marker line, followed by the fenced content for text blocks
    """
    match block.kind:
        case ContentKind.BINARY:
            return [f"--- File: {block.label} (Binary file ignored) ---"]
        case ContentKind.READ_ERROR:
            return [f"--- File: {block.label} (Error reading file: {block.payload}) ---"]
        case _:
            return [f"--- File: {block.label} ---", FENCE, block.payload or "", FENCE]


def build_document(tree_lines: Sequence[str], blocks: Iterable[ContentBlock]) -> str:
    """Join the directory diagram and the content blocks into the output text.

    Args:
        tree_lines (Sequence[str]): rendered tree lines
        blocks (Iterable[ContentBlock]): content blocks, in output order

    Returns:
        str: the document; lines are joined with "\\n" and there is no trailing newline
    """
    lines: list[str] = [TREE_HEADING, FENCE, *tree_lines, FENCE, "", CONTENTS_HEADING]
    for block in blocks:
        lines.extend(format_block(block))
    return "\n".join(lines)


def assemble(
    resolved_files: Sequence[ResolvedFile],
    tree: DirectoryNode,
    storage: Storage,
    *,
    sniff_bytes: int = MIN_SNIFF_BYTES,
    encoding: str = "utf-8",
) -> str:
    """Build the complete output document in memory.

    Args:
        resolved_files (Sequence[ResolvedFile]): every file to include, in output order
        tree (DirectoryNode): the directory tree of the working directory
        storage (Storage): storage used for reading
        sniff_bytes (int, optional): prefix size for binary detection. Defaults to 1024.
        encoding (str, optional): text encoding. Defaults to "utf-8".

    Returns:
        str: the document text
    """
    tree_lines = format_tree(tree)
    blocks = [
        build_content_block(rec, storage, sniff_bytes=sniff_bytes, encoding=encoding)
        for rec in resolved_files
    ]
    return build_document(tree_lines, blocks)
