"""Run orchestration: discover, resolve, build the tree, assemble and write once."""

from __future__ import annotations

from typing import TYPE_CHECKING

from prepx.exceptions import WriteError
from prepx.file_manipulation import describe_os_error
from prepx.logging import logger
from prepx.output_construction import assemble
from prepx.paths import resolve_files
from prepx.tree import build_file_tree

if TYPE_CHECKING:
    from pathlib import Path

    from prepx.config import ResolvedFile
    from prepx.file_manipulation import Storage
    from prepx.git import RepositoryLister
    from prepx.settings import Settings


def discover_files(
    settings: Settings,
    lister: RepositoryLister,
    storage: Storage,
    working_dir: Path,
    output_path: Path,
) -> list[ResolvedFile]:
    """Ask the lister for the repository files and resolve them against `working_dir`.

    The output file itself, directory entries (e.g. submodules) and symbolic
    links whose target is missing are dropped.

    Args:
        settings (Settings): run settings; `settings.repo` overrides root detection
        lister (RepositoryLister): repository lister
        storage (Storage): storage used to detect directory entries and broken links
        working_dir (Path): absolute directory the tool runs from
        output_path (Path): absolute path of the output document

    Raises:
        DiscoveryError: if the repository cannot be found or listed

    Returns:
        list[ResolvedFile]: the files to include, in the lister's order
    """
    repo_root = settings.repo.resolve() if settings.repo else lister.repo_root(working_dir)
    tracked = lister.list_tracked_paths(repo_root)

    out: list[ResolvedFile] = []
    for rec in resolve_files(tracked, repo_root, working_dir):
        if rec.absolute_path == output_path:
            continue
        if storage.is_directory(rec.absolute_path):
            logger.info("skipping directory entry", path=rec.label)
            continue
        if storage.is_broken_link(rec.absolute_path):
            logger.info("skipping broken symlink", path=rec.label)
            continue
        out.append(rec)
    return out


def process(settings: Settings, lister: RepositoryLister, storage: Storage) -> Path:
    """Process the current working directory and create the LLM context file.

    Args:
        settings (Settings): run settings
        lister (RepositoryLister): repository lister
        storage (Storage): filesystem access

    Raises:
        DiscoveryError: if the repository cannot be found or listed
        WriteError: if the output file cannot be written

    Returns:
        Path: the path of the created context file
    """
    working_dir = storage.current_directory()
    output_path = working_dir / settings.output_name

    files = discover_files(settings, lister, storage, working_dir, output_path)
    tree = build_file_tree(rec.label for rec in files if not rec.escapes_working_dir)
    document = assemble(
        files,
        tree,
        storage,
        sniff_bytes=settings.sniff_bytes,
        encoding=settings.encoding,
    )

    try:
        storage.write(output_path, document.encode(settings.encoding, errors="surrogateescape"))
    except OSError as e:
        raise WriteError(path=output_path, detail=describe_os_error(e)) from e
    logger.info("wrote context file", path=str(output_path), files=len(files))

    if lister.is_repo_path(output_path):
        logger.warning(
            "output file is not git-ignored; consider adding it to .gitignore",
            path=str(output_path),
        )
    return output_path
