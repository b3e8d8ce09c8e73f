"""Loading whole repository databases from directories or archives."""

from __future__ import annotations

import logging
import os
import tarfile
from typing import Dict, List, Optional, Tuple

import zstandard

from common.logging_utils import Timer, extra_context, is_debug_enabled
from constants import Constants
from errors import AlpmParseError
from .alpm import parse_package_entry
from .package import Package

logger = logging.getLogger(__name__)

ZSTD_MAGIC = b"\x28\xb5\x2f\xfd"


def repository_name(path: str) -> str:
    """Derive the repository name from a database path.

    ``/srv/core.db.tar.gz`` and ``/srv/core.db`` both give ``core``; a
    directory name is used as is.
    """
    name = os.path.basename(os.path.normpath(path))
    for suffix in Constants.DB_SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()


def read_db_dir(directory: str, repository: Optional[str] = None) -> List[Package]:
    """Read an extracted repository database.

    Every subdirectory holding a ``desc`` file is one package; entries are
    read in sorted order.

    Raises:
        AlpmParseError: on a malformed entry.
        OSError: if the directory cannot be read.
    """
    packages: List[Package] = []
    with Timer() as t:
        for entry in sorted(os.listdir(directory)):
            entry_dir = os.path.join(directory, entry)
            desc_path = os.path.join(entry_dir, Constants.DB_DESC_FILE)
            if not os.path.isfile(desc_path):
                continue
            depends_path = os.path.join(entry_dir, Constants.DB_DEPENDS_FILE)
            depends = _read_text(depends_path) if os.path.isfile(depends_path) else None
            packages.append(
                parse_package_entry(_read_text(desc_path), depends, source=desc_path, repository=repository)
            )
    if is_debug_enabled(logger):
        logger.debug(
            "Read database directory",
            extra=extra_context(
                event="db_read",
                component="reader",
                action="read_db_dir",
                target=directory,
                count=len(packages),
                duration_ms=t.duration_ms(),
            ),
        )
    return packages


def _is_zstd(path: str) -> bool:
    with open(path, "rb") as handle:
        return handle.read(4) == ZSTD_MAGIC


def _collect_entries(archive: tarfile.TarFile, entries: Dict[str, Dict[str, str]]) -> None:
    for member in archive:
        if not member.isfile():
            continue
        entry, _, file_name = member.name.rstrip("/").rpartition("/")
        if file_name not in (Constants.DB_DESC_FILE, Constants.DB_DEPENDS_FILE):
            continue
        handle = archive.extractfile(member)
        if handle is None:
            continue
        with handle:
            entries.setdefault(entry, {})[file_name] = handle.read().decode("utf-8")


def read_db_archive(path: str, repository: Optional[str] = None) -> List[Package]:
    """Read a ``.db`` / ``.db.tar.*`` archive without extracting it.

    gzip, bzip2 and xz are handled by ``tarfile``; zstd archives are
    recognised by their magic bytes and streamed through ``zstandard``.

    Raises:
        AlpmParseError: on a malformed entry or an unreadable archive.
        OSError: if the file cannot be opened.
    """
    entries: Dict[str, Dict[str, str]] = {}
    with Timer() as t:
        try:
            if _is_zstd(path):
                with open(path, "rb") as fh:
                    with zstandard.ZstdDecompressor().stream_reader(fh) as reader:
                        with tarfile.open(fileobj=reader, mode="r|") as archive:
                            _collect_entries(archive, entries)
            else:
                with tarfile.open(path, "r:*") as archive:
                    _collect_entries(archive, entries)
        except (tarfile.TarError, zstandard.ZstdError) as exc:
            raise AlpmParseError(f"failed to read database archive: {exc}", source=path) from exc

        packages = []
        for entry in sorted(entries):
            files = entries[entry]
            if Constants.DB_DESC_FILE not in files:
                logger.warning("Skipping %s in %s: no desc file", entry, path)
                continue
            packages.append(
                parse_package_entry(
                    files[Constants.DB_DESC_FILE],
                    files.get(Constants.DB_DEPENDS_FILE),
                    source=f"{path}:{entry}/{Constants.DB_DESC_FILE}",
                    repository=repository,
                )
            )
    if is_debug_enabled(logger):
        logger.debug(
            "Read database archive",
            extra=extra_context(
                event="db_read",
                component="reader",
                action="read_db_archive",
                target=path,
                count=len(packages),
                duration_ms=t.duration_ms(),
            ),
        )
    return packages


def read_database(path: str) -> Tuple[str, List[Package]]:
    """Read a database directory or archive.

    Returns:
        Tuple of (repository name, packages).
    """
    name = repository_name(path)
    if os.path.isdir(path):
        return name, read_db_dir(path, repository=name)
    return name, read_db_archive(path, repository=name)


def read_databases(paths: List[str]) -> List[Tuple[str, List[Package]]]:
    """Read several databases, rejecting duplicate repository names.

    Raises:
        ValueError: if two paths map to the same repository name.
    """
    seen = set()
    for path in paths:
        name = repository_name(path)
        if name in seen:
            raise ValueError(f"duplicate repository name: {name}")
        seen.add(name)

    repositories = []
    for path in paths:
        name, packages = read_database(path)
        logger.debug("Loaded %d packages from %s", len(packages), name)
        repositories.append((name, packages))
    return repositories
