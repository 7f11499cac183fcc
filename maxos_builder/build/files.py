"""Filesystem primitives for the ISO staging tree."""

from __future__ import annotations

import hashlib
import shutil
from pathlib import Path
from typing import Iterable

from maxos_builder.domain import CopyAction, CopyOutcome, CopyPolicy
from maxos_builder.logging import LoggerFactory

from .exceptions import SourceFileMissingError

log = LoggerFactory.for_staging()

_HASH_CHUNK_SIZE = 1024 * 1024


def compute_sha256(path: Path) -> str:
    """Compute SHA256 checksum of a file."""
    digest = hashlib.sha256()
    with open(path, "rb") as handle:
        for chunk in iter(lambda: handle.read(_HASH_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def ensure_dir(path: Path) -> Path:
    """mkdir -p"""
    path.mkdir(parents=True, exist_ok=True)
    return path


def _destination_for(source: Path, destination: Path) -> Path:
    if destination.is_dir():
        return destination / source.name
    return destination


def _require_source(source: Path, role: str) -> None:
    if not source.is_file():
        raise SourceFileMissingError(source, role=role)


def copy_if_absent(source: Path, destination: Path, role: str = "file") -> CopyOutcome:
    """Copy ``source`` unless the destination file already exists.

    Mirrors ``cp -n``: the source must exist even when the copy is skipped,
    and an existing destination is never touched. A kept destination whose
    content differs from the source is flagged as stale and logged.

    Args:
        source: File to copy
        destination: Target file, or a directory to copy into
        role: Human readable description used in errors

    Raises:
        SourceFileMissingError: If ``source`` is not a file
    """
    source = Path(source)
    _require_source(source, role)
    target = _destination_for(source, Path(destination))
    if target.exists():
        stale = compute_sha256(source) != compute_sha256(target)
        if stale:
            log.warning(f"Keeping stale {target.name}: differs from {source}")
        else:
            log.debug(f"Keeping existing {target}")
        return CopyOutcome(source, target, CopyAction.KEPT, stale=stale)
    shutil.copy2(source, target)
    log.debug(f"Copied {source} -> {target}")
    return CopyOutcome(source, target, CopyAction.COPIED)


def copy_overwrite(source: Path, destination: Path, role: str = "file") -> CopyOutcome:
    """Copy ``source`` over any existing destination (``cp``)."""
    source = Path(source)
    _require_source(source, role)
    target = _destination_for(source, Path(destination))
    shutil.copy2(source, target)
    log.debug(f"Copied {source} -> {target}")
    return CopyOutcome(source, target, CopyAction.COPIED)


def copy_files(
    sources: Iterable[Path],
    destination: Path,
    policy: CopyPolicy,
    role: str = "file",
) -> list[CopyOutcome]:
    """Copy several files into one directory with the same policy.

    All sources are checked before anything is copied, so a missing file
    leaves the destination untouched.
    """
    sources = [Path(source) for source in sources]
    for source in sources:
        _require_source(source, role)
    copy = copy_if_absent if policy is CopyPolicy.KEEP_EXISTING else copy_overwrite
    return [copy(source, destination, role=role) for source in sources]


def remove_tree(path: Path) -> bool:
    """rm -rf; returns False when there was nothing to remove."""
    path = Path(path)
    if not path.exists() and not path.is_symlink():
        log.debug(f"Nothing to remove at {path}")
        return False
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()
    log.debug(f"Removed {path}")
    return True
