"""Materialise a generated project archive on disk.

The archive body is written next to the target directory as
``<dest>.zip``, every entry is extracted into ``<dest>`` in archive order,
and the temporary zip is removed. If extraction fails part-way the zip is
left behind so the download can be inspected.
"""

from __future__ import annotations

import os
import shutil
import zipfile
from pathlib import Path

from snowdrop_scaffold.utils import ensure_dir

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ArchiveError(Exception):
    """Raised when downloading, writing, extracting or removing the archive fails."""

    def __init__(self, step: str, path: str | Path, message: str) -> None:
        self.step = step
        self.path = str(path)
        super().__init__(f"{step} failed for {self.path}: {message}")


# ---------------------------------------------------------------------------
# Steps
# ---------------------------------------------------------------------------


def archive_path_for(dest: str | Path) -> Path:
    """``/work/demo`` -> ``/work/demo.zip``."""
    dest_path = Path(dest)
    return dest_path.with_name(dest_path.name + ".zip")


def write_archive(body: bytes, zip_path: str | Path) -> Path:
    """Write the downloaded archive bytes to ``zip_path``."""
    target = Path(zip_path)
    try:
        target.write_bytes(body)
    except OSError as exc:
        raise ArchiveError("write", target, f"failed to download file: {exc}") from exc
    return target


def _entry_mode(info: zipfile.ZipInfo) -> int:
    """Unix permission bits recorded for an entry, 0 when there are none."""
    return (info.external_attr >> 16) & 0o7777


def extract_archive(zip_path: str | Path, dest: str | Path) -> Path:
    """Extract every entry of ``zip_path`` into ``dest``.

    Directory entries are created with their parents. File entries get their
    parent directories created, their bytes copied and, when the archive
    records one, their unix file mode applied.

    Raises:
        ArchiveError: With ``step="extract"`` if the archive cannot be read,
            an entry points outside ``dest`` or a file cannot be written.
    """
    source = Path(zip_path)
    root = Path(dest)
    resolved_root = root.resolve()

    try:
        with zipfile.ZipFile(source) as archive:
            for info in archive.infolist():
                target = root / info.filename
                if not target.resolve().is_relative_to(resolved_root):
                    raise ArchiveError(
                        "extract", source, f"entry {info.filename!r} is outside {root}"
                    )

                if info.is_dir():
                    ensure_dir(target)
                    continue

                ensure_dir(target.parent)
                with archive.open(info) as src, open(target, "wb") as out:
                    shutil.copyfileobj(src, out)

                mode = _entry_mode(info)
                if mode:
                    os.chmod(target, mode)
    except ArchiveError:
        raise
    except (OSError, zipfile.BadZipFile) as exc:
        raise ArchiveError("extract", source, f"failed to unzip new project file: {exc}") from exc

    return root


def remove_archive(zip_path: str | Path) -> None:
    """Delete the temporary archive."""
    target = Path(zip_path)
    try:
        target.unlink()
    except OSError as exc:
        raise ArchiveError("cleanup", target, str(exc)) from exc


def materialize(body: bytes, dest: str | Path) -> Path:
    """Write, extract and clean up one project archive.

    Args:
        body: The zip archive returned by the generator service.
        dest: Directory the project is extracted into.

    Returns:
        The directory the project was extracted into.
    """
    zip_path = archive_path_for(dest)
    write_archive(body, zip_path)
    extracted = extract_archive(zip_path, dest)
    remove_archive(zip_path)
    return extracted
