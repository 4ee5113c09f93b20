"""Zip extraction for Godot downloads.

The editor ships as a ``.zip`` and the export templates as a ``.tpz`` (a zip
with a single top-level ``templates/`` directory). Entries that would land
outside the target (absolute paths, ``..``, drive letters) and symlinks are
dropped before anything is written.
"""

from __future__ import annotations

import shutil
import stat
import zipfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath

from godot_export.core.result import Err, Ok, Result

__all__ = ["Installer", "InstallResult", "InstallError"]

ARCHIVE_SUFFIXES = (".zip", ".tpz")


@dataclass(frozen=True, slots=True)
class InstallError:
    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive}"


@dataclass(frozen=True, slots=True)
class InstallResult:
    install_dir: Path
    files: tuple[Path, ...]

    @property
    def files_count(self) -> int:
        return len(self.files)


def _safe_relative_path(member_name: str, strip_components: int) -> Path | None:
    parts = PurePosixPath(member_name.replace("\\", "/")).parts
    if not parts or parts[0] == "/":
        return None
    kept = parts[strip_components:]
    if not kept or kept[0].endswith(":"):
        return None
    if any(part in ("", ".", "..") for part in kept):
        return None
    return Path(*kept)


def _unix_mode(info: zipfile.ZipInfo) -> int:
    return info.external_attr >> 16


def _plan(zf: zipfile.ZipFile, strip_components: int) -> Iterator[tuple[zipfile.ZipInfo, Path]]:
    """Members worth extracting, paired with their sanitised relative path."""
    for info in zf.infolist():
        if info.is_dir() or stat.S_ISLNK(_unix_mode(info)):
            continue
        rel = _safe_relative_path(info.filename, strip_components)
        if rel is not None:
            yield info, rel


class Installer:
    """Unpacks an archive into a directory that it owns outright."""

    def install(
        self,
        archive: Path,
        install_dir: Path,
        *,
        strip_components: int = 0,
    ) -> Result[InstallResult, InstallError]:
        """Replace ``install_dir`` with the contents of ``archive``.

        ``strip_components`` drops that many leading path parts from every
        member, like ``tar --strip-components``. Unix permission bits stored
        in the archive are restored so the Godot binary stays executable.
        """
        if not archive.is_file():
            return Err(InstallError(archive, "Archive not found"))
        if not archive.name.lower().endswith(ARCHIVE_SUFFIXES):
            return Err(InstallError(archive, f"Unsupported archive format: {archive.suffix}"))

        try:
            if install_dir.exists():
                shutil.rmtree(install_dir)
            install_dir.mkdir(parents=True)
            root = install_dir.resolve()

            written: list[Path] = []
            with zipfile.ZipFile(archive) as zf:
                for info, rel in _plan(zf, strip_components):
                    target = install_dir / rel
                    if not target.resolve().is_relative_to(root):
                        continue
                    target.parent.mkdir(parents=True, exist_ok=True)
                    with zf.open(info) as src, target.open("wb") as dst:
                        shutil.copyfileobj(src, dst)
                    if mode := _unix_mode(info) & 0o777:
                        target.chmod(mode)
                    written.append(target)
        except zipfile.BadZipFile as e:
            return Err(InstallError(archive, f"Invalid zip file: {e}"))
        except OSError as e:
            return Err(InstallError(archive, f"IO error: {e}"))

        return Ok(InstallResult(install_dir=install_dir, files=tuple(written)))
