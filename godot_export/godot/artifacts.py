"""Export artifacts and how they are packaged.

An artifact is what one preset produced: either its build directory or,
once archived, a single zip file. Release assets must be files, so
directories are zipped before upload.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from zipfile import ZIP_DEFLATED, ZipFile

from .presets import ExportPreset

__all__ = ["ExportArtifact", "sanitize_name", "zip_directory"]

_UNSAFE_RE = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True, slots=True)
class ExportArtifact:
    """Output of one preset export.

    Attributes:
        preset: The preset that produced it.
        path: Build directory, or a ``.zip`` when archived.
    """

    preset: ExportPreset
    path: Path

    @property
    def name(self) -> str:
        return self.path.name


def sanitize_name(name: str) -> str:
    """Filesystem-safe form of a preset name ("Windows Desktop" stays as is)."""
    cleaned = _UNSAFE_RE.sub("", name).strip().rstrip(".")
    return cleaned or "export"


def zip_directory(src: Path, dest: Path) -> Path:
    """Zip the contents of ``src`` (paths relative to ``src``) into ``dest``."""
    dest.parent.mkdir(parents=True, exist_ok=True)
    # Files restored from caches can carry pre-1980 mtimes, which zip cannot store.
    with ZipFile(dest, "w", compression=ZIP_DEFLATED, strict_timestamps=False) as zf:
        for p in sorted(src.rglob("*")):
            if p.is_file():
                zf.write(p, arcname=p.relative_to(src).as_posix())
    return dest
