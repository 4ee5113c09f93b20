from __future__ import annotations

import zipfile
from pathlib import Path

import pytest

from godot_export.godot.artifacts import ExportArtifact, sanitize_name, zip_directory
from godot_export.godot.presets import ExportPreset


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("Windows Desktop", "Windows Desktop"),
        ("Linux/X11", "LinuxX11"),
        ('a<b>c:"d|e?f*', "abcdef"),
        ("trailing.", "trailing"),
        ("///", "export"),
    ],
)
def test_sanitize_name(raw: str, expected: str) -> None:
    assert sanitize_name(raw) == expected


def test_zip_directory_uses_relative_paths(tmp_path: Path) -> None:
    src = tmp_path / "build"
    (src / "sub").mkdir(parents=True)
    (src / "game.pck").write_bytes(b"pck")
    (src / "sub" / "lib.so").write_bytes(b"so")

    dest = zip_directory(src, tmp_path / "out" / "game.zip")

    with zipfile.ZipFile(dest) as zf:
        assert sorted(zf.namelist()) == ["game.pck", "sub/lib.so"]


def test_artifact_properties(tmp_path: Path) -> None:
    preset = ExportPreset(0, "Web", "Web")
    archive = tmp_path / "Web.zip"
    archive.write_bytes(b"PK")

    assert ExportArtifact(preset, archive).name == "Web.zip"
    assert ExportArtifact(preset, tmp_path / "Web").name == "Web"
