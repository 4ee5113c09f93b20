"""Reader for Godot's ``export_presets.cfg``.

The file is Godot's ConfigFile format (INI-like, values in Godot variant
syntax). Only ``[preset.N]`` sections are read, and from those only the
``name``, ``platform`` and ``export_path`` string keys; ``[preset.N.options]``
sections are skipped.

    [preset.0]

    name="Windows Desktop"
    platform="Windows Desktop"
    export_path="build/windows/game.exe"
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from godot_export.core.result import Err, Ok, Result

__all__ = [
    "ExportPreset",
    "PresetError",
    "has_export_presets",
    "load_export_presets",
    "parse_export_presets",
]

_SECTION_RE = re.compile(r"^\[(?P<name>[^\]]+)\]\s*$")
_PRESET_SECTION_RE = re.compile(r"^preset\.(?P<index>\d+)$")
_KEY_RE = re.compile(r"^(?P<key>[A-Za-z0-9_/.]+)\s*=\s*(?P<value>.*)$")


@dataclass(frozen=True, slots=True)
class ExportPreset:
    """One export target defined in the Godot editor."""

    index: int
    name: str
    platform: str
    export_path: str = ""


@dataclass(frozen=True, slots=True)
class PresetError:
    path: Path
    message: str


def has_export_presets(path: Path) -> bool:
    return path.is_file()


def _unquote(raw: str) -> str | None:
    """Decode a Godot string literal; None for non-string values."""
    raw = raw.strip()
    if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
        return None
    body = raw[1:-1]
    return re.sub(r"\\(.)", lambda m: {"n": "\n", "t": "\t"}.get(m.group(1), m.group(1)), body)


def _string_open(value: str) -> bool:
    """True if ``value`` opens a string literal that continues on the next line."""
    in_string = False
    escaped = False
    for ch in value:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            in_string = not in_string
    return in_string


def parse_export_presets(text: str, *, path: Path) -> Result[list[ExportPreset], PresetError]:
    """Parse presets from ``export_presets.cfg`` content, ordered by index."""
    sections: dict[int, dict[str, str]] = {}
    current: dict[str, str] | None = None
    pending_key: str | None = None
    pending_value = ""

    for line in text.splitlines():
        if pending_key is not None:
            pending_value += "\n" + line
            if not _string_open(pending_value):
                if current is not None:
                    current[pending_key] = pending_value
                pending_key = None
            continue

        stripped = line.strip()
        if not stripped or stripped.startswith(";"):
            continue

        section = _SECTION_RE.match(stripped)
        if section is not None:
            preset = _PRESET_SECTION_RE.match(section.group("name"))
            current = sections.setdefault(int(preset.group("index")), {}) if preset else None
            continue

        kv = _KEY_RE.match(stripped)
        if kv is None:
            continue
        key, value = kv.group("key"), kv.group("value")
        if _string_open(value):
            pending_key, pending_value = key, value
            continue
        if current is not None:
            current[key] = value

    presets: list[ExportPreset] = []
    for index in sorted(sections):
        values = sections[index]
        name = _unquote(values.get("name", ""))
        platform = _unquote(values.get("platform", ""))
        if not name or not platform:
            return Err(PresetError(path=path, message=f"preset.{index} is missing a name or platform"))
        presets.append(
            ExportPreset(
                index=index,
                name=name,
                platform=platform,
                export_path=_unquote(values.get("export_path", "")) or "",
            )
        )
    return Ok(presets)


def load_export_presets(path: Path) -> Result[list[ExportPreset], PresetError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(PresetError(path=path, message="export presets file not found"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(PresetError(path=path, message=f"cannot read export presets: {e}"))
    return parse_export_presets(text, path=path)
