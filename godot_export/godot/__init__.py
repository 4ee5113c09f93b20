"""Godot project files and export outputs."""

from .artifacts import ExportArtifact, sanitize_name, zip_directory
from .presets import ExportPreset, PresetError, has_export_presets, load_export_presets

__all__ = [
    "ExportArtifact",
    "ExportPreset",
    "PresetError",
    "has_export_presets",
    "load_export_presets",
    "sanitize_name",
    "zip_directory",
]
