"""Export Godot projects and publish versioned GitHub releases from CI."""

__version__ = "0.3.0"
