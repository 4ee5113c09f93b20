"""Pipeline stages and the orchestrator that sequences them."""

from .errors import RunError
from .export import ExportPipeline
from .orchestrator import Orchestrator, PublishRelease, RelocateArtifacts, RunSummary, select_mode
from .relocate import relocate_artifacts
from .setup import DependencySetup, GodotToolchain

__all__ = [
    "DependencySetup",
    "ExportPipeline",
    "GodotToolchain",
    "Orchestrator",
    "PublishRelease",
    "RelocateArtifacts",
    "RunError",
    "RunSummary",
    "relocate_artifacts",
    "select_mode",
]
