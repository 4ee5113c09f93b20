"""Typed action configuration.

The configuration is assembled exactly once at process start from three
layers (lowest priority first):

1. an optional TOML file (``[godot-export]`` table),
2. GitHub Actions inputs (``INPUT_<NAME>`` environment variables),
3. explicit CLI overrides.

The resulting ``ActionConfig`` is frozen and passed into every service; no
helper reads the environment on its own.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from godot_export.platform.paths import godot_data_dir

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_table

__all__ = [
    "ActionConfig",
    "ConfigError",
    "RepositoryInfo",
    "DEFAULT_BASE_VERSION",
    "EXPORT_PRESETS_FILE",
    "default_working_path",
    "load_config",
    "parse_bool",
    "parse_repository",
]

DEFAULT_BASE_VERSION = "0.0.1"
EXPORT_PRESETS_FILE = "export_presets.cfg"
TOML_TABLE = "godot-export"

_INPUT_KEYS = (
    "base_version",
    "create_release",
    "relative_project_path",
    "archive_output",
    "export_debug",
    "godot_executable_download_url",
    "godot_export_templates_download_url",
    "release_draft",
    "release_prerelease",
    "strict_history_lookup",
)

_FLAG_KEYS = (
    "create_release",
    "archive_output",
    "export_debug",
    "release_draft",
    "release_prerelease",
    "strict_history_lookup",
)

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when configuration cannot be assembled."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class RepositoryInfo:
    """GitHub repository identity (``owner/repo``)."""

    owner: str
    repo: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        return self.full_name


def default_working_path() -> Path:
    """Godot's per-user data directory, where export templates must live."""
    return godot_data_dir()


@dataclass(frozen=True, slots=True)
class ActionConfig:
    """Immutable run configuration.

    Attributes:
        base_version: User-supplied semver floor for the next release.
        create_release: Publish a GitHub release instead of moving exports.
        relative_project_path: Godot project directory, relative to workspace_root.
        archive_output: Zip each preset's output before publishing/moving.
        export_debug: Use ``--export-debug`` instead of ``--export-release``.
        godot_executable_download_url: Zip containing the headless Godot binary.
        godot_export_templates_download_url: ``.tpz`` export templates archive.
        github_token: Token used for release history and publishing.
        repository: Repository the release is created in.
        workspace_root: Checkout root (``GITHUB_WORKSPACE`` in CI).
        working_path: Scratch directory for downloads, binaries and builds.
        strict_history_lookup: Fail when the latest-release query errors instead
            of treating it as "no prior release".
    """

    base_version: str = DEFAULT_BASE_VERSION
    create_release: bool = False
    relative_project_path: str = "."
    archive_output: bool = False
    export_debug: bool = False
    godot_executable_download_url: str | None = None
    godot_export_templates_download_url: str | None = None
    github_token: str | None = None
    repository: RepositoryInfo | None = None
    workspace_root: Path = Path(".")
    working_path: Path = field(default_factory=default_working_path)
    release_draft: bool = False
    release_prerelease: bool = False
    strict_history_lookup: bool = False

    @property
    def project_path(self) -> Path:
        return self.workspace_root / self.relative_project_path

    @property
    def export_presets_path(self) -> Path:
        return self.project_path / EXPORT_PRESETS_FILE

    @property
    def exports_path(self) -> Path:
        """Destination for relocated artifacts when no release is created."""
        return self.project_path / "exports"

    @property
    def builds_path(self) -> Path:
        return self.working_path / "builds"

    @property
    def archives_path(self) -> Path:
        return self.working_path / "archives"

    @property
    def executable_dir(self) -> Path:
        return self.working_path / "godot_executable"

    @property
    def templates_dir(self) -> Path:
        """Godot looks for export templates under ``~/.local/share/godot/export_templates``."""
        return self.working_path / "export_templates"

    @property
    def download_cache_dir(self) -> Path:
        return self.working_path / "downloads"


def parse_bool(value: object, *, key: str) -> Result[bool, ConfigError]:
    """Parse an Actions-style boolean input (``"true"``/``"false"`` and friends)."""
    if isinstance(value, bool):
        return Ok(value)
    if isinstance(value, str):
        norm = value.strip().lower()
        if norm in _TRUE:
            return Ok(True)
        if norm in _FALSE:
            return Ok(False)
    return Err(
        ConfigError(
            f"Invalid boolean for {key}: {value!r}",
            hint="Use true or false",
        )
    )


def parse_repository(value: str | None) -> Result[RepositoryInfo | None, ConfigError]:
    """Parse ``GITHUB_REPOSITORY`` (``owner/repo``); absent is not an error."""
    if value is None or not value.strip():
        return Ok(None)
    owner, sep, repo = value.strip().partition("/")
    if not sep or not owner or not repo or "/" in repo:
        return Err(ConfigError(f"Invalid repository identity: {value!r}", hint="Expected owner/repo"))
    return Ok(RepositoryInfo(owner=owner, repo=repo))


def _read_toml(path: Path) -> Result[StrDict, ConfigError]:
    import tomllib

    try:
        data_obj: object = tomllib.loads(path.read_bytes().decode("utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a TOML table", path=path))
    return Ok(get_table(data, TOML_TABLE) or data)


def _env_inputs(env: Mapping[str, str]) -> StrDict:
    out: StrDict = {}
    for key in _INPUT_KEYS:
        value = env.get(f"INPUT_{key.upper()}")
        # Actions passes unset optional inputs as empty strings
        if value is not None and value.strip():
            out[key] = value.strip()
    return out


def _opt_str(raw: Mapping[str, object], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    s = str(value).strip()
    return s or None


def load_config(
    *,
    env: Mapping[str, str],
    overrides: Mapping[str, object] | None = None,
    toml_path: Path | None = None,
) -> Result[ActionConfig, ConfigError]:
    """Build the run configuration.

    Args:
        env: Process environment (``os.environ`` in production).
        overrides: CLI values; ``None`` entries are ignored.
        toml_path: Optional TOML file with a ``[godot-export]`` table.

    Returns:
        Ok(ActionConfig) on success, Err(ConfigError) on invalid input.
    """
    raw: StrDict = {}
    if toml_path is not None:
        toml = _read_toml(toml_path)
        if isinstance(toml, Err):
            return toml
        raw.update({k: v for k, v in toml.value.items() if k in _INPUT_KEYS})

    raw.update(_env_inputs(env))
    if overrides:
        raw.update({k: v for k, v in overrides.items() if v is not None})

    flags: dict[str, bool] = {}
    for key in _FLAG_KEYS:
        if key not in raw:
            flags[key] = False
            continue
        parsed = parse_bool(raw[key], key=key)
        if isinstance(parsed, Err):
            return parsed
        flags[key] = parsed.value

    repository = parse_repository(env.get("GITHUB_REPOSITORY"))
    if isinstance(repository, Err):
        return repository

    workspace_env = env.get("GITHUB_WORKSPACE")
    workspace_root = Path(workspace_env) if workspace_env else Path.cwd()

    return Ok(
        ActionConfig(
            base_version=_opt_str(raw, "base_version") or DEFAULT_BASE_VERSION,
            create_release=flags["create_release"],
            relative_project_path=_opt_str(raw, "relative_project_path") or ".",
            archive_output=flags["archive_output"],
            export_debug=flags["export_debug"],
            godot_executable_download_url=_opt_str(raw, "godot_executable_download_url"),
            godot_export_templates_download_url=_opt_str(
                raw, "godot_export_templates_download_url"
            ),
            github_token=env.get("GITHUB_TOKEN") or None,
            repository=repository.value,
            workspace_root=workspace_root,
            working_path=godot_data_dir(env=env),
            release_draft=flags["release_draft"],
            release_prerelease=flags["release_prerelease"],
            strict_history_lookup=flags["strict_history_lookup"],
        )
    )
