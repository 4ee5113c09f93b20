"""Godot executable and export template setup.

Both come from user-supplied download URLs (``godot_executable_download_url``
and ``godot_export_templates_download_url``). The executable zip is unpacked
into ``<working_path>/godot_executable``; the ``.tpz`` templates are unpacked
into ``<working_path>/export_templates/<version>``, where ``<version>`` is read
from the archive's ``version.txt`` (e.g. ``4.2.1.stable``). Godot only finds
templates in that exact location.
"""

from __future__ import annotations

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from godot_export.core.config import ActionConfig
from godot_export.core.result import Err, Ok, Result
from godot_export.output.console import ConsoleProtocol, Style
from godot_export.platform.detection import Platform, detect_platform
from godot_export.tools.download import Downloader
from godot_export.tools.http import HttpClient
from godot_export.tools.installer import Installer

from .errors import RunError

__all__ = ["GodotToolchain", "DependencySetup", "ToolchainSetup", "find_godot_executable"]

_LINUX_EXE_RE = re.compile(r"\.(x86_64|x86_32|arm64|arm32|64|32)$")


@dataclass(frozen=True, slots=True)
class GodotToolchain:
    executable: Path
    templates_version: str
    templates_dir: Path


class ToolchainSetup(Protocol):
    def run(self) -> Result[GodotToolchain, RunError]: ...


def find_godot_executable(install_dir: Path, platform: Platform) -> Path | None:
    """Locate the Godot binary inside an unpacked editor archive.

    On Windows the ``*_console.exe`` wrapper is skipped. On macOS the binary
    lives in ``Godot.app/Contents/MacOS/Godot``.
    """
    candidates: list[Path] = []
    # Shallowest first: mono builds ship GodotSharp/ assemblies next to the binary.
    for p in sorted(install_dir.rglob("*"), key=lambda p: (len(p.parts), p.as_posix())):
        if not p.is_file() or "godot" not in p.name.lower():
            continue
        name = p.name.lower()
        if platform == Platform.WINDOWS:
            if name.endswith(".exe") and "_console" not in name:
                candidates.append(p)
        elif platform == Platform.MACOS:
            if p.parent.name == "MacOS":
                candidates.append(p)
        elif _LINUX_EXE_RE.search(name):
            candidates.append(p)
    return candidates[0] if candidates else None


class DependencySetup:
    """Downloads and installs what an export needs."""

    def __init__(
        self,
        *,
        config: ActionConfig,
        http: HttpClient,
        console: ConsoleProtocol,
        platform: Platform | None = None,
    ) -> None:
        self._config = config
        self._console = console
        self._platform = detect_platform() if platform is None else platform
        self._downloader = Downloader(http, config.download_cache_dir)
        self._installer = Installer()

    def _fetch(self, url: str, what: str) -> Result[Path, RunError]:
        self._console.print(f"Downloading {what}: {url}", Style.DIM)
        result = self._downloader.download(url)
        if isinstance(result, Err):
            message = f"Failed to download {what}: {result.error}"
            return Err(RunError(kind="download_failed", message=message))
        if result.value.from_cache:
            self._console.print(f"Using cached {what}", Style.DIM)
        return Ok(result.value.path)

    def _unpack(self, archive: Path, dest: Path, *, strip: int = 0) -> Result[None, RunError]:
        installed = self._installer.install(archive, dest, strip_components=strip)
        if isinstance(installed, Err):
            return Err(RunError(kind="setup_failed", message=str(installed.error)))
        count = installed.value.files_count
        self._console.print(f"Unpacked {count} file(s) into {dest}", Style.DIM)
        return Ok(None)

    def setup_executable(self) -> Result[Path, RunError]:
        url = self._config.godot_executable_download_url
        if not url:
            return Err(
                RunError(
                    kind="setup_failed",
                    message="No Godot executable download URL configured",
                    hint="Set the godot_executable_download_url input",
                )
            )

        archive = self._fetch(url, "Godot executable")
        if isinstance(archive, Err):
            return archive

        unpacked = self._unpack(archive.value, self._config.executable_dir)
        if isinstance(unpacked, Err):
            return unpacked

        exe = find_godot_executable(self._config.executable_dir, self._platform)
        if exe is None:
            return Err(
                RunError(
                    kind="setup_failed",
                    message=f"No Godot executable found in {self._config.executable_dir}",
                    hint="Check that the download URL points at a Godot editor zip for this OS",
                )
            )

        if self._platform.is_unix:
            try:
                exe.chmod(0o755)
            except OSError as e:
                return Err(
                    RunError(kind="setup_failed", message=f"Cannot make {exe} executable: {e}")
                )
        self._console.info(f"Godot executable: {exe}")
        return Ok(exe)

    def setup_templates(self) -> Result[tuple[str, Path], RunError]:
        url = self._config.godot_export_templates_download_url
        if not url:
            return Err(
                RunError(
                    kind="setup_failed",
                    message="No export templates download URL configured",
                    hint="Set the godot_export_templates_download_url input",
                )
            )

        archive = self._fetch(url, "export templates")
        if isinstance(archive, Err):
            return archive

        staging = self._config.working_path / "templates_staging"
        # .tpz files hold a single top-level "templates/" directory
        unpacked = self._unpack(archive.value, staging, strip=1)
        if isinstance(unpacked, Err):
            return unpacked

        version_file = staging / "version.txt"
        try:
            version = version_file.read_text(encoding="utf-8").strip()
        except OSError:
            message = f"Export templates have no version.txt: {url}"
            return Err(RunError(kind="setup_failed", message=message))
        if not version:
            message = "Export templates version.txt is empty"
            return Err(RunError(kind="setup_failed", message=message))

        target = self._config.templates_dir / version
        try:
            if target.exists():
                shutil.rmtree(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(staging), str(target))
        except OSError as e:
            return Err(
                RunError(kind="setup_failed", message=f"Failed to install export templates: {e}")
            )

        self._console.info(f"Export templates {version}: {target}")
        return Ok((version, target))

    def run(self) -> Result[GodotToolchain, RunError]:
        exe = self.setup_executable()
        if isinstance(exe, Err):
            return exe
        templates = self.setup_templates()
        if isinstance(templates, Err):
            return templates
        version, target = templates.value
        return Ok(
            GodotToolchain(executable=exe.value, templates_version=version, templates_dir=target)
        )
