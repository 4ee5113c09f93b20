"""Console output abstraction.

Services report progress through ``ConsoleProtocol`` rather than printing
directly. ``RichConsole`` renders for a terminal and, on a GitHub Actions
runner, also writes workflow commands; ``MockConsole`` records everything
for assertions.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

__all__ = [
    "Style",
    "ConsoleProtocol",
    "RichConsole",
    "MockConsole",
    "OutputRecord",
]


class Style(Enum):
    """Semantic styles; the value is the Rich style used to render it."""

    DEFAULT = ""
    SUCCESS = "green"
    ERROR = "red bold"
    WARNING = "yellow"
    INFO = "cyan"
    DIM = "dim"
    HEADER = "blue bold"

    def __str__(self) -> str:
        return self.name.lower()


# Label printed before the message for each leveled call.
_LABELS: dict[Style, str] = {
    Style.SUCCESS: "OK",
    Style.ERROR: "error:",
    Style.WARNING: "warning:",
    Style.INFO: "info:",
}


class ConsoleProtocol(Protocol):
    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None:
        """Report a failure on the diagnostic channel."""
        ...

    def warning(self, message: str) -> None: ...

    def info(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...

    def group(self, title: str) -> AbstractContextManager[None]:
        """Collapsible log section around one pipeline stage."""
        ...


def _workflow_escape(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class RichConsole:
    """Terminal console built on Rich.

    With ``github_actions`` set, stages become ``::group::`` sections and
    errors/warnings become ``::error::``/``::warning::`` annotations.
    """

    def __init__(self, *, github_actions: bool = False) -> None:
        from rich.console import Console

        self._out = Console(highlight=False)
        self._err = Console(stderr=True, highlight=False)
        self._github_actions = github_actions

    def _workflow_command(self, command: str, message: str = "") -> None:
        # Runner commands are matched verbatim, so no markup or wrapping.
        self._out.print(f"::{command}::{message}", markup=False, soft_wrap=True)

    def _leveled(self, style: Style, message: str, *, stderr: bool = False) -> None:
        from rich.markup import escape

        console = self._err if stderr else self._out
        console.print(f"[{style.value}]{_LABELS[style]}[/] {escape(message)}")

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self._out.print(message, style=style.value or None, markup=False)

    def success(self, message: str) -> None:
        self._leveled(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        if self._github_actions:
            self._workflow_command("error", _workflow_escape(message))
        self._leveled(Style.ERROR, message, stderr=True)

    def warning(self, message: str) -> None:
        if self._github_actions:
            self._workflow_command("warning", _workflow_escape(message))
        else:
            self._leveled(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._leveled(Style.INFO, message)

    def header(self, message: str) -> None:
        self._out.print()
        self._out.print(message, style=Style.HEADER.value, markup=False)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        if not self._github_actions:
            self.header(title)
            yield
            return
        self._workflow_command("group", title)
        try:
            yield
        finally:
            self._workflow_command("endgroup")


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Records output; leveled calls keep the label the terminal would show."""

    outputs: list[OutputRecord] = field(default_factory=list[OutputRecord])
    groups: list[str] = field(default_factory=list[str])

    def _record(self, style: Style, message: str) -> None:
        label = _LABELS.get(style)
        text = f"{label} {message}" if label else message
        self.outputs.append(OutputRecord(text, style))

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def success(self, message: str) -> None:
        self._record(Style.SUCCESS, message)

    def error(self, message: str) -> None:
        self._record(Style.ERROR, message)

    def warning(self, message: str) -> None:
        self._record(Style.WARNING, message)

    def info(self, message: str) -> None:
        self._record(Style.INFO, message)

    def header(self, message: str) -> None:
        self._record(Style.HEADER, message)

    @contextmanager
    def group(self, title: str) -> Iterator[None]:
        self.groups.append(title)
        self.header(title)
        yield

    @property
    def messages(self) -> list[str]:
        return [record.message for record in self.outputs]

    @property
    def text(self) -> str:
        return "\n".join(self.messages)

    def has_error(self) -> bool:
        return any(record.style is Style.ERROR for record in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [record for record in self.outputs if substring in record.message]
