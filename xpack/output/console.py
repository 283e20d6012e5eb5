"""Console output abstraction.

The run log writes through ConsoleProtocol so nothing in the release workflow
talks to Rich directly. RichConsole is the terminal backend; MockConsole keeps
every record for assertions in tests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Protocol

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "OutputRecord",
    "RichConsole",
    "Style",
]


class Style(Enum):
    DEFAULT = auto()
    SUCCESS = auto()
    ERROR = auto()
    WARNING = auto()
    INFO = auto()
    DIM = auto()
    HEADER = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def tag(self) -> str:
        return f"[{self.name}]"


class ConsoleProtocol(Protocol):
    """Leveled console output.

    Messages are Rich markup; callers escape text that is not meant as markup.
    """

    def print(self, message: str, style: Style = Style.DEFAULT) -> None: ...

    def info(self, message: str) -> None: ...

    def success(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def header(self, message: str) -> None: ...


_RICH_STYLES: dict[Style, str] = {
    Style.SUCCESS: "green",
    Style.ERROR: "red bold",
    Style.WARNING: "yellow",
    Style.INFO: "cyan",
    Style.DIM: "dim",
    Style.HEADER: "blue bold",
}


class RichConsole:
    """Terminal backend. Level records get a colored `[LEVEL]` prefix."""

    def __init__(self) -> None:
        from rich.console import Console

        self._console = Console(highlight=False)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        rich_style = _RICH_STYLES.get(style)
        if rich_style:
            self._console.print(message, style=rich_style)
        else:
            self._console.print(message)

    def _tagged(self, style: Style, message: str) -> None:
        color = _RICH_STYLES[style]
        self._console.print(f"[{color}]\\{style.tag}[/{color}] {message}")

    def info(self, message: str) -> None:
        self._tagged(Style.INFO, message)

    def success(self, message: str) -> None:
        self._tagged(Style.SUCCESS, message)

    def warning(self, message: str) -> None:
        self._tagged(Style.WARNING, message)

    def error(self, message: str) -> None:
        self._tagged(Style.ERROR, message)

    def header(self, message: str) -> None:
        self._console.print(f"\n[blue bold]{message}[/blue bold]")


@dataclass(frozen=True, slots=True)
class OutputRecord:
    message: str
    style: Style


@dataclass
class MockConsole:
    """Captures output for tests; level records keep their `[LEVEL]` prefix."""

    outputs: list[OutputRecord] = field(default_factory=list)

    def print(self, message: str, style: Style = Style.DEFAULT) -> None:
        self.outputs.append(OutputRecord(message, style))

    def _tagged(self, style: Style, message: str) -> None:
        self.outputs.append(OutputRecord(f"{style.tag} {message}", style))

    def info(self, message: str) -> None:
        self._tagged(Style.INFO, message)

    def success(self, message: str) -> None:
        self._tagged(Style.SUCCESS, message)

    def warning(self, message: str) -> None:
        self._tagged(Style.WARNING, message)

    def error(self, message: str) -> None:
        self._tagged(Style.ERROR, message)

    def header(self, message: str) -> None:
        self.outputs.append(OutputRecord(message, Style.HEADER))

    # Test helpers

    @property
    def messages(self) -> list[str]:
        return [o.message for o in self.outputs]

    def has_error(self) -> bool:
        return any(o.style is Style.ERROR for o in self.outputs)

    def find(self, substring: str) -> list[OutputRecord]:
        return [o for o in self.outputs if substring in o.message]
