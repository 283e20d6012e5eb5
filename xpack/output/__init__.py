"""Output abstraction layer."""

from .console import (
    ConsoleProtocol,
    MockConsole,
    RichConsole,
    Style,
)
from .runlog import RunLog

__all__ = [
    "ConsoleProtocol",
    "MockConsole",
    "RichConsole",
    "RunLog",
    "Style",
]
