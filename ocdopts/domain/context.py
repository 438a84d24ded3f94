# ocdopts/domain/context.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Protocol, runtime_checkable

from ocdopts.config.logging_config import user_output

logger = logging.getLogger(__name__)

ERROR_OK = 0


@runtime_checkable
class CommandContext(Protocol):
    """Command-execution surface the argument interpreter talks to."""

    def run_line(self, text: str) -> int:
        """Run one command line synchronously and return its status."""
        ...

    def add_config_command(self, text: str) -> None:
        """Queue a command for the script loader."""
        ...


def configuration_output_handler(line: str) -> int:
    """Forward one line of interpreter output to the user."""
    user_output(line)
    return ERROR_OK


@dataclass
class RecordingCommandContext:
    """
    In-process command context that records instead of executing.

    Immediate lines land in `lines`, queued commands in `config_commands`,
    both in arrival order. Used by the entry point for its dry run.
    """
    lines: List[str] = field(default_factory=list)
    config_commands: List[str] = field(default_factory=list)

    def run_line(self, text: str) -> int:
        logger.debug("run_line: %s", text)
        self.lines.append(text)
        return ERROR_OK

    def add_config_command(self, text: str) -> None:
        logger.debug("add_config_command: %s", text)
        self.config_commands.append(text)
