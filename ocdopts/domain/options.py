# ocdopts/domain/options.py

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional, Sequence, Tuple

from ocdopts.config.logging_config import user_output
from ocdopts.config.settings import APP_TITLE
from ocdopts.domain.context import CommandContext
from ocdopts.domain.errors import (
    EXIT_HELP,
    EXIT_SUCCESS,
    EXIT_USAGE,
    CommandLineError,
    ExitRequest,
)
from ocdopts.domain.search_paths import SearchPathList, add_script_search_dir
from ocdopts.utils.commandline import scan_args

logger = logging.getLogger(__name__)

HasArgument = Literal["none", "optional", "required"]
SideEffect = Literal[
    "help",
    "version",
    "debug_level",
    "script_file",
    "search_dir",
    "log_output",
    "command",
    "pipe",
]
DispatchMode = Literal["queue_as_config", "run_immediately"]

DEFAULT_DEBUG_LEVEL = "3"
PIPE_COMMAND = "gdb_port pipe; log_output openocd.log"
PIPE_DEPRECATION = (
    "deprecated option: -p/--pipe. "
    "Use '-c \"gdb_port pipe; log_output openocd.log\"' instead."
)


@dataclass(frozen=True)
class FlagSpecification:
    long_name: str
    has_argument: HasArgument
    short_code: str
    side_effect: SideEffect
    help: str = ""

    @property
    def usage_line(self) -> str:
        return f"{'--' + self.long_name:<13}| -{self.short_code}\t{self.help}"


FLAG_TABLE: Tuple[FlagSpecification, ...] = (
    FlagSpecification("help", "none", "h", "help", "display this help"),
    FlagSpecification("version", "none", "v", "version", "display OpenOCD version"),
    FlagSpecification("file", "required", "f", "script_file", "use configuration file <name>"),
    FlagSpecification("search", "required", "s", "search_dir", "dir to search for config files and scripts"),
    FlagSpecification("debug", "optional", "d", "debug_level", "set debug level <0-3>"),
    FlagSpecification("log_output", "required", "l", "log_output", "redirect log output to file <name>"),
    FlagSpecification("command", "required", "c", "command", "run <command>"),
    FlagSpecification("pipe", "none", "p", "pipe", "use pipes for gdb communication (deprecated)"),
)


def usage_text(title: str = APP_TITLE) -> List[str]:
    """Lines printed for --help."""
    lines = [title, "Licensed under GNU GPL v2"]
    lines.extend(spec.usage_line for spec in FLAG_TABLE)
    return lines


@dataclass(frozen=True)
class DeferredInstruction:
    text: str
    mode: DispatchMode


@dataclass
class ParseState:
    """Per-invocation result of argument interpretation."""
    help_requested: bool = False
    version_requested: bool = False
    instructions: List[DeferredInstruction] = field(default_factory=list)

    def config_commands(self) -> List[str]:
        """Queued commands, in command-line order."""
        return [i.text for i in self.instructions if i.mode == "queue_as_config"]

    def immediate_commands(self) -> List[str]:
        return [i.text for i in self.instructions if i.mode == "run_immediately"]


class ArgumentInterpreter:
    """Translate command-line flags into commands for a CommandContext.

    Flags are handled in the order they appear. ``--debug``, ``--log_output``
    and ``--pipe`` are run on the context as soon as they are scanned, so a
    log redirection affects everything after it. ``--file`` and
    ``--command`` are only queued for the script loader. ``--search``
    registers its directory on `search_paths` right away.

    After the scan, help takes precedence over version; both end with an
    `ExitRequest`.

    Parameters
    ----------
    context:
        Command-execution context (``run_line`` / ``add_config_command``).
    search_paths:
        List receiving ``-s`` directories in their explicit segment.
    output:
        User-facing output channel, one call per line. Defaults to the
        ``ocdopts.output`` logger.
    """

    def __init__(
        self,
        context: CommandContext,
        search_paths: SearchPathList,
        output: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.context = context
        self.search_paths = search_paths
        self.output = output or user_output

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #
    def interpret(self, args: Sequence[str]) -> ParseState:
        state = ParseState()

        try:
            scan_args(FLAG_TABLE, args, lambda spec, value: self._handle(state, spec, value))
        except CommandLineError as exc:
            logger.error("%s", exc)
            raise ExitRequest(EXIT_USAGE, str(exc)) from exc

        if state.help_requested:
            for line in usage_text():
                self.output(line)
            raise ExitRequest(EXIT_HELP, "help requested")

        if state.version_requested:
            # Version banner is printed by the caller before parsing
            raise ExitRequest(EXIT_SUCCESS)

        return state

    # ------------------------------------------------------------------ #
    # Flag handling
    # ------------------------------------------------------------------ #
    def _handle(self, state: ParseState, spec: FlagSpecification, value: Optional[str]) -> None:
        effect = spec.side_effect

        if effect == "help":
            state.help_requested = True
        elif effect == "version":
            state.version_requested = True
        elif effect == "debug_level":
            level = value if value is not None else DEFAULT_DEBUG_LEVEL
            self._run(state, f"debug_level {level}")
        elif effect == "script_file":
            self._queue(state, f"script {{{value}}}")
        elif effect == "search_dir":
            add_script_search_dir(value, self.search_paths)
        elif effect == "log_output":
            self._run(state, f"log_output {value}")
        elif effect == "command":
            self._queue(state, value)
        elif effect == "pipe":
            # Synchronous: command and warning complete before the next flag
            self._run(state, PIPE_COMMAND)
            logger.warning(PIPE_DEPRECATION)

    def _run(self, state: ParseState, text: str) -> None:
        state.instructions.append(DeferredInstruction(text, "run_immediately"))
        status = self.context.run_line(text)
        if status:
            logger.debug("Command %r returned status %s", text, status)

    def _queue(self, state: ParseState, text: str) -> None:
        state.instructions.append(DeferredInstruction(text, "queue_as_config"))
        self.context.add_config_command(text)
