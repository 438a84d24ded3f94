# ocdopts/startup.py

from __future__ import annotations

import logging
from typing import Callable, Optional, Sequence

from ocdopts.domain.context import CommandContext
from ocdopts.domain.options import ArgumentInterpreter, ParseState
from ocdopts.domain.search_paths import (
    LayoutStrategy,
    SearchPathList,
    register_default_search_paths,
)

logger = logging.getLogger(__name__)


def parse_cmdline_args(
    args: Sequence[str],
    context: CommandContext,
    search_paths: SearchPathList,
    strategy: LayoutStrategy,
    output: Optional[Callable[[str], None]] = None,
) -> ParseState:
    """
    Interpret the command line, then register the default search paths.

    An ExitRequest from the interpreter propagates and the defaults are
    never added. Paths given with -s stay ahead of the defaults.
    """
    state = ArgumentInterpreter(context, search_paths, output=output).interpret(args)
    register_default_search_paths(search_paths, strategy)
    logger.debug("Script search path: %s", list(search_paths))
    return state
