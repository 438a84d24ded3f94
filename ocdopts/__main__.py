# ocdopts/__main__.py

import logging
import sys
from typing import Optional, Sequence

from ocdopts.config.logging_config import configure_logging, user_output
from ocdopts.config.settings import APP_TITLE, APP_VERSION, Settings
from ocdopts.domain.context import RecordingCommandContext, configuration_output_handler
from ocdopts.domain.errors import ExitRequest
from ocdopts.domain.search_paths import SCRIPT_SEARCH_DIRS, select_strategy
from ocdopts.startup import parse_cmdline_args

logger = logging.getLogger(__name__)


def main(argv: Optional[Sequence[str]] = None) -> None:
    # ------------------------------------------------------------------ #
    # 1. Settings & logging
    # ------------------------------------------------------------------ #
    settings = Settings()
    configure_logging(settings)

    # Always shown, --version relies on it
    user_output(f"{APP_TITLE} {APP_VERSION}")

    # ------------------------------------------------------------------ #
    # 2. Command line
    # ------------------------------------------------------------------ #
    args = sys.argv[1:] if argv is None else list(argv)
    context = RecordingCommandContext()

    try:
        state = parse_cmdline_args(
            args,
            context,
            SCRIPT_SEARCH_DIRS,
            select_strategy(settings),
        )
    except ExitRequest as exc:
        sys.exit(exc.status)

    # ------------------------------------------------------------------ #
    # 3. Dry run: show what the script loader would get
    # ------------------------------------------------------------------ #
    for text in state.immediate_commands():
        configuration_output_handler(f"ran: {text}")
    for text in state.config_commands():
        configuration_output_handler(f"queued: {text}")
    for directory in SCRIPT_SEARCH_DIRS:
        configuration_output_handler(f"search: {directory}")


if __name__ == "__main__":
    main()
