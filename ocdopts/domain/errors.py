# ocdopts/domain/errors.py

from typing import Optional

EXIT_SUCCESS = 0
EXIT_USAGE = 2
# Legacy exit(-1), as a shell sees it
EXIT_HELP = 255


class OptionsError(Exception):
    """Base class for startup option errors."""


class CommandLineError(OptionsError):
    """Malformed command line, carrying the flag scanner's diagnostic."""


class ExitRequest(OptionsError):
    """
    Startup must stop and the process exit with `status`.

    Raised for --help (non-zero), --version (zero) and malformed command
    lines. The entry point turns it into sys.exit(status).
    """

    def __init__(self, status: int, message: Optional[str] = None) -> None:
        super().__init__(message or f"exit requested with status {status}")
        self.status = status
        self.message = message
