# ocdopts/utils/commandline.py

from __future__ import annotations

import argparse
from typing import Any, Callable, Iterable, List, Optional, Sequence, TYPE_CHECKING

from ocdopts.domain.errors import CommandLineError

if TYPE_CHECKING:
    from ocdopts.domain.options import FlagSpecification

FlagHandler = Callable[["FlagSpecification", Optional[str]], None]

_NARGS = {
    "none": 0,
    "optional": "?",
    "required": None,
}


class FlagScanner(argparse.ArgumentParser):
    """
    ArgumentParser that raises instead of printing usage and exiting.

    Long options may be abbreviated to any unambiguous prefix.
    """

    def error(self, message: str):
        raise CommandLineError(message)


class _FlagAction(argparse.Action):
    """Hands each flag to `handler` at the moment argparse meets it."""

    def __init__(self, option_strings, dest, spec=None, handler=None, **kwargs):
        super().__init__(option_strings, dest, **kwargs)
        self.spec = spec
        self.handler = handler

    def __call__(self, parser, namespace, values: Any, option_string=None):
        if isinstance(values, list):
            # nargs=0 hands over an empty list
            values = None
        self.handler(self.spec, values)


def build_scanner(specs: Iterable["FlagSpecification"], handler: FlagHandler) -> FlagScanner:
    """
    Build a scanner for the given flag table.

    Handlers run in argv order while parsing, so a side effect of an early
    flag is visible before later flags are even read.
    """
    parser = FlagScanner(prog="openocd", add_help=False, allow_abbrev=True)

    for spec in specs:
        parser.add_argument(
            f"-{spec.short_code}",
            f"--{spec.long_name}",
            action=_FlagAction,
            nargs=_NARGS[spec.has_argument],
            dest=spec.long_name,
            default=argparse.SUPPRESS,
            help=spec.help,
            spec=spec,
            handler=handler,
        )

    return parser


def _long_option(token: str, long_options: List[str]) -> Optional[str]:
    """Full long option for an exact or unambiguous abbreviated `token`."""
    if not token.startswith("--") or "=" in token:
        return None
    matches = [option for option in long_options if option.startswith(token)]
    if token in matches:
        return token
    return matches[0] if len(matches) == 1 else None


def attach_required_values(specs: Iterable["FlagSpecification"], argv: Sequence[str]) -> List[str]:
    """
    Glue each required-argument flag to the token after it.

    ``["-c", "-x"]`` becomes ``["--command=-x"]``: the next token is the
    value whatever it looks like, as with getopt_long. A flag left without
    a following token is passed on unchanged for argparse to reject.
    """
    specs = list(specs)
    required = {}
    for spec in specs:
        if spec.has_argument == "required":
            required[f"-{spec.short_code}"] = spec
            required[f"--{spec.long_name}"] = spec
    long_options = [f"--{spec.long_name}" for spec in specs]

    attached: List[str] = []
    tokens = iter(argv)
    for token in tokens:
        spec = required.get(token) or required.get(_long_option(token, long_options) or "")
        if spec is None:
            attached.append(token)
            continue
        value = next(tokens, None)
        if value is None:
            attached.append(token)
        else:
            attached.append(f"--{spec.long_name}={value}")
    return attached


def _ignore(spec: "FlagSpecification", value: Optional[str]) -> None:
    pass


def scan_args(specs: Iterable["FlagSpecification"], argv: Sequence[str], handler: FlagHandler) -> None:
    """
    Scan `argv`, calling `handler(spec, value)` per flag.

    The whole command line is checked before the first handler call, so a
    malformed one raises CommandLineError with no side effect at all.
    """
    specs = list(specs)
    args = attach_required_values(specs, argv)

    _, extras = build_scanner(specs, _ignore).parse_known_args(args)
    if extras:
        raise CommandLineError(f"unrecognized arguments: {' '.join(extras)}")

    build_scanner(specs, handler).parse_args(args)
