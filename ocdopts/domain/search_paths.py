# ocdopts/domain/search_paths.py

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Iterable, Iterator, List, Mapping, Optional, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from ocdopts.config.settings import Settings

logger = logging.getLogger(__name__)


class SearchPathList:
    """Ordered, append-only list of script search directories.

    Two segments are kept: directories given explicitly on the command line
    (``-s``) and defaults registered afterwards by the bootstrapper. Iteration
    always yields the explicit segment first, so an explicit directory added
    late still takes precedence over every default.

    Existence is never checked when adding; `find` resolves names lazily.
    """

    def __init__(self) -> None:
        self._explicit: List[str] = []
        self._defaults: List[str] = []

    def add_explicit(self, path: str) -> None:
        self._explicit.append(path)

    def add_default(self, path: str) -> None:
        self._defaults.append(path)

    @property
    def explicit(self) -> List[str]:
        return list(self._explicit)

    @property
    def defaults(self) -> List[str]:
        return list(self._defaults)

    def __iter__(self) -> Iterator[str]:
        yield from self._explicit
        yield from self._defaults

    def __len__(self) -> int:
        return len(self._explicit) + len(self._defaults)

    def __repr__(self) -> str:
        return f"SearchPathList({list(self)!r})"

    def find(self, name: str) -> Optional[str]:
        """
        Return the first existing `<dir>/<name>`, or None.
        Absolute names are returned as-is when they exist.
        """
        if os.path.isabs(name):
            return name if os.path.isfile(name) else None

        for directory in self:
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return candidate
        return None


# Process-wide list consumed by the script loader
SCRIPT_SEARCH_DIRS = SearchPathList()


def add_script_search_dir(path: str, search_paths: Optional[SearchPathList] = None) -> None:
    """Register an explicit search directory (the ``-s`` flag)."""
    target = SCRIPT_SEARCH_DIRS if search_paths is None else search_paths
    logger.debug("Adding script search dir: %s", path)
    target.add_explicit(path)


# --------------------------------------------------------------------------- #
# Platform path strategies
# --------------------------------------------------------------------------- #
class LayoutStrategy(Protocol):
    def default_dirs(self) -> Iterable[str]:
        ...


class InstallationLayoutStrategy:
    """
    Directories relative to the running executable:

        bin/openocd(.exe)            -> <exe>/..
        share/<pkg>/scripts/...      -> <exe>/../share/<pkg>/scripts
        scripts/...                  -> <exe>/../scripts

    All three are yielded whether they exist or not.
    """

    def __init__(self, executable_dir: Optional[str], package: str = "openocd") -> None:
        self.executable_dir = executable_dir
        self.package = package

    def default_dirs(self) -> Iterator[str]:
        if not self.executable_dir:
            return
        # Forward slashes work on Windows too
        base = self.executable_dir.replace("\\", "/").rstrip("/")
        yield f"{base}/.."
        yield f"{base}/../share/{self.package}/scripts"
        yield f"{base}/../scripts"


class PosixLayoutStrategy:
    """
    Per-user directory under $HOME, then the fixed install directories.

    The bundled scripts directory comes last so that users can override
    vendor scripts with site or personal copies.
    """

    def __init__(
        self,
        pkgdatadir: str,
        package: str = "openocd",
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.pkgdatadir = pkgdatadir.rstrip("/")
        self.package = package
        self.environ = os.environ if environ is None else environ

    def default_dirs(self) -> Iterator[str]:
        home = self.environ.get("HOME")
        if home:
            yield f"{home}/.{self.package}"
        yield f"{self.pkgdatadir}/site"
        yield f"{self.pkgdatadir}/scripts"


class ChainedLayoutStrategy:
    """Concatenate several strategies, in order."""

    def __init__(self, *strategies: LayoutStrategy) -> None:
        self.strategies = strategies

    def default_dirs(self) -> Iterator[str]:
        for strategy in self.strategies:
            yield from strategy.default_dirs()


def discover_executable_dir(argv0: Optional[str] = None) -> Optional[str]:
    """Best-effort directory of the running program; None if unknown."""
    if argv0 is None:
        argv0 = sys.argv[0] if sys.argv else ""
    if not argv0:
        return None
    try:
        return str(Path(argv0).resolve().parent)
    except (OSError, RuntimeError):
        return None


def select_strategy(
    settings: "Settings",
    executable_dir: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> LayoutStrategy:
    """
    Build the layout strategy named by `settings.search_layout`.

    "auto" picks the installation layout on Windows and the POSIX layout
    elsewhere. "portable" chains both: installation, home, fixed.
    """
    layout = settings.search_layout
    if layout == "auto":
        platform = platform or sys.platform
        layout = "installation" if platform.startswith("win") else "posix"

    if executable_dir is None and layout in ("installation", "portable"):
        executable_dir = discover_executable_dir()

    installation = InstallationLayoutStrategy(executable_dir, settings.package)
    posix = PosixLayoutStrategy(settings.pkgdatadir, settings.package, environ)

    if layout == "installation":
        return installation
    if layout == "posix":
        return posix
    return ChainedLayoutStrategy(installation, posix)


def register_default_search_paths(search_paths: SearchPathList, strategy: LayoutStrategy) -> None:
    """Append the strategy's defaults after any explicit directories."""
    for path in strategy.default_dirs():
        logger.debug("Adding default search dir: %s", path)
        search_paths.add_default(path)
