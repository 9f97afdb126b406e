"""Start-up decisions: make flavour, run mode, output mode and progress messages."""

from __future__ import annotations

import posixpath
import re
from enum import Enum
from typing import Mapping

_XPG4_MAKE = "/usr/xpg4/bin/make"
_SVR4_PROGRAM = "svr4.make"
_SVR4_VARIABLES = ("USE_SVR4_MAKE", "USE_SVID")
_COMPAT_VARIABLE = "SUN_MAKE_COMPAT_MODE"
_LEADING_INT = re.compile(r"[ \t\n\v\f\r]*([+-]?\d+)")


class MakeMode(Enum):
    """Which make dialect the program behaves as."""

    SUN = "sun"
    POSIX = "posix"
    SVR4 = "svr4"


class DmakeMode(str, Enum):
    """Whether targets are built one at a time or in parallel."""

    SERIAL = "serial"
    PARALLEL = "parallel"


class OutputMode(Enum):
    """The format of build output."""

    TXT1 = "TXT1"
    TXT2 = "TXT2"
    HTML1 = "HTML1"


def detect_mode(argv0: str, environ: Mapping[str, str]) -> tuple[MakeMode, bool]:
    """Return the dialect chosen by the program name and environment, and GNU style.

    The program runs in POSIX mode when started as ``/usr/xpg4/bin/make``
    and in SVR4 mode when its name is ``svr4.make`` or when ``USE_SVR4_MAKE``
    or ``USE_SVID`` is set. GNU style is on when ``SUN_MAKE_COMPAT_MODE``
    is ``GNU`` in any case.
    """
    mode = MakeMode.SUN
    if argv0 == _XPG4_MAKE:
        mode = MakeMode.POSIX
    elif posixpath.basename(argv0) == _SVR4_PROGRAM:
        mode = MakeMode.SVR4
    if any(environ.get(name) is not None for name in _SVR4_VARIABLES):
        mode = MakeMode.SVR4
    compat = environ.get(_COMPAT_VARIABLE)
    gnu_style = compat is not None and compat.lower() == "gnu"
    return mode, gnu_style


def argv_zero(argv0: str, cwd: str) -> tuple[str, bool]:
    """Return the form of ``argv0`` used for ``$(MAKE)`` and whether it was relative.

    A name with no slash, or one starting with a slash, is kept; any other
    path is made absolute against ``cwd``.
    """
    if argv0.startswith("/") or "/" not in argv0:
        return argv0, False
    return f"{cwd}/{argv0}", True


def select_dmake_mode(
    program: str, jobs_specified: bool, dmake_mode: str | None
) -> DmakeMode | None:
    """Choose serial or parallel building.

    Started as ``make`` without ``-j`` the build is serial. Otherwise the
    ``DMAKE_MODE`` value decides; without one, ``dmake`` builds in parallel
    and any other name leaves the mode unchanged (None).
    """
    name = posixpath.basename(program)
    if name == "make" and not jobs_specified:
        return DmakeMode.SERIAL
    if dmake_mode is None:
        return DmakeMode.PARALLEL if name == "dmake" else None
    try:
        return DmakeMode(dmake_mode)
    except ValueError:
        raise ValueError(
            f"Unknown dmake mode argument `{dmake_mode}' after -m flag"
        ) from None


def output_mode(value: str | None) -> OutputMode | None:
    """Return the output mode named by ``DMAKE_OUTPUT_MODE``.

    An undefined value means TXT1. An unsupported value gives None; the
    caller warns and keeps its current mode.
    """
    if value is None:
        return OutputMode.TXT1
    try:
        return OutputMode(value)
    except ValueError:
        return None


def unsupported_output_mode_warning(value: str) -> str:
    """The warning given for an unsupported ``DMAKE_OUTPUT_MODE`` value."""
    return (
        f"Unsupported value `{value}' for DMAKE_OUTPUT_MODE after -x flag (ignored)"
    )


def temp_file_directory(make_state: str, cwd: str) -> str:
    """Return the directory the state file lives in, as an absolute path."""
    slash = make_state.rfind("/")
    if slash < 0:
        return cwd
    directory = make_state[:slash] or "/"
    if directory.startswith("/"):
        return directory
    return f"{cwd}/{directory}"


def _atoi(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def make_level(environ: Mapping[str, str], entering: bool) -> tuple[int, int]:
    """Return the new ``MAKELEVEL`` value and the level shown in directory messages.

    On entry the variable goes up by one while messages show the old level;
    on leaving both are one below the current value.
    """
    current = environ.get("MAKELEVEL")
    level = _atoi(current) if current else 0
    if entering:
        return level + 1, level
    return level - 1, level - 1


def directory_message(program: str, level: int, cwd: str, entering: bool) -> str:
    """Return the ``-w`` line reported on entering or leaving a directory."""
    action = "Entering" if entering else "Leaving"
    if level <= 0:
        return f"{program}: {action} directory `{cwd}'\n"
    return f"{program}[{level}]: {action} directory `{cwd}'\n"


def status_message(
    target: str,
    posix: bool,
    commands_done: bool,
    no_action_taken: bool,
    exists: bool,
) -> str | None:
    """Return the line printed after a target was built successfully, if any."""
    if posix:
        if not commands_done:
            return f"`{target}' is updated.\n"
        if no_action_taken:
            return f"`{target}': no action was taken.\n"
        return None
    if not commands_done and exists:
        return f"`{target}' is up to date.\n"
    return None