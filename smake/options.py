"""Command line options: the option letters, their effects and MAKEFLAGS splitting."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Sequence

VERSION = "smake"

SUNPRO_OPTIONS = "-~Bbc:C:Ddef:g:ij:K:kM:m:NnO:o:PpqRrSsTtuVvwx:"
SVR4_OPTIONS = "-c:C:ef:g:ij:km:nO:o:pqrsTtVv"

_SUNPRO_USAGE = (
    "Usage : make [ -f makefile ][ -c dmake_rcfile ][ -g dmake_group ][-C directory]\n"
    "              [ -j dmake_max_jobs ][ -K statefile ][ -m dmake_mode ]"
    "[ -x MODE_NAME=VALUE ][ -o dmake_odir ]...\n"
    "              [ -d ][ -dd ][ -D ][ -DD ][ -e ][ -i ][ -k ][ -n ][ -p ][ -P ][ -u ][ -w ]\n"
    "              [ -q ][ -r ][ -s ][ -S ][ -t ][ -v ][ -V ][ target... ]"
    "[ macro=value... ][ \"macro +=value\"... ]\n"
)
_SVR4_USAGE = (
    "Usage : make [ -f makefile ][ -c dmake_rcfile ][ -g dmake_group ][-C directory]\n"
    "              [ -j dmake_max_jobs ][ -m dmake_mode ][ -o dmake_odir ]...\n"
    "              [ -e ][ -i ][ -k ][ -n ][ -p ][ -q ][ -r ][ -s ][ -t ][ -v ]\n"
)

_QUOTED = set(";(){}[]|^&<>*?$'\"`# \\")
_SPACE = " \t\n\v\f\r"


class ArgumentKind(IntFlag):
    """Which option requiring an argument was seen in one argument group."""

    NONE = 0
    MAKEFILE = 1
    RCFILE = 2
    GROUP = 4
    MAX_JOBS = 8
    MACHINESFILE = 16
    MODE = 32
    OBSOLETE = 128
    STATEFILE = 256
    ODIR = 512
    EXTRA = 1024
    CHDIR = 2048

    @property
    def letter(self) -> str:
        """The option letter this kind stands for."""
        return _LETTERS[self]


_LETTERS = {
    ArgumentKind.MAKEFILE: "f",
    ArgumentKind.RCFILE: "c",
    ArgumentKind.GROUP: "g",
    ArgumentKind.MAX_JOBS: "j",
    ArgumentKind.MACHINESFILE: "M",
    ArgumentKind.MODE: "m",
    ArgumentKind.OBSOLETE: "O",
    ArgumentKind.STATEFILE: "K",
    ArgumentKind.ODIR: "o",
    ArgumentKind.EXTRA: "x",
    ArgumentKind.CHDIR: "C",
}


class OptionError(Exception):
    """A command line option could not be accepted."""

    def __init__(self, message: str, usage: str = "") -> None:
        super().__init__(message)
        self.usage = usage


class VersionRequested(Exception):
    """Raised for ``-v``: the caller prints the version and stops."""

    def __init__(self, program: str = "make") -> None:
        self.text = f"{program}: {VERSION}"
        super().__init__(self.text)


@dataclass
class Options:
    """The state set by command line options."""

    debug_level: int = 0
    read_trace_level: int = 0
    report_dependencies_level: int = 0
    env_wins: bool = False
    ignore_errors_all: bool = False
    continue_after_error: bool = False
    continue_after_error_ever_seen: bool = False
    stop_after_error_ever_seen: bool = False
    do_not_exec_rule: bool = False
    trace_status: bool = False
    list_all_targets: bool = False
    quest: bool = False
    silent_all: bool = False
    touch: bool = False
    build_unconditional: bool = False
    report_cwd: bool = False
    ignore_default_mk: bool = False
    svr4: bool = False
    dmake_rcfile_specified: bool = False
    dmake_group_specified: bool = False
    dmake_max_jobs_specified: bool = False
    dmake_mode_specified: bool = False
    dmake_add_mode_specified: bool = False
    dmake_output_mode_specified: bool = False
    dmake_compat_mode_specified: bool = False
    dmake_odir_specified: bool = False
    pmake_machinesfile_specified: bool = False
    pmake_cap_r_specified: bool = False
    dmake_mode_type: str | None = None
    no_parallel: bool = False
    path_reset: bool = False
    rebuild_arg0: bool = False
    _invert_next: bool = field(default=False, repr=False, compare=False)

    def _parallel(self) -> None:
        self.dmake_mode_type = "parallel"
        self.no_parallel = False

    def _serial(self) -> None:
        self.dmake_mode_type = "serial"
        self.no_parallel = True

    def apply(self, ch: str) -> ArgumentKind:
        """Apply option letter ``ch``; return the kind of argument it takes."""
        invert = self._invert_next
        self._invert_next = False
        on = not invert
        step = -1 if invert else 1

        if ch == "~":
            self._invert_next = True
        elif ch == "c":
            self.dmake_rcfile_specified = on
            return ArgumentKind.RCFILE
        elif ch == "C":
            return ArgumentKind.CHDIR
        elif ch == "D":
            self.read_trace_level += step
        elif ch == "d":
            self.debug_level += step
        elif ch == "e":
            self.env_wins = on
        elif ch == "f":
            return ArgumentKind.MAKEFILE
        elif ch == "g":
            self.dmake_group_specified = on
            return ArgumentKind.GROUP
        elif ch == "i":
            self.ignore_errors_all = on
        elif ch == "j":
            if invert:
                self.dmake_max_jobs_specified = False
            else:
                self._parallel()
                self.dmake_max_jobs_specified = True
            return ArgumentKind.MAX_JOBS
        elif ch == "K":
            return ArgumentKind.STATEFILE
        elif ch == "k":
            self.continue_after_error = on
            if on:
                self.continue_after_error_ever_seen = True
        elif ch == "M":
            self.pmake_machinesfile_specified = on
            if on:
                self._parallel()
            return ArgumentKind.MACHINESFILE
        elif ch == "m":
            self.dmake_mode_specified = on
            return ArgumentKind.MODE
        elif ch == "x":
            self.dmake_add_mode_specified = on
            return ArgumentKind.EXTRA
        elif ch == "N":
            self.do_not_exec_rule = invert
        elif ch == "n":
            self.do_not_exec_rule = on
        elif ch == "o":
            self.dmake_odir_specified = on
            return ArgumentKind.ODIR
        elif ch == "P":
            self.report_dependencies_level += step
        elif ch == "p":
            self.trace_status = on
            self.do_not_exec_rule = on
        elif ch == "q":
            self.quest = on
        elif ch == "R":
            if invert:
                self.pmake_cap_r_specified = False
                self.no_parallel = False
            else:
                self.pmake_cap_r_specified = True
                self._serial()
        elif ch == "r":
            self.ignore_default_mk = on
        elif ch == "S":
            if invert:
                self.continue_after_error = True
            else:
                self.continue_after_error = False
                self.stop_after_error_ever_seen = True
        elif ch == "s":
            self.silent_all = on
        elif ch == "T":
            self.list_all_targets = on
            self.do_not_exec_rule = on
        elif ch == "t":
            self.touch = on
        elif ch == "u":
            self.build_unconditional = on
        elif ch == "V":
            self.svr4 = True
        elif ch == "v":
            if on:
                raise VersionRequested()
        elif ch == "w":
            self.report_cwd = on
        return ArgumentKind.NONE


def _spec(options: Options) -> tuple[str, dict[str, bool]]:
    text = SVR4_OPTIONS if options.svr4 else SUNPRO_OPTIONS
    spec: dict[str, bool] = {}
    for pos, char in enumerate(text):
        if char == ":":
            continue
        spec[char] = pos + 1 < len(text) and text[pos + 1] == ":"
    return text, spec


def _bad_option(ch: str, options: Options) -> OptionError:
    text, _ = _spec(options)
    usage = _SVR4_USAGE if options.svr4 else _SUNPRO_USAGE
    if ch in text.replace(":", ""):
        return OptionError(f"Missing argument after `-{ch}'", usage)
    return OptionError(f"Unknown option `-{ch}'", usage)


def parse_options(argv: Sequence[str | None], options: Options) -> list[str | None]:
    """Apply the options in ``argv`` and return it with option groups rewritten.

    Groups without an argument-taking option are replaced by None; a group
    with one becomes just its letter (``-f``) and its argument stays in place.
    ``-C`` changes the working directory at once.
    """
    args = list(argv)
    index = 1
    retried_at: int | None = None
    while index < len(args):
        arg = args[index]
        if arg is None or len(arg) < 2 or not arg.startswith("-") or arg == "--":
            index += 1
            continue
        if arg.startswith("--"):
            _, spec = _spec(options)
            if arg[2] in spec and retried_at != index:
                retried_at = index
                args[index] = arg[1:]
                continue
            raise _bad_option("-", options)

        kinds = ArgumentKind.NONE
        value: str | None = None
        consumed = 1
        pos = 1
        while pos < len(arg):
            ch = arg[pos]
            pos += 1
            _, spec = _spec(options)
            if ch not in spec:
                raise _bad_option(ch, options)
            if spec[ch]:
                if pos < len(arg):
                    value = arg[pos:]
                elif index + 1 < len(args) and args[index + 1] is not None:
                    value = args[index + 1]
                    consumed = 2
                else:
                    raise _bad_option(ch, options)
                pos = len(arg)
            kinds |= options.apply(ch)

        if kinds == ArgumentKind.NONE:
            args[index] = None
            if consumed == 2:
                args[index + 1] = None
        elif kinds in _LETTERS:
            args[index] = "-" + _LETTERS[kinds]
            if kinds == ArgumentKind.CHDIR:
                _change_directory(value or "", options)
        else:
            raise OptionError(
                "Illegal command line. More than one option requiring\n"
                "an argument given in the same argument group"
            )
        index += consumed
    return args


def _change_directory(path: str, options: Options) -> None:
    try:
        os.chdir(path)
    except OSError as exc:
        raise OptionError(
            f"failed to change to directory {path}: {exc.strerror}"
        ) from exc
    options.path_reset = True
    options.rebuild_arg0 = True


def quote_str(text: str) -> str:
    """Backslash-escape the characters a shell would treat specially."""
    return "".join("\\" + char if char in _QUOTED else char for char in text)


def unquote_str(text: str) -> str:
    """Drop each backslash, keeping the character that follows it."""
    out: list[str] = []
    chars = iter(text)
    for char in chars:
        if char == "\\":
            char = next(chars, "")
        out.append(char)
    return "".join(out)


def _tokens(text: str) -> list[str]:
    tokens: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        while pos < length and text[pos] in _SPACE:
            pos += 1
        if pos >= length:
            break
        start = pos
        while pos < length and text[pos] not in _SPACE:
            if text[pos] == "\\":
                pos += 1
            pos += 1
        tokens.append(text[start:min(pos, length)])
    return tokens


def split_makeflags(value: str | None) -> list[str]:
    """Turn a MAKEFLAGS value into an argument vector headed by ``MAKEFLAGS``."""
    result = ["MAKEFLAGS"]
    if value is None:
        return result
    cp = 0
    cp_orig = 0
    add_hyphen = True
    if "-" in value or "=" in value:
        add_hyphen = False
        length = len(value)
        while cp < length:
            if value[cp] != "-":
                break
            cp += 1
            if cp < length and value[cp] == "-":
                cp_orig = cp
                cp += 1
            if cp >= length:
                cp_orig = cp
                break
    count = len(_tokens(value[cp:]))
    for token in _tokens(value[cp_orig:])[:count]:
        text = unquote_str(token)
        result.append("-" + text if add_hyphen else text)
    return result