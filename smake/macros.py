"""Macro storage, appending and expansion."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

_CLOSERS = {"(": ")", "{": "}"}


@dataclass
class Macro:
    """One macro definition together with text appended by ``+=``."""

    value: str = ""
    appended: str | None = None
    read_only: bool = False
    exported: bool = False

    @property
    def text(self) -> str:
        """The full, unexpanded text of the macro."""
        if not self.appended:
            return self.value
        if not self.value:
            return self.appended
        return f"{self.value} {self.appended}"


class MacroTable:
    """A mapping from macro names to their definitions."""

    def __init__(self) -> None:
        self._macros: dict[str, Macro] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._macros

    def __iter__(self) -> Iterator[str]:
        return iter(self._macros)

    def __len__(self) -> int:
        return len(self._macros)

    def macro(self, name: str) -> Macro | None:
        """Return the definition of ``name``, or None when it is undefined."""
        return self._macros.get(name)

    def _entry(self, name: str) -> Macro:
        macro = self._macros.get(name)
        if macro is None:
            macro = self._macros[name] = Macro()
        return macro

    def set(self, name: str, value: str | None, read_only: bool = False) -> Macro:
        """Define ``name``; a read-only macro is only replaced by another read-only set."""
        macro = self._entry(name)
        if macro.read_only and not read_only:
            return macro
        macro.value = value or ""
        macro.read_only = read_only
        return macro

    def get(self, name: str) -> str:
        """Return the unexpanded text of ``name``, or an empty string."""
        macro = self._macros.get(name)
        return "" if macro is None else macro.text

    def append(self, name: str, value: str | None) -> Macro:
        """Append ``value`` to the text to be added to ``name``, space separated."""
        macro = self._entry(name)
        parts = [part for part in (macro.appended, value) if part is not None]
        if parts:
            macro.appended = " ".join(parts)
        elif macro.appended is None:
            macro.appended = ""
        return macro

    def export(self, name: str) -> Macro:
        """Mark ``name`` as exported to the environment of commands."""
        macro = self._entry(name)
        macro.exported = True
        return macro

    def expand(self, text: str) -> str:
        """Replace every macro reference in ``text`` by its expanded value."""
        return self._expand(text, frozenset())

    def _expand(self, text: str, active: frozenset[str]) -> str:
        out: list[str] = []
        pos = 0
        length = len(text)
        while pos < length:
            dollar = text.find("$", pos)
            if dollar < 0:
                out.append(text[pos:])
                break
            out.append(text[pos:dollar])
            if dollar + 1 >= length:
                out.append("$")
                break
            char = text[dollar + 1]
            if char == "$":
                out.append("$")
                pos = dollar + 2
            elif char in _CLOSERS:
                end = _matching_close(text, dollar + 1)
                name = self._expand(text[dollar + 2:end], active)
                out.append(self._lookup(name, active))
                pos = end + 1
            else:
                out.append(self._lookup(char, active))
                pos = dollar + 2
        return "".join(out)

    def _lookup(self, name: str, active: frozenset[str]) -> str:
        if name in active:
            raise ValueError(f"recursive reference to macro {name!r}")
        return self._expand(self.get(name), active | {name})


def _matching_close(text: str, open_at: int) -> int:
    opener = text[open_at]
    closer = _CLOSERS[opener]
    depth = 0
    for index in range(open_at, len(text)):
        char = text[index]
        if char == opener:
            depth += 1
        elif char == closer:
            depth -= 1
            if depth == 0:
                return index
    raise ValueError(f"unterminated macro reference in {text!r}")