"""Environment variables whose values hold macro references."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, MutableMapping

from smake.macros import MacroTable


@dataclass
class DynamicEnvVar:
    """An environment variable whose value is expanded before it is exported."""

    name: str
    value: str
    already_put: bool = False
    env_string: str | None = None


def export_dynamic(
    envvars: Iterable[DynamicEnvVar],
    table: MacroTable,
    environ: MutableMapping[str, str],
) -> list[str]:
    """Expand and export each variable not yet put into ``environ``.

    Returns the ``NAME=value`` strings exported by this call.
    """
    exported: list[str] = []
    for var in envvars:
        if var.already_put:
            continue
        value = table.expand(var.value)
        environ[var.name] = value
        var.already_put = True
        var.env_string = f"{var.name}={value}"
        exported.append(var.env_string)
    return exported