"""Pattern (``%``) rules: matching targets and deriving their dependencies."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Sequence

_GROUP_SEPARATOR = re.compile(r"\s+\+\s+")


@dataclass
class PatternRule:
    """A rule whose target contains ``%``."""

    name: str
    patterns: tuple[str, ...]
    dependencies: tuple[tuple[str, ...], ...] = ()
    target_group: tuple[str, ...] = ()
    command: tuple[str, ...] = ()
    being_expanded: bool = field(default=False, compare=False)

    @classmethod
    def parse(
        cls,
        target: str,
        dependencies: str | Iterable[str] = (),
        command: str | Iterable[str] = (),
    ) -> "PatternRule":
        """Build a rule from a target (``a + b`` for a group), dependencies and commands."""
        members = [m for m in _GROUP_SEPARATOR.split(target.strip()) if m]
        if not members or "%" not in members[0]:
            raise ValueError(f"not a pattern target: {target!r}")
        if isinstance(dependencies, str):
            dependencies = dependencies.split()
        if isinstance(command, str):
            command = (command,)
        return cls(
            name=members[0],
            patterns=tuple(members[0].split("%")),
            dependencies=tuple(tuple(dep.split("%")) for dep in dependencies),
            target_group=tuple(members) if len(members) > 1 else (),
            command=tuple(command),
        )


@dataclass(frozen=True)
class PercentMatch:
    """The result of applying a pattern rule to a target."""

    rule: PatternRule
    percent: str
    less: str | None
    dependencies: tuple[str, ...]
    target_group: tuple[str, ...]
    member: str | None

    @property
    def star(self) -> str:
        return self.percent


def construct_from_pattern(patterns: Sequence[str], percent: str) -> str:
    """Join pattern pieces with ``percent``, dropping a leading ``./``."""
    result = percent.join(patterns)
    return result[2:] if result.startswith("./") else result


def match_pattern(target: str, patterns: Sequence[str]) -> str | None:
    """Return the text that ``%`` stands for in ``target``, or None."""
    if len(patterns) < 2:
        raise ValueError("a pattern needs at least one '%'")
    prefix, suffix = patterns[0], patterns[-1]
    if not target.startswith(prefix):
        return None
    if len(suffix) > len(target) or not target.endswith(suffix):
        return None
    start = len(prefix)
    for length in range(len(target) - len(prefix) - len(suffix), -1, -1):
        percent = target[start:start + length]
        if construct_from_pattern(patterns, percent) == target:
            return percent
    return None


def _dependency_name(pieces: Sequence[str], percent: str) -> str:
    if len(pieces) > 1:
        return construct_from_pattern(pieces, percent)
    return pieces[0]


def expand_target_group(rule: PatternRule, percent: str) -> list[str]:
    """Return the members of the rule's target group with ``%`` filled in."""
    group: list[str] = []
    for member in rule.target_group:
        pieces = member.split("%")
        name = _dependency_name(pieces, percent)
        if len(pieces) > 1 and not name:
            continue
        add_to_chain(group, name)
    return group


def archive_member_name(target: str) -> str | None:
    """Return the member named inside ``lib.a(member)``, or None."""
    left = target.find("(")
    right = target.find(")")
    if left < 0 or right < 0:
        return None
    return target[left + 1:right]


def add_to_chain(chain: list[str], name: str) -> bool:
    """Append ``name`` to ``chain`` unless present; report whether it was added."""
    if name in chain:
        return False
    chain.append(name)
    return True


def _resolve(rule: PatternRule, target: str, percent: str, less: str | None) -> PercentMatch:
    dependencies: list[str] = []
    for pieces in rule.dependencies:
        name = _dependency_name(pieces, percent)
        if len(pieces) > 1 and not name:
            continue
        add_to_chain(dependencies, name)
    member = archive_member_name(target) if "(" in target else None
    return PercentMatch(
        rule=rule,
        percent=percent,
        less=less,
        dependencies=tuple(dependencies),
        target_group=tuple(expand_target_group(rule, percent)),
        member=member,
    )


def find_percent_rule(
    target: str,
    rules: Iterable[PatternRule],
    can_build: Callable[[str], bool],
) -> PercentMatch | None:
    """Find the pattern rule to build ``target`` with.

    The first matching rule whose dependencies can all be built wins. Failing
    that, the first matching rule whose pattern dependencies can all be built
    is used. Rules currently being expanded are skipped.
    """
    candidate: tuple[PatternRule, str, str | None] | None = None
    for rule in rules:
        if rule.being_expanded:
            continue
        percent = match_pattern(target, rule.patterns)
        if percent is None:
            continue
        maybe_ok = True
        all_ok = True
        less: str | None = None
        nonpattern_less = True
        for pieces in rule.dependencies:
            is_pattern = len(pieces) > 1
            name = _dependency_name(pieces, percent)
            if is_pattern:
                if less is None or nonpattern_less:
                    less = name
                    nonpattern_less = False
            elif less is None:
                less = name
            if not name:
                continue
            rule.being_expanded = True
            try:
                ok = bool(can_build(name))
            finally:
                rule.being_expanded = False
            if not ok:
                if is_pattern:
                    maybe_ok = False
                all_ok = False
                break
        if all_ok:
            return _resolve(rule, target, percent, less)
        if maybe_ok and candidate is None:
            candidate = (rule, percent, less)
    if candidate is None:
        return None
    rule, percent, less = candidate
    return _resolve(rule, target, percent, less)