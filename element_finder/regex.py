"""Regular expression helpers used by :meth:`Document.match` and collections."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Iterator, Optional, Pattern, Union

from .errors import InvalidInput


@dataclass(frozen=True)
class GroupIndex:
    """Pick one capture group from every match."""

    index: int = 1

    def check(self, pattern: Pattern[str]) -> None:
        if self.index < 0 or self.index > pattern.groups:
            raise InvalidInput(f"Pattern {pattern.pattern!r} has no group {self.index}")

    def extract(self, found: re.Match) -> Optional[str]:
        return found.group(self.index)


@dataclass(frozen=True)
class Transform:
    """Hand every match to a callable and keep what it returns."""

    func: Callable[[re.Match], Any]

    def check(self, pattern: Pattern[str]) -> None:
        return None

    def extract(self, found: re.Match) -> Optional[str]:
        result = self.func(found)
        return None if result is None else str(result)


MatchSelector = Union[GroupIndex, Transform]


def as_match_selector(value: Any) -> MatchSelector:
    """Normalise an integer or a callable into a :data:`MatchSelector`."""

    if isinstance(value, (GroupIndex, Transform)):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return GroupIndex(value)
    if callable(value):
        return Transform(value)
    raise InvalidInput("Invalid argument. Expect integer or callable")


def compile_pattern(pattern: Union[str, Pattern[str]]) -> Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise InvalidInput(f"Invalid pattern {pattern!r}: {exc}") from exc


def iter_matches(
    pattern: Union[str, Pattern[str]],
    selector: MatchSelector,
    texts: Iterable[str],
) -> Iterator[str]:
    """Yield one value per non-overlapping match across ``texts``.

    Groups that did not take part in a match, and transforms returning
    ``None``, are skipped.
    """

    compiled = compile_pattern(pattern)
    selector.check(compiled)
    for text in texts:
        for found in compiled.finditer(text):
            value = selector.extract(found)
            if value is not None:
                yield value
