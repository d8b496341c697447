"""Match labels against a project's configured patterns."""

import re
from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def _identity(item):
    return item


class PatternMatcher:
    """Tests values against a set of compiled regular expressions."""

    def __init__(self, patterns: Iterable[re.Pattern] | None = None):
        self._patterns = list(patterns or [])

    def __bool__(self) -> bool:
        return bool(self._patterns)

    def matches(self, value: str) -> bool:
        """True if any pattern is found anywhere in `value`."""
        return any(pattern.search(value) for pattern in self._patterns)

    def select(self, items: Iterable[T], key: Callable[[T], str] = _identity) -> list[T]:
        """
        Filter `items` to those whose key matches any pattern.

        Input order is preserved and each key is kept once, however many
        patterns it matches or however often it repeats.
        """
        selected: list[T] = []
        seen: set[str] = set()
        for item in items:
            value = key(item)
            if value in seen or not self.matches(value):
                continue
            seen.add(value)
            selected.append(item)
        return selected
