"""
Autocomplete input logic: filtering, open/closed state and keyboard handling.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Sequence

EMPTY_VALUE_LIMIT = 10
MATCH_LIMIT = 20


class Key(str, Enum):
    DOWN = "ArrowDown"
    UP = "ArrowUp"
    ENTER = "Enter"
    ESCAPE = "Escape"


def filter_options(value: str, options: Sequence[str]) -> list[str]:
    if not value:
        return list(options[:EMPTY_VALUE_LIMIT])
    needle = value.lower()
    return [option for option in options if needle in option.lower()][:MATCH_LIMIT]


class Autocomplete:
    def __init__(
        self,
        options: Sequence[str],
        value: str = "",
        *,
        on_change: Callable[[str], None] | None = None,
    ) -> None:
        self.options = list(options)
        self.value = value
        self.on_change = on_change
        self.is_open = False
        self.focused = False
        self.highlighted_index = -1
        self.filtered = filter_options(value, self.options)

    def _recompute(self) -> None:
        self.filtered = filter_options(self.value, self.options)
        self.highlighted_index = -1

    def _set_value(self, value: str) -> None:
        self.value = value
        self._recompute()
        if self.on_change is not None:
            self.on_change(value)

    def set_options(self, options: Sequence[str]) -> None:
        self.options = list(options)
        self._recompute()

    @property
    def highlighted(self) -> str | None:
        if 0 <= self.highlighted_index < len(self.filtered):
            return self.filtered[self.highlighted_index]
        return None

    def type(self, value: str) -> None:
        self._set_value(value)
        self.is_open = True

    def focus(self) -> None:
        self.focused = True
        self.is_open = True

    def blur(self) -> None:
        self.focused = False

    def select(self, option: str) -> None:
        self._set_value(option)
        self.is_open = False
        self.blur()

    def click_outside(self) -> None:
        self.is_open = False

    def clear(self) -> None:
        self._set_value("")
        self.is_open = False
        # The input keeps focus after clearing.
        self.focused = True

    def key(self, key: Key | str) -> None:
        try:
            key = Key(key)
        except ValueError:
            # Other keys (Tab, letters) belong to the text input.
            return
        if not self.is_open:
            if key in (Key.DOWN, Key.ENTER):
                self.is_open = True
            return

        count = len(self.filtered)
        if key is Key.DOWN and count:
            self.highlighted_index = self.highlighted_index + 1 if self.highlighted_index < count - 1 else 0
        elif key is Key.UP and count:
            self.highlighted_index = self.highlighted_index - 1 if self.highlighted_index > 0 else count - 1
        elif key is Key.ENTER:
            if self.highlighted is not None:
                self.select(self.highlighted)
        elif key is Key.ESCAPE:
            self.is_open = False
            self.blur()
