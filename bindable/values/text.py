"""
Text selection value and string helpers.

TextSelection is an immutable (text, start_index, length) triple describing a
selected range of a string. ``length`` may be negative, meaning the selection
extends backwards from ``start_index``. Lines are separated by ``"\\n"``.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True, init=False)
class TextSelection:
    """
    A selected range within ``text``.

    ``start_index`` is clamped into ``[0, len(text) - 1]`` (0 for empty text). ``length`` is then
    clamped so the selection stays within the text in either direction.
    """

    text: str
    start_index: int
    length: int

    def __init__(self, text: str, start_index: int, length: int):
        if start_index >= len(text):
            start_index = len(text) - 1
        if start_index < 0:
            start_index = 0

        if start_index + length >= len(text):
            length = len(text) - start_index
        elif start_index + length < 0:
            length = -start_index

        object.__setattr__(self, "text", text)
        object.__setattr__(self, "start_index", start_index)
        object.__setattr__(self, "length", length)

    def _bounds(self):
        """Inclusive start and exclusive end of the selected range."""
        if self.length >= 0:
            return self.start_index, self.start_index + self.length
        return self.start_index + self.length, self.start_index

    def selected_text(self) -> str:
        start, end = self._bounds()
        return self.text[start:end]

    def text_with_selection_removed(self) -> str:
        start, end = self._bounds()
        return self.text[:start] + self.text[end:]

    def fully_selected_line_indices(self) -> List[int]:
        """Indices of the lines lying completely inside the selection."""
        if self.length == 0:
            return []
        start, end = self._bounds()

        result = []
        line_start = 0
        line_index = 0
        while line_start < len(self.text):
            line_end = self.text.find("\n", line_start)
            last_line = line_end == -1
            if last_line:
                line_end = len(self.text)
            if line_start >= start and line_end <= end:
                result.append(line_index)
            if last_line:
                break
            line_start = line_end + 1
            line_index += 1
        return result

    def start_line_index(self) -> int:
        """0-based line of the selection start."""
        return self.text.count("\n", 0, max(self.start_index, 0))

    def start_line_char_index(self) -> int:
        """Column of the selection start within its line."""
        if self.start_index <= 0:
            return 0
        line_break = self.text.rfind("\n", 0, self.start_index)
        return self.start_index - (line_break + 1)

    def text_of_last_line(self) -> str:
        """Selected text on the last line that has selected characters."""
        selected = self.selected_text()
        if not selected:
            return ""
        if selected.endswith("\n"):
            selected = selected[:-1]
        return selected[selected.rfind("\n") + 1 :]


def count_substrings(text: str, substring: str) -> int:
    """Number of non-overlapping occurrences of ``substring``."""
    return text.count(substring)


def is_whitespace(text: str) -> bool:
    """True when ``text`` holds only spaces and tabs (or nothing)."""
    return all(char in " \t" for char in text)


def repeat_string(text: str, count: int) -> str:
    """``text`` repeated ``count`` times; at least one copy."""
    return text * max(count, 1)


def replace_all(text: str, old: str, new: str) -> str:
    """
    Replace ``old`` with ``new`` until no occurrence is left.

    Unlike ``str.replace`` this repeats, so replacements that form new
    occurrences are replaced too. ``new`` must not contain ``old``.
    """
    while old and old in text:
        text = text.replace(old, new, 1)
    return text
