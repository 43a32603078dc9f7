"""Managed marker regions for idempotent in-place replacement."""

from __future__ import annotations


class MarkerManager:
    """Replaces the text between ``multigen:begin:<key>`` and ``multigen:end:<key>``.

    Markers are written as line comments so they survive in any target file;
    ``comment`` is the line-comment prefix of that file (``//`` or ``#``).
    """

    BEGIN_FMT = "{comment} multigen:begin:{key}"
    END_FMT = "{comment} multigen:end:{key}"

    def __init__(self, comment: str = "//") -> None:
        self.comment = comment

    def begin(self, key: str) -> str:
        return self.BEGIN_FMT.format(comment=self.comment, key=key)

    def end(self, key: str) -> str:
        return self.END_FMT.format(comment=self.comment, key=key)

    def contains(self, text: str, key: str) -> bool:
        begin, end = self.begin(key), self.end(key)
        return begin in text and end in text.split(begin, 1)[1]

    def replace(self, text: str, key: str, new_body: str) -> str:
        """Replace an existing managed block; text without the block is returned unchanged."""
        if not self.contains(text, key):
            return text
        begin, end = self.begin(key), self.end(key)
        pre, rest = text.split(begin, 1)
        _, post = rest.split(end, 1)
        return f"{pre}{begin}\n{new_body.rstrip()}\n{end}{post}"


__all__ = ["MarkerManager"]
