"""Locate txtar file marker lines.

A marker line starts with ``"-- "`` and ends with ``" --"``; the text between
them, stripped of surrounding whitespace, is the file name. Marker lines are
only recognized at the start of the text or right after a newline.

The scanner works on offsets into a single string so that a whole archive is
parsed in one forward pass: candidates that fail validation are skipped, never
rescanned.
"""

from __future__ import annotations

from typing import Optional, Tuple

from .constants import MARKER, MARKER_END, NEWLINE_MARKER, MIN_MARKER_LEN


# (name, offset just past the marker line)
Marker = Tuple[str, int]


def fix_trailing_newline(s: str) -> str:
    if s and not s.endswith("\n"):
        return s + "\n"
    return s


def parse_marker(text: str, pos: int = 0) -> Optional[Marker]:
    """Return ``(name, after)`` if a marker line starts at ``pos``, else None.

    ``after`` is the offset following the line's newline, or ``len(text)``
    when the marker is the last line and has no newline.
    """
    if not text.startswith(MARKER, pos):
        return None

    nl = text.find("\n", pos)
    if nl < 0:
        end = after = len(text)
    else:
        end, after = nl, nl + 1

    if end - pos < MIN_MARKER_LEN or not text.endswith(MARKER_END, pos, end):
        return None

    # For "-- --" the delimiters overlap and the raw name is empty.
    name = text[pos + len(MARKER):max(end - len(MARKER_END), pos + len(MARKER))]
    return name.strip(), after


def scan(text: str, pos: int = 0) -> Tuple[int, Optional[Marker]]:
    """Find the first marker line at or after ``pos``.

    Returns ``(end, marker)``: ``text[pos:end]`` is the text preceding the
    marker (or the rest of the text when ``marker`` is None).
    """
    i = pos
    while True:
        marker = parse_marker(text, i)
        if marker is not None:
            return i, marker

        j = text.find(NEWLINE_MARKER, i)
        if j < 0:
            return len(text), None
        i = j + 1


def find_file_marker(text: str) -> Tuple[str, Optional[Tuple[str, str]]]:
    """Split ``text`` at its first marker line.

    Returns ``(before, None)`` when there is no marker, with a trailing newline
    enforced on ``before``; otherwise ``(before, (name, rest))`` where ``rest``
    is everything after the marker line.
    """
    end, marker = scan(text)
    if marker is None:
        return fix_trailing_newline(text), None
    name, after = marker
    return text[:end], (name, text[after:])


def has_marker(text: str) -> bool:
    return scan(text)[1] is not None
