"""Normalization of raw engine emissions into displayable lines.

An update record arrives in one of several shapes. The first shape present wins:

1. ``lines``: already split, used verbatim.
2. ``text``: plain text, split on ``\\n``.
3. ``output``: a markup blob, split on ``<br>`` while keeping ``<pre>...</pre>``
   blocks intact (a ``<br>`` inside an open block stays part of the block).
4. ``message``: a single line.

Every resulting line is then filtered: blank lines and bare prompt lines
(``>`` or ``&gt;`` once tags are stripped) are dropped. The emitted line keeps
its original, untrimmed content so preformatted blocks keep their layout.

Markup is passed through untouched; the engine is trusted.
"""
from __future__ import annotations

import re

from adventure.engine.base import UpdateRecord

PROMPT_GLYPH = ">"

_TAG_RE = re.compile(r"<[^>]*>")
_BR_RE = re.compile(r"^<br\s*/?>$", re.IGNORECASE)
_PRE_OPEN_RE = re.compile(r"^<pre(?:\s[^>]*)?>$", re.IGNORECASE)
_PRE_CLOSE_RE = re.compile(r"^</pre\s*>$", re.IGNORECASE)
_MARKUP_SPLIT_RE = re.compile(r"(<br\s*/?>|<pre(?:\s[^>]*)?>|</pre\s*>)", re.IGNORECASE)


def visible_text(line: str) -> str:
    """Line content with tags removed and the prompt entity decoded, trimmed."""

    stripped = _TAG_RE.sub("", line.strip()).strip()
    return stripped.replace("&gt;", ">").strip()


def is_displayable(line: str) -> bool:
    if not line or not line.strip():
        return False
    text = visible_text(line)
    return bool(text) and text != PROMPT_GLYPH


def split_markup(blob: str) -> list[str]:
    """Split a markup blob on line breaks, treating ``<pre>`` blocks as atomic."""

    units: list[str] = []
    current = ""
    in_pre = False

    for part in _MARKUP_SPLIT_RE.split(blob):
        if not part:
            continue
        if _BR_RE.match(part):
            if in_pre:
                current += part
            elif current.strip():
                units.append(current)
                current = ""
        elif _PRE_OPEN_RE.match(part):
            in_pre = True
            current += part
        elif _PRE_CLOSE_RE.match(part):
            in_pre = False
            current += part
        else:
            current += part

    if current.strip():
        units.append(current)
    return units


def raw_lines(record: UpdateRecord) -> list[str]:
    if record.lines is not None:
        return list(record.lines)
    if record.text is not None:
        return record.text.split("\n")
    if record.output is not None:
        return split_markup(record.output)
    if record.message is not None:
        return [record.message]
    return []


def process_update(record: UpdateRecord) -> list[str]:
    return [line for line in raw_lines(record) if is_displayable(line)]
