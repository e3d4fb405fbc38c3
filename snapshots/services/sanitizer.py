"""Remove relative-time noise ("2h", "3 days ago", "just now") from post text.

Timestamps show up in three places in captured text: on a line of their own,
at the edge of a text blob, and between separators mid-sentence. Each place
gets its own pass; all three are built from the same token grammar.
"""

from __future__ import annotations

import re

_QUANTITY = r"(?:\b(?:an?|one)\b|\b\d+)"
_UNIT = (
    r"(?:s|sec|secs|second|seconds"
    r"|m|min|mins|minute|minutes"
    r"|h|hr|hrs|hour|hours"
    r"|d|day|days"
    r"|w|wk|wks|week|weeks"
    r"|mo|mos|month|months"
    r"|y|yr|yrs|year|years)"
)
TIME_TOKEN = rf"(?:{_QUANTITY}\s*){_UNIT}\b(?:\s+ago)?|\bjust now\b"

# space, tab, middle dot, pipe, comma, semicolon, colon, en dash, em dash, hyphen
_SEP = r"[ \t·|,;:–—-]+"
_BRACKET = r"[()\[\]]?"
_WRAPPED = rf"{_BRACKET}\s*(?:{TIME_TOKEN})\s*{_BRACKET}"

# word boundaries and digits follow ASCII rules
_FLAGS = re.IGNORECASE | re.ASCII

_TIME_ONLY_LINE = re.compile(rf"\s*{_WRAPPED}\s*", _FLAGS)
_LEADING = re.compile(rf"\A(?:{_SEP})?{_WRAPPED}(?:{_SEP})?", _FLAGS)
_TRAILING = re.compile(rf"(?:{_SEP})?{_WRAPPED}(?:{_SEP})?\Z", _FLAGS)
_STANDALONE = re.compile(rf"(?:\A|{_SEP}){_WRAPPED}(?=(?:{_SEP})|\Z)", _FLAGS)
_LINE_BREAK = re.compile(r"\r?\n")
_WHITESPACE_RUN = re.compile(r"\s{2,}")


def strip_relative_time(text: str | None) -> str | None:
    if not text:
        return text

    lines = _LINE_BREAK.split(text)
    result = "\n".join(line for line in lines if not _TIME_ONLY_LINE.fullmatch(line))

    result = _LEADING.sub("", result, count=1)
    result = _TRAILING.sub("", result, count=1)

    result = _STANDALONE.sub(" ", result)

    return _WHITESPACE_RUN.sub(" ", result).strip()
