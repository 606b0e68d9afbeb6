from __future__ import annotations

import re

from .models import ColorRecord

# Letter runs (any script) and digit runs; punctuation and "_" separate words.
_RUN_PATTERN = re.compile(r"[^\W\d_]+|\d+")


def _split_case(run: str) -> list[str]:
    """Split a letter run on camel case and acronym boundaries."""
    words: list[str] = []
    start = 0
    for index in range(1, len(run)):
        char, previous = run[index], run[index - 1]
        following = run[index + 1] if index + 1 < len(run) else ""
        if char.isupper() and (
            previous.islower() or (previous.isupper() and following.islower())
        ):
            words.append(run[start:index])
            start = index
    words.append(run[start:])
    return words


def split_words(value: str) -> list[str]:
    words: list[str] = []
    for run in _RUN_PATTERN.findall(value):
        words.extend([run] if run.isdigit() else _split_case(run))
    return words


def title(value: str, description: str | None = None) -> str:
    """Return a title cased string, e.g. ``brand-primary`` -> ``Brand Primary``.

    When a description is given it is title cased too and appended in
    parentheses.
    """
    words = split_words(value)
    text = " ".join(word.lower().capitalize() for word in words)
    if description:
        text = f"{text} ({title(description)})"
    return text


def build_record(slug: str, raw_value: object) -> ColorRecord:
    name = title(slug) or slug
    return ColorRecord(name=name, slug=slug, color=str(raw_value).strip())
