from __future__ import annotations

from collections.abc import Iterable
from typing import Literal

from .classify import classify_record
from .models import ColorRecord

BlacklistMatch = Literal["slug", "color", "both"]


def dedupe(records: Iterable[ColorRecord]) -> list[ColorRecord]:
    seen: set[str] = set()
    unique: list[ColorRecord] = []
    for record in records:
        if record.slug in seen:
            continue
        seen.add(record.slug)
        unique.append(record)
    return unique


def apply_blacklist(
    records: Iterable[ColorRecord],
    blacklist: Iterable[str],
    match: BlacklistMatch = "both",
) -> list[ColorRecord]:
    """Drop records whose slug and/or colour is an excluded value.

    Runs before ``merge``; matching is exact, whitespace and case insensitive.
    """
    if match not in ("slug", "color", "both"):
        raise ValueError(f"unsupported blacklist match '{match}'")

    excluded = {str(value).strip().lower() for value in blacklist}
    if not excluded:
        return list(records)

    def is_excluded(record: ColorRecord) -> bool:
        if match in ("slug", "both") and record.slug.strip().lower() in excluded:
            return True
        if match in ("color", "both") and record.color.strip().lower() in excluded:
            return True
        return False

    return [record for record in records if not is_excluded(record)]


def merge(*collections: Iterable[ColorRecord]) -> list[ColorRecord]:
    """Build a flat palette from one or more colour collections.

    Records are deduplicated by slug (first occurrence wins), then every
    grayscale colour is moved after the rest. Both groups are sorted by name.
    """
    collection = dedupe(record for records in collections for record in records)
    classified = [classify_record(record) for record in collection]

    colors = [item.record for item in classified if not item.is_grayscale]
    grayscale = [item.record for item in classified if item.is_grayscale]

    return [
        record
        for group in (colors, grayscale)
        for record in sorted(group, key=lambda record: record.name)
    ]
