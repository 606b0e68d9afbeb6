from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

RGB = tuple[int, int, int]
HSV = tuple[float, float, float]


class ColorClass(Enum):
    TRUE_COLOR = "true_color"
    AMBIGUOUS_FORMAT = "ambiguous_format"
    NON_COLOR = "non_color"
    GRAYSCALE = "grayscale"


@dataclass(frozen=True)
class ColorRecord:
    name: str
    slug: str
    color: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("color record name must not be empty")
        if not self.slug:
            raise ValueError("color record slug must not be empty")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "slug": self.slug,
            "color": self.color,
        }


@dataclass(frozen=True)
class ClassifiedColor:
    record: ColorRecord
    color_class: ColorClass

    @property
    def is_grayscale(self) -> bool:
        return self.color_class is ColorClass.GRAYSCALE


@dataclass(frozen=True)
class RawColorEntry:
    name: str
    value: str


@dataclass(frozen=True)
class SassMapEntry:
    name: str
    value: str
    compiled_value: str | None = None


@dataclass(frozen=True)
class SassVariable:
    name: str
    value: str
    compiled_value: str | None = None
    map_value: list[SassMapEntry] | None = None
