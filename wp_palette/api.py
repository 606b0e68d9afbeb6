from __future__ import annotations

from typing import Any, Literal

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from wp_palette.src.palette_pipeline.classify import classify
from wp_palette.src.palette_pipeline.io import (
    MalformedDocumentError,
    parse_theme_document,
)
from wp_palette.src.palette_pipeline.models import ColorClass, ColorRecord
from wp_palette.src.palette_pipeline.naming import build_record
from wp_palette.src.palette_pipeline.output import format_palette
from wp_palette.src.palette_pipeline.palette import apply_blacklist, merge


class ColorInput(BaseModel):
    slug: str = Field(..., min_length=1, description="Stable color identifier")
    color: str = Field(..., description="Raw color value, e.g. #ff0000 or red")
    name: str | None = Field(
        default=None, description="Display name; derived from the slug when omitted"
    )


class PaletteRequest(BaseModel):
    colors: list[ColorInput] = Field(default_factory=list)
    mode: Literal["flat", "nested"] = "nested"
    pretty: bool = False
    blacklist: list[str] = Field(default_factory=lambda: ["transparent", "inherit"])
    blacklist_match: Literal["slug", "color", "both"] = "both"
    existing_document: str | None = Field(
        default=None,
        description="Raw theme.json text to merge the palette into",
    )


class ColorItem(BaseModel):
    name: str
    slug: str
    color: str
    classification: str


class PaletteResponse(BaseModel):
    palette: list[ColorItem]
    content: str
    grayscale_count: int


app = FastAPI(
    title="WordPress Palette API",
    version="1.0.0",
    description="Build a sorted theme.json color palette from raw color values.",
)


def _to_record(item: ColorInput) -> ColorRecord:
    record = build_record(item.slug, item.color)
    if item.name:
        record = ColorRecord(name=item.name, slug=record.slug, color=record.color)
    return record


@app.post("/palette", response_model=PaletteResponse)
def build_palette(payload: PaletteRequest) -> PaletteResponse:
    try:
        records = apply_blacklist(
            [_to_record(item) for item in payload.colors],
            payload.blacklist,
            match=payload.blacklist_match,
        )
        palette = merge(records)

        existing: dict[str, Any] | None = None
        if payload.mode == "nested" and payload.existing_document is not None:
            existing = parse_theme_document(
                payload.existing_document, source="existing_document"
            )
        content = format_palette(
            palette, mode=payload.mode, existing_document=existing, pretty=payload.pretty
        )
    except MalformedDocumentError as exc:
        raise HTTPException(
            status_code=400, detail=f"malformed_existing_document: {exc}"
        ) from exc
    except ValueError as exc:
        raise HTTPException(
            status_code=400, detail=f"failed_to_build_palette: {exc}"
        ) from exc

    items = []
    for record in palette:
        color_class = classify(record.color)
        items.append(
            ColorItem(
                name=record.name,
                slug=record.slug,
                color=record.color,
                classification=color_class.value,
            )
        )
    return PaletteResponse(
        palette=items,
        content=content,
        grayscale_count=sum(
            1 for item in items if item.classification == ColorClass.GRAYSCALE.value
        ),
    )
