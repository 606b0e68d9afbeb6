from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from .config import PaletteConfig
from .io import read_theme_document, write_text_atomic
from .models import ColorRecord
from .output import format_palette
from .palette import apply_blacklist, merge
from .sass import VariableExporter, load_sass_colors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaletteAsset:
    name: str
    text: str

    def source(self) -> str:
        return self.text

    def size(self) -> int:
        return len(self.text.encode("utf-8"))


class AssetPublisher(Protocol):
    def publish(self, asset: PaletteAsset) -> None:
        """Hand the finished palette document to the host build."""


@dataclass
class FilePublisher:
    root: str | Path = "."

    def publish(self, asset: PaletteAsset) -> None:
        path = write_text_atomic(asset.source(), Path(self.root) / asset.name)
        logger.info("wrote palette to %s (%d bytes)", path, asset.size())


class PalettePipeline:
    def __init__(
        self,
        config: PaletteConfig | None = None,
        exporter: VariableExporter | None = None,
        root: str | Path | None = None,
    ) -> None:
        self.config = config or PaletteConfig()
        self.root = Path(root) if root is not None else Path(".")
        self.palette = load_sass_colors(
            self.config.sass, exporter=exporter, root=self.root
        )

    def sass_palette(self) -> list[ColorRecord]:
        return list(self.palette)

    def build(self, *collections: Iterable[ColorRecord]) -> list[ColorRecord]:
        records = [
            record
            for collection in (self.palette, *collections)
            for record in collection
        ]
        allowed = apply_blacklist(
            records, self.config.blacklist, match=self.config.blacklist_match
        )
        if len(allowed) != len(records):
            logger.debug("blacklist removed %d color(s)", len(records) - len(allowed))
        return merge(allowed)

    def render(self, *collections: Iterable[ColorRecord]) -> str:
        palette = self.build(*collections)
        existing = None
        if self.config.mode == "nested":
            existing = read_theme_document(self.root / self.config.document_path)
        text = format_palette(
            palette,
            mode=self.config.mode,
            existing_document=existing,
            pretty=self.config.pretty,
        )
        logger.debug(
            "rendered %d color(s) in %s mode", len(palette), self.config.mode
        )
        return text

    def apply(
        self, publisher: AssetPublisher, *collections: Iterable[ColorRecord]
    ) -> PaletteAsset:
        text = self.render(*collections) + "\n"
        asset = PaletteAsset(name=self.config.output_path, text=text)
        publisher.publish(asset)
        return asset
