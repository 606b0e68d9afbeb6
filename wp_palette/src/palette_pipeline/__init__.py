from .classify import classify
from .config import PaletteConfig, SassOptions, load_config
from .io import MalformedDocumentError
from .models import ClassifiedColor, ColorClass, ColorRecord
from .naming import build_record, title
from .output import format_palette
from .palette import apply_blacklist, merge
from .pipeline import FilePublisher, PaletteAsset, PalettePipeline
from .sass import ScssVariableExporter, extract_colors

__all__ = [
    "ClassifiedColor",
    "ColorClass",
    "ColorRecord",
    "FilePublisher",
    "MalformedDocumentError",
    "PaletteAsset",
    "PaletteConfig",
    "PalettePipeline",
    "SassOptions",
    "ScssVariableExporter",
    "apply_blacklist",
    "build_record",
    "classify",
    "extract_colors",
    "format_palette",
    "load_config",
    "merge",
    "title",
]
