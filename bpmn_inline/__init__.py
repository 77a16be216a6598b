"""Inline the bpmn-js example bundle and its vendor assets into standalone HTML."""

from bpmn_inline.compose import inline_script
from bpmn_inline.config import BuildConfig, FontFamily, FontVariant, StylesheetAsset, VendorScript
from bpmn_inline.errors import (
    BuildError,
    ConfigError,
    FetchError,
    MissingInputError,
    PlaceholderNotFoundError,
    TransformError,
)

__all__ = [
    "BuildConfig",
    "BuildError",
    "ConfigError",
    "FetchError",
    "FontFamily",
    "FontVariant",
    "MissingInputError",
    "PlaceholderNotFoundError",
    "StylesheetAsset",
    "TransformError",
    "VendorScript",
    "inline_script",
]

__version__ = "0.1.0"
