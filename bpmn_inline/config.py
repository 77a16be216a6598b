"""Build configuration.

Every path is relative to ``BuildConfig.root``. ``BuildConfig.default`` mirrors
the layout of the example project; ``load_config`` overlays a TOML file on it.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from bpmn_inline.errors import ConfigError, MissingInputError

DEFAULT_PLACEHOLDER = "<!-- INLINE_BUNDLE -->"
DEFAULT_TARGETS: Tuple[str, ...] = ("chrome58", "firefox57", "safari11", "edge16")

BPMN_JS_URL = "https://unpkg.com/bpmn-js@{bpmn_version}/"
JQUERY_URL = "https://code.jquery.com/jquery-{jquery_version}.min.js"

FONT_MIME_TYPES = {
    "woff2": "font/woff2",
    "woff": "font/woff",
    "truetype": "font/ttf",
    "opentype": "font/otf",
    "embedded-opentype": "application/vnd.ms-fontobject",
    "svg": "image/svg+xml",
}


@dataclass(frozen=True)
class VendorScript:
    path: Path
    label: str
    source: Optional[str] = None


@dataclass(frozen=True)
class StylesheetAsset:
    path: Path
    # Icon stylesheets reference font files by URL; their @font-face rules are
    # regenerated from the binaries instead.
    strip_font_face: bool = False
    source: Optional[str] = None


@dataclass(frozen=True)
class FontVariant:
    path: Path
    format: str
    source: Optional[str] = None

    @property
    def mime_type(self) -> str:
        return FONT_MIME_TYPES[self.format]


@dataclass(frozen=True)
class FontFamily:
    family: str
    variants: Tuple[FontVariant, ...]
    weight: str = "normal"
    style: str = "normal"


@dataclass(frozen=True)
class BuildConfig:
    root: Path
    template: Path = Path("src/bpmn.template.html")
    bundle: Path = Path("build/app.bundle.js")
    output_html: Path = Path("bpmn.html")
    output_all_in_one: Path = Path("bpmn.all-in-one.html")
    output_script: Path = Path("bpmn.all-in-one.js")
    vendor_scripts: Tuple[VendorScript, ...] = ()
    stylesheets: Tuple[StylesheetAsset, ...] = ()
    fonts: Tuple[FontFamily, ...] = ()
    placeholder: str = DEFAULT_PLACEHOLDER
    targets: Tuple[str, ...] = DEFAULT_TARGETS
    transpiler: Optional[Tuple[str, ...]] = None
    bundle_label: str = "app bundle"

    @classmethod
    def default(cls, root: Path) -> "BuildConfig":
        return cls(
            root=Path(root),
            vendor_scripts=(
                VendorScript(
                    Path("dist/bpmn-modeler.development.js"),
                    "bpmn-js modeler",
                    BPMN_JS_URL + "dist/bpmn-modeler.development.js",
                ),
                VendorScript(Path("dist/jquery.js"), "jquery", JQUERY_URL),
            ),
            stylesheets=(
                StylesheetAsset(
                    Path("dist/assets/diagram-js.css"),
                    source=BPMN_JS_URL + "dist/assets/diagram-js.css",
                ),
                StylesheetAsset(
                    Path("dist/assets/bpmn-js.css"),
                    source=BPMN_JS_URL + "dist/assets/bpmn-js.css",
                ),
                StylesheetAsset(
                    Path("dist/assets/bpmn-font/css/bpmn.css"),
                    strip_font_face=True,
                    source=BPMN_JS_URL + "dist/assets/bpmn-font/css/bpmn.css",
                ),
            ),
            fonts=(
                FontFamily(
                    "bpmn",
                    (
                        FontVariant(
                            Path("dist/assets/bpmn-font/font/bpmn.woff2"),
                            "woff2",
                            BPMN_JS_URL + "dist/assets/bpmn-font/font/bpmn.woff2",
                        ),
                        FontVariant(
                            Path("dist/assets/bpmn-font/font/bpmn.woff"),
                            "woff",
                            BPMN_JS_URL + "dist/assets/bpmn-font/font/bpmn.woff",
                        ),
                    ),
                ),
            ),
        )

    def resolve(self, path: Path) -> Path:
        return self.root / path

    @property
    def script_labels(self) -> List[str]:
        return [script.label for script in self.vendor_scripts] + [self.bundle_label]


def _path(table: Dict[str, Any], key: str) -> Path:
    value = table.get(key)
    if not isinstance(value, str):
        raise ConfigError(f"{key} must be a string path")
    return Path(value)


def _string(table: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
    value = table.get(key, default)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{key} must be a string")
    return value


def _strings(table: Dict[str, Any], key: str) -> Tuple[str, ...]:
    value = table.get(key)
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigError(f"{key} must be a list of strings")
    return tuple(value)


def _flag(table: Dict[str, Any], key: str) -> bool:
    value = table.get(key, False)
    if not isinstance(value, bool):
        raise ConfigError(f"{key} must be true or false")
    return value


def _table(value: Any, where: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ConfigError(f"{where} must be a table")
    return value


def _tables(value: Any, where: str) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        raise ConfigError(f"{where} must be an array of tables")
    return [_table(item, where) for item in value]


def _check_keys(table: Dict[str, Any], allowed: set, where: str) -> None:
    unknown = sorted(set(table) - allowed)
    if unknown:
        raise ConfigError(f"unknown key(s) in {where}: {', '.join(unknown)}")


def _vendor_scripts(entries: Any) -> Tuple[VendorScript, ...]:
    scripts = []
    for entry in _tables(entries, "vendor_scripts"):
        _check_keys(entry, {"path", "label", "source"}, "vendor_scripts")
        path = _path(entry, "path")
        scripts.append(VendorScript(path, _string(entry, "label", path.name), _string(entry, "source")))
    return tuple(scripts)


def _stylesheets(entries: Any) -> Tuple[StylesheetAsset, ...]:
    sheets = []
    for entry in _tables(entries, "stylesheets"):
        _check_keys(entry, {"path", "strip_font_face", "source"}, "stylesheets")
        sheets.append(
            StylesheetAsset(
                _path(entry, "path"),
                _flag(entry, "strip_font_face"),
                _string(entry, "source"),
            )
        )
    return tuple(sheets)


def _fonts(entries: Any) -> Tuple[FontFamily, ...]:
    families = []
    for entry in _tables(entries, "fonts"):
        _check_keys(entry, {"family", "variants", "weight", "style"}, "fonts")
        family = _string(entry, "family")
        if not family:
            raise ConfigError("fonts entry is missing 'family'")
        variants = []
        for variant in _tables(entry.get("variants", []), "fonts.variants"):
            _check_keys(variant, {"path", "format", "source"}, "fonts.variants")
            fmt = variant.get("format")
            if not isinstance(fmt, str) or fmt not in FONT_MIME_TYPES:
                raise ConfigError(f"unsupported font format: {fmt!r}")
            variants.append(FontVariant(_path(variant, "path"), fmt, _string(variant, "source")))
        if not variants:
            raise ConfigError(f"font family {family!r} has no variants")
        families.append(
            FontFamily(
                family,
                tuple(variants),
                _string(entry, "weight", "normal"),
                _string(entry, "style", "normal"),
            )
        )
    return tuple(families)


def config_from_mapping(data: Dict[str, Any], root: Path) -> BuildConfig:
    """Overlay ``data`` (parsed TOML) on the default configuration."""
    config = BuildConfig.default(root)
    scalar_paths = {"template", "bundle"}
    allowed = scalar_paths | {
        "outputs",
        "vendor_scripts",
        "stylesheets",
        "fonts",
        "placeholder",
        "targets",
        "transpiler",
        "bundle_label",
    }
    _check_keys(data, allowed, "config")

    changes: Dict[str, Any] = {}
    for key in scalar_paths & set(data):
        changes[key] = _path(data, key)
    if "outputs" in data:
        outputs = _table(data["outputs"], "outputs")
        _check_keys(outputs, {"html", "all_in_one", "script"}, "outputs")
        if "html" in outputs:
            changes["output_html"] = _path(outputs, "html")
        if "all_in_one" in outputs:
            changes["output_all_in_one"] = _path(outputs, "all_in_one")
        if "script" in outputs:
            changes["output_script"] = _path(outputs, "script")
    if "vendor_scripts" in data:
        changes["vendor_scripts"] = _vendor_scripts(data["vendor_scripts"])
    if "stylesheets" in data:
        changes["stylesheets"] = _stylesheets(data["stylesheets"])
    if "fonts" in data:
        changes["fonts"] = _fonts(data["fonts"])
    if "placeholder" in data:
        placeholder = _string(data, "placeholder")
        if not placeholder:
            raise ConfigError("placeholder must not be empty")
        changes["placeholder"] = placeholder
    if "targets" in data:
        targets = _strings(data, "targets")
        if not targets:
            raise ConfigError("targets must not be empty")
        changes["targets"] = targets
    if "transpiler" in data:
        transpiler = _strings(data, "transpiler")
        if not transpiler:
            raise ConfigError("transpiler must name a command")
        changes["transpiler"] = transpiler
    if "bundle_label" in data:
        changes["bundle_label"] = _string(data, "bundle_label")
    return replace(config, **changes)


def load_config(path: Optional[Path], root: Path) -> BuildConfig:
    if path is None:
        return BuildConfig.default(root)
    if not path.is_file():
        raise MissingInputError(path)
    try:
        with path.open("rb") as fh:
            data = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"{path}: {exc}") from exc
    # pyproject.toml keeps the settings under [tool.bpmn-inline].
    if path.name == "pyproject.toml":
        data = data.get("tool", {}).get("bpmn-inline", {})
    return config_from_mapping(data, root)
