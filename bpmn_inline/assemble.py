"""Build the plain page, the all-in-one page and the standalone script.

``assemble`` is the pure part: it only sees text and bytes that were already
read. ``read_inputs`` and ``write_artifacts`` are the I/O around it.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import List

from bpmn_inline.compose import inline_script, read_bytes, read_text, write_text
from bpmn_inline.config import BuildConfig
from bpmn_inline.htmltags import insert_before_head_close, remove_script_tags, remove_stylesheet_links
from bpmn_inline.scripts import banner, combine_scripts, standalone_script
from bpmn_inline.styles import compose_styles, font_face_rule, sanitize_stylesheet, stylesheet_block
from bpmn_inline.transpile import Downleveler


@dataclass
class AssemblyInputs:
    template: str
    bundle: str
    vendor_scripts: List[str]
    stylesheets: List[str]
    # One list of payloads per font family, in variant order.
    fonts: List[List[bytes]]


@dataclass
class Artifacts:
    html: str
    all_in_one_html: str
    script: str


def inline_styles(config: BuildConfig, inputs: AssemblyInputs) -> str:
    blocks = [
        stylesheet_block(sheet.path.as_posix(), sanitize_stylesheet(css, sheet.strip_font_face))
        for sheet, css in zip(config.stylesheets, inputs.stylesheets)
    ]
    font_rules = [
        (font.family, font_face_rule(font, payloads))
        for font, payloads in zip(config.fonts, inputs.fonts)
    ]
    return compose_styles(font_rules, blocks)


def strip_vendor_references(config: BuildConfig, template: str) -> str:
    page = remove_script_tags(template, [script.path.as_posix() for script in config.vendor_scripts])
    return remove_stylesheet_links(page, [sheet.path.as_posix() for sheet in config.stylesheets])


async def assemble(config: BuildConfig, inputs: AssemblyInputs, downleveler: Downleveler) -> Artifacts:
    html = inline_script(inputs.template, inputs.bundle, config.placeholder)

    combined = combine_scripts([*inputs.vendor_scripts, inputs.bundle])
    code = await downleveler.transform(combined)
    script = standalone_script(banner(config.script_labels), code)

    page = strip_vendor_references(config, inputs.template)
    styles = inline_styles(config, inputs)
    if styles:
        page = insert_before_head_close(page, styles)
    all_in_one_html = inline_script(page, script.rstrip("\n"), config.placeholder)

    return Artifacts(html=html, all_in_one_html=all_in_one_html, script=script)


async def _read_font(config: BuildConfig, paths: List[Path]) -> List[bytes]:
    return list(await asyncio.gather(*(asyncio.to_thread(read_bytes, config.resolve(p)) for p in paths)))


async def read_inputs(config: BuildConfig) -> AssemblyInputs:
    """Read every input concurrently; the first missing file aborts the run."""
    template_and_bundle = asyncio.gather(
        asyncio.to_thread(read_text, config.resolve(config.template)),
        asyncio.to_thread(read_text, config.resolve(config.bundle)),
    )
    vendor = asyncio.gather(
        *(asyncio.to_thread(read_text, config.resolve(s.path)) for s in config.vendor_scripts)
    )
    sheets = asyncio.gather(
        *(asyncio.to_thread(read_text, config.resolve(s.path)) for s in config.stylesheets)
    )
    fonts = asyncio.gather(
        *(_read_font(config, [v.path for v in font.variants]) for font in config.fonts)
    )
    (template, bundle), vendor_texts, sheet_texts, font_payloads = await asyncio.gather(
        template_and_bundle, vendor, sheets, fonts
    )
    return AssemblyInputs(
        template=template,
        bundle=bundle,
        vendor_scripts=list(vendor_texts),
        stylesheets=list(sheet_texts),
        fonts=list(font_payloads),
    )


async def write_artifacts(config: BuildConfig, artifacts: Artifacts) -> List[Path]:
    """Write the three outputs concurrently; a failed write does not undo the others."""
    written = await asyncio.gather(
        asyncio.to_thread(write_text, config.resolve(config.output_html), artifacts.html),
        asyncio.to_thread(write_text, config.resolve(config.output_all_in_one), artifacts.all_in_one_html),
        asyncio.to_thread(write_text, config.resolve(config.output_script), artifacts.script),
    )
    return list(written)


async def build(config: BuildConfig, downleveler: Downleveler) -> List[Path]:
    inputs = await read_inputs(config)
    artifacts = await assemble(config, inputs, downleveler)
    return await write_artifacts(config, artifacts)
