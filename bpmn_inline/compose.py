"""Splice a pre-built bundle into the HTML template."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Tuple

from bpmn_inline.config import BuildConfig
from bpmn_inline.errors import MissingInputError, PlaceholderNotFoundError


def inline_script(template: str, script: str, placeholder: str) -> str:
    """Replace the single ``placeholder`` in ``template`` with an inline script tag.

    The script text is spliced in literally; nothing in it is interpreted.
    """
    index = template.find(placeholder)
    if index < 0:
        raise PlaceholderNotFoundError(placeholder)
    tag = f"<script>\n{script}\n</script>"
    return template[:index] + tag + template[index + len(placeholder):]


def read_text(path: Path) -> str:
    if not path.is_file():
        raise MissingInputError(path)
    return path.read_text(encoding="utf-8")


def read_bytes(path: Path) -> bytes:
    if not path.is_file():
        raise MissingInputError(path)
    return path.read_bytes()


def write_text(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def write_bytes(path: Path, payload: bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(payload)
    return path


async def read_template_and_bundle(config: BuildConfig) -> Tuple[str, str]:
    template, bundle = await asyncio.gather(
        asyncio.to_thread(read_text, config.resolve(config.template)),
        asyncio.to_thread(read_text, config.resolve(config.bundle)),
    )
    return template, bundle


async def build_html(config: BuildConfig) -> Path:
    """Write ``output_html``: the template with only the app bundle inlined."""
    template, bundle = await read_template_and_bundle(config)
    html = inline_script(template, bundle, config.placeholder)
    return await asyncio.to_thread(write_text, config.resolve(config.output_html), html)
