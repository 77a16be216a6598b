"""Stylesheet sanitizing and font embedding for the all-in-one page."""

from __future__ import annotations

import base64
import re
from typing import Iterable, List, Sequence, Tuple

from bpmn_inline.config import FontFamily

CHARSET_RE = re.compile(r"""@charset\s+(?:"[^"]*"|'[^']*')\s*;[ \t]*(?:\r?\n)?""", re.IGNORECASE)
FONT_FACE_RE = re.compile(r"@font-face\b", re.IGNORECASE)


def _skip_comment(css: str, pos: int) -> int:
    end = css.find("*/", pos + 2)
    return len(css) if end < 0 else end + 2


def _skip_string(css: str, pos: int) -> int:
    quote = css[pos]
    pos += 1
    while pos < len(css):
        ch = css[pos]
        if ch == "\\":
            pos += 2
            continue
        if ch == quote:
            return pos + 1
        pos += 1
    return pos


def _block_end(css: str, pos: int) -> int:
    """Return the index just past the ``}`` closing the block opened at or after ``pos``."""
    depth = 0
    while pos < len(css):
        if css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
            continue
        ch = css[pos]
        if ch in "\"'":
            pos = _skip_string(css, pos)
            continue
        if ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    return len(css)


def _font_face_spans(css: str) -> List[Tuple[int, int]]:
    spans = []
    pos = 0
    while pos < len(css):
        if css.startswith("/*", pos):
            pos = _skip_comment(css, pos)
            continue
        if css[pos] in "\"'":
            pos = _skip_string(css, pos)
            continue
        match = FONT_FACE_RE.match(css, pos)
        if match:
            end = _block_end(css, match.end())
            # Take the rest of the line with the rule.
            while end < len(css) and css[end] in " \t":
                end += 1
            if css.startswith("\r\n", end):
                end += 2
            elif end < len(css) and css[end] == "\n":
                end += 1
            spans.append((pos, end))
            pos = end
            continue
        pos += 1
    return spans


def strip_font_faces(css: str) -> str:
    out = []
    last = 0
    for start, end in _font_face_spans(css):
        out.append(css[last:start])
        last = end
    out.append(css[last:])
    return "".join(out)


def sanitize_stylesheet(css: str, strip_font_face: bool = False) -> str:
    css = CHARSET_RE.sub("", css)
    if strip_font_face:
        css = strip_font_faces(css)
    return css


def stylesheet_block(path: str, css: str) -> str:
    return f"/* {path} */\n{css.strip()}"


def data_uri(mime_type: str, payload: bytes) -> str:
    encoded = base64.b64encode(payload).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def font_face_rule(font: FontFamily, payloads: Sequence[bytes]) -> str:
    """Build an ``@font-face`` rule embedding every variant of ``font``.

    ``payloads`` holds the font binaries in the order of ``font.variants``.
    """
    if len(payloads) != len(font.variants):
        raise ValueError(f"expected {len(font.variants)} font files for {font.family!r}, got {len(payloads)}")
    sources = ",\n       ".join(
        f'url("{data_uri(variant.mime_type, payload)}") format("{variant.format}")'
        for variant, payload in zip(font.variants, payloads)
    )
    return (
        "@font-face {\n"
        f'  font-family: "{font.family}";\n'
        f"  src: {sources};\n"
        f"  font-weight: {font.weight};\n"
        f"  font-style: {font.style};\n"
        "  font-display: swap;\n"
        "}"
    )


def compose_styles(font_rules: Iterable[Tuple[str, str]], blocks: Iterable[str]) -> str:
    """Font rules first, each labelled ``/* font N: family */``, then the stylesheet blocks."""
    parts = [
        f"/* font {index}: {family} */\n{rule}"
        for index, (family, rule) in enumerate(font_rules, start=1)
    ]
    parts.extend(blocks)
    return "\n\n".join(parts)
