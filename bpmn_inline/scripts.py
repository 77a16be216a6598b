from __future__ import annotations

import re
from typing import Iterable, List

BANNER_PREFIX = "/* Auto-generated by bpmn-inline. Do not edit."

LEADING_BLANK_LINES_RE = re.compile(r"\A(?:[ \t]*\r?\n)+")


def combine_scripts(segments: Iterable[str]) -> str:
    """Join script segments in order, separated by exactly one blank line.

    Empty segments (an empty vendor file) are skipped.
    """
    parts: List[str] = []
    for segment in segments:
        text = LEADING_BLANK_LINES_RE.sub("", segment).rstrip()
        if text:
            parts.append(text)
    return "\n\n".join(parts)


def banner(labels: Iterable[str]) -> str:
    contents = " + ".join(labels)
    return f"{BANNER_PREFIX} Contains: {contents} */"


def standalone_script(banner_line: str, code: str) -> str:
    return f"{banner_line}\n{code.rstrip()}\n"
