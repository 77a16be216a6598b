"""Locate and remove tags by their parsed attributes.

Matching works on what ``html.parser`` reports for each tag, so attribute
order, quoting style and self-closing slashes do not matter.
"""

from __future__ import annotations

from dataclasses import dataclass
from html.parser import HTMLParser
from typing import Callable, Dict, Iterable, List, Optional

from bpmn_inline.errors import PlaceholderNotFoundError

Attrs = Dict[str, Optional[str]]


@dataclass
class TagSpan:
    name: str
    start: int
    end: int
    attrs: Attrs


class _TagCollector(HTMLParser):
    def __init__(self, html: str) -> None:
        super().__init__(convert_charrefs=True)
        self.html = html
        self.line_starts = [0]
        for index, ch in enumerate(html):
            if ch == "\n":
                self.line_starts.append(index + 1)
        self.tags: List[TagSpan] = []
        self.end_tags: List[TagSpan] = []
        self._open_scripts: List[TagSpan] = []

    def char_offset(self) -> int:
        line, column = self.getpos()
        return self.line_starts[line - 1] + column

    def handle_starttag(self, tag: str, attrs) -> None:
        start = self.char_offset()
        text = self.get_starttag_text() or ""
        span = TagSpan(tag, start, start + len(text), {k: v for k, v in attrs})
        self.tags.append(span)
        if tag == "script":
            self._open_scripts.append(span)

    def handle_startendtag(self, tag: str, attrs) -> None:
        start = self.char_offset()
        text = self.get_starttag_text() or ""
        self.tags.append(TagSpan(tag, start, start + len(text), {k: v for k, v in attrs}))

    def handle_endtag(self, tag: str) -> None:
        start = self.char_offset()
        close = self.html.find(">", start)
        end = len(self.html) if close < 0 else close + 1
        self.end_tags.append(TagSpan(tag, start, end, {}))
        if tag == "script" and self._open_scripts:
            # A script element spans up to and including its closing tag.
            self._open_scripts.pop().end = end


def parse_tags(html: str) -> _TagCollector:
    collector = _TagCollector(html)
    collector.feed(html)
    collector.close()
    return collector


def find_tags(html: str, name: str, predicate: Callable[[Attrs], bool]) -> List[TagSpan]:
    return [tag for tag in parse_tags(html).tags if tag.name == name and predicate(tag.attrs)]


def _start_with_leading_whitespace(html: str, start: int) -> int:
    while start > 0 and html[start - 1] in " \t\r\n":
        start -= 1
    return start


def remove_spans(html: str, spans: Iterable[TagSpan]) -> str:
    """Cut each span out of ``html`` together with the whitespace before it."""
    for span in sorted(spans, key=lambda s: s.start, reverse=True):
        start = _start_with_leading_whitespace(html, span.start)
        html = html[:start] + html[span.end:]
    return html


def remove_script_tags(html: str, srcs: Iterable[str]) -> str:
    wanted = set(srcs)
    return remove_spans(html, find_tags(html, "script", lambda attrs: attrs.get("src") in wanted))


def _is_stylesheet_link(attrs: Attrs, hrefs: set) -> bool:
    rel = (attrs.get("rel") or "").lower().split()
    return "stylesheet" in rel and attrs.get("href") in hrefs


def remove_stylesheet_links(html: str, hrefs: Iterable[str]) -> str:
    wanted = set(hrefs)
    return remove_spans(html, find_tags(html, "link", lambda attrs: _is_stylesheet_link(attrs, wanted)))


def indent_lines(text: str, prefix: str) -> str:
    return "\n".join(prefix + line if line.strip() else "" for line in text.splitlines())


def insert_before_head_close(html: str, css: str) -> str:
    """Insert a ``<style>`` block holding ``css`` right before ``</head>``."""
    closing = [tag for tag in parse_tags(html).end_tags if tag.name == "head"]
    if not closing:
        raise PlaceholderNotFoundError("</head>")
    start = closing[0].start
    line_start = html.rfind("\n", 0, start) + 1
    indent = html[line_start:start]
    if indent.strip():
        return html[:start] + f"<style>\n{indent_lines(css, '  ')}\n</style>" + html[start:]
    block = (
        f"{indent}  <style>\n"
        f"{indent_lines(css, indent + '    ')}\n"
        f"{indent}  </style>\n"
        "\n"
    )
    return html[:line_start] + block + html[line_start:]
