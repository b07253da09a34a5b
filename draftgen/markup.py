"""Minimal markdown renderer.

Block structure is handled by a small finite-state machine over physical
lines. Each line is classified once, and the ``(state, kind)`` pair selects
the handler from a transition table. Only headings, bullet lists, fenced
code, single-line quotes and paragraphs are recognized.

Inline spans are substituted in a fixed order: links, code spans, bold,
italic. Markup produced by the first two steps is shielded from the later
ones. A link written inside a code span is shown as literal anchor text.
"""

from __future__ import annotations

import enum
import html
import re

from .render import escape_attr

FENCE_RE = re.compile(r"^```")
BULLET_RE = re.compile(r"^\s*[-*+]\s+")
HEADING_RE = re.compile(r"^(#{1,6})\s+(.*)$")
QUOTE_RE = re.compile(r"^>\s?")

LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
CODE_SPAN_RE = re.compile(r"`([^`]+)`")
BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
ITALIC_RE = re.compile(r"\*([^*]+)\*")
PLACEHOLDER_RE = re.compile("\x00(\\d+)\x00")


class State(enum.Enum):
    NORMAL = "normal"
    IN_LIST = "in_list"
    IN_CODE_BLOCK = "in_code_block"


class LineKind(enum.Enum):
    FENCE = "fence"
    BULLET = "bullet"
    BLANK = "blank"
    HEADING = "heading"
    QUOTE = "quote"
    TEXT = "text"


def classify(line: str) -> LineKind:
    if FENCE_RE.match(line.strip()):
        return LineKind.FENCE
    if BULLET_RE.match(line):
        return LineKind.BULLET
    if not line.strip():
        return LineKind.BLANK
    if HEADING_RE.match(line):
        return LineKind.HEADING
    if QUOTE_RE.match(line):
        return LineKind.QUOTE
    return LineKind.TEXT


class InlineRenderer:
    def __init__(self, escape_html: bool = False):
        self.escape_html = escape_html

    def render(self, text: str) -> str:
        text = text.replace("\x00", "")
        if self.escape_html:
            text = html.escape(text, quote=False)
        shielded: list[str] = []

        def shield(markup: str) -> str:
            shielded.append(markup)
            return f"\x00{len(shielded) - 1}\x00"

        def link(match: re.Match) -> str:
            label, url = match.group(1), match.group(2)
            opening = shield(f'<a href="{escape_attr(self._raw(url))}">')
            return f"{opening}{label}{shield('</a>')}"

        def restore(value: str) -> str:
            return PLACEHOLDER_RE.sub(lambda m: shielded[int(m.group(1))], value)

        def code(match: re.Match) -> str:
            return shield(f"<code>{html.escape(restore(self._raw(match.group(1))))}</code>")

        text = LINK_RE.sub(link, text)
        text = CODE_SPAN_RE.sub(code, text)
        text = BOLD_RE.sub(r"<strong>\1</strong>", text)
        text = ITALIC_RE.sub(r"<em>\1</em>", text)
        return restore(text)

    def _raw(self, value: str) -> str:
        if self.escape_html:
            return html.unescape(value)
        return value


class MarkdownRenderer:
    def __init__(self, escape_html: bool = False):
        self.inline = InlineRenderer(escape_html=escape_html)
        self._transitions = {
            (State.IN_CODE_BLOCK, LineKind.FENCE): self._close_code,
            (State.NORMAL, LineKind.FENCE): self._open_code,
            (State.IN_LIST, LineKind.FENCE): self._open_code,
            (State.NORMAL, LineKind.BULLET): self._list_item,
            (State.IN_LIST, LineKind.BULLET): self._list_item,
            (State.NORMAL, LineKind.BLANK): self._close_blocks,
            (State.IN_LIST, LineKind.BLANK): self._close_blocks,
            (State.NORMAL, LineKind.HEADING): self._heading,
            (State.IN_LIST, LineKind.HEADING): self._heading,
            (State.NORMAL, LineKind.QUOTE): self._quote,
            (State.IN_LIST, LineKind.QUOTE): self._quote,
            (State.NORMAL, LineKind.TEXT): self._paragraph,
            (State.IN_LIST, LineKind.TEXT): self._paragraph,
        }
        for kind in LineKind:
            if kind is not LineKind.FENCE:
                self._transitions[(State.IN_CODE_BLOCK, kind)] = self._code_line
        self._reset()

    def render(self, body: str) -> str:
        self._reset()
        for line in body.replace("\r\n", "\n").split("\n"):
            kind = classify(line)
            self._transitions[(self.state, kind)](line)
        self._close_blocks()
        html_out = "\n".join(self.out)
        self._reset()
        return html_out

    def _reset(self) -> None:
        self.state = State.NORMAL
        self.out: list[str] = []
        self.code_lines: list[str] = []

    def _close_blocks(self, line: str = "") -> None:
        if self.state is State.IN_LIST:
            self.out.append("</ul>")
        elif self.state is State.IN_CODE_BLOCK:
            self._flush_code()
        self.state = State.NORMAL

    def _flush_code(self) -> None:
        code = html.escape("\n".join(self.code_lines))
        self.out.append(f"<pre><code>{code}</code></pre>")
        self.code_lines = []

    def _open_code(self, line: str) -> None:
        self._close_blocks()
        self.state = State.IN_CODE_BLOCK

    def _close_code(self, line: str) -> None:
        self._close_blocks()

    def _code_line(self, line: str) -> None:
        self.code_lines.append(line)

    def _list_item(self, line: str) -> None:
        if self.state is not State.IN_LIST:
            self._close_blocks()
            self.out.append("<ul>")
            self.state = State.IN_LIST
        self.out.append(f"<li>{self.inline.render(BULLET_RE.sub('', line, count=1))}</li>")

    def _heading(self, line: str) -> None:
        self._close_blocks()
        match = HEADING_RE.match(line)
        level = len(match.group(1))
        self.out.append(f"<h{level}>{self.inline.render(match.group(2).strip())}</h{level}>")

    def _quote(self, line: str) -> None:
        self._close_blocks()
        text = QUOTE_RE.sub("", line, count=1).strip()
        self.out.append(f"<blockquote>{self.inline.render(text)}</blockquote>")

    def _paragraph(self, line: str) -> None:
        self._close_blocks()
        self.out.append(f"<p>{self.inline.render(line.strip())}</p>")


def render_markdown(body: str, escape_html: bool = False) -> str:
    return MarkdownRenderer(escape_html=escape_html).render(body)
