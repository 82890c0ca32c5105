"""HTML to styled lines.

Work item rich-text fields (Description, Acceptance Criteria, Repro Steps...)
arrive as HTML. ``render_html`` turns them into word-wrapped lines of styled
spans that the details pane can draw directly. It is not an HTML parser: it
scans the markup once, front to back, and understands just enough tags to keep
the structure readable in a terminal.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from rich.cells import cell_len
from rich.style import Style
from rich.text import Text

BOLD = Style(bold=True)
UNDERLINE = Style(underline=True)
STRIKE = Style(strike=True)
ANCHOR_STYLE = Style(color="cyan")
CODE_STYLE = Style(color="yellow")
IMAGE_STYLE = Style(color="bright_black")
REFERENCE_STYLE = Style(color="cyan", bold=True)

BULLET = "• "
CELL_SEPARATOR = " | "
INDENT_STEP = "  "

HTML_ENTITIES = {
    "&nbsp;": " ",
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&#x27;": "'",
    "&mdash;": "—",
    "&ndash;": "–",
    "&hellip;": "…",
    "&bull;": "•",
    "&copy;": "©",
    "&reg;": "®",
    "&trade;": "™",
}

_ENTITY_RE = re.compile(r"&#?[A-Za-z0-9]+;")
_WHITESPACE_RE = re.compile(r"\s+")
_TOKEN_RE = re.compile(r"\S+\s*|\s+")
_HREF_RE = re.compile(r"""href\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s>]+))""", re.IGNORECASE)
_WORK_ITEM_HREF_RE = re.compile(r"workitems/(?:edit/)?(\d+)", re.IGNORECASE)

# Inline tags that push a style, keyed to the group their close tag pops
_INLINE_STYLES = {
    "b": ("bold", BOLD),
    "strong": ("bold", BOLD),
    "u": ("underline", UNDERLINE),
    "s": ("strike", STRIKE),
    "strike": ("strike", STRIKE),
    "del": ("strike", STRIKE),
}
_HEADINGS = {"h1", "h2", "h3"}
_BLOCKS = {"p", "div", "h4", "h5", "h6"}


def decode_html_entities(text: str) -> str:
    """Decode the supported entities in one pass; unknown ones are left as-is."""
    return _ENTITY_RE.sub(lambda match: HTML_ENTITIES.get(match.group(0), match.group(0)), text)


def normalize_whitespace(text: str) -> str:
    """Collapse every whitespace run to a single space."""
    return _WHITESPACE_RE.sub(" ", text)


def extract_work_item_id(href: str) -> Optional[int]:
    """Pull the work item id out of ``.../workitems/edit/<id>`` or ``.../workitems/<id>``."""
    match = _WORK_ITEM_HREF_RE.search(href)
    if not match:
        return None
    value = int(match.group(1))
    return value if value > 0 else None


@dataclass(frozen=True)
class StyledSpan:
    text: str
    style: Style = field(default_factory=Style)


@dataclass
class StyledLine:
    spans: List[StyledSpan] = field(default_factory=list)

    @property
    def plain(self) -> str:
        return "".join(span.text for span in self.spans)

    @property
    def width(self) -> int:
        """Width in terminal cells."""
        return cell_len(self.plain)

    def is_blank(self) -> bool:
        return not self.plain.strip()

    def to_text(self) -> Text:
        return Text.assemble(*((span.text, span.style) for span in self.spans))


@dataclass
class _ListContext:
    ordered: bool
    counter: int = 0

    def next_prefix(self) -> str:
        if not self.ordered:
            return BULLET
        self.counter += 1
        return f"{self.counter}. "


@dataclass
class _Anchor:
    work_item_id: Optional[int]
    text: str = ""


class _HtmlRenderer:
    """Single-use renderer; holds the state carried across the document."""

    def __init__(self, max_width: int):
        self.max_width = max_width
        self.style_stack: List[Tuple[str, Style]] = []
        self.list_stack: List[_ListContext] = []
        self.lines: List[StyledLine] = []
        self.spans: List[StyledSpan] = []
        self.pending_text = ""
        self.line_width = 0
        # Width of a list prefix that opens the current line
        self.line_start_width = 0
        self.after_prefix = False
        self.cell_index = 0
        self.last_was_blank = False
        self.anchor: Optional[_Anchor] = None
        self.code_depth = 0
        self.pre_depth = 0
        self.indent = ""

    # -- output ------------------------------------------------------------

    def _style(self) -> Style:
        style = Style()
        for _, pushed in self.style_stack:
            style += pushed
        if self.anchor is not None:
            style += ANCHOR_STYLE
        if self.code_depth or self.pre_depth:
            style += CODE_STYLE
        return style

    def _has_content(self) -> bool:
        return bool(self.spans or self.pending_text)

    def _flush_text(self) -> None:
        if self.pending_text:
            self.spans.append(StyledSpan(self.pending_text, self._style()))
            self.pending_text = ""

    def _emit_blank(self) -> None:
        # Never before the first line, never twice in a row
        if self.lines and not self.last_was_blank:
            self.lines.append(StyledLine())
            self.last_was_blank = True

    def _trim_trailing_whitespace(self) -> None:
        self._flush_text()
        while not self.pre_depth and self.spans:
            last = self.spans[-1]
            trimmed = last.text.rstrip()
            if trimmed == last.text:
                break
            self.line_width -= cell_len(last.text) - cell_len(trimmed)
            if trimmed:
                self.spans[-1] = StyledSpan(trimmed, last.style)
                break
            self.spans.pop()

    def _flush_line(self, keep_blank: bool = False) -> None:
        """End the current line. An empty line is only emitted when ``keep_blank``."""
        self._trim_trailing_whitespace()

        spans, self.spans = self.spans, []
        self.line_width = 0
        self.line_start_width = 0
        self.after_prefix = False

        if not spans or all(not span.text.strip() for span in spans):
            if spans or keep_blank:
                self._emit_blank()
            return

        if self.indent:
            spans.insert(0, StyledSpan(self.indent))
        self.lines.append(StyledLine(spans))
        self.last_was_blank = False

    def _available_width(self) -> Optional[int]:
        if self.max_width <= 0:
            return None
        return max(1, self.max_width - cell_len(self.indent))

    def _append(self, text: str) -> None:
        self.pending_text += text
        self.line_width += cell_len(text)
        self.after_prefix = False
        if self.anchor is not None:
            self.anchor.text += text

    def _append_span(self, span: StyledSpan) -> None:
        self._flush_text()
        self.spans.append(span)
        self.line_width += cell_len(span.text)

    def _append_unit(self, span: StyledSpan) -> None:
        """Append a span that wraps like a single word."""
        available = self._available_width()
        text = span.text
        if self.line_width == 0:
            text = text.lstrip()
        elif available is not None and self.line_width > self.line_start_width \
                and self.line_width + cell_len(text.rstrip()) > available:
            self._flush_line()
            text = text.lstrip()

        while available is not None and cell_len(text) > available - self.line_width:
            room = available - self.line_width
            if room <= 0:
                self._flush_line()
                continue
            head, text = _split_cells(text, room)
            self._append_span(StyledSpan(head, span.style))
            self._flush_line()

        if text:
            self._append_span(StyledSpan(text, span.style))
        self.after_prefix = False

    # -- text --------------------------------------------------------------

    def _add_text(self, raw: str) -> None:
        if self.pre_depth:
            self._add_preformatted(raw)
            return

        text = decode_html_entities(normalize_whitespace(raw))
        if not self._has_content() or self.after_prefix:
            text = text.lstrip()
        for token in _TOKEN_RE.findall(text):
            self._add_word(token)

    def _add_word(self, word: str) -> None:
        available = self._available_width()
        if available is None:
            self._append(word)
            return

        visible = word.rstrip()
        if self.line_width > self.line_start_width and self.line_width + cell_len(visible) > available:
            self._flush_line()
            word = word.lstrip()
            visible = word.rstrip()
            if not visible:
                return

        # A word wider than a whole line is split so no line overflows
        while cell_len(visible) > available - self.line_width:
            room = available - self.line_width
            if room <= 0:
                self._flush_line()
                continue
            head, word = _split_cells(word, room)
            self._append(head)
            self._flush_line()
            visible = word.rstrip()
            if not visible:
                return

        self._append(word)

    def _add_preformatted(self, raw: str) -> None:
        text = decode_html_entities(raw.replace("\r\n", "\n"))
        for index, part in enumerate(text.split("\n")):
            if index:
                self._flush_line(keep_blank=True)
            if part:
                self._append(part)

    # -- tags --------------------------------------------------------------

    def _pop_style(self, group: str) -> None:
        for index in range(len(self.style_stack) - 1, -1, -1):
            if self.style_stack[index][0] == group:
                del self.style_stack[index]
                return
        # Unbalanced close tag: nothing to pop

    def _update_indent(self) -> None:
        self.indent = INDENT_STEP * max(0, len(self.list_stack) - 1)

    def _open_tag(self, name: str, attributes: str) -> None:
        if name in _INLINE_STYLES:
            self._flush_text()
            self.style_stack.append(_INLINE_STYLES[name])
        elif name == "br":
            self._flush_line(keep_blank=True)
        elif name in _BLOCKS:
            if self._has_content():
                self._flush_line()
        elif name in _HEADINGS:
            self._flush_line()
            self._emit_blank()
            self.style_stack.append(("heading", BOLD))
        elif name == "a":
            self._flush_text()
            self.anchor = _Anchor(_anchor_work_item_id(attributes))
        elif name in ("ul", "ol"):
            self._flush_line()
            self.list_stack.append(_ListContext(ordered=name == "ol"))
            self._update_indent()
        elif name == "li":
            self._flush_line()
            context = self.list_stack[-1] if self.list_stack else _ListContext(ordered=False)
            self._append_span(StyledSpan(context.next_prefix()))
            self.line_start_width = self.line_width
            self.after_prefix = True
        elif name == "img":
            self._append_unit(StyledSpan("[image]", IMAGE_STYLE))
        elif name in ("table", "tbody", "tr"):
            self._flush_line()
            self.cell_index = 0
        elif name in ("td", "th"):
            if self.cell_index:
                self._trim_trailing_whitespace()
                self._add_text(CELL_SEPARATOR)
            self.cell_index += 1
        elif name == "code":
            self._flush_text()
            self.code_depth += 1
        elif name == "pre":
            self._flush_line()
            self.pre_depth += 1

    def _close_tag(self, name: str) -> None:
        if name in _INLINE_STYLES:
            self._flush_text()
            self._pop_style(_INLINE_STYLES[name][0])
        elif name in _BLOCKS:
            self._flush_line()
        elif name in _HEADINGS:
            self._flush_text()
            self._pop_style("heading")
            self._flush_line()
        elif name == "a":
            self._close_anchor()
        elif name in ("ul", "ol"):
            self._flush_line()
            if self.list_stack:
                self.list_stack.pop()
            self._update_indent()
        elif name in ("tr", "table"):
            self._flush_line()
            self.cell_index = 0
        elif name == "code":
            self._flush_text()
            self.code_depth = max(0, self.code_depth - 1)
        elif name == "pre":
            if self.pre_depth:
                self._flush_line()
                self.pre_depth -= 1

    def _close_anchor(self) -> None:
        if self.anchor is None:
            return
        self._flush_text()
        anchor, self.anchor = self.anchor, None
        if anchor.work_item_id is not None:
            reference = f"#{anchor.work_item_id}"
            if reference not in anchor.text:
                self._append_unit(StyledSpan(f" {reference}", REFERENCE_STYLE))

    def _process_tag(self, content: str) -> None:
        content = content.strip()
        if not content or content[0] in "!?":
            return

        closing = content.startswith("/")
        if closing:
            content = content[1:].lstrip()
        if content.endswith("/"):
            content = content[:-1]

        parts = content.split(None, 1)
        if not parts:
            return
        name = parts[0].lower()
        attributes = parts[1] if len(parts) > 1 else ""

        if closing:
            self._close_tag(name)
        else:
            self._open_tag(name, attributes)

    # -- driver ------------------------------------------------------------

    def render(self, html: str) -> List[StyledLine]:
        position = 0
        length = len(html)

        while position < length:
            if html.startswith("<!--", position):
                end = html.find("-->", position + 4)
                position = length if end == -1 else end + 3
            elif html[position] == "<":
                end = html.find(">", position + 1)
                if end == -1:
                    # Unterminated tag swallows the rest of the input
                    break
                self._process_tag(html[position + 1:end])
                position = end + 1
            else:
                end = html.find("<", position)
                if end == -1:
                    end = length
                self._add_text(html[position:end])
                position = end

        self._flush_line()
        while self.lines and not self.lines[-1].spans:
            self.lines.pop()
        return self.lines


def _anchor_work_item_id(attributes: str) -> Optional[int]:
    match = _HREF_RE.search(attributes)
    if not match:
        return None
    href = decode_html_entities(next(group for group in match.groups() if group is not None))
    return extract_work_item_id(href)


def _split_cells(text: str, width: int) -> Tuple[str, str]:
    """Split ``text`` so the head fits in ``width`` cells (at least one character)."""
    used = 0
    for index, char in enumerate(text):
        char_width = cell_len(char)
        if used + char_width > width and index > 0:
            return text[:index], text[index:]
        used += char_width
    return text, ""


def render_html(html: str, max_width: int) -> List[StyledLine]:
    """
    Render HTML to styled, word-wrapped lines.

    Args:
        html: HTML fragment (a work item field value)
        max_width: Wrap width in terminal cells; 0 disables wrapping

    Returns:
        List of StyledLine, no leading or trailing blank lines and never two blank lines in a row
    """
    return _HtmlRenderer(max_width).render(html)
