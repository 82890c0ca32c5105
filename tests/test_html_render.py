"""Tests for the HTML to styled lines renderer"""
import pytest

from azdo_branches.formatters.html import (
    ANCHOR_STYLE,
    CODE_STYLE,
    IMAGE_STYLE,
    REFERENCE_STYLE,
    StyledLine,
    StyledSpan,
    decode_html_entities,
    extract_work_item_id,
    render_html,
)


def plain_lines(html, width=80):
    return [line.plain for line in render_html(html, width)]


class TestBasicRendering:
    """Test inline styles and paragraphs."""

    def test_paragraph_with_bold(self):
        lines = render_html("<p>Hello <b>world</b></p>", 80)

        assert len(lines) == 1
        assert lines[0].plain == "Hello world"
        assert any(span.style.bold for span in lines[0].spans)
        assert lines[0].spans[0].style.bold is not True

    def test_empty_input(self):
        assert render_html("", 80) == []
        assert render_html("   \n  ", 80) == []

    def test_plain_text_without_tags(self):
        assert plain_lines("just text") == ["just text"]

    def test_whitespace_is_normalized(self):
        assert plain_lines("<p>a   b\n\tc</p>") == ["a b c"]

    def test_strong_underline_strike(self):
        lines = render_html("<strong>s</strong><u>u</u><del>d</del>", 80)
        styles = {span.text: span.style for span in lines[0].spans}
        assert styles["s"].bold is True
        assert styles["u"].underline is True
        assert styles["d"].strike is True

    def test_nested_styles_combine(self):
        lines = render_html("<b>bold <u>both</u></b>", 80)
        both = [span for span in lines[0].spans if span.text == "both"][0]
        assert both.style.bold is True
        assert both.style.underline is True

    def test_unmatched_close_tag_is_ignored(self):
        lines = render_html("</b>plain <b>bold</b>", 80)
        assert lines[0].plain == "plain bold"
        assert lines[0].spans[0].style.bold is not True

    def test_unknown_tags_are_noops(self):
        assert plain_lines("<span class='x'>a</span><custom>b</custom>") == ["ab"]

    def test_comments_are_skipped(self):
        assert plain_lines("a<!-- <b>hidden</b> -->b") == ["ab"]

    def test_unterminated_tag_drops_rest(self):
        assert plain_lines("text <b") == ["text"]

    def test_deterministic(self):
        html = "<h2>T</h2><ul><li>a <b>b</b></li></ul><pre>x\n y</pre>"
        assert render_html(html, 30) == render_html(html, 30)


class TestEntities:
    """Test HTML entity decoding."""

    def test_nbsp_and_amp(self):
        assert plain_lines("Hello&nbsp;&amp;&nbsp;world") == ["Hello & world"]

    def test_supported_entities(self):
        assert decode_html_entities("&lt;a&gt; &quot;q&quot; &#39;s&apos; &#x27;") == "<a> \"q\" 's' '"
        assert decode_html_entities("&mdash;&ndash;&hellip;&bull;") == "—–…•"
        assert decode_html_entities("&copy;&reg;&trade;") == "©®™"

    def test_unknown_entity_passes_through(self):
        assert decode_html_entities("&unknown; &lt;") == "&unknown; <"

    def test_single_pass(self):
        """Decoded output is not decoded again."""
        assert decode_html_entities("&amp;lt;") == "&lt;"


class TestLists:
    """Test ordered, unordered and nested lists."""

    def test_unordered_list(self):
        assert plain_lines("<ul><li>Item 1</li><li>Item 2</li></ul>") == ["• Item 1", "• Item 2"]

    def test_ordered_list(self):
        assert plain_lines("<ol><li>a</li><li>b</li><li>c</li></ol>") == ["1. a", "2. b", "3. c"]

    def test_nested_list_is_indented(self):
        html = "<ul><li>Outer<ul><li>Inner</li></ul></li><li>Next</li></ul>"
        assert plain_lines(html) == ["• Outer", "  • Inner", "• Next"]

    def test_ordered_counters_are_per_list(self):
        html = "<ol><li>a</li></ol><ol><li>b</li></ol>"
        assert plain_lines(html) == ["1. a", "1. b"]

    def test_list_item_outside_list(self):
        assert plain_lines("<li>orphan</li>") == ["• orphan"]

    def test_whitespace_after_bullet_is_dropped(self):
        assert plain_lines("<ul><li>\n  Item one</li></ul>") == ["• Item one"]

    def test_bullet_stays_with_its_text_when_narrow(self):
        lines = render_html("<ul><li>Item</li></ul>", 4)

        assert [line.plain for line in lines] == ["• It", "em"]


class TestBlocks:
    """Test line breaking tags."""

    def test_br_breaks_line(self):
        assert plain_lines("a<br>b") == ["a", "b"]

    def test_double_br_gives_one_blank(self):
        assert plain_lines("a<br><br>b") == ["a", "", "b"]
        assert plain_lines("a<br><br><br><br>b") == ["a", "", "b"]

    def test_no_leading_or_trailing_blank_lines(self):
        assert plain_lines("<br><br>a<br><br><br>") == ["a"]

    def test_divs_break_lines(self):
        assert plain_lines("<div>one</div><div>two</div>") == ["one", "two"]

    def test_whitespace_between_blocks_is_dropped(self):
        assert plain_lines("<div>one</div>\n   <div>two</div>") == ["one", "two"]

    def test_heading_gets_blank_separator(self):
        lines = render_html("<p>Intro</p><h2>Title</h2><p>Body</p>", 80)

        assert [line.plain for line in lines] == ["Intro", "", "Title", "Body"]
        assert lines[2].spans[0].style.bold is True

    def test_heading_at_start_has_no_separator(self):
        assert plain_lines("<h1>Top</h1>text") == ["Top", "text"]

    def test_table_rows_and_cells(self):
        html = "<table><tr><td>a</td><td>b</td></tr><tr><th>c</th><th>d</th></tr></table>"
        assert plain_lines(html) == ["a | b", "c | d"]

    def test_whitespace_between_cells_is_dropped(self):
        html = "<table>\n<tr>\n<td>a</td>\n<td>b</td>\n</tr>\n</table>"
        assert plain_lines(html) == ["a | b"]

    def test_empty_leading_cell_keeps_separator(self):
        assert plain_lines("<table><tr><td></td><td>b</td></tr></table>") == ["| b"]


class TestSpecialElements:
    """Test anchors, code, pre and images."""

    def test_anchor_with_work_item_reference(self):
        html = '<a href="https://dev.azure.com/org/proj/_workitems/edit/456">the bug</a>'
        lines = render_html(html, 80)

        assert lines[0].plain == "the bug #456"
        assert lines[0].spans[0].style.color == ANCHOR_STYLE.color

    def test_anchor_text_already_showing_id(self):
        html = "<a href='https://dev.azure.com/org/_apis/wit/workItems/456'>#456</a>"
        assert plain_lines(html) == ["#456"]

    def test_plain_anchor(self):
        assert plain_lines('<a href="https://example.com">docs</a>') == ["docs"]

    @pytest.mark.parametrize("href,expected", [
        ("https://dev.azure.com/org/proj/_workitems/edit/12", 12),
        ("https://dev.azure.com/org/_apis/wit/WorkItems/34", 34),
        ("https://example.com/items/56", None),
        ("https://dev.azure.com/org/proj/_workitems/edit/0", None),
    ])
    def test_extract_work_item_id(self, href, expected):
        assert extract_work_item_id(href) == expected

    def test_code_is_yellow(self):
        lines = render_html("run <code>make test</code> now", 80)
        code = [span for span in lines[0].spans if span.text == "make test"][0]
        assert code.style.color == CODE_STYLE.color

    def test_pre_keeps_whitespace_and_newlines(self):
        lines = render_html("<pre>line1\n  indented   text</pre>", 80)

        assert [line.plain for line in lines] == ["line1", "  indented   text"]
        assert all(span.style.color == CODE_STYLE.color for span in lines[0].spans)

    def test_pre_is_not_wrapped(self):
        lines = render_html("<pre>a very long preformatted line</pre>", 10)
        assert [line.plain for line in lines] == ["a very long preformatted line"]

    def test_image_placeholder(self):
        lines = render_html("see <img src='x.png'/> here", 80)

        assert lines[0].plain == "see [image] here"
        image = [span for span in lines[0].spans if span.text == "[image]"][0]
        assert image.style == IMAGE_STYLE


class TestWrapping:
    """Test word wrapping."""

    def test_lines_never_exceed_width(self):
        lines = render_html("<p>" + "word " * 20 + "</p>", 20)

        assert len(lines) > 1
        assert all(line.width <= 20 for line in lines)
        assert " ".join(line.plain for line in lines) == " ".join(["word"] * 20)

    def test_long_word_is_split(self):
        lines = render_html("a" * 50, 20)
        assert [line.plain for line in lines] == ["a" * 20, "a" * 20, "a" * 10]

    def test_zero_width_disables_wrapping(self):
        text = "word " * 50
        lines = render_html(text, 0)
        assert len(lines) == 1
        assert lines[0].plain == text.strip()

    def test_nested_list_wraps_within_indent(self):
        html = "<ul><li>x<ul><li>" + "alpha " * 10 + "</li></ul></li></ul>"
        lines = render_html(html, 20)

        assert all(line.width <= 20 for line in lines)
        assert all(line.plain.startswith("  ") for line in lines[1:])

    def test_work_item_reference_wraps_at_right_edge(self):
        html = 'aaaaaaa <a href="https://x/_workitems/edit/123456">link</a>'
        lines = render_html(html, 12)

        assert [line.plain for line in lines] == ["aaaaaaa link", "#123456"]
        assert lines[1].spans[0].style == REFERENCE_STYLE
        assert all(line.width <= 12 for line in lines)

    def test_image_wraps_at_right_edge(self):
        lines = render_html("abcdefgh <img src='x.png'>", 12)
        assert [line.plain for line in lines] == ["abcdefgh", "[image]"]

    def test_wide_characters_count_as_two_cells(self):
        lines = render_html("漢字漢字漢字", 4)
        assert [line.plain for line in lines] == ["漢字", "漢字", "漢字"]

    @pytest.mark.parametrize("html", [
        "<p>a</p><br><br><h1>b</h1><br><h2>c</h2><div><br></div><p>d</p>",
        "<br><h1>x</h1><pre>\n\n\ny</pre><br><br>",
        "<ul><li></li><li></li></ul><p>  </p>z",
    ])
    def test_blank_line_invariants(self, html):
        lines = render_html(html, 15)

        assert lines, "expected content"
        assert not lines[0].is_blank()
        assert not lines[-1].is_blank()
        for previous, current in zip(lines, lines[1:]):
            assert not (previous.is_blank() and current.is_blank())


class TestStyledLine:
    """Test the line value type."""

    def test_to_text_keeps_styles(self):
        line = StyledLine([StyledSpan("a"), StyledSpan("b", ANCHOR_STYLE)])
        text = line.to_text()

        assert text.plain == "ab"
        assert len(text.spans) == 1
        assert text.spans[0].start == 1

    def test_blank_line(self):
        assert StyledLine().is_blank()
        assert StyledLine().plain == ""
