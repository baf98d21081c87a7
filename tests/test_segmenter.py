"""Tests for splitting CSS into blocks."""

from stylesweep.blocks import AtRuleType, serialize_blocks
from stylesweep.segmenter import segment_css, segment_inner


class TestSegmentCss:
    def test_simple_rules(self):
        """Each top-level rule becomes one block in source order."""
        blocks = segment_css(".a{color:red} .b{color:blue}")

        assert [b.selectors_text for b in blocks] == [".a", ".b"]
        assert [b.source_order for b in blocks] == [0, 1]
        assert blocks[0].body == "{color:red}"
        assert blocks[0].at_rule_type is AtRuleType.NONE

    def test_sources_reproduce_input(self):
        """Concatenating block sources gives back the input."""
        css = "/* head */\n@import url('x.css');\n.a, .b { color: red }\n@media (max-width:480px) {\n  .c { x: 1 }\n}"
        blocks = segment_css(css)

        assert "".join(b.source for b in blocks) == css

    def test_nested_rules_stay_in_one_block(self):
        """Rules inside @media are part of the at-rule body."""
        blocks = segment_css("@media (max-width:480px){.a{x:1}.b{y:2}} .c{z:3}")

        assert len(blocks) == 2
        media = blocks[0]
        assert media.at_rule_type is AtRuleType.MEDIA
        assert media.at_keyword == "media"
        assert media.prelude == "(max-width:480px)"
        assert media.selectors_text == ""
        assert ".a{x:1}" in media.body and ".b{y:2}" in media.body

    def test_inner_rules_on_demand(self):
        """segment_inner splits a container body into its own blocks."""
        media = segment_css("@media print{.a{x:1} .b{y:2}}")[0]

        assert [b.selectors_text for b in segment_inner(media)] == [".a", ".b"]

    def test_comments_preserved_as_passthrough(self):
        """Top-level comments become non-rule blocks by default."""
        blocks = segment_css("/* hi */ .a{}")

        assert blocks[0].is_non_rule
        assert blocks[0].body == "/* hi */"
        assert blocks[1].selectors_text == ".a"

    def test_comments_stripped_when_configured(self):
        """preserve_comments=False removes comments before scanning."""
        blocks = segment_css("/* hi */ .a{ /* inner */ }", preserve_comments=False)

        assert len(blocks) == 1
        assert "inner" not in blocks[0].body

    def test_comment_inside_selector_is_ignored(self):
        """Comments inside a prelude do not end up in the selector text."""
        blocks = segment_css(".a /* note */, .b{x:1}")

        assert blocks[0].selectors_text == ".a , .b"

    def test_statement_at_rule(self):
        """@import ends at the semicolon and is a passthrough block."""
        blocks = segment_css('@import url("x.css");\n.a{}')

        assert blocks[0].is_non_rule
        assert blocks[0].body == '@import url("x.css");'
        assert blocks[1].selectors_text == ".a"

    def test_unbalanced_braces_flagged_malformed(self):
        """An unterminated block is closed at end of input and flagged."""
        blocks = segment_css(".a{color:red} .b{color:blue")

        assert len(blocks) == 2
        assert not blocks[0].malformed
        assert blocks[1].malformed
        assert blocks[1].source.endswith("color:blue")

    def test_nested_unbalanced_braces(self):
        """Depth above one at end of input is still a single malformed block."""
        blocks = segment_css("@media screen{.a{x:1}")

        assert len(blocks) == 1
        assert blocks[0].malformed
        assert blocks[0].at_rule_type is AtRuleType.MEDIA

    def test_braces_inside_strings(self):
        """Braces inside quoted strings do not change the depth."""
        blocks = segment_css('.a::before{content:"}"} .b[title="{"]{x:1}')

        assert [b.selectors_text for b in blocks] == [".a::before", '.b[title="{"]']
        assert blocks[0].body == '{content:"}"}'

    def test_escaped_quotes_in_selector(self):
        """Backslash-escaped quotes do not open a string; the next at-rule keeps its type."""
        css = ".c-\\[\\'x\\'\\]{content:'x'}\n@media print{.a{x:1}}\n@media print{.b{x:1}}"
        blocks = segment_css(css)

        assert len(blocks) == 3
        assert blocks[0].selectors_text == ".c-\\[\\'x\\'\\]"
        assert blocks[0].body == "{content:'x'}"
        assert [b.at_rule_type for b in blocks[1:]] == [AtRuleType.MEDIA, AtRuleType.MEDIA]

    def test_escaped_brace_in_selector(self):
        blocks = segment_css(".a\\{b{x:1} .c{y:2}")

        assert [b.selectors_text for b in blocks] == [".a\\{b", ".c"]

    def test_comment_marker_inside_string_when_stripping(self):
        """A `/*` inside a quoted value is text, not the start of a comment."""
        css = '.a::before{content:"/*"}\n.used{x:1}\n/* end */'
        blocks = segment_css(css, preserve_comments=False)

        assert [b.selectors_text for b in blocks] == [".a::before", ".used"]
        assert blocks[0].body == '{content:"/*"}'

    def test_comment_marker_inside_attribute_selector(self):
        blocks = segment_css('.a[title="/*"] /* note */ {x:1} .b{y:2}')

        assert [b.selectors_text for b in blocks] == ['.a[title="/*"]', ".b"]

    def test_stray_close_brace(self):
        """A stray closing brace is kept as passthrough text."""
        blocks = segment_css("} .a{}")

        assert blocks[0].is_non_rule
        assert blocks[0].body == "}"
        assert blocks[1].selectors_text == ".a"

    def test_trailing_text_without_body(self):
        """Prelude text that never opens a block is passthrough."""
        blocks = segment_css(".a{} .dangling")

        assert blocks[1].is_non_rule
        assert blocks[1].body == ".dangling"

    def test_at_rule_types(self):
        """At-rule type comes from the keyword, vendor prefix ignored."""
        css = (
            "@-webkit-keyframes spin{from{}to{}}"
            "@font-face{font-family:x}"
            "@supports (display:grid){.g{}}"
            "@page{margin:1cm}"
        )
        kinds = [b.at_rule_type for b in segment_css(css)]

        assert kinds == [AtRuleType.KEYFRAMES, AtRuleType.FONT_FACE, AtRuleType.SUPPORTS, AtRuleType.OTHER]

    def test_media_without_space(self):
        """@media(...) without a space still splits keyword and prelude."""
        block = segment_css("@media(max-width:1px){.a{}}")[0]

        assert block.at_keyword == "media"
        assert block.prelude == "(max-width:1px)"

    def test_empty_and_non_string_input(self):
        """Empty or non-string input gives no blocks."""
        assert segment_css("") == []
        assert segment_css(None) == []
        assert segment_css("   \n  ") == []


class TestSerializeBlocks:
    def test_joins_block_text(self):
        """Blocks serialize one per line with surrounding whitespace trimmed."""
        blocks = segment_css("  .a{x:1}\n\n   .b{y:2}  ")

        assert serialize_blocks(blocks) == ".a{x:1}\n.b{y:2}"
