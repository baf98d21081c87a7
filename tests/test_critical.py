"""Tests for above-the-fold scanning and critical selector generation."""

from stylesweep.critical import (AboveFoldElement, critical_usage, generate_critical_selectors,
                                 inline_critical_css, scan_above_fold)


PAGE = """<html>
<head><title>x</title></head>
<body>
<header class="top" id="site"></header>
<div class="hero lead"></div>
<p>far below</p>
</body>
</html>
"""


class TestScanAboveFold:
    def test_elements_within_window(self):
        """Only elements starting within the line window after <body> are taken."""
        elements = scan_above_fold(PAGE, line_window=2)

        assert [e.tag for e in elements] == ["header", "div"]
        assert elements[0].classes == ("top",)
        assert elements[0].id == "site"
        assert elements[1].classes == ("hero", "lead")
        assert elements[1].id is None

    def test_default_window_takes_whole_short_page(self):
        assert [e.tag for e in scan_above_fold(PAGE)] == ["header", "div", "p"]

    def test_no_body(self):
        assert scan_above_fold('<div class="a"></div>') == []
        assert scan_above_fold("") == []
        assert scan_above_fold(None) == []


class TestGenerateCriticalSelectors:
    def test_compounds_only_within_one_element(self):
        """Tag and class of different elements are never combined."""
        elements = [AboveFoldElement("header"), AboveFoldElement("div", ("hero",))]
        selectors = generate_critical_selectors(elements, seed=["html", "body"])

        assert {"html", "body", "header", ".hero", "div", "div.hero"} <= set(selectors)
        assert "header.hero" not in selectors

    def test_id_compounds(self):
        selectors = generate_critical_selectors([AboveFoldElement("nav", ("menu",), "main-nav")], seed=[])

        assert selectors[:5] == ["nav", ".menu", "#main-nav", "nav.menu", "#main-nav.menu"]

    def test_interactive_variants_follow(self):
        selectors = generate_critical_selectors([], seed=["a"], max_selectors=10)

        assert selectors == ["a", "a:hover", "a:focus", "a:active"]

    def test_cap(self):
        """The list never grows past max_selectors."""
        elements = [AboveFoldElement("header"), AboveFoldElement("div", ("hero",))]
        selectors = generate_critical_selectors(elements, seed=["html", "body"], max_selectors=3)

        assert selectors == ["html", "body", "header"]

    def test_duplicates_removed(self):
        elements = [AboveFoldElement("div", ("card",)), AboveFoldElement("div", ("card",))]
        selectors = generate_critical_selectors(elements, seed=[])

        assert len(selectors) == len(set(selectors))

    def test_critical_usage_holds_raw_selectors(self):
        usage = critical_usage([AboveFoldElement("div", ("hero",))], seed=["body"])

        assert {"body", "div", ".hero", "div.hero"} <= usage.raw_tokens
        assert usage.classes == set()


class TestInlineCriticalCss:
    def test_before_head_close(self):
        html = "<html><head><title>t</title></head><body></body></html>"
        out = inline_critical_css(html, ".a{x:1}")

        assert "<style>\n.a{x:1}\n</style>\n</head>" in out
        assert out.index("<title>") < out.index("<style>")

    def test_without_head(self):
        out = inline_critical_css("<p>x</p>", ".a{x:1}")

        assert out.startswith("<head>")
        assert out.endswith("<p>x</p>")
