"""Tests for the command-line scripts under tools/."""

import importlib.util
import json
from pathlib import Path

import pytest

TOOLS = Path(__file__).resolve().parent.parent / "tools"


def load_tool(name):
    spec = importlib.util.spec_from_file_location(f"tool_{name}", TOOLS / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def project(tmp_path):
    (tmp_path / "index.html").write_text(
        "<html>\n<head></head>\n<body>\n<header class=\"top\"></header>\n<div class=\"hero\"></div>\n</body>\n</html>\n",
        encoding="utf-8",
    )
    (tmp_path / "style.css").write_text(
        ".top{a:1}\n.hero{b:1}\n.unused{c:1}\n"
        "@media (max-width:480px){.top{d:1}}\n@media screen and (max-width:480px){.hero{e:1}}\n",
        encoding="utf-8",
    )
    return tmp_path


class TestPruneUnusedCss:
    def test_rewrites_stylesheet(self, project, capsys):
        load_tool("prune_unused_css").main(["--root", str(project)])

        css = (project / "style.css").read_text(encoding="utf-8")
        assert ".unused" not in css
        assert ".top{a:1}" in css
        assert (project / "style.css.prune.bak").exists()
        report = json.loads((project / "unused_css_report.json").read_text(encoding="utf-8"))
        assert report["removed"] == 1
        assert report["rejectedSelectors"] == [".unused"]
        assert "[PRUNE-CSS]" in capsys.readouterr().out

    def test_combine_media_option(self, project):
        load_tool("prune_unused_css").main(["--root", str(project), "--combine-media"])

        css = (project / "style.css").read_text(encoding="utf-8")
        assert css.count("@media") == 1

    def test_dry_run_leaves_file(self, project):
        before = (project / "style.css").read_text(encoding="utf-8")
        load_tool("prune_unused_css").main(["--root", str(project), "--dry-run"])

        assert (project / "style.css").read_text(encoding="utf-8") == before
        assert (project / "unused_css_report.json").exists()

    def test_whitelist(self, project):
        (project / "keep.json").write_text(json.dumps({"classes": ["unused"]}), encoding="utf-8")
        load_tool("prune_unused_css").main(["--root", str(project), "--whitelist", str(project / "keep.json")])

        assert ".unused{c:1}" in (project / "style.css").read_text(encoding="utf-8")

    def test_missing_stylesheet(self, tmp_path):
        with pytest.raises(SystemExit):
            load_tool("prune_unused_css").main(["--root", str(tmp_path)])


class TestCombineMediaQueries:
    def test_merges(self, project, capsys):
        load_tool("combine_media_queries").main(["--root", str(project)])

        css = (project / "style.css").read_text(encoding="utf-8")
        assert css.count("@media") == 1
        assert (project / "style.css.media.bak").exists()
        assert "[MEDIA] merged 1 duplicate media blocks" in capsys.readouterr().out


class TestExtractCriticalCss:
    def test_writes_outputs(self, project):
        load_tool("extract_critical_css").main(["--root", str(project), "--inline"])

        critical = (project / "critical.css").read_text(encoding="utf-8")
        remaining = (project / "remaining.css").read_text(encoding="utf-8")
        assert ".top{a:1}" in critical and ".hero{b:1}" in critical
        assert ".unused{c:1}" in remaining
        report = json.loads((project / "critical_report.json").read_text(encoding="utf-8"))
        assert ".top" in report["selectors"]
        inlined = (project / "index-inlined.html").read_text(encoding="utf-8")
        assert "<style>" in inlined
