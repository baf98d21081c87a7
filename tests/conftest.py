"""Shared fixtures for the stylesweep tests."""

import pytest

from stylesweep import UsageSet


@pytest.fixture
def empty_usage():
    return UsageSet()


@pytest.fixture(autouse=True)
def clean_css_env(monkeypatch):
    """Keep CSS_* settings from the developer's shell out of the tests."""
    for name in (
        "CSS_SAFELIST",
        "CSS_BLOCKLIST",
        "CSS_WHITELIST_FILE",
        "CSS_PRESERVE_VARIABLES",
        "CSS_PRESERVE_KEYFRAMES",
        "CSS_PRESERVE_FONT_FACE",
        "CSS_PRESERVE_INTERACTIVE",
        "CSS_PRESERVE_MEDIA",
        "CSS_PRESERVE_ROOT",
        "CSS_PRESERVE_COMMENTS",
        "CSS_CRITICAL_SEED",
        "CSS_CRITICAL_LINE_WINDOW",
        "CSS_CRITICAL_MAX_SELECTORS",
    ):
        monkeypatch.delenv(name, raising=False)
