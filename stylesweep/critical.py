"""
Above-the-fold (critical) selectors.

The markup is parsed with BeautifulSoup; elements that start within a fixed
number of lines after <body> count as above the fold. From those elements an
allow-list of selectors is built and handed to the rule filter in critical
mode: a rule is critical when its selector is on the list.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

from bs4 import BeautifulSoup

from .usage import UsageSet


DEFAULT_SEED_SELECTORS = (
    'html', 'body', 'head', 'title', 'header', 'nav', 'main', 'footer',
    '.hero', '.above-fold', '.critical', '[data-critical]',
)
INTERACTIVE_VARIANTS = (':hover', ':focus', ':active')
DEFAULT_LINE_WINDOW = 50
DEFAULT_MAX_SELECTORS = 500


@dataclass(frozen=True)
class AboveFoldElement:
    tag: str
    classes: Tuple[str, ...] = ()
    id: Optional[str] = None
    line: int = 0


def scan_above_fold(html: str, line_window: int = DEFAULT_LINE_WINDOW) -> List[AboveFoldElement]:
    """Elements starting within `line_window` lines after the opening <body> tag."""
    if not isinstance(html, str) or not html:
        return []
    soup = BeautifulSoup(html, 'html.parser')
    body = soup.find('body')
    if body is None:
        return []
    start = body.sourceline or 1
    elements: List[AboveFoldElement] = []
    for tag in body.find_all(True):
        line = tag.sourceline or start
        if line > start + line_window:
            break
        classes = tag.get('class') or []
        if isinstance(classes, str):
            classes = classes.split()
        ident = tag.get('id')
        elements.append(AboveFoldElement(
            tag=tag.name.lower(),
            classes=tuple(c for c in classes if c),
            id=ident.strip() if isinstance(ident, str) and ident.strip() else None,
            line=line,
        ))
    return elements


def generate_critical_selectors(elements: Iterable[AboveFoldElement],
                                seed: Sequence[str] = DEFAULT_SEED_SELECTORS,
                                max_selectors: int = DEFAULT_MAX_SELECTORS) -> List[str]:
    """Ordered allow-list: seed, per-element selectors, then interactive variants.

    Compound selectors (`tag.class`, `#id.class`) only combine tokens of the same
    element. Interactive variants are added while the list is below `max_selectors`.
    """
    selectors: List[str] = []
    seen = set()

    def add(sel: str) -> None:
        sel = ' '.join((sel or '').split())
        if sel and sel not in seen and len(selectors) < max_selectors:
            seen.add(sel)
            selectors.append(sel)

    for sel in seed:
        add(sel)
    for el in elements:
        tag = (el.tag or '').lower()
        if tag:
            add(tag)
        for cls in el.classes:
            add(f".{cls}")
        if el.id:
            add(f"#{el.id}")
        for cls in el.classes:
            if tag:
                add(f"{tag}.{cls}")
            if el.id:
                add(f"#{el.id}.{cls}")

    for sel in list(selectors):
        for variant in INTERACTIVE_VARIANTS:
            if len(selectors) >= max_selectors:
                return selectors
            add(f"{sel}{variant}")
    return selectors


def critical_usage(elements: Iterable[AboveFoldElement],
                   seed: Sequence[str] = DEFAULT_SEED_SELECTORS,
                   max_selectors: int = DEFAULT_MAX_SELECTORS) -> UsageSet:
    return UsageSet.from_selectors(generate_critical_selectors(elements, seed, max_selectors))


def inline_critical_css(html: str, critical_css: str) -> str:
    """Insert a <style> block with `critical_css` before </head>."""
    style = f"\n<style>\n{critical_css}\n</style>\n"
    m = re.search(r"</head\s*>", html, re.I)
    if m:
        return html[:m.start()] + style + html[m.start():]
    m = re.search(r"<head\b[^>]*>", html, re.I)
    if m:
        return html[:m.end()] + style + html[m.end():]
    return f"<head>{style}</head>\n{html}"
