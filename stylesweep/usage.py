"""
Collect the class / id / tag / attribute tokens a project's source documents
reference.

Extraction is regex based and deliberately generous: when a construct cannot be
resolved statically (JSX expressions, Vue :class objects) every string literal
it contains is taken as a class name. Keeping a few extra rules is cheap;
deleting a referenced rule breaks a page.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Set

from .selectors import TokenKind, decompose_selector, split_selector_group


KINDS = ('generic', 'jsx', 'vue', 'angular', 'tailwind')

HTML_TAGS = frozenset('''
a abbr address area article aside audio b blockquote body br button canvas caption
code col colgroup dd details dialog div dl dt em fieldset figcaption figure footer
form h1 h2 h3 h4 h5 h6 head header hr html i iframe img input label legend li link
main mark menu meta nav noscript ol optgroup option output p picture pre progress q
s section select small source span strong sub summary sup svg table tbody td template
textarea tfoot th thead time title tr u ul video
'''.split())

# class="..." / className="..." but not Vue's :class / v-bind:class
CLASS_ATTR_RE = re.compile(r"""(?<![:\w-])(?:class|className)\s*=\s*(["'`])(.*?)\1""", re.S)
JSX_CLASS_EXPR_RE = re.compile(r"""(?<![:\w-])className\s*=\s*\{""")
QUOTED_VALUE_RE = re.compile(r'"[^"]*"|\'[^\']*\'|\{[^{}]*\}')
ID_ATTR_RE = re.compile(r"""(?<![:\w.-])id\s*=\s*(["'])([^"']*)\1""")
ATTR_SELECTOR_RE = re.compile(r"""\[\s*[a-zA-Z_][-\w:.]*\s*(?:[~|^$*]?=\s*(?:"[^"\n]*"|'[^'\n]*'|[^\]\s"']+)\s*(?:[iIsS]\s*)?)?\]""")
TAG_RE = re.compile(r"<([a-zA-Z][a-zA-Z0-9-]*)((?:\s+[^<>]*?)?)/?>", re.S)
TAG_ATTR_NAME_RE = re.compile(r"""\s([a-zA-Z_@:][-\w:.@]*)(?=\s*=|\s|$)""")
PSEUDO_TOKEN_RE = re.compile(r"(?<![\w:\\])::?[a-zA-Z][-a-zA-Z]*(?:\([^()\n]*\))?")
STRING_LITERAL_RE = re.compile(r"""(["'`])((?:\\.|(?!\1).)*?)\1""", re.S)
TEMPLATE_HOLE_RE = re.compile(r"\$\{[^}]*\}")
CLASSLIST_RE = re.compile(r"classList\.(?:add|remove|toggle|contains|replace)\(([^)]*)\)")
GET_BY_CLASS_RE = re.compile(r"""getElementsByClassName\(\s*(["'])([^"']+)\1""")
QUERY_SELECTOR_RE = re.compile(r"""(?:querySelector(?:All)?|closest|matches)\(\s*(["'`])([^"'`]+)\1""")
VUE_CLASS_BINDING_RE = re.compile(r"""(?:v-bind:|:)class\s*=\s*(["'])(.*?)\1""", re.S)
OBJECT_KEY_RE = re.compile(r"""(?:^|[{,])\s*([-\w]+)\s*:""")
ANGULAR_SELECTOR_RE = re.compile(r"""\bselector\s*:\s*(["'`])([^"'`]+)\1""")
ANGULAR_CLASS_BINDING_RE = re.compile(r"\[class\.([-\w]+)\]")
APPLY_RE = re.compile(r"@apply\s+([^;}]+)[;}]")
TAILWIND_UTILITY_RE = re.compile(r"^[a-z][a-z0-9:-]*$")
TAILWIND_VARIANT_RE = re.compile(r"^(hover|focus|focus-within|focus-visible|active|visited|disabled|group-hover|group-focus|peer-hover|peer-focus|dark|first|last|odd|even|sm|md|lg|xl|2xl):")


@dataclass
class UsageSet:
    classes: Set[str] = field(default_factory=set)
    ids: Set[str] = field(default_factory=set)
    tags: Set[str] = field(default_factory=set)
    attributes: Set[str] = field(default_factory=set)
    utilities: Set[str] = field(default_factory=set)
    raw_tokens: Set[str] = field(default_factory=set)

    def union(self, other: 'UsageSet') -> 'UsageSet':
        return UsageSet(
            classes=self.classes | other.classes,
            ids=self.ids | other.ids,
            tags=self.tags | other.tags,
            attributes=self.attributes | other.attributes,
            utilities=self.utilities | other.utilities,
            raw_tokens=self.raw_tokens | other.raw_tokens,
        )

    def is_empty(self) -> bool:
        return not (self.classes or self.ids or self.tags or self.attributes or self.utilities or self.raw_tokens)

    def __len__(self) -> int:
        return (len(self.classes) + len(self.ids) + len(self.tags) + len(self.attributes)
                + len(self.utilities) + len(self.raw_tokens))

    def add_selector(self, selector: str) -> None:
        """Record a selector string both verbatim and as its decomposed tokens."""
        selector = ' '.join(selector.split())
        if not selector:
            return
        self.raw_tokens.add(selector)
        for tok in decompose_selector(selector):
            if tok.kind is TokenKind.CLASS:
                self.classes.add(tok.value)
            elif tok.kind is TokenKind.ID:
                self.ids.add(tok.value)
            elif tok.kind is TokenKind.TAG:
                self.tags.add(tok.value)
            elif tok.kind is TokenKind.ATTRIBUTE:
                self.attributes.add(tok.value)

    @classmethod
    def from_selectors(cls, selectors: Iterable[str]) -> 'UsageSet':
        usage = cls()
        for sel in selectors:
            usage.raw_tokens.add(' '.join(sel.split()))
        return usage


class SourceDocument(NamedTuple):
    path: str
    content: str
    kind: str = 'auto'


def detect_kind(path: str, content: str = '') -> str:
    """Best-effort framework guess from the file name; defaults to generic."""
    p = (path or '').lower()
    if p.endswith('.component.ts') or p.endswith('.component.html'):
        return 'angular'
    if p.endswith('.vue'):
        return 'vue'
    if re.search(r"@tailwind\b|@apply\b", content or ''):
        return 'tailwind'
    if p.endswith('.jsx') or p.endswith('.tsx'):
        return 'jsx'
    return 'generic'


def _split_classes(value: str) -> List[str]:
    value = TEMPLATE_HOLE_RE.sub(' ', value)
    return [c for c in value.split() if c and c not in ('{', '}', '{{', '}}')]


def _string_literals(text: str) -> List[str]:
    return [m.group(2) for m in STRING_LITERAL_RE.finditer(text)]


def _brace_expression(content: str, start: int) -> str:
    """Text of the {...} expression opening at content[start]."""
    depth = 0
    for i in range(start, len(content)):
        ch = content[i]
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return content[start + 1:i]
    return content[start + 1:]


def _class_attribute_values(content: str) -> List[str]:
    """Every class token written in class= / className= attributes, incl. JSX expressions."""
    out: List[str] = []
    for m in CLASS_ATTR_RE.finditer(content):
        out.extend(_split_classes(m.group(2)))
    for m in JSX_CLASS_EXPR_RE.finditer(content):
        expr = _brace_expression(content, m.end() - 1)
        for lit in _string_literals(expr):
            out.extend(_split_classes(lit))
    return out


def _extract_generic(content: str, usage: UsageSet, route_classes=None) -> None:
    add_class = route_classes or usage.classes.add
    for cls in _class_attribute_values(content):
        add_class(cls)
    for m in ID_ATTR_RE.finditer(content):
        if m.group(2).strip():
            usage.ids.add(m.group(2).strip())
    for m in ATTR_SELECTOR_RE.finditer(content):
        usage.attributes.add(m.group(0))
    for m in TAG_RE.finditer(content):
        tag = m.group(1).lower()
        if tag in HTML_TAGS:
            usage.tags.add(tag)
        for am in TAG_ATTR_NAME_RE.finditer(QUOTED_VALUE_RE.sub('""', m.group(2) or '')):
            usage.attributes.add(f"[{am.group(1).lower()}]")
    for m in PSEUDO_TOKEN_RE.finditer(content):
        usage.raw_tokens.add(m.group(0))
    # DOM API usage in scripts
    for m in CLASSLIST_RE.finditer(content):
        for lit in _string_literals(m.group(1)):
            for cls in _split_classes(lit):
                add_class(cls)
    for m in GET_BY_CLASS_RE.finditer(content):
        for cls in _split_classes(m.group(2)):
            add_class(cls)
    for m in QUERY_SELECTOR_RE.finditer(content):
        for sel in split_selector_group(m.group(2)):
            usage.add_selector(sel)


def _extract_vue(content: str, usage: UsageSet) -> None:
    for m in VUE_CLASS_BINDING_RE.finditer(content):
        expr = m.group(2)
        for lit in _string_literals(expr):
            usage.classes.update(_split_classes(lit))
        for km in OBJECT_KEY_RE.finditer(expr):
            usage.classes.add(km.group(1))


def _extract_angular(content: str, usage: UsageSet) -> None:
    for m in ANGULAR_SELECTOR_RE.finditer(content):
        for sel in split_selector_group(m.group(2)):
            usage.utilities.add(sel)
            usage.add_selector(sel)
    for m in ANGULAR_CLASS_BINDING_RE.finditer(content):
        usage.classes.add(m.group(1))


def _route_tailwind(usage: UsageSet):
    def add(token: str) -> None:
        if TAILWIND_UTILITY_RE.match(token):
            usage.utilities.add(token)
            vm = TAILWIND_VARIANT_RE.match(token)
            if vm:
                usage.utilities.add(vm.group(1))
        else:
            usage.classes.add(token)
    return add


def extract_document(content: str, kind: str = 'generic') -> UsageSet:
    """UsageSet for one document. Never raises on content."""
    usage = UsageSet()
    if not isinstance(content, str) or not content:
        return usage
    if kind == 'tailwind':
        add = _route_tailwind(usage)
        _extract_generic(content, usage, route_classes=add)
        for m in APPLY_RE.finditer(content):
            for token in m.group(1).split():
                if not token.startswith('!'):
                    add(token)
        return usage
    _extract_generic(content, usage)
    if kind == 'vue':
        _extract_vue(content, usage)
    elif kind == 'angular':
        _extract_angular(content, usage)
    return usage


def extract_usage(documents: Iterable) -> UsageSet:
    """Union of the UsageSets of `documents` ((path, content, kind) tuples)."""
    total = UsageSet()
    for doc in documents:
        path, content, kind = (tuple(doc) + ('auto',))[:3]
        if kind not in KINDS:
            kind = detect_kind(path, content if isinstance(content, str) else '')
        total = total.union(extract_document(content, kind))
    return total
