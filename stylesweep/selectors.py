"""
Selector decomposition shared by the classifier, the usage extractor and the
critical selector generator.

    decompose_selector('a.btn#go[href^="x"]:hover')
    -> TAG a, CLASS btn, ID go, ATTRIBUTE [href^="x"], PSEUDO :hover
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


COMBINATORS = '>+~'
# functional pseudo-classes whose arguments are selector lists
SELECTOR_LIST_PSEUDOS = {'is', 'where', 'not', 'has', 'matches', '-webkit-any', '-moz-any'}


class TokenKind(str, Enum):
    TAG = 'tag'
    CLASS = 'class'
    ID = 'id'
    ATTRIBUTE = 'attribute'
    PSEUDO = 'pseudo'


@dataclass(frozen=True)
class SelectorToken:
    kind: TokenKind
    value: str


def _is_ident_char(ch: str) -> bool:
    return ch.isalnum() or ch in '-_' or ord(ch) > 0x7f


def _read_ident(s: str, i: int) -> Tuple[str, int]:
    """Read an identifier at i, resolving backslash escapes (`hover\\:x` -> `hover:x`)."""
    out = []
    n = len(s)
    while i < n:
        ch = s[i]
        if ch == '\\' and i + 1 < n:
            # hex escape: up to 6 hex digits and one optional space
            j = i + 1
            hexdigits = ''
            while j < n and len(hexdigits) < 6 and s[j] in '0123456789abcdefABCDEF':
                hexdigits += s[j]
                j += 1
            if hexdigits:
                try:
                    out.append(chr(int(hexdigits, 16)))
                except (ValueError, OverflowError):
                    out.append('�')
                if j < n and s[j] == ' ':
                    j += 1
                i = j
            else:
                out.append(s[i + 1])
                i += 2
            continue
        if not _is_ident_char(ch):
            break
        out.append(ch)
        i += 1
    return ''.join(out), i


def _read_balanced(s: str, i: int, open_ch: str, close_ch: str) -> int:
    """Index just past the bracket group opening at i; quotes are respected."""
    depth = 0
    quote = None
    n = len(s)
    while i < n:
        ch = s[i]
        if quote:
            if ch == '\\':
                i += 2
                continue
            if ch == quote:
                quote = None
        elif ch in ('"', "'"):
            quote = ch
        elif ch == open_ch:
            depth += 1
        elif ch == close_ch:
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return n


def split_selector_group(text: str) -> List[str]:
    """Split a selector group on top-level commas (not inside [], () or quotes)."""
    parts: List[str] = []
    buf: List[str] = []
    depth_paren = depth_bracket = 0
    quote = None
    i = 0
    n = len(text)
    while i < n:
        ch = text[i]
        if quote:
            buf.append(ch)
            if ch == '\\' and i + 1 < n:
                buf.append(text[i + 1])
                i += 2
                continue
            if ch == quote:
                quote = None
            i += 1
            continue
        if ch in ('"', "'"):
            quote = ch
        elif ch == '\\' and i + 1 < n:
            buf.append(ch)
            buf.append(text[i + 1])
            i += 2
            continue
        elif ch == '(':
            depth_paren += 1
        elif ch == ')':
            depth_paren = max(0, depth_paren - 1)
        elif ch == '[':
            depth_bracket += 1
        elif ch == ']':
            depth_bracket = max(0, depth_bracket - 1)
        if ch == ',' and depth_paren == 0 and depth_bracket == 0:
            parts.append(''.join(buf).strip())
            buf = []
        else:
            buf.append(ch)
        i += 1
    if buf:
        parts.append(''.join(buf).strip())
    return [' '.join(p.split()) for p in parts if p]


def split_compound_parts(selector: str) -> List[str]:
    """Split one complex selector on combinators (space, >, +, ~)."""
    parts: List[str] = []
    buf: List[str] = []
    i = 0
    n = len(selector)
    while i < n:
        ch = selector[i]
        if ch == '\\' and i + 1 < n:
            buf.append(selector[i:i + 2])
            i += 2
            continue
        if ch == '[':
            j = _read_balanced(selector, i, '[', ']')
            buf.append(selector[i:j])
            i = j
            continue
        if ch == '(':
            j = _read_balanced(selector, i, '(', ')')
            buf.append(selector[i:j])
            i = j
            continue
        if ch.isspace() or ch in COMBINATORS:
            if buf:
                parts.append(''.join(buf))
                buf = []
            i += 1
            continue
        buf.append(ch)
        i += 1
    if buf:
        parts.append(''.join(buf))
    return parts


def decompose_selector(selector: str) -> List[SelectorToken]:
    """Typed tokens of every simple selector in `selector`, in order."""
    tokens: List[SelectorToken] = []
    s = selector
    n = len(s)
    i = 0
    while i < n:
        ch = s[i]
        if ch == '.':
            name, i = _read_ident(s, i + 1)
            if name:
                tokens.append(SelectorToken(TokenKind.CLASS, name))
            continue
        if ch == '#':
            name, i = _read_ident(s, i + 1)
            if name:
                tokens.append(SelectorToken(TokenKind.ID, name))
            continue
        if ch == '[':
            j = _read_balanced(s, i, '[', ']')
            tokens.append(SelectorToken(TokenKind.ATTRIBUTE, s[i:j]))
            i = j
            continue
        if ch == ':':
            j = i + 2 if s.startswith('::', i) else i + 1
            name, j = _read_ident(s, j)
            args = ''
            if j < n and s[j] == '(':
                k = _read_balanced(s, j, '(', ')')
                args = s[j:k]
                j = k
            tokens.append(SelectorToken(TokenKind.PSEUDO, s[i:j]))
            if args and name.lower() in SELECTOR_LIST_PSEUDOS:
                for alt in split_selector_group(args[1:-1] if args.endswith(')') else args[1:]):
                    tokens.extend(decompose_selector(alt))
            i = j
            continue
        if ch == '\\' or _is_ident_char(ch):
            name, i = _read_ident(s, i)
            if name:
                tokens.append(SelectorToken(TokenKind.TAG, name.lower()))
            else:
                i += 1
            continue
        # combinators, whitespace, `*`, `|` namespace separators
        i += 1
    return tokens


def attribute_name(fragment: str) -> str:
    """`[data-x="1"]` -> `data-x`."""
    inner = fragment.strip()[1:-1] if fragment.strip().endswith(']') else fragment.strip()[1:]
    name = []
    for ch in inner.strip():
        if ch in '~|^$*=] \t\n':
            break
        name.append(ch)
    return ''.join(name).lower()


def has_matchable_token(tokens: List[SelectorToken]) -> bool:
    return any(t.kind is not TokenKind.PSEUDO for t in tokens)
