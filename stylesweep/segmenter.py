"""
Split CSS text into an ordered list of Blocks.

The scanner is a small state machine (OUTSIDE -> IN_PRELUDE -> IN_BODY) with a
brace-depth counter. A block closes only when depth returns to zero, so the
rules nested inside @media / @supports / @keyframes stay inside one block body.
Quoted strings, backslash escapes and comments never move the depth counter.

Nothing is dropped: comments, @import/@charset statements and stray text come
out as passthrough (is_non_rule) blocks, and an unterminated block at the end of
input is closed and flagged malformed.
"""
from __future__ import annotations

import re
from enum import Enum
from typing import List

from .blocks import AtRuleType, Block, at_rule_type_for


AT_KEYWORD_RE = re.compile(r"@(-?[_a-zA-Z][-\w]*)")


class _State(Enum):
    OUTSIDE = 0
    IN_PRELUDE = 1
    IN_BODY = 2


def _skip_string(css: str, i: int) -> int:
    """Index just past the quoted string opening at i (newline ends a bad string)."""
    quote = css[i]
    n = len(css)
    i += 1
    while i < n:
        ch = css[i]
        if ch == '\\':
            i += 2
            continue
        if ch == quote or ch == '\n':
            return i + 1
        i += 1
    return n


def _skip_comment(css: str, i: int) -> int:
    end = css.find('*/', i + 2)
    return len(css) if end == -1 else end + 2


def strip_comments(css: str) -> str:
    """Remove comments; quoted strings and backslash escapes are copied through untouched."""
    out = []
    n = len(css)
    i = start = 0
    while i < n:
        ch = css[i]
        if ch == '\\':
            i += 2
        elif ch in ('"', "'"):
            i = _skip_string(css, i)
        elif css.startswith('/*', i):
            out.append(css[start:i])
            i = _skip_comment(css, i)
            start = i
        else:
            i += 1
    out.append(css[start:])
    return ''.join(out)


def _passthrough(source: str, order: int) -> Block:
    return Block(
        selectors_text='',
        body=source.strip(),
        at_rule_type=AtRuleType.NONE,
        prelude='',
        source_order=order,
        is_non_rule=True,
        source=source,
    )


def _rule_block(css: str, start: int, brace: int, end: int, order: int, malformed: bool = False) -> Block:
    header = strip_comments(css[start:brace]).strip()
    keyword = ''
    selectors_text = header
    prelude = header
    m = AT_KEYWORD_RE.match(header)
    if m:
        keyword = m.group(1)
        selectors_text = ''
        prelude = header[m.end():].strip()
    return Block(
        selectors_text=selectors_text,
        body=css[brace:end],
        at_rule_type=at_rule_type_for(keyword),
        prelude=prelude,
        source_order=order,
        malformed=malformed,
        at_keyword=keyword,
        source=css[start:end],
    )


def segment_css(css: str, preserve_comments: bool = True) -> List[Block]:
    """Return the Blocks of `css` in source order. Never raises."""
    if not isinstance(css, str) or not css:
        return []
    if not preserve_comments:
        css = strip_comments(css)

    blocks: List[Block] = []
    n = len(css)
    i = start = brace = 0
    depth = parens = 0
    state = _State.OUTSIDE

    while i < n:
        ch = css[i]
        if state is _State.OUTSIDE:
            if ch.isspace():
                i += 1
            elif css.startswith('/*', i):
                i = _skip_comment(css, i)
                blocks.append(_passthrough(css[start:i], len(blocks)))
                start = i
            elif ch == '}':
                # stray close brace
                i += 1
                blocks.append(_passthrough(css[start:i], len(blocks)))
                start = i
            else:
                state = _State.IN_PRELUDE
                parens = 0
            continue

        if ch == '\\':
            # escaped character (`.c-\[\'x\'\]`) never opens a string or a block
            i += 2
            continue
        if ch in ('"', "'"):
            i = _skip_string(css, i)
            continue
        if css.startswith('/*', i):
            i = _skip_comment(css, i)
            continue

        if state is _State.IN_PRELUDE:
            if ch in '([':
                parens += 1
            elif ch in ')]':
                parens = max(0, parens - 1)
            elif ch == ';' and parens == 0:
                # statement at-rule (@import, @charset) or stray declaration
                i += 1
                blocks.append(_passthrough(css[start:i], len(blocks)))
                start = i
                state = _State.OUTSIDE
                continue
            elif ch == '{':
                brace = i
                depth = 1
                state = _State.IN_BODY
            elif ch == '}':
                i += 1
                blocks.append(_passthrough(css[start:i], len(blocks)))
                start = i
                state = _State.OUTSIDE
                continue
            i += 1
            continue

        # IN_BODY
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                i += 1
                blocks.append(_rule_block(css, start, brace, i, len(blocks)))
                start = i
                state = _State.OUTSIDE
                continue
        i += 1

    if state is _State.IN_PRELUDE:
        blocks.append(_passthrough(css[start:], len(blocks)))
    elif state is _State.IN_BODY:
        blocks.append(_rule_block(css, start, brace, n, len(blocks), malformed=True))
    return blocks


def segment_inner(block: Block, preserve_comments: bool = True) -> List[Block]:
    """Segment the rules nested in a container at-rule body."""
    if block.is_non_rule or not block.body.startswith('{'):
        return []
    return segment_css(block.inner, preserve_comments=preserve_comments)
