"""
Merge @media blocks whose queries normalize to the same string.

    screen and (max-width: 480px)
    only screen and (max-width:480px)      -> (max-width:480px)
    (max-width:480px)

Conditions are compared as normalized text, not parsed: `(min-width:1px) and
(max-width:2px)` and the same conditions in the other order stay separate.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from .blocks import AtRuleType, Block


ONLY_RE = re.compile(r"^only\s+")
SCREEN_AND_RE = re.compile(r"^screen\s+and\s+")


def normalize_media_query(prelude: str) -> str:
    q = ' '.join((prelude or '').lower().split())
    q = re.sub(r"\s*:\s*", ':', q)
    q = re.sub(r"\(\s*", '(', q)
    q = re.sub(r"\s*\)", ')', q)
    q = ONLY_RE.sub('', q)
    rest = SCREEN_AND_RE.sub('', q)
    if rest.strip():
        q = rest
    return q.strip()


@dataclass(frozen=True)
class MediaQueryGroup:
    normalized_query: str
    members: Tuple[Block, ...]


@dataclass(frozen=True)
class CombineResult:
    blocks: Tuple[Block, ...]
    count: int
    groups: Tuple[MediaQueryGroup, ...] = ()


def _media_positions(blocks: List[Block]) -> Dict[str, List[int]]:
    """Normalized query -> list indices of its members; malformed blocks never join a group."""
    positions: Dict[str, List[int]] = {}
    for i, b in enumerate(blocks):
        if b.at_rule_type is not AtRuleType.MEDIA or b.malformed or b.is_non_rule:
            continue
        positions.setdefault(normalize_media_query(b.prelude), []).append(i)
    return positions


def group_media_blocks(blocks: Iterable[Block]) -> List[MediaQueryGroup]:
    """Groups in order of first occurrence."""
    blocks = list(blocks)
    return [MediaQueryGroup(k, tuple(blocks[i] for i in idx)) for k, idx in _media_positions(blocks).items()]


def merge_group(group: MediaQueryGroup) -> Block:
    first = group.members[0]
    if len(group.members) == 1:
        return first
    inner = '\n\n'.join(m.inner.strip() for m in group.members if m.inner.strip())
    return first.with_body('{\n' + inner + '\n}')


def combine_media_queries(blocks: Iterable[Block]) -> CombineResult:
    blocks = list(blocks)
    groups: List[MediaQueryGroup] = []
    merged: Dict[int, Block] = {}
    dropped = set()
    count = 0
    # keyed by position: the same Block value may appear more than once
    for query, idx in _media_positions(blocks).items():
        group = MediaQueryGroup(query, tuple(blocks[i] for i in idx))
        groups.append(group)
        if len(idx) < 2:
            continue
        merged[idx[0]] = merge_group(group)
        dropped.update(idx[1:])
        count += len(idx) - 1

    out = [merged.get(i, b) for i, b in enumerate(blocks) if i not in dropped]
    return CombineResult(blocks=tuple(out), count=count, groups=tuple(groups))
