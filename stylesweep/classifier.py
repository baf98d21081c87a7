"""
Keep/Drop decision for one block.

A selector group is OR'd the way CSS groups it: the block is dropped only when
every comma-separated alternative is neither referenced nor preserved.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from .blocks import AtRuleType, Block
from .policy import PreservationPolicy
from .segmenter import segment_inner
from .selectors import (TokenKind, attribute_name, decompose_selector,
                        has_matchable_token, split_compound_parts, split_selector_group)
from .usage import UsageSet


class Decision(str, Enum):
    KEEP = 'keep'
    DROP = 'drop'


@dataclass(frozen=True)
class Classification:
    decision: Decision
    rejected_selectors: Tuple[str, ...] = ()
    preserved_by: Tuple[str, ...] = ()

    @property
    def keep(self) -> bool:
        return self.decision is Decision.KEEP


def is_selector_used(selector: str, usage: UsageSet) -> bool:
    if selector in usage.raw_tokens:
        return True
    tokens = decompose_selector(selector)
    if not has_matchable_token(tokens):
        # `*`, `::selection`, bare pseudo selectors: nothing to disprove
        return True
    for tok in tokens:
        if tok.kind is TokenKind.CLASS:
            if tok.value in usage.classes or tok.value in usage.utilities:
                return True
        elif tok.kind is TokenKind.ID:
            if tok.value in usage.ids:
                return True
        elif tok.kind is TokenKind.TAG:
            if tok.value in usage.tags:
                return True
        elif tok.kind is TokenKind.ATTRIBUTE:
            if tok.value in usage.attributes or f"[{attribute_name(tok.value)}]" in usage.attributes:
                return True
    return False


def is_selector_critical(selector: str, allow: UsageSet) -> bool:
    """Critical when listed verbatim, or when every compound part of it is."""
    if selector in allow.raw_tokens:
        return True
    parts = split_compound_parts(selector)
    return len(parts) > 1 and all(p in allow.raw_tokens for p in parts)


def _alternatives(block: Block) -> List[str]:
    if block.is_at_rule:
        return [block.header]
    return split_selector_group(block.selectors_text)


def _check_alternative(block: Block, selector: str, usage: UsageSet, policy: PreservationPolicy,
                       critical: bool) -> Tuple[bool, Optional[str]]:
    """(kept, preserving predicate name) for one alternative."""
    if policy.is_safelisted(selector):
        return True, 'safelist'
    if policy.is_blocklisted(selector):
        return False, None
    if block.is_at_rule:
        if selector in usage.raw_tokens:
            return True, None
    elif critical:
        if is_selector_critical(selector, usage):
            return True, None
    elif is_selector_used(selector, usage):
        return True, None
    name = policy.preserved_by(block, selector)
    return name is not None, name


def _container_kept(block: Block, usage: UsageSet, policy: PreservationPolicy, critical: bool) -> bool:
    """A container at-rule survives when any nested rule survives, or when it nests none."""
    inner = [b for b in segment_inner(block) if not b.is_non_rule]
    if not inner:
        return not critical
    return any(b.malformed or classify_block(b, usage, policy, critical).keep for b in inner)


def classify_block(block: Block, usage: UsageSet, policy: Optional[PreservationPolicy] = None,
                   critical: bool = False) -> Classification:
    policy = policy or PreservationPolicy()
    alternatives = _alternatives(block)
    rejected: List[str] = []
    preserved: List[str] = []
    keep = False
    for sel in alternatives:
        kept, name = _check_alternative(block, sel, usage, policy, critical)
        if kept:
            keep = True
            if name:
                preserved.append(name)
        else:
            rejected.append(sel)

    if not keep and block.is_at_rule and (block.is_container or block.at_rule_type is AtRuleType.OTHER):
        if not policy.is_blocklisted(block.header) and _container_kept(block, usage, policy, critical):
            keep = True
            rejected = []
            preserved.append('nested')

    return Classification(
        decision=Decision.KEEP if keep else Decision.DROP,
        rejected_selectors=tuple(rejected),
        preserved_by=tuple(preserved),
    )
