"""
Run the classifier over a block list.

Pure: no logging, no I/O. Passthrough and malformed blocks are always retained
and the retained blocks keep their source order.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .blocks import Block
from .classifier import classify_block
from .policy import PreservationPolicy
from .usage import UsageSet


@dataclass(frozen=True)
class FilterStats:
    total_blocks_in: int = 0
    retained: int = 0
    removed: int = 0
    rejected_selectors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FilterResult:
    retained: Tuple[Block, ...]
    removed: Tuple[Block, ...]
    stats: FilterStats
    # one flag per input block, in input order
    kept: Tuple[bool, ...] = ()


def filter_blocks(blocks: Iterable[Block], usage: UsageSet, policy: Optional[PreservationPolicy] = None,
                  critical: bool = False) -> FilterResult:
    policy = policy or PreservationPolicy()
    blocks = list(blocks)
    retained: List[Block] = []
    removed: List[Block] = []
    rejected: List[str] = []
    kept: List[bool] = []
    for block in blocks:
        if block.is_non_rule or block.malformed:
            keep = True
        else:
            result = classify_block(block, usage, policy, critical=critical)
            rejected.extend(result.rejected_selectors)
            keep = result.keep
        kept.append(keep)
        if keep:
            retained.append(block)
        else:
            removed.append(block)
    stats = FilterStats(
        total_blocks_in=len(blocks),
        retained=len(retained),
        removed=len(removed),
        rejected_selectors=tuple(rejected),
        warnings=policy.warnings,
    )
    return FilterResult(retained=tuple(retained), removed=tuple(removed), stats=stats, kept=tuple(kept))
