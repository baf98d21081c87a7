"""
String-in / string-out entry points.

    purge_css(css, usage)          drop rules nothing references
    combine_media(css)             merge duplicate @media blocks
    extract_critical(css, html)    split CSS into critical / remaining parts
    optimize(css, documents)       extract usage, purge, then combine
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Tuple

from .blocks import serialize_blocks
from .config import EngineConfig
from .critical import critical_usage, scan_above_fold
from .media import combine_media_queries
from .policy import PreservationPolicy
from .rule_filter import filter_blocks
from .segmenter import segment_css
from .usage import UsageSet, extract_usage


@dataclass(frozen=True)
class RunStats:
    total_blocks_in: int = 0
    retained: int = 0
    removed: int = 0
    merged_media_queries: int = 0
    rejected_selectors: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'totalBlocksIn': self.total_blocks_in,
            'retained': self.retained,
            'removed': self.removed,
            'mergedMediaQueries': self.merged_media_queries,
            'rejectedSelectors': list(self.rejected_selectors),
            'warnings': list(self.warnings),
        }


@dataclass(frozen=True)
class RunResult:
    css: str = ''
    stats: RunStats = field(default_factory=RunStats)


@dataclass(frozen=True)
class CriticalResult:
    critical_css: str = ''
    remaining_css: str = ''
    selectors: Tuple[str, ...] = ()
    stats: RunStats = field(default_factory=RunStats)


def _usable(css) -> bool:
    return isinstance(css, str) and bool(css.strip())


def purge_css(css: str, usage: UsageSet, config: Optional[EngineConfig] = None) -> RunResult:
    config = config or EngineConfig()
    policy = PreservationPolicy.from_config(config)
    if not _usable(css):
        return RunResult(stats=RunStats(warnings=policy.warnings))
    blocks = segment_css(css, preserve_comments=config.preserve_comments)
    result = filter_blocks(blocks, usage, policy)
    s = result.stats
    return RunResult(
        css=serialize_blocks(result.retained),
        stats=RunStats(
            total_blocks_in=s.total_blocks_in,
            retained=s.retained,
            removed=s.removed,
            rejected_selectors=s.rejected_selectors,
            warnings=s.warnings,
        ),
    )


def combine_media(css: str, config: Optional[EngineConfig] = None) -> RunResult:
    config = config or EngineConfig()
    if not _usable(css):
        return RunResult()
    blocks = segment_css(css, preserve_comments=config.preserve_comments)
    combined = combine_media_queries(blocks)
    return RunResult(
        css=serialize_blocks(combined.blocks),
        stats=RunStats(
            total_blocks_in=len(blocks),
            retained=len(combined.blocks),
            merged_media_queries=combined.count,
        ),
    )


def extract_critical(css: str, html: str, config: Optional[EngineConfig] = None) -> CriticalResult:
    """Critical rules for the above-the-fold part of `html`; the rest goes to remaining_css.

    Passthrough blocks (comments, @import) stay with the remaining CSS.
    """
    config = config or EngineConfig()
    policy = PreservationPolicy.from_config(config).for_critical()
    elements = scan_above_fold(html, config.critical_line_window)
    allow = critical_usage(elements, config.critical_seed_selectors, config.critical_max_selectors)
    selectors = tuple(sorted(allow.raw_tokens))
    if not _usable(css):
        return CriticalResult(selectors=selectors, stats=RunStats(warnings=policy.warnings))
    blocks = segment_css(css, preserve_comments=config.preserve_comments)
    result = filter_blocks(blocks, allow, policy, critical=True)
    critical = [b for b, keep in zip(blocks, result.kept) if keep and not b.is_non_rule]
    remaining = [b for b, keep in zip(blocks, result.kept) if not keep or b.is_non_rule]
    return CriticalResult(
        critical_css=serialize_blocks(critical),
        remaining_css=serialize_blocks(remaining),
        selectors=selectors,
        stats=RunStats(
            total_blocks_in=len(blocks),
            retained=len(critical),
            removed=len(remaining),
            rejected_selectors=result.stats.rejected_selectors,
            warnings=result.stats.warnings,
        ),
    )


def optimize(css: str, documents: Iterable, config: Optional[EngineConfig] = None) -> RunResult:
    config = config or EngineConfig()
    usage = extract_usage(documents)
    purged = purge_css(css, usage, config)
    if not purged.css:
        return purged
    combined = combine_media(purged.css, config)
    s = purged.stats
    return RunResult(
        css=combined.css,
        stats=RunStats(
            total_blocks_in=s.total_blocks_in,
            retained=s.retained - combined.stats.merged_media_queries,
            removed=s.removed,
            merged_media_queries=combined.stats.merged_media_queries,
            rejected_selectors=s.rejected_selectors,
            warnings=s.warnings,
        ),
    )
