"""Segment CSS into rule blocks, match them against project usage, and prune, merge or split them."""
from .blocks import AtRuleType, Block, serialize_blocks
from .cache import MemoryCache, ResultCache, cached, content_key
from .classifier import Classification, Decision, classify_block
from .config import EngineConfig, load_config
from .critical import (AboveFoldElement, critical_usage, generate_critical_selectors,
                       inline_critical_css, scan_above_fold)
from .engine import CriticalResult, RunResult, RunStats, combine_media, extract_critical, optimize, purge_css
from .media import CombineResult, MediaQueryGroup, combine_media_queries, normalize_media_query
from .policy import PreservationPolicy
from .rule_filter import FilterResult, FilterStats, filter_blocks
from .segmenter import segment_css
from .selectors import SelectorToken, TokenKind, decompose_selector, split_selector_group
from .usage import SourceDocument, UsageSet, detect_kind, extract_document, extract_usage

__version__ = '0.1.0'
