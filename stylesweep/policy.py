"""
Preservation policy: rules that keep a block even when no source references it.

Predicates run in a fixed order and each can be switched off:

    variables    custom properties (`--`) in the selector or the declarations
    keyframes    @keyframes blocks
    font-face    @font-face blocks
    interactive  :hover :focus :active :visited ::before ::after ::first-line ::first-letter
    media        @media blocks
    root         :root

Safelist / blocklist entries are literals (`btn`, `.btn`, `#main`, `nav a`) or
regular expressions written as `/pattern/` (or compiled re.Pattern objects).
An entry that does not compile is skipped and reported in `warnings`.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional, Pattern, Sequence, Tuple, Union

from .blocks import AtRuleType, Block
from .selectors import TokenKind, decompose_selector


INTERACTIVE_PSEUDOS = (
    ':hover', ':focus', ':active', ':visited',
    '::before', '::after', '::first-line', '::first-letter',
)

PREDICATE_ORDER = ('variables', 'keyframes', 'font-face', 'interactive', 'media', 'root')

Entry = Union[str, Pattern]


def _compile_entries(entries: Sequence[Entry], label: str) -> Tuple[Tuple[str, ...], Tuple[Pattern, ...], List[str]]:
    literals: List[str] = []
    patterns: List[Pattern] = []
    warnings: List[str] = []
    for entry in entries or ():
        if isinstance(entry, re.Pattern):
            patterns.append(entry)
            continue
        if not isinstance(entry, str):
            warnings.append(f"{label}: ignored non-string entry {entry!r}")
            continue
        text = entry.strip()
        if not text:
            continue
        if len(text) > 2 and text.startswith('/') and text.endswith('/'):
            try:
                patterns.append(re.compile(text[1:-1]))
            except re.error as e:
                warnings.append(f"{label}: invalid pattern {text!r} skipped ({e})")
            continue
        literals.append(' '.join(text.split()))
    return tuple(literals), tuple(patterns), warnings


def _matches(selector: str, literals: Tuple[str, ...], patterns: Tuple[Pattern, ...]) -> bool:
    if not literals and not patterns:
        return False
    if selector in literals:
        return True
    names = set()
    for tok in decompose_selector(selector):
        if tok.kind is TokenKind.CLASS:
            names.update((tok.value, '.' + tok.value))
        elif tok.kind is TokenKind.ID:
            names.update((tok.value, '#' + tok.value))
    if names.intersection(literals):
        return True
    return any(p.search(selector) for p in patterns)


@dataclass(frozen=True)
class PreservationPolicy:
    preserve_variables: bool = True
    preserve_keyframes: bool = True
    preserve_font_face: bool = True
    preserve_interactive_states: bool = True
    preserve_media: bool = True
    preserve_root: bool = True
    safelist: Tuple[str, ...] = ()
    safelist_patterns: Tuple[Pattern, ...] = ()
    blocklist: Tuple[str, ...] = ()
    blocklist_patterns: Tuple[Pattern, ...] = ()
    warnings: Tuple[str, ...] = field(default=())

    @classmethod
    def build(cls, safelist: Sequence[Entry] = (), blocklist: Sequence[Entry] = (), **toggles) -> 'PreservationPolicy':
        safe_lit, safe_pat, safe_warn = _compile_entries(safelist, 'safelist')
        block_lit, block_pat, block_warn = _compile_entries(blocklist, 'blocklist')
        return cls(
            safelist=safe_lit,
            safelist_patterns=safe_pat,
            blocklist=block_lit,
            blocklist_patterns=block_pat,
            warnings=tuple(safe_warn + block_warn),
            **toggles,
        )

    @classmethod
    def from_config(cls, config) -> 'PreservationPolicy':
        return cls.build(
            safelist=config.safelist,
            blocklist=config.blocklist,
            preserve_variables=config.preserve_variables,
            preserve_keyframes=config.preserve_keyframes,
            preserve_font_face=config.preserve_font_face,
            preserve_interactive_states=config.preserve_interactive_states,
            preserve_media=config.preserve_media,
            preserve_root=config.preserve_root,
        )

    def for_critical(self) -> 'PreservationPolicy':
        """Critical CSS keeps only what it needs to render: variables and :root survive."""
        return PreservationPolicy(
            preserve_variables=self.preserve_variables,
            preserve_keyframes=False,
            preserve_font_face=False,
            preserve_interactive_states=False,
            preserve_media=False,
            preserve_root=self.preserve_root,
            safelist=self.safelist,
            safelist_patterns=self.safelist_patterns,
            blocklist=self.blocklist,
            blocklist_patterns=self.blocklist_patterns,
            warnings=self.warnings,
        )

    def is_safelisted(self, selector: str) -> bool:
        return _matches(selector, self.safelist, self.safelist_patterns)

    def is_blocklisted(self, selector: str) -> bool:
        return _matches(selector, self.blocklist, self.blocklist_patterns)

    def preserved_by(self, block: Block, selector: str) -> Optional[str]:
        """Name of the first predicate that keeps `selector` of `block`, else None."""
        for name in PREDICATE_ORDER:
            if self._check(name, block, selector):
                return name
        return None

    def _check(self, name: str, block: Block, selector: str) -> bool:
        kind = block.at_rule_type
        if name == 'variables':
            return self.preserve_variables and ('--' in selector or '--' in block.body)
        if name == 'keyframes':
            return self.preserve_keyframes and kind is AtRuleType.KEYFRAMES
        if name == 'font-face':
            return self.preserve_font_face and kind is AtRuleType.FONT_FACE
        if name == 'interactive':
            if not self.preserve_interactive_states:
                return False
            low = selector.lower()
            return any(p in low for p in INTERACTIVE_PSEUDOS)
        if name == 'media':
            return self.preserve_media and kind is AtRuleType.MEDIA
        if name == 'root':
            return self.preserve_root and ':root' in selector.lower()
        return False
