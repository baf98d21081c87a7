"""
Block: one segmented CSS rule, at-rule, or passthrough fragment.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class AtRuleType(str, Enum):
    NONE = 'none'
    MEDIA = 'media'
    SUPPORTS = 'supports'
    KEYFRAMES = 'keyframes'
    FONT_FACE = 'font-face'
    OTHER = 'other'


AT_RULE_TYPES = {
    'media': AtRuleType.MEDIA,
    'supports': AtRuleType.SUPPORTS,
    'keyframes': AtRuleType.KEYFRAMES,
    'font-face': AtRuleType.FONT_FACE,
}

# at-rules whose body holds nested rules rather than declarations
CONTAINER_AT_RULES = {'media', 'supports', 'layer', 'container', 'document', 'scope', 'starting-style'}


def strip_vendor_prefix(name: str) -> str:
    if name.startswith('-'):
        parts = name.split('-', 2)
        if len(parts) == 3 and parts[2]:
            return parts[2]
    return name


def at_rule_type_for(keyword: str) -> AtRuleType:
    if not keyword:
        return AtRuleType.NONE
    return AT_RULE_TYPES.get(strip_vendor_prefix(keyword.lower()), AtRuleType.OTHER)


@dataclass(frozen=True)
class Block:
    selectors_text: str
    body: str
    at_rule_type: AtRuleType = AtRuleType.NONE
    prelude: str = ''
    source_order: int = 0
    is_non_rule: bool = False
    malformed: bool = False
    at_keyword: str = ''
    source: str = ''

    @property
    def is_at_rule(self) -> bool:
        return bool(self.at_keyword)

    @property
    def is_container(self) -> bool:
        return strip_vendor_prefix(self.at_keyword.lower()) in CONTAINER_AT_RULES

    @property
    def header(self) -> str:
        """Selector group or `@keyword prelude`, as written before the body."""
        if self.is_non_rule:
            return ''
        if self.at_keyword:
            return f"@{self.at_keyword} {self.prelude}".strip()
        return self.selectors_text

    @property
    def inner(self) -> str:
        """Body text without the outer braces."""
        body = self.body
        if body.startswith('{'):
            body = body[1:]
        if body.endswith('}') and not self.malformed:
            body = body[:-1]
        return body

    @property
    def text(self) -> str:
        return self.source.strip()

    def with_body(self, body: str) -> 'Block':
        """Copy with a new body; `source` is rebuilt from the header."""
        lead = self.source[:len(self.source) - len(self.source.lstrip())]
        return replace(self, body=body, source=f"{lead}{self.header} {body}")


def serialize_blocks(blocks) -> str:
    return '\n'.join(b.text for b in blocks if b.text)
