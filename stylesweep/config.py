"""Engine configuration, read from the environment (and .env) plus an optional JSON whitelist."""
from __future__ import annotations

import json
import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from dotenv import load_dotenv

from .critical import DEFAULT_LINE_WINDOW, DEFAULT_MAX_SELECTORS, DEFAULT_SEED_SELECTORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    safelist: Tuple[str, ...] = ()
    blocklist: Tuple[str, ...] = ()
    preserve_variables: bool = True
    preserve_keyframes: bool = True
    preserve_font_face: bool = True
    preserve_interactive_states: bool = True
    preserve_media: bool = True
    preserve_root: bool = True
    # comments are kept as passthrough blocks; False strips them before segmenting
    preserve_comments: bool = True
    critical_seed_selectors: Tuple[str, ...] = field(default=DEFAULT_SEED_SELECTORS)
    critical_line_window: int = DEFAULT_LINE_WINDOW
    critical_max_selectors: int = DEFAULT_MAX_SELECTORS


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() == 'true'


def _safe_int(env_var: str, default: int) -> int:
    value = os.getenv(env_var, str(default))
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid value '%s' for %s, using default %s", value, env_var, default)
        return default


def _env_list(name: str) -> List[str]:
    return [s.strip() for s in os.getenv(name, '').split(',') if s.strip()]


def load_whitelist(path: Path) -> List[str]:
    """Safelist entries from a JSON file: {"classes": [...], "ids": [...], "selectors": [...]}."""
    entries: List[str] = []
    if not path.exists():
        return entries
    try:
        data = json.loads(path.read_text(encoding='utf-8'))
    except OSError as e:
        logger.warning("Could not read whitelist %s: %s", path, e)
        return entries
    except json.JSONDecodeError:
        logger.warning("Could not parse whitelist %s", path)
        return entries
    if not isinstance(data, dict):
        logger.warning("Whitelist %s is not a JSON object, ignored", path)
        return entries
    for cls in data.get('classes', []):
        entries.extend(f".{part}" for part in str(cls).split() if part)
    for ident in data.get('ids', []):
        if ident:
            entries.append(f"#{ident}")
    for sel in data.get('selectors', []):
        if sel:
            entries.append(str(sel))
    return entries


def _check_patterns(entries: List[str], label: str) -> None:
    for entry in entries:
        if len(entry) > 2 and entry.startswith('/') and entry.endswith('/'):
            try:
                re.compile(entry[1:-1])
            except re.error as e:
                logger.warning("Invalid %s pattern %r will be skipped: %s", label, entry, e)


def load_config(env_file: Optional[str] = None, whitelist_path: Optional[str] = None) -> EngineConfig:
    load_dotenv(env_file)
    safelist = _env_list('CSS_SAFELIST')
    blocklist = _env_list('CSS_BLOCKLIST')
    whitelist = whitelist_path or os.getenv('CSS_WHITELIST_FILE')
    if whitelist:
        safelist.extend(load_whitelist(Path(whitelist)))
    _check_patterns(safelist, 'safelist')
    _check_patterns(blocklist, 'blocklist')
    seed = _env_list('CSS_CRITICAL_SEED') or list(DEFAULT_SEED_SELECTORS)
    return EngineConfig(
        safelist=tuple(safelist),
        blocklist=tuple(blocklist),
        preserve_variables=_env_bool('CSS_PRESERVE_VARIABLES', True),
        preserve_keyframes=_env_bool('CSS_PRESERVE_KEYFRAMES', True),
        preserve_font_face=_env_bool('CSS_PRESERVE_FONT_FACE', True),
        preserve_interactive_states=_env_bool('CSS_PRESERVE_INTERACTIVE', True),
        preserve_media=_env_bool('CSS_PRESERVE_MEDIA', True),
        preserve_root=_env_bool('CSS_PRESERVE_ROOT', True),
        preserve_comments=_env_bool('CSS_PRESERVE_COMMENTS', True),
        critical_seed_selectors=tuple(seed),
        critical_line_window=_safe_int('CSS_CRITICAL_LINE_WINDOW', DEFAULT_LINE_WINDOW),
        critical_max_selectors=_safe_int('CSS_CRITICAL_MAX_SELECTORS', DEFAULT_MAX_SELECTORS),
    )

