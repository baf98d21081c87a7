#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import List

from stylesweep import SourceDocument, load_config, optimize, purge_css
from stylesweep.cache import MemoryCache, cached, content_key
from stylesweep.usage import KINDS, extract_usage

CACHE = MemoryCache()


def load_documents(root: Path, names: List[str], kind: str) -> List[SourceDocument]:
    docs = []
    for name in names:
        path = root / name
        if not path.exists():
            raise SystemExit(f'Missing content file: {path}')
        docs.append(SourceDocument(str(path), path.read_text(encoding='utf-8', errors='ignore'), kind))
    return docs


def prune(css: str, docs: List[SourceDocument], config, combine: bool = False):
    key = content_key(css, [tuple(d) for d in docs], config, combine)
    if combine:
        return cached(CACHE, key, lambda: optimize(css, docs, config))
    return cached(CACHE, key, lambda: purge_css(css, extract_usage(docs), config))


def main(argv=None):
    ap = argparse.ArgumentParser(description='Remove CSS rules that no content file references')
    ap.add_argument('--root', required=True, help='Project root containing the stylesheet and content files')
    ap.add_argument('--css', default='style.css', help='Stylesheet relative to root (default: style.css)')
    ap.add_argument('--content', action='append', help='Content file relative to root; repeatable (default: index.html)')
    ap.add_argument('--kind', default='auto', choices=('auto',) + KINDS, help='Source kind for all content files')
    ap.add_argument('--whitelist', help='JSON whitelist with classes/ids/selectors to keep')
    ap.add_argument('--env-file', help='.env file with CSS_* settings')
    ap.add_argument('--combine-media', action='store_true', help='Also merge duplicate @media blocks')
    ap.add_argument('--dry-run', action='store_true')
    args = ap.parse_args(argv)

    root = Path(args.root)
    css_path = root / args.css
    if not css_path.exists():
        raise SystemExit(f'Missing {args.css}')

    config = load_config(args.env_file, args.whitelist)
    docs = load_documents(root, args.content or ['index.html'], args.kind)
    css = css_path.read_text(encoding='utf-8', errors='ignore')
    result = prune(css, docs, config, combine=args.combine_media)
    stats = result.stats

    report = {
        'stylesheet': str(css_path),
        'content': [d.path for d in docs],
        'original_bytes': len(css),
        'pruned_bytes': len(result.css),
        **stats.to_dict(),
    }
    report_path = root / 'unused_css_report.json'
    report_path.write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding='utf-8')
    for w in stats.warnings:
        print(f"[PRUNE-CSS] warning: {w}")

    if args.dry_run:
        print(f"[PRUNE-CSS] would remove {stats.removed}/{stats.total_blocks_in} blocks; report: {report_path}")
        return

    if stats.removed or stats.merged_media_queries:
        bak = css_path.with_suffix(css_path.suffix + '.prune.bak')
        if not bak.exists():
            bak.write_text(css, encoding='utf-8')
        css_path.write_text(result.css + '\n', encoding='utf-8')
    print(f"[PRUNE-CSS] removed {stats.removed} blocks, merged {stats.merged_media_queries} media queries; backup: {css_path.name}.prune.bak")


if __name__ == '__main__':
    main()
