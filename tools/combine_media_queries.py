#!/usr/bin/env python3
"""
Merge duplicate @media blocks in a stylesheet.

`screen and (max-width: 768px)`, `only screen and (max-width:768px)` and
`(max-width: 768px)` are treated as the same query; the merged block sits where
the first one was.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from stylesweep import combine_media, load_config


def main(argv=None):
    ap = argparse.ArgumentParser(description='Combine duplicate @media blocks')
    ap.add_argument('--root', required=True, help='Project root containing the stylesheet')
    ap.add_argument('--css', default='style.css', help='Stylesheet relative to root (default: style.css)')
    ap.add_argument('--env-file', help='.env file with CSS_* settings')
    ap.add_argument('--dry-run', action='store_true')
    args = ap.parse_args(argv)

    css_path = Path(args.root) / args.css
    if not css_path.exists():
        raise SystemExit(f'Missing {args.css}')

    css = css_path.read_text(encoding='utf-8', errors='ignore')
    result = combine_media(css, load_config(args.env_file))
    count = result.stats.merged_media_queries

    if args.dry_run:
        print(f"[MEDIA] would merge {count} duplicate media blocks")
        return
    if count:
        bak = css_path.with_suffix(css_path.suffix + '.media.bak')
        if not bak.exists():
            bak.write_text(css, encoding='utf-8')
        css_path.write_text(result.css + '\n', encoding='utf-8')
    print(f"[MEDIA] merged {count} duplicate media blocks")


if __name__ == '__main__':
    main()
