#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
from pathlib import Path

from stylesweep import extract_critical, inline_critical_css, load_config


def main(argv=None):
    ap = argparse.ArgumentParser(description='Split a stylesheet into critical (above-the-fold) and remaining CSS')
    ap.add_argument('--root', required=True, help='Project root containing index.html and style.css')
    ap.add_argument('--html', default='index.html')
    ap.add_argument('--css', default='style.css')
    ap.add_argument('--env-file', help='.env file with CSS_* settings')
    ap.add_argument('--inline', action='store_true', help='Also write <name>-inlined.html with the critical CSS in <head>')
    args = ap.parse_args(argv)

    root = Path(args.root)
    html_path = root / args.html
    css_path = root / args.css
    if not html_path.exists() or not css_path.exists():
        raise SystemExit(f'Missing {args.html} or {args.css} in root')

    html = html_path.read_text(encoding='utf-8', errors='ignore')
    css = css_path.read_text(encoding='utf-8', errors='ignore')
    result = extract_critical(css, html, load_config(args.env_file))

    (root / 'critical.css').write_text(result.critical_css + '\n', encoding='utf-8')
    (root / 'remaining.css').write_text(result.remaining_css + '\n', encoding='utf-8')
    report = {'selectors': list(result.selectors), **result.stats.to_dict()}
    (root / 'critical_report.json').write_text(json.dumps(report, ensure_ascii=False, indent=2), encoding='utf-8')
    print(f"[CRITICAL] {result.stats.retained} critical / {result.stats.removed} remaining blocks ({len(result.selectors)} selectors)")

    if args.inline:
        out = html_path.with_name(html_path.stem + '-inlined.html')
        out.write_text(inline_critical_css(html, result.critical_css), encoding='utf-8')
        print(f"[CRITICAL] inlined: {out}")


if __name__ == '__main__':
    main()
