#!/usr/bin/env python3
"""
Run a tab template file against a real browser

Usage:
  python scripts/run_scraper.py <template file> [--headed] [--output out.json] [--stream]

Examples:
  python scripts/run_scraper.py templates/quotes.yaml
  python scripts/run_scraper.py templates/quotes.yaml --stream
  python scripts/run_scraper.py templates/quotes.json --headed --output quotes.json
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from dotenv import load_dotenv

load_dotenv()

from infrastructure.logging.log_setup import setup_console_logging

from domain.exceptions import StepWrightError
from domain.run import RunOptions
from infrastructure.bootstrap import run_scraper, run_scraper_with_callback
from infrastructure.template import TemplateLoaderRegistry


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a tab template")
    parser.add_argument("template_file", help="Template file (.json, .yaml, .yml)")
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument("--output", help="Write records to this JSON file")
    parser.add_argument("--stream", action="store_true", help="Print each record as it is produced")
    parser.add_argument("--log-level", default="", help="loguru level (default: STEPWRIGHT_LOG_LEVEL or INFO)")
    parser.add_argument("--json-logs", action="store_true", help="Write logs as JSON lines")
    return parser


def main(argv=None) -> int:
    args = _build_parser().parse_args(argv)
    setup_console_logging(level=args.log_level, serialize=args.json_logs)

    path = Path(args.template_file)
    try:
        templates = TemplateLoaderRegistry().get_loader(path).load_from_file(path)
    except StepWrightError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    options = RunOptions(headless=not args.headed)

    if args.stream:
        def on_result(record, index):
            print(json.dumps({"index": index, "record": record}, ensure_ascii=False, default=str), flush=True)

        run_scraper_with_callback(templates, on_result, options)
        return 0

    records = run_scraper(templates, options)
    payload = json.dumps(records, ensure_ascii=False, indent=2, default=str)
    if args.output:
        Path(args.output).write_text(payload, encoding="utf-8")
        print(f"Wrote {len(records)} records to {args.output}")
    else:
        print(payload)
    return 0


if __name__ == "__main__":
    sys.exit(main())
