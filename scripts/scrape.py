from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from docscrap.errors import DocscrapError
from docscrap.ingest.pipeline import AnalysisResult, ScrapePipeline
from docscrap.models.configs import DEFAULT_USER_AGENT, ScrapeConfig
from docscrap.orchestration.config_loader import load_scrape_config
from docscrap.output.storage import SQLiteIndexConfig, SQLiteIndexStore


LOG_FORMAT = "[%(asctime)s] - %(name)s %(levelname)s %(message)s"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    if Path(".env").exists():
        load_dotenv(".env", override=False)
    parser = argparse.ArgumentParser(description="Convert documentation pages into sectioned Markdown and JSON.")
    parser.add_argument("urls", nargs="*", help="Page URLs (or local HTML files) to convert")
    parser.add_argument("--config", type=Path, help="YAML/TOML/JSON file with scrape settings")
    parser.add_argument("--output", type=Path, default=None, help="Output directory (default: output)")
    parser.add_argument("--content-selector", help="CSS selector for the main content root")
    parser.add_argument("--exclude-selector", help="CSS selector(s) removed before parsing")
    parser.add_argument("--nav-selector", help="CSS selector for the navigation menu; enables sections/ output")
    parser.add_argument("--max-sections", type=int, default=None, help="Keep only the first N sections")
    parser.add_argument("--max-menu-items", type=int, default=None, help="Write at most N menu-linked files")
    parser.add_argument("--max-markdown-bytes", type=int, default=None, help="Split Markdown files above N bytes")
    parser.add_argument("--max-chars", type=int, default=None, help="Split Markdown files above N characters")
    parser.add_argument("--max-tokens", type=int, default=None, help="Split Markdown files above N estimated tokens")
    parser.add_argument("--strict", action="store_true", default=None, help="Fail when completeness checks report issues")
    parser.add_argument("--no-index", dest="write_index", action="store_false", default=None, help="Skip index.jsonl")
    parser.add_argument("--sqlite-db", type=Path, default=None, help="Also store index records in this SQLite DB")
    parser.add_argument(
        "--timeout",
        type=float,
        default=float(os.getenv("DOCSCRAP_TIMEOUT", "30")),
        help="HTTP timeout in seconds",
    )
    parser.add_argument(
        "--user-agent",
        default=os.getenv("DOCSCRAP_USER_AGENT", DEFAULT_USER_AGENT),
        help="User-Agent header for HTTP fetches",
    )
    parser.add_argument("--dry-run", action="store_true", help="Analyze and print the summary without writing files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> ScrapeConfig:
    base = load_scrape_config(args.config) if args.config else ScrapeConfig()
    values: Dict[str, Any] = base.model_dump()
    overrides = {
        "output_dir": args.output,
        "content_selector": args.content_selector,
        "exclude_selector": args.exclude_selector,
        "nav_selector": args.nav_selector,
        "max_sections": args.max_sections,
        "max_menu_items": args.max_menu_items,
        "max_markdown_bytes": args.max_markdown_bytes,
        "max_chars": args.max_chars,
        "max_tokens": args.max_tokens,
        "strict": args.strict,
        "write_index": args.write_index,
        "sqlite_db": args.sqlite_db,
        "timeout_seconds": args.timeout,
        "user_agent": args.user_agent,
    }
    values.update({key: value for key, value in overrides.items() if value is not None})
    if args.urls:
        values["urls"] = list(args.urls)
    return ScrapeConfig.model_validate(values)


def print_summary(url: str, result: AnalysisResult) -> None:
    document = result.document
    print(f"Page: {url}")
    print(f"Sections found: {len(document.sections)}")
    print("Heading IDs:")
    _print_list(sorted(set(document.heading_ids)))
    print('Anchor targets (from href="#..."):')
    _print_list(sorted(set(document.anchor_targets)))
    if result.report.has_issues:
        print("\nCompleteness report:")
        for name, count in result.report.counts().items():
            print(f"  {name.replace('_', ' ')}: {count}")


def _print_list(items: List[str]) -> None:
    if not items:
        print("  (none)")
        return
    for item in items:
        print(f"  - {item}")


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT)
    try:
        config = build_config(args)
    except (ValidationError, ValueError, FileNotFoundError) as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2
    if not config.urls:
        print("No URLs given (pass them as arguments or in --config)", file=sys.stderr)
        return 2

    store = SQLiteIndexStore(SQLiteIndexConfig(db_path=config.sqlite_db)) if config.sqlite_db else None
    pipeline = ScrapePipeline(config, index_store=store)

    try:
        if args.dry_run:
            for url in config.urls:
                fetched = pipeline.fetcher(url, timeout=config.timeout_seconds, user_agent=config.user_agent)
                result = pipeline.analyze(fetched.html, url=url)
                result.trim(config.max_sections)
                print_summary(url, result)
            print("\nDry run complete (no files written).")
            return 0

        summaries = pipeline.run()
    except (DocscrapError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    finally:
        if store is not None:
            store.close()

    failed = [summary for summary in summaries if not summary.processed]
    for summary in summaries:
        if summary.processed and summary.result is not None:
            print(f"Wrote: {summary.output_dir} ({summary.sections} sections)")
        else:
            print(f"Failed: {summary.url}: {summary.error}", file=sys.stderr)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
