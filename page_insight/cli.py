"""
CLI Module - Command Line Interface for Page Insight

Handles command-line argument parsing and runs a single crawl through the
dispatcher, then writes the formatted result.
"""

import argparse
import json
import sys
import time
from pathlib import Path

from .analyzer import MarkupAnalyzer
from .crawler import CrawlDispatcher, CrawlOrchestrator
from .exceptions import CrawlFailure
from .fetcher import DEFAULT_MAX_REDIRECTS, DEFAULT_TIMEOUT, DocumentFetcher
from .link_checker import (
    DEFAULT_CHECK_DELAY,
    DEFAULT_CHECK_TIMEOUT,
    DEFAULT_MAX_LINKS,
    LinkChecker,
)
from .output_formatter import OutputFormatter
from .store import InMemoryResultStore


def parse_arguments(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Analyze a web page's structure, links and login forms",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py https://example.com
  python main.py https://example.com --output results.json --max-links 20
  python main.py https://site.com --delay 0.5 --verbose
  python main.py https://site.com --skip-link-check
        """,
    )

    parser.add_argument("url", help="URL of the page to analyze")

    parser.add_argument(
        "--output",
        "-o",
        help="Output file path (default: data/page_analysis.json)",
        default="data/page_analysis.json",
    )

    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Page fetch timeout in seconds (default: {DEFAULT_TIMEOUT})",
    )

    parser.add_argument(
        "--max-redirects",
        type=int,
        default=DEFAULT_MAX_REDIRECTS,
        help=f"Maximum redirects to follow (default: {DEFAULT_MAX_REDIRECTS})",
    )

    parser.add_argument(
        "--max-links",
        type=int,
        default=DEFAULT_MAX_LINKS,
        help=f"Maximum number of links to check (default: {DEFAULT_MAX_LINKS})",
    )

    parser.add_argument(
        "--link-timeout",
        type=float,
        default=DEFAULT_CHECK_TIMEOUT,
        help=f"Timeout per link check in seconds (default: {DEFAULT_CHECK_TIMEOUT})",
    )

    parser.add_argument(
        "--delay",
        type=float,
        default=DEFAULT_CHECK_DELAY,
        help=f"Delay between link checks in seconds (default: {DEFAULT_CHECK_DELAY})",
    )

    parser.add_argument(
        "--skip-link-check",
        action="store_true",
        help="Do not check links for brokenness",
    )

    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def _print_summary(output_data: dict) -> None:
    page = output_data["page"]
    links = page["links_found"]
    counts = page["headings"]["counts"]

    print(f"\n{'=' * 60}")
    print("📋 PAGE ANALYSIS SUMMARY")
    print("=" * 60)
    print(f"🌐 {output_data['crawl_summary']['url']}")
    print(f"   📝 Title: {page['title'] or '(none)'}")
    print(f"   🏷️  HTML version: {page['html_version']}")
    print(
        "   🔠 Headings: "
        + ", ".join(f"{level}={count}" for level, count in counts.items())
    )
    print(
        f"   🔗 Links: {links['internal_count']} internal, "
        f"{links['external_count']} external, {links['broken_count']} broken"
    )
    print(f"   🔐 Login form: {'yes' if page['has_login_form'] else 'no'}")


def main(argv=None) -> None:
    """Main entry point for the CLI application."""
    args = parse_arguments(argv)

    output_path = Path(args.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    if args.verbose:
        print(f"🚀 Starting analysis of: {args.url}")
        print(f"🔗 Max links checked: {args.max_links}")
        print(f"⏱️  Link check delay: {args.delay}s")
        print(f"💾 Output file: {args.output}")
        print("-" * 50)

    start_time = time.time()

    store = InMemoryResultStore()
    fetcher = DocumentFetcher(
        timeout=args.timeout,
        max_redirects=args.max_redirects,
        verbose=args.verbose,
    )
    orchestrator = CrawlOrchestrator(
        store,
        fetcher=fetcher,
        analyzer=MarkupAnalyzer(verbose=args.verbose),
        link_checker=LinkChecker(
            max_links=args.max_links,
            timeout=args.link_timeout,
            delay=args.delay,
            verbose=args.verbose,
        ),
        check_links=not args.skip_link_check,
        verbose=args.verbose,
    )
    dispatcher = CrawlDispatcher(orchestrator, max_workers=1, verbose=args.verbose)

    record = store.add(args.url)
    outcome = None

    try:
        outcome = dispatcher.start(record.id).result()
    except KeyboardInterrupt:
        print("\n❌ Analysis interrupted by user")
        sys.exit(1)
    except CrawlFailure:
        # The dispatcher already reported the failure
        pass
    finally:
        dispatcher.shutdown(wait=False)

    crawl_time = time.time() - start_time
    output_data = OutputFormatter().format_outcome(
        store.get(record.id), outcome, crawl_time
    )

    with open(args.output, "w", encoding="utf-8") as f:
        f.write(json.dumps(output_data, indent=2, ensure_ascii=False))

    if outcome is None:
        print(f"❌ Error during analysis: {store.get(record.id).error_message}")
        sys.exit(1)

    if args.verbose:
        print(f"✅ Results saved to: {args.output}")
        print(f"\n🎉 Analysis completed in {crawl_time:.2f} seconds")
        _print_summary(output_data)
    else:
        print(f"Analysis complete. Results saved to: {args.output}")


if __name__ == "__main__":
    main()
