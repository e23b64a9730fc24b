"""
Search a word across YC batches: per-batch frequency, trend, correlation, and an HTML chart.

    python search_word.py mobile
    python search_word.py --trends 25
"""
import argparse
import json
import sys
from pathlib import Path

import config
from app_logging import configure_logging
from batches import batch_summary, group_batches
from build_chart import ChartView, render_no_results_page, render_page
from correlation import timed_correlate
from fetch_companies import DataFetchError, load_companies
from word_trends import rising_words

HOW_TO = (
    "Enter any word to analyze its frequency trend across YC company descriptions over time,\n"
    "e.g. `python search_word.py ai` or `python search_word.py blockchain`."
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="YC word correlation search")
    parser.add_argument("word", nargs="?", default="", help="word to search for")
    parser.add_argument("--data", type=Path, default=config.CACHE_FILE, help="company cache JSON")
    parser.add_argument("--refresh", action="store_true", help="re-fetch companies even if cached")
    parser.add_argument("--out", type=Path, default=config.OUTPUT_FILE, help="HTML chart output path")
    parser.add_argument("--json", action="store_true", help="print the result as JSON")
    parser.add_argument("--trends", type=int, default=0, metavar="N", help="print the N fastest-moving words")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def write_page(path, html):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        f.write(html)


def main(argv=None):
    args = parse_args(argv)
    configure_logging(args.verbose)

    try:
        companies = load_companies(args.data, refresh=args.refresh)
    except DataFetchError as e:
        print(f"Error fetching YC companies: {e}", file=sys.stderr)
        return 1

    batches = group_batches(companies)
    print(f"Loaded {sum(len(b.companies) for b in batches)} companies across {len(batches)} batches")
    if args.verbose:
        print(batch_summary(batches).to_string(index=False))

    if args.trends:
        trends = rising_words(batches, top_n=args.trends)
        print("\n=== Fastest-moving words ===")
        print(trends.to_string(index=False) if not trends.empty else "  (no words to scan)")

    result, elapsed_ms = timed_correlate(args.word, batches)
    if result is None:
        if not args.trends:
            print(HOW_TO)
        return 0

    if args.json:
        print(json.dumps({**result.to_dict(), "processingTime": elapsed_ms}, indent=2))

    if result.no_results:
        print(f'Word "{result.word}" not found in any company descriptions. '
              f"Try a different word or check your spelling.")
        print(f"Processing time: {elapsed_ms:.1f}ms")
        write_page(args.out, render_no_results_page(result.word, elapsed_ms))
        return 0

    print(f'\n=== Analysis Results for "{result.word}" ===')
    print(f"  Correlation:     {result.correlation:.3f}")
    print(f"  P-Value:         {result.p_value:.3f} ({'significant' if result.is_significant else 'not significant'})")
    print(f"  Slope:           {result.slope * 100:+.3f} pts/year")
    print(f"  Max Frequency:   {result.max_ratio * 100:.1f}%")
    print(f"  Processing Time: {elapsed_ms:.1f}ms")

    write_page(args.out, render_page(ChartView(result, elapsed_ms)))
    print(f"Chart written: {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
