from __future__ import annotations

import argparse
import re
import sys

from logtally.stream.engine import NO_INPUT_HINT


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="logtally",
        description="Count lines from stdin by key and print a ranked report.",
    )
    parser.add_argument(
        "patterns",
        nargs="*",
        metavar="PATTERN",
        help="Regex to count; capture group 1 becomes the key",
    )

    match = parser.add_argument_group("matching")
    match.add_argument("-f", "--fields", help="Comma-separated 1-based fields to use instead of the whole line")
    match.add_argument("-d", "--delimiter", help="Field delimiter regex (default: whitespace)")
    match.add_argument("-e", "--exclude", help="Skip lines matching this regex")
    match.add_argument("-c", "--case-sensitive", action="store_true", default=None, help="Match case-sensitively")
    match.add_argument("-m", "--multi-match", action="store_true", default=None, help="Count every match in a line")

    report = parser.add_argument_group("report")
    report.add_argument("-r", "--relative", action="store_true", default=None, help="Percentages of hits instead of lines")
    report.add_argument("-w", "--width", type=int, help="Key column width (default: 30)")
    report.add_argument("-l", "--limit", type=int, help="Rows before the <limited> rollup (default: unlimited)")
    report.add_argument("-L", "--line-frequency", type=int, help="Report every N lines")
    report.add_argument("-T", "--time-frequency", type=float, help="Report every T seconds (default: 1)")
    report.add_argument("-R", "--no-rate", dest="show_rate", action="store_false", default=None, help="Hide the hits/s column")
    report.add_argument("-C", "--clear", dest="clear_screen", action="store_true", default=None, help="Clear the screen before each report")

    limits = parser.add_argument_group("limits")
    limits.add_argument("-k", "--max-keys", type=int, help="Stop after this many distinct keys (default: 50000)")
    limits.add_argument("-t", "--max-time", type=float, help="Stop after this many seconds")
    limits.add_argument("-n", "--max-lines", type=int, help="Stop after this many lines")

    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def overrides_from_args(args: argparse.Namespace) -> dict[str, dict]:
    return {
        "match": {
            "patterns": args.patterns or None,
            "fields": args.fields,
            "delimiter": args.delimiter,
            "exclude": args.exclude,
            "case_sensitive": args.case_sensitive,
            "multi_match": args.multi_match,
        },
        "report": {
            "relative": args.relative,
            "width": args.width,
            "limit": args.limit,
            "line_frequency": args.line_frequency,
            "time_frequency": args.time_frequency,
            "show_rate": args.show_rate,
            "clear_screen": args.clear_screen,
        },
        "limits": {
            "max_keys": args.max_keys,
            "max_time": args.max_time,
            "max_lines": args.max_lines,
        },
    }


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    from logtally.app import LogTallyApp

    try:
        app = LogTallyApp(
            config_path=args.config,
            overrides=overrides_from_args(args),
            verbose=args.verbose,
            usage=f"{NO_INPUT_HINT}\n{parser.format_usage().rstrip()}",
        )
    except re.error as e:
        parser.error(f"invalid pattern {e.pattern!r}: {e}")
    except (ValueError, OSError) as e:
        parser.error(str(e))
    return app.run()


if __name__ == "__main__":
    sys.exit(main())
