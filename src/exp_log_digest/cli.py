from __future__ import annotations

import argparse
import asyncio
import logging
import os
import random
import sys

from pydantic import ValidationError

from exp_log_digest.core.models import ReportMode, SampleMode
from exp_log_digest.core.options import ReportOptions
from exp_log_digest.report import run_report

LOG_LEVEL_ENV = "EXP_LOG_LEVEL"

VERSION = "0.0.1"
VERSION_TEXT = f"ExP version {VERSION}"

_MODE_FLAGS = [
    ("-x", "--hash", ReportMode.HASH, "Show hashes of log files with numbers removed"),
    ("-w", "--wordcount", ReportMode.WORDCOUNT, "Show word count for given word"),
    ("-D", "--daemon", ReportMode.DAEMON, "Show a report of entries from each daemon"),
    ("-H", "--host", ReportMode.HOST, "Show a report of entries from each host"),
    ("-s", "--sgraph", ReportMode.SGRAPH, "Show a graph of the first 60 seconds"),
    ("-m", "--mgraph", ReportMode.MGRAPH, "Show a graph of the first 60 minutes"),
    ("-X", "--hgraph", ReportMode.HGRAPH, "Show a graph of the first 24 hours"),
    ("-d", "--dgraph", ReportMode.DGRAPH, "Show a graph of the first 31 days"),
    ("-M", "--mograph", ReportMode.MOGRAPH, "Show a graph of the first 12 months"),
    ("-y", "--ygraph", ReportMode.YGRAPH, "Show a graph of the first 10 years"),
]

_REPORT_ONLY = ("sample", "filter", "fingerprint", "deviation")
_GRAPH_ONLY = ("tick", "wide")


def _configure_logging(verbosity: int) -> None:
    """Log to stderr: WARNING by default, INFO with -v, DEBUG with -vv."""
    if verbosity >= 2:
        default = logging.DEBUG
    elif verbosity == 1:
        default = logging.INFO
    else:
        default = logging.WARNING
    level_name = os.getenv(LOG_LEVEL_ENV)
    level = getattr(logging, level_name.upper(), default) if level_name else default
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="exp",
        description="Summarize log files: frequency reports of scrubbed lines, words, daemons or hosts.",
        epilog="If no file is specified, data is read from stdin.",
    )
    p.add_argument("files", nargs="*", metavar="file")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbose output (may be given twice)")
    p.add_argument("-V", "--version", action="version", version=VERSION_TEXT)

    modes = p.add_mutually_exclusive_group()
    for short, long, mode, help_text in _MODE_FLAGS:
        modes.add_argument(short, long, dest="mode", action="store_const", const=mode, help=help_text)

    report = p.add_argument_group("report-specific options")
    report.add_argument(
        "--sample", dest="sample", action="store_const", const=SampleMode.THRESHOLD,
        help="Show sample output for small numbered entries",
    )
    report.add_argument(
        "--nosample", dest="sample", action="store_const", const=SampleMode.NONE,
        help="Do not sample output for low count entries",
    )
    report.add_argument(
        "--allsample", dest="sample", action="store_const", const=SampleMode.ALL,
        help="Show samples instead of munged text for all entries",
    )
    report.add_argument(
        "--filter", dest="filter", action="store_const", const=True,
        help="Use filter files during processing (default)",
    )
    report.add_argument(
        "--nofilter", dest="filter", action="store_const", const=False,
        help="Do not use filter files during processing",
    )
    report.add_argument(
        "--fingerprint", action="store_const", const=True, default=None,
        help="Use fingerprinting to remove known patterns",
    )
    report.add_argument(
        "--dev", dest="deviation", type=int, choices=[0, 1, 2], default=None,
        help="Only show entries more than N standard deviations from the mean (0 shows all)",
    )

    graph = p.add_argument_group("graph-specific options")
    graph.add_argument("--wide", action="store_const", const=True, default=None, help="Use wider graphs")
    graph.add_argument("-t", "--tick", default=None, help="Change tick character from default (#)")

    rules = p.add_argument_group("rule directories")
    rules.add_argument("--filter-dir", action="append", default=[], help="Extra stopword directory (repeatable)")
    rules.add_argument(
        "--fingerprint-dir", action="append", default=[], help="Extra fingerprint directory (repeatable)"
    )
    rules.add_argument(
        "--recognizer-dir", action="append", default=[], help="Extra recognizer directory (repeatable)"
    )

    p.add_argument("--year", type=int, default=None, help="Year for timestamps without one (default: current)")
    p.add_argument("--seed", type=int, default=None, help="Seed for sampling, for reproducible output")
    return p


def _check_compatible(p: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    rejected = _GRAPH_ONLY if not args.mode.is_graph else _REPORT_ONLY
    given = [name for name in rejected if getattr(args, name) is not None]
    if given:
        kind = "graph" if args.mode.is_graph else "report"
        p.error(f"Incompatible options for {kind} mode: {', '.join(given)}")


def _options_from_args(args: argparse.Namespace) -> ReportOptions:
    values = {
        "mode": args.mode,
        "filter_dirs": tuple(args.filter_dir),
        "fingerprint_dirs": tuple(args.fingerprint_dir),
        "recognizer_dirs": tuple(args.recognizer_dir),
        "year": args.year,
    }
    for name in _REPORT_ONLY + _GRAPH_ONLY:
        value = getattr(args, name)
        if value is not None:
            values[name] = value
    return ReportOptions(**values)


def main(argv: list[str] | None = None) -> None:
    p = build_parser()
    args = p.parse_args(argv)
    _configure_logging(args.verbose)

    if args.mode is None:
        if not args.files:
            print(VERSION_TEXT)
            return
        p.error("Undefined mode")

    _check_compatible(p, args)

    try:
        options = _options_from_args(args)
    except ValidationError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)

    rng = random.Random(args.seed)
    asyncio.run(run_report(options, args.files, rng=rng))


if __name__ == "__main__":
    main()
