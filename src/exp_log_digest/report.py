"""Report orchestration.

Keep this layer thin: resolve options, translate them into core calls and
write the result to the output stream.
"""

from __future__ import annotations

import logging
import random
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

from exp_log_digest.core.aggregator import REPORT_KINDS, Aggregator
from exp_log_digest.core.fingerprint import FingerprintDeduplicator
from exp_log_digest.core.graph import bucket_records, render_graph
from exp_log_digest.core.log_service import STDIN, load_inputs
from exp_log_digest.core.models import ParsedFile
from exp_log_digest.core.options import ReportOptions, current_year, resolve_report_options
from exp_log_digest.core.recognizers import RecognizerRegistry, default_registry

logger = logging.getLogger(__name__)


def _graph(options: ReportOptions, files: Sequence[ParsedFile], out: TextIO) -> int:
    records = [r for f in files for r in f.records]
    buckets = bucket_records(records, options.mode)
    if not buckets:
        logger.info("No timestamped records to graph")
        return 0
    lines = render_graph(buckets, tick=options.tick, wide=options.wide)
    for line in lines:
        print(line, file=out)
    return len(lines)


async def _report(
    options: ReportOptions,
    files: Sequence[ParsedFile],
    registry: RecognizerRegistry,
    out: TextIO,
    rng: random.Random,
) -> int:
    kind = REPORT_KINDS[options.mode]
    deduplicator = None
    if options.fingerprint:
        deduplicator = await FingerprintDeduplicator.load(
            kind,
            registry,
            fingerprint_dirs=options.fingerprint_dirs,
            filter_dirs=options.filter_dirs,
            current_year=current_year(options),
            rng=rng,
        )

    aggregator = Aggregator(
        kind,
        files,
        filter_enabled=options.filter,
        filter_dirs=options.filter_dirs,
        sample=options.sample,
        deviation=options.deviation,
        deduplicator=deduplicator,
        rng=rng,
    )
    return aggregator.display(out)


async def run_report(
    options: ReportOptions,
    paths: Sequence[str | Path] = (),
    *,
    out: TextIO | None = None,
    rng: random.Random | None = None,
) -> int:
    """Load the inputs (stdin when none) and print the selected report.

    Returns the number of lines printed.
    """
    options = resolve_report_options(options)
    out = out or sys.stdout
    rng = rng or random.Random()

    registry = default_registry(options.recognizer_dirs)
    files = await load_inputs(
        list(paths) or [STDIN], registry, current_year=current_year(options), rng=rng
    )
    if not files:
        logger.info("No data")
        return 0

    if options.mode.is_graph:
        return _graph(options, files, out)
    return await _report(options, files, registry, out, rng)
