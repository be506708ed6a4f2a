"""Time graphs: record counts over the first N units after the earliest record."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from .models import LogRecord, ReportMode
from .recognizers import RAW_NAME, UNSTRUCTURED_YEAR

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 50


@dataclass(frozen=True, slots=True)
class GraphScale:
    resolution: str
    buckets: int
    label_format: str


GRAPH_SCALES: dict[ReportMode, GraphScale] = {
    ReportMode.SGRAPH: GraphScale("second", 60, "%Y-%m-%d %H:%M:%S"),
    ReportMode.MGRAPH: GraphScale("minute", 60, "%Y-%m-%d %H:%M"),
    ReportMode.HGRAPH: GraphScale("hour", 24, "%Y-%m-%d %H:00"),
    ReportMode.DGRAPH: GraphScale("day", 31, "%Y-%m-%d"),
    ReportMode.MOGRAPH: GraphScale("month", 12, "%Y-%m"),
    ReportMode.YGRAPH: GraphScale("year", 10, "%Y"),
}

_STEPS = {
    "second": timedelta(seconds=1),
    "minute": timedelta(minutes=1),
    "hour": timedelta(hours=1),
    "day": timedelta(days=1),
}


def _timestamp(record: LogRecord) -> datetime | None:
    # Neither unmatched lines nor raw lines carry a timestamp.
    if record.year == UNSTRUCTURED_YEAR or record.recognizer == RAW_NAME:
        return None
    try:
        return datetime(
            record.year, record.month, record.day, record.hour, record.minute, record.second
        )
    except ValueError:
        logger.debug("Line %d: invalid date, skipped", record.line_no)
        return None


def truncate(ts: datetime, resolution: str) -> datetime:
    """Drop everything finer than resolution."""
    if resolution == "second":
        return ts.replace(microsecond=0)
    if resolution == "minute":
        return ts.replace(second=0, microsecond=0)
    if resolution == "hour":
        return ts.replace(minute=0, second=0, microsecond=0)
    if resolution == "day":
        return ts.replace(hour=0, minute=0, second=0, microsecond=0)
    if resolution == "month":
        return datetime(ts.year, ts.month, 1)
    if resolution == "year":
        return datetime(ts.year, 1, 1)
    raise ValueError(f"Unknown graph resolution: {resolution}")


def _offset(start: datetime, ts: datetime, resolution: str) -> int:
    if resolution == "month":
        return (ts.year - start.year) * 12 + (ts.month - start.month)
    if resolution == "year":
        return ts.year - start.year
    return (ts - start) // _STEPS[resolution]


def _bucket_start(start: datetime, index: int, resolution: str) -> datetime:
    if resolution == "month":
        months = start.month - 1 + index
        return datetime(start.year + months // 12, months % 12 + 1, 1)
    if resolution == "year":
        return datetime(start.year + index, 1, 1)
    return start + index * _STEPS[resolution]


def bucket_records(records: Iterable[LogRecord], mode: ReportMode) -> list[tuple[str, int]]:
    """Count records per bucket, starting at the earliest record.

    Returns one ``(label, count)`` pair per bucket of the mode's scale, or an
    empty list when no record carries a usable timestamp.
    """
    scale = GRAPH_SCALES.get(mode)
    if scale is None:
        raise ValueError(f"{mode.value} is not a graph mode")

    stamps = [ts for ts in (_timestamp(r) for r in records) if ts is not None]
    if not stamps:
        return []

    start = truncate(min(stamps), scale.resolution)
    counts = [0] * scale.buckets
    dropped = 0
    for ts in stamps:
        index = _offset(start, truncate(ts, scale.resolution), scale.resolution)
        if index < scale.buckets:
            counts[index] += 1
        else:
            dropped += 1
    if dropped:
        logger.info("%d record(s) after the last %s bucket not graphed", dropped, scale.resolution)

    return [
        (_bucket_start(start, i, scale.resolution).strftime(scale.label_format), n)
        for i, n in enumerate(counts)
    ]


def render_graph(
    buckets: list[tuple[str, int]],
    *,
    tick: str = "#",
    wide: bool = False,
    width: int = DEFAULT_WIDTH,
) -> list[str]:
    """Render ``label | bar count`` lines, bars scaled to the largest count."""
    if not buckets:
        return []
    if wide:
        width *= 2
    peak = max(n for _, n in buckets)
    label_width = max(len(label) for label, _ in buckets)
    lines = []
    for label, n in buckets:
        size = round(n * width / peak) if peak else 0
        if n and not size:
            size = 1
        bar = tick * size
        lines.append(f"{label:<{label_width}} | " + (f"{bar} {n}" if bar else str(n)))
    return lines
