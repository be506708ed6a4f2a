from __future__ import annotations

import pytest

from exp_log_digest.core.graph import GRAPH_SCALES, bucket_records, render_graph
from exp_log_digest.core.models import LogRecord, ReportMode
from exp_log_digest.core.recognizers import raw_recognizer


def _record(
    year=2024, month=1, day=1, hour=0, minute=0, second=0, line_no=1, recognizer="syslog"
) -> LogRecord:
    return LogRecord(
        line_no=line_no,
        year=year,
        month=month,
        day=day,
        hour=hour,
        minute=minute,
        second=second,
        host="h",
        daemon="d",
        message="m",
        recognizer=recognizer,
    )


def test_scales_cover_every_graph_mode() -> None:
    assert set(GRAPH_SCALES) == {m for m in ReportMode if m.is_graph}
    assert [GRAPH_SCALES[m].buckets for m in GRAPH_SCALES] == [60, 60, 24, 31, 12, 10]


def test_minute_buckets_start_at_earliest_record() -> None:
    records = [
        _record(hour=10, minute=5, second=30),
        _record(hour=10, minute=3, second=59),
        _record(hour=10, minute=5, second=1),
    ]

    buckets = bucket_records(records, ReportMode.MGRAPH)

    assert len(buckets) == 60
    assert buckets[0] == ("2024-01-01 10:03", 1)
    assert buckets[2] == ("2024-01-01 10:05", 2)
    assert sum(n for _, n in buckets) == 3


def test_month_buckets_cross_year_boundary() -> None:
    records = [_record(year=2023, month=11), _record(year=2024, month=2), _record(year=2024, month=2)]

    buckets = bucket_records(records, ReportMode.MOGRAPH)

    assert buckets[0] == ("2023-11", 1)
    assert buckets[3] == ("2024-02", 2)
    assert buckets[-1][0] == "2024-10"


def test_records_after_window_and_invalid_dates_are_skipped() -> None:
    records = [
        _record(hour=0),
        _record(hour=23),
        _record(day=2, hour=0),
        _record(month=2, day=30, line_no=9),
        _record(year=1900),
    ]

    buckets = bucket_records(records, ReportMode.HGRAPH)

    assert sum(n for _, n in buckets) == 2


def test_no_timestamps_gives_no_buckets() -> None:
    assert bucket_records([_record(year=1900)], ReportMode.YGRAPH) == []


def test_report_mode_is_not_a_graph() -> None:
    with pytest.raises(ValueError):
        bucket_records([_record()], ReportMode.HASH)


def test_render_graph_scales_to_peak() -> None:
    lines = render_graph([("a", 10), ("bb", 5), ("c", 0)], width=10)

    assert lines == ["a  | ########## 10", "bb | ##### 5", "c  | 0"]


def test_render_graph_tick_and_wide() -> None:
    narrow = render_graph([("x", 4)], tick="*", width=4)
    wide = render_graph([("x", 4)], tick="*", wide=True, width=4)

    assert narrow == ["x | **** 4"]
    assert wide == ["x | ******** 4"]


def test_render_graph_small_counts_still_visible() -> None:
    lines = render_graph([("big", 1000), ("tiny", 1)], width=10)
    assert lines[1] == "tiny | # 1"


def test_raw_records_are_not_graphed() -> None:
    raw = raw_recognizer().parse(1, "free form text", current_year=2024)
    assert raw.year == 2024

    assert bucket_records([raw, _record(recognizer="raw")], ReportMode.DGRAPH) == []
    assert sum(n for _, n in bucket_records([raw, _record(hour=3)], ReportMode.HGRAPH)) == 1
