"""Intrusion detector (snort) alert log recognizer."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .base import Recognizer

# 10/11-14:32:52.123456  [**] [1:2003:8] MS-SQL Worm propagation attempt [**] ...
SNORT_PATTERN = (
    r"^(?P<date>(?P<month>[0-9]{2})/(?P<day>[0-9]{2})[-:]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})\.[0-9]+) +"
    r"(?P<log>.*)$"
)


def snort_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name="snort",
        priority=10,
        patterns=(SNORT_PATTERN,),
        search_dirs=tuple(search_dirs),
    )
