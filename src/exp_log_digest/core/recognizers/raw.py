"""Catch-all recognizer for lines no other dialect claims."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .base import Recognizer

RAW_NAME = "raw"
RAW_PATTERN = r"^(?P<log>.+)$"


def raw_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name=RAW_NAME,
        priority=0,
        patterns=(RAW_PATTERN,),
        search_dirs=tuple(search_dirs),
    )
