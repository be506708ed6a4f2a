"""Recognizer interface, acceptance rules and record construction."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from functools import cached_property
from pathlib import Path

from ..models import NOTHING, LogRecord
from ..rules import RECOGNIZERS, compile_rule, find_rule_file, read_rule_lines

logger = logging.getLogger(__name__)

AcceptanceRule = Callable[[int, int, int], bool]
ExtraCheck = Callable[[Mapping[str, str | None]], bool]

UNSTRUCTURED_YEAR = 1900  # year of records for unmatched lines

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_of(name: str) -> int:
    """Map a short English month name (Jan..Dec) to 1..12, or 0 if unknown."""
    try:
        return _MONTHS.index(name) + 1
    except ValueError:
        return 0


def tally_above_threshold(tally: int, threshold: int, sample_size: int) -> bool:
    """General acceptance rule."""
    return tally > threshold


def tally_covers_sample(tally: int, threshold: int, sample_size: int) -> bool:
    """Strict acceptance rule: a whole sample's worth of matching lines."""
    return tally >= sample_size


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def unstructured_record(line_no: int, line: str, recognizer: str) -> LogRecord:
    """Record for a line none of the candidate expressions matched."""
    message = collapse_whitespace(line)
    return LogRecord(
        line_no=line_no,
        year=UNSTRUCTURED_YEAR,
        month=1,
        day=1,
        hour=1,
        minute=1,
        second=1,
        host="",
        daemon="",
        message=message or NOTHING,
        recognizer=recognizer,
        raw=line,
    )


def _int_field(groups: Mapping[str, str | None], name: str, default: int) -> int:
    value = groups.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _month_field(groups: Mapping[str, str | None]) -> int:
    if groups.get("month"):
        return _int_field(groups, "month", 1)
    strmonth = groups.get("strmonth")
    if strmonth:
        return month_of(strmonth) or 1
    return 1


@dataclass(frozen=True)
class Recognizer:
    """A log dialect: candidate expressions, acceptance rule and parser.

    Candidate expressions are the built-in ``patterns`` followed by the lines
    of ``<name>.regexps`` found along the recognizer search path. They are
    compiled on first use and cached.
    """

    name: str
    priority: int
    patterns: Sequence[str]
    acceptance: AcceptanceRule = tally_above_threshold
    extra_check: ExtraCheck | None = None
    search_dirs: Sequence[str | Path] = field(default=(), compare=False)

    @cached_property
    def expressions(self) -> tuple[re.Pattern[str], ...]:
        sources = list(self.patterns)
        path = find_rule_file(RECOGNIZERS, f"{self.name}.regexps", self.search_dirs)
        if path is not None:
            sources.extend(read_rule_lines(path))
        compiled = tuple(
            p for p in (compile_rule(s, source=self.name) for s in sources) if p is not None
        )
        logger.debug("Recognizer %s: %d candidate expression(s)", self.name, len(compiled))
        return compiled

    def match(self, line: str) -> dict[str, str | None] | None:
        """Return the named groups of the first accepted match, else None."""
        for expr in self.expressions:
            m = expr.search(line)
            if m is None:
                continue
            groups = m.groupdict()
            if self.extra_check is None or self.extra_check(groups):
                return groups
        return None

    def matches(self, line: str) -> bool:
        return self.match(line) is not None

    def parse(self, line_no: int, line: str, *, current_year: int) -> LogRecord:
        """Parse a line into a LogRecord (unstructured if nothing matches)."""
        groups = self.match(line)
        if groups is None:
            return unstructured_record(line_no, line, self.name)

        log = groups.get("log")
        message = collapse_whitespace(log if log is not None else line)
        return LogRecord(
            line_no=line_no,
            year=_int_field(groups, "year", current_year),
            month=_month_field(groups),
            day=_int_field(groups, "day", 1),
            hour=_int_field(groups, "hour", 1),
            minute=_int_field(groups, "minute", 1),
            second=_int_field(groups, "second", 1),
            host=groups.get("host") or "",
            daemon=groups.get("daemon") or "",
            message=message or NOTHING,
            recognizer=self.name,
            raw=line,
        )
