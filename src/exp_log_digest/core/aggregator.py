"""Frequency aggregation of scrubbed keys and report display.

Four report kinds share one engine and differ only in how keys are taken
from a record: the whole "daemon message" line, single message words, the
daemon name or the host name.
"""

from __future__ import annotations

import logging
import random
import re
import statistics
import sys
from collections.abc import Callable, Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, TextIO

from .models import NOTHING, LogRecord, ParsedFile, ReportMode, SampleMode
from .scrub import ScrubFilter

if TYPE_CHECKING:
    from .fingerprint import FingerprintDeduplicator

logger = logging.getLogger(__name__)

SAMPLE_THRESHOLD = 3

KeyFunction = Callable[[LogRecord, ScrubFilter], Iterable[str]]

_WORD_SPLIT_RE = re.compile(r"[ \t]+")


def hash_keys(record: LogRecord, scrub_filter: ScrubFilter) -> list[str]:
    """The whole line: ``"<daemon> <message>"`` (message alone without daemon)."""
    text = f"{record.daemon} {record.message}" if record.daemon else record.message
    return [scrub_filter.scrub(text)]


def word_keys(record: LogRecord, scrub_filter: ScrubFilter) -> list[str]:
    """Every space/tab separated token of the scrubbed message."""
    return [w for w in _WORD_SPLIT_RE.split(scrub_filter.scrub(record.message)) if w]


# An empty daemon or host maps to NOTHING and is purged, not reported as a row.
def daemon_keys(record: LogRecord, scrub_filter: ScrubFilter) -> list[str]:
    return [scrub_filter.scrub(record.daemon) if record.daemon else NOTHING]


def host_keys(record: LogRecord, scrub_filter: ScrubFilter) -> list[str]:
    return [scrub_filter.scrub(record.host) if record.host else NOTHING]


@dataclass(frozen=True, slots=True)
class ReportKind:
    """Key extraction and defaults for one report variant.

    ``name`` is also the prefix of the stopword files loaded for it.
    """

    name: str
    keys: KeyFunction
    default_sample: SampleMode = SampleMode.NONE


HASH = ReportKind("hash", hash_keys, SampleMode.THRESHOLD)
WORDCOUNT = ReportKind("words", word_keys)
DAEMON = ReportKind("daemon", daemon_keys)
HOST = ReportKind("host", host_keys)

REPORT_KINDS: dict[ReportMode, ReportKind] = {
    ReportMode.HASH: HASH,
    ReportMode.WORDCOUNT: WORDCOUNT,
    ReportMode.DAEMON: DAEMON,
    ReportMode.HOST: HOST,
}


@dataclass(slots=True)
class DictEntry:
    key: str
    records: list[LogRecord] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.records)


@dataclass(frozen=True, slots=True)
class ReportRow:
    count: int
    key: str
    text: str  # key, or a sampled original message


class Aggregator:
    """Key -> records dictionary built from classified files.

    ``prepare()`` builds one filter per file, fills the dictionary, drops the
    ``"#"`` bucket, runs the fingerprint deduplicator (if any) and finally
    computes the mean and population standard deviation of the counts.
    """

    def __init__(
        self,
        kind: ReportKind,
        files: Sequence[ParsedFile],
        *,
        filter_enabled: bool = True,
        filter_dirs: Sequence[str | Path] = (),
        sample: SampleMode | None = None,
        deviation: int = 0,
        deduplicator: FingerprintDeduplicator | None = None,
        rng: random.Random | None = None,
    ) -> None:
        if deviation < 0:
            raise ValueError("deviation must be >= 0")
        self.kind = kind
        self.files = list(files)
        self.sample = sample or kind.default_sample
        self.deviation = deviation
        self._filter_enabled = filter_enabled
        self._filter_dirs = tuple(filter_dirs)
        self._deduplicator = deduplicator
        self._rng = rng or random.Random()
        self._filters: list[ScrubFilter] = []
        self._dict: dict[str, DictEntry] = {}
        self._prepared = False
        self.mean = 0.0
        self.stddev = 0.0

    # -- filters -----------------------------------------------------------

    def _build_filter(self, file: ParsedFile) -> ScrubFilter:
        scrub_filter = ScrubFilter(self._filter_dirs)
        if self._filter_enabled:
            scrub_filter.extend(f"{self.kind.name}.stopwords", NOTHING)
            scrub_filter.extend(f"{self.kind.name}.{file.recognizer.name}.stopwords")
        logger.debug("Filter for %s: %d rule(s)", file.name, len(scrub_filter))
        return scrub_filter

    def filter_for(self, index: int) -> ScrubFilter:
        if len(self._filters) != len(self.files):
            self._filters = [self._build_filter(f) for f in self.files]
        return self._filters[index]

    # -- dictionary --------------------------------------------------------

    def _file_items(self, index: int) -> Iterator[tuple[str, LogRecord]]:
        scrub_filter = self.filter_for(index)
        for record in self.files[index].records:
            for key in self.kind.keys(record, scrub_filter):
                yield key, record

    def _increment(self, key: str, record: LogRecord) -> int:
        entry = self._dict.get(key)
        if entry is None:
            entry = self._dict[key] = DictEntry(key)
        entry.records.append(record)
        return entry.count

    @property
    def entries(self) -> Mapping[str, DictEntry]:
        return MappingProxyType(self._dict)

    @property
    def total(self) -> int:
        return sum(e.count for e in self._dict.values())

    def has_key(self, key: str) -> bool:
        return key in self._dict

    def file_keys(self, index: int) -> set[str]:
        """Distinct scrubbed keys of one file (the sentinel excluded)."""
        return {key for key, _ in self._file_items(index) if key != NOTHING}

    def collapse_file(self, keys: Iterable[str], representative_key: str, record: LogRecord) -> None:
        """Replace a file's keys with one entry counted once under representative_key."""
        for key in keys:
            self._dict.pop(key, None)
        self._increment(representative_key, record)

    # -- prepare / display -------------------------------------------------

    def _fill(self) -> None:
        for index, file in enumerate(self.files):
            n = 0
            for key, record in self._file_items(index):
                self._increment(key, record)
                n += 1
            logger.info("Filled %d key(s) from %s", n, file.name)
        self._dict.pop(NOTHING, None)

    def _compute_statistics(self) -> None:
        counts = [e.count for e in self._dict.values()]
        if counts:
            self.mean = statistics.fmean(counts)
            self.stddev = statistics.pstdev(counts)
        else:
            self.mean = self.stddev = 0.0
        logger.info("Statistics: %d key(s), mean %.3f, stddev %.3f", len(counts), self.mean, self.stddev)

    def prepare(self) -> None:
        self._dict.clear()
        self._filters = [self._build_filter(f) for f in self.files]
        self._fill()
        if self._deduplicator is not None:
            self._deduplicator.run(self)
        self._compute_statistics()
        self._prepared = True

    def _is_unusual(self, count: int) -> bool:
        if self.deviation == 0:
            return True
        return abs(count - self.mean) > self.deviation * self.stddev

    def _row_text(self, entry: DictEntry) -> str:
        if self.sample is SampleMode.THRESHOLD:
            if entry.count <= SAMPLE_THRESHOLD:
                return entry.records[0].message
            return entry.key
        if self.sample is SampleMode.ALL:
            return self._rng.choice(entry.records).message
        return entry.key

    def rows(self) -> list[ReportRow]:
        """Rows by descending count then ascending key, deviation-filtered."""
        if not self._prepared:
            self.prepare()
        ordered = sorted(self._dict.values(), key=lambda e: (-e.count, e.key))
        return [
            ReportRow(count=e.count, key=e.key, text=self._row_text(e))
            for e in ordered
            if self._is_unusual(e.count)
        ]

    def display(self, out: TextIO | None = None) -> int:
        """Print ``count:<TAB>text`` rows; returns the number of rows."""
        out = out or sys.stdout
        logger.info("Sample type: %s", self.sample.value)
        rows = self.rows()
        for row in rows:
            print(f"{row.count}:\t{row.text}", file=out)
        return len(rows)
