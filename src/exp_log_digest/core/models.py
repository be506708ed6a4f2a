"""Core data models for log digests."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .recognizers import Recognizer

MAX_LINE_SIZE = 4096
NOTHING = "#"  # scrubbed to nothing of interest


class ReportMode(str, Enum):
    """Output modes selectable from the command line."""

    HASH = "hash"
    WORDCOUNT = "wordcount"
    DAEMON = "daemon"
    HOST = "host"
    SGRAPH = "sgraph"
    MGRAPH = "mgraph"
    HGRAPH = "hgraph"
    DGRAPH = "dgraph"
    MOGRAPH = "mograph"
    YGRAPH = "ygraph"

    @property
    def is_graph(self) -> bool:
        return self.value.endswith("graph")


class SampleMode(str, Enum):
    """Whether report rows show the key or an original message."""

    NONE = "none"
    THRESHOLD = "threshold"
    ALL = "all"


@dataclass(frozen=True, slots=True)
class LogRecord:
    """Classified form of one log line."""

    line_no: int
    year: int
    month: int
    day: int
    hour: int
    minute: int
    second: int
    host: str
    daemon: str
    message: str
    recognizer: str
    raw: str | None = None


@dataclass(frozen=True, slots=True)
class LogFile:
    """Raw lines read from one input (file path or stdin)."""

    name: str
    size: int
    lines: tuple[str, ...]

    def __len__(self) -> int:
        return len(self.lines)


@dataclass(frozen=True, slots=True)
class ParsedFile:
    """A log file with the recognizer chosen for it and its records."""

    source: LogFile
    recognizer: Recognizer
    records: tuple[LogRecord, ...]

    @property
    def name(self) -> str:
        return self.source.name

    def __len__(self) -> int:
        return len(self.records)
