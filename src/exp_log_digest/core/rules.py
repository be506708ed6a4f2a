"""Rule file discovery and parsing.

Stopword, recognizer and fingerprint files live in a handful of well-known
directories. A caller may prepend extra directories; the bundled defaults
shipped with the package are searched last.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from pathlib import Path

logger = logging.getLogger(__name__)

FILTERS = "filters"
FINGERPRINTS = "fingerprints"
RECOGNIZERS = "recognizers"

_INSTALL_ROOTS: tuple[str, ...] = (
    "/var/lib/exp",
    "/usr/local/exp/var/lib",
    "/opt/exp/var/lib",
    "/var/lib/petit",
    "/usr/local/petit/var/lib",
    "/opt/petit/var/lib",
)

BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"

# PCRE spells named groups (?<name>...); Python wants (?P<name>...).
# Lookbehinds (?<= and (?<! are left alone.
_PCRE_NAMED_GROUP_RE = re.compile(r"\(\?<(?=[A-Za-z_])")


def search_dirs(family: str, extra_dirs: Iterable[str | Path] = ()) -> list[Path]:
    """Return the ordered directories searched for a rule family."""
    dirs = [Path(d) for d in extra_dirs]
    dirs.extend(Path(root) / family for root in _INSTALL_ROOTS)
    dirs.append(BUNDLED_DATA_DIR / family)
    return dirs


def find_rule_file(
    family: str,
    filename: str,
    extra_dirs: Iterable[str | Path] = (),
) -> Path | None:
    """Return the first matching file along the search path, or None."""
    for d in search_dirs(family, extra_dirs):
        candidate = d / filename
        if candidate.is_file():
            logger.debug("Found rule file %s", candidate)
            return candidate
    logger.debug("Rule file %s not found in any %s directory", filename, family)
    return None


def read_rule_lines(path: Path) -> list[str]:
    """Read the non-empty lines of a rule file."""
    with path.open(encoding="utf-8", errors="replace") as f:
        return [line for line in (raw.rstrip("\r\n") for raw in f) if line]


def _is_delimiter(c: str) -> bool:
    return not (c.isspace() or c.isalnum())


def _scan_segment(text: str, start: int, delim: str) -> int:
    """Index of the next unescaped delimiter at or after start, or -1."""
    i = start
    while i < len(text):
        c = text[i]
        if c == "\\":
            i += 2
            continue
        if c == delim:
            return i
        i += 1
    return -1


def split_rule(line: str, default: str = "#") -> tuple[str, str] | None:
    """Split a self-describing ``<d>regex<d>replacement<d>`` rule line.

    A line not starting with a delimiter is taken as a bare regex whose
    replacement is ``default``. Returns None for malformed lines (opening
    delimiter without a closing one).
    """
    if not line or not _is_delimiter(line[0]):
        return line, default

    delim = line[0]
    end = _scan_segment(line, 1, delim)
    if end < 0:
        return None

    regex = line[1:end]
    rest_start = end + 1
    rest_end = _scan_segment(line, rest_start, delim)
    if rest_end < 0:
        replacement = line[rest_start:].rstrip()
    else:
        replacement = line[rest_start:rest_end]
    replacement = replacement.replace("\\" + delim, delim)
    return regex, replacement


def compile_rule(regex: str, *, source: str | None = None) -> re.Pattern[str] | None:
    """Compile a rule expression, logging and dropping invalid ones."""
    try:
        return re.compile(_PCRE_NAMED_GROUP_RE.sub("(?P<", regex))
    except re.error as e:
        where = f" ({source})" if source else ""
        logger.warning("Error while compiling regexp %r%s: %s", regex, where, e)
        return None


def scan_rule_dirs(
    family: str,
    suffix: str,
    extra_dirs: Sequence[str | Path] = (),
) -> list[Path]:
    """List files with the given suffix in every search directory.

    Unlike find_rule_file, all directories contribute; files are name-sorted
    within each directory.
    """
    found: list[Path] = []
    for d in search_dirs(family, extra_dirs):
        try:
            entries = sorted(p for p in d.iterdir() if p.suffix == suffix and p.is_file())
        except OSError as e:
            logger.debug("Error opening directory %s: %s", d, e)
            continue
        logger.debug("Scanning directory %s (%d %s)", d, len(entries), "entry" if len(entries) == 1 else "entries")
        found.extend(entries)
    return found
