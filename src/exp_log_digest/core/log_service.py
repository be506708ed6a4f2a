"""Log loading and classification.

This module is the integration point that reads log files and returns them
classified, with one record per line.
"""

from __future__ import annotations

import gzip
import logging
import random
import sys
from collections.abc import Sequence
from contextlib import asynccontextmanager
from pathlib import Path

import aiofiles
from aiofiles.threadpool import wrap

from .classifier import ClassificationError, classify
from .models import MAX_LINE_SIZE, LogFile, ParsedFile
from .recognizers import RecognizerRegistry

logger = logging.getLogger(__name__)

STDIN = "-"


@asynccontextmanager
async def _open_text(path: Path, *, encoding: str, decode_errors: str):
    """Open a log file for async text reading (plain or gzip)."""
    if path.suffix.lower() == ".gz":
        f = gzip.open(path, mode="rt", encoding=encoding, errors=decode_errors)
        af = wrap(f)
        try:
            yield af
        finally:
            await af.close()
    else:
        async with aiofiles.open(path, encoding=encoding, errors=decode_errors) as f:
            yield f


async def _read_lines(f, *, max_line_size: int) -> list[str]:
    limit = max_line_size - 1
    lines: list[str] = []
    truncated = 0
    async for raw in f:
        line = raw.rstrip("\r\n")
        if len(line) > limit:
            logger.info("Truncating line %d", len(lines))
            truncated += 1
            line = line[:limit]
        lines.append(line)

    if truncated:
        logger.warning(
            "%d line%s too long, truncated to %d characters",
            truncated,
            "s" if truncated > 1 else "",
            limit,
        )
    logger.debug("Read %d line%s", len(lines), "s" if len(lines) != 1 else "")
    return lines


async def read_log_file(
    log_path: str | Path,
    *,
    max_line_size: int = MAX_LINE_SIZE,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> LogFile:
    """Read every line of a file (``"-"`` for stdin) into a LogFile."""
    if str(log_path) == STDIN:
        logger.debug("Using stdin")
        lines = await _read_lines(wrap(sys.stdin), max_line_size=max_line_size)
        size = sum(len(line.encode(encoding, errors="replace")) + 1 for line in lines)
        return LogFile(name=STDIN, size=size, lines=tuple(lines))

    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")

    logger.debug("Opening file: %s", path)
    size = path.stat().st_size
    async with _open_text(path, encoding=encoding, decode_errors=decode_errors) as f:
        lines = await _read_lines(f, max_line_size=max_line_size)
    return LogFile(name=str(log_path), size=size, lines=tuple(lines))


def parse_log_file(
    file: LogFile,
    registry: RecognizerRegistry,
    *,
    current_year: int,
    rng: random.Random | None = None,
) -> ParsedFile | None:
    """Classify a file and parse its lines; None if it cannot be classified."""
    try:
        recognizer = classify(file.lines, registry, rng=rng)
    except ClassificationError as e:
        logger.warning("Input recognizer not found for file %s: %s", file.name, e)
        return None

    logger.info('Using recognizer "%s" for file %s', recognizer.name, file.name)
    records = tuple(
        recognizer.parse(line_no, line, current_year=current_year)
        for line_no, line in enumerate(file.lines, start=1)
    )
    return ParsedFile(source=file, recognizer=recognizer, records=records)


async def load_inputs(
    paths: Sequence[str | Path],
    registry: RecognizerRegistry,
    *,
    current_year: int,
    rng: random.Random | None = None,
    max_line_size: int = MAX_LINE_SIZE,
) -> list[ParsedFile]:
    """Read and classify inputs in order, skipping unreadable or unknown ones."""
    out: list[ParsedFile] = []
    for i, p in enumerate(paths, start=1):
        logger.info("Input %d/%d: %s", i, len(paths), p)
        try:
            file = await read_log_file(p, max_line_size=max_line_size)
        except OSError as e:
            logger.warning("Cannot read %s: %s", p, e)
            continue
        parsed = parse_log_file(file, registry, current_year=current_year, rng=rng)
        if parsed is not None:
            out.append(parsed)
    logger.debug("Input done")
    return out
