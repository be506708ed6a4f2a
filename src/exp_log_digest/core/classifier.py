"""Sampling classifier choosing the recognizer for a file."""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence

from .recognizers import Recognizer, RecognizerRegistry

logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10
MAX_ROUNDS = 100


class ClassificationError(RuntimeError):
    """No recognizer could be chosen for a file."""


def _first_match(registry: RecognizerRegistry, line: str) -> int | None:
    for index, recognizer in enumerate(registry.ordered):
        if recognizer.matches(line):
            return index
    return None


def classify(
    lines: Sequence[str],
    registry: RecognizerRegistry,
    *,
    rng: random.Random | None = None,
    sample_size: int = SAMPLE_SIZE,
    max_rounds: int = MAX_ROUNDS,
) -> Recognizer:
    """Choose a recognizer by repeated random sampling of lines.

    Each round draws ``sample_size`` lines with replacement and credits the
    first recognizer (in registry order) matching each line. Tallies
    accumulate across rounds; after every round the first recognizer whose
    acceptance rule holds wins.

    Raises ClassificationError for empty input, or when ``max_rounds`` rounds
    pass without any acceptance.
    """
    if not lines:
        raise ClassificationError("no lines to sample")
    if sample_size < 1:
        raise ValueError("sample_size must be >= 1")

    rng = rng or random.Random()
    ordered = registry.ordered
    threshold = sample_size // 4
    tally = [0] * len(ordered)
    nlines = len(lines)

    for round_no in range(1, max_rounds + 1):
        for _ in range(sample_size):
            index = rng.randrange(nlines)
            line = lines[index]
            logger.debug("Sample line %4d/%4d | %s", index + 1, nlines, line)
            hit = _first_match(registry, line)
            if hit is not None:
                logger.debug(" => %s", ordered[hit].name)
                tally[hit] += 1

        for recognizer, count in zip(ordered, tally):
            logger.debug("tally[%s] = %d (round %d)", recognizer.name, count, round_no)

        for recognizer, count in zip(ordered, tally):
            if recognizer.acceptance(count, threshold, sample_size):
                return recognizer

    raise ClassificationError(f"no recognizer accepted the file after {max_rounds} rounds")
