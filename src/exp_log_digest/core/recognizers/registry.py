"""Recognizer registry: the ordered set of dialects a run can choose from."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from .apache import apache_access_recognizer, apache_error_recognizer
from .base import Recognizer
from .raw import RAW_NAME, raw_recognizer
from .snort import snort_recognizer
from .syslog import rsyslog_recognizer, securelog_recognizer, syslog_recognizer

logger = logging.getLogger(__name__)


class RecognizerRegistry:
    """Recognizers ordered by descending priority, then ascending name."""

    def __init__(self, recognizers: Iterable[Recognizer]) -> None:
        ordered = sorted(recognizers, key=lambda r: (-r.priority, r.name))
        names = [r.name for r in ordered]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate recognizer names: {names}")
        self._ordered: tuple[Recognizer, ...] = tuple(ordered)
        self._by_name = {r.name: r for r in ordered}

        logger.debug("Sorted recognizers:")
        for i, r in enumerate(self._ordered, start=1):
            logger.debug("%2d: %s (%d)", i, r.name, r.priority)

    @property
    def ordered(self) -> tuple[Recognizer, ...]:
        return self._ordered

    def named(self, name: str) -> Recognizer:
        return self._by_name[name]

    @property
    def catch_all(self) -> Recognizer:
        """The lowest-priority recognizer, used for synthesized records."""
        return self._by_name.get(RAW_NAME) or self._ordered[-1]

    def __iter__(self) -> Iterator[Recognizer]:
        return iter(self._ordered)

    def __len__(self) -> int:
        return len(self._ordered)


def default_registry(extra_dirs: Sequence[str | Path] = ()) -> RecognizerRegistry:
    """Registry with every built-in dialect."""
    return RecognizerRegistry(
        factory(extra_dirs)
        for factory in (
            syslog_recognizer,
            rsyslog_recognizer,
            securelog_recognizer,
            apache_access_recognizer,
            apache_error_recognizer,
            snort_recognizer,
            raw_recognizer,
        )
    )
