"""Stopword filters: ordered regex replacement rules applied to keys."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from .models import MAX_LINE_SIZE, NOTHING
from .rules import FILTERS, compile_rule, find_rule_file, read_rule_lines, split_rule

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ScrubRule:
    pattern: re.Pattern[str]
    replacement: str


class ScrubFilter:
    """Ordered scrub rules for one (report type, file) pair.

    Rules run in load order, each against the output of the previous one.
    Scrubbed text never exceeds ``max_line_size - 1`` characters: a
    replacement that would overflow is skipped for that match.
    """

    def __init__(
        self,
        search_dirs: Sequence[str | Path] = (),
        *,
        max_line_size: int = MAX_LINE_SIZE,
    ) -> None:
        self._search_dirs = tuple(search_dirs)
        self._limit = max_line_size - 1
        self._rules: list[ScrubRule] = []

    @property
    def rules(self) -> tuple[ScrubRule, ...]:
        return tuple(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def add_rule(self, pattern: str | re.Pattern[str], replacement: str) -> bool:
        """Append one rule; returns False if the expression is invalid or empty."""
        if isinstance(pattern, str):
            if not pattern:
                return False
            compiled = compile_rule(pattern)
            if compiled is None:
                return False
        else:
            compiled = pattern
        self._rules.append(ScrubRule(compiled, replacement))
        return True

    def extend(self, filename: str, replacement: str | None = None) -> int:
        """Load rules from the first stopword file found along the search path.

        With a fixed ``replacement`` every line is a bare expression.
        Otherwise lines are self-describing ``/regex/replacement/`` rules.
        Returns the number of rules added (0 when no file is found).
        """
        path = find_rule_file(FILTERS, filename, self._search_dirs)
        if path is None:
            return 0

        added = 0
        for line_no, line in enumerate(read_rule_lines(path), start=1):
            if replacement is not None:
                regex, repl = line, replacement
            else:
                parsed = split_rule(line)
                if parsed is None:
                    logger.debug("%s:%d: no closing delimiter, skipped", path, line_no)
                    continue
                regex, repl = parsed
            if not regex:
                continue
            compiled = compile_rule(regex, source=f"{path}:{line_no}")
            if compiled is not None:
                self._rules.append(ScrubRule(compiled, repl))
                added += 1

        logger.debug("Loaded %d rule(s) from %s", added, path)
        return added

    def _replace_all(self, rule: ScrubRule, text: str) -> str:
        pieces: list[str] = []
        pos = 0
        length = len(text)
        for m in rule.pattern.finditer(text):
            start, end = m.span()
            # Empty matches only count when they cover the whole (empty) text.
            if start == end and text:
                continue
            grown = len(rule.replacement) - (end - start)
            if length + grown > self._limit:
                logger.warning(
                    "Replacement for %r would exceed %d characters, cannot replace",
                    rule.pattern.pattern,
                    self._limit,
                )
                continue
            pieces.append(text[pos:start])
            pieces.append(rule.replacement)
            pos = end
            length += grown
        if not pieces:
            return text
        pieces.append(text[pos:])
        return "".join(pieces)

    def scrub(self, text: str) -> str:
        """Apply every rule in order and return the rewritten text."""
        result = text[: self._limit]
        for rule in self._rules:
            result = self._replace_all(rule, result)
        return result

    def bleach(self, text: str) -> bool:
        """True if the text scrubs down to the nothing-of-interest sentinel."""
        return self.scrub(text) == NOTHING
