"""Fingerprints: collapse whole files that look like known noise.

A fingerprint library is a set of ``*.fp`` log excerpts. They are classified
and aggregated like any input into a reference dictionary. An input file
whose distinct keys mostly appear in that dictionary is replaced in the
report by a single entry named after the file.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from pathlib import Path

from .aggregator import Aggregator, ReportKind
from .log_service import load_inputs
from .models import ParsedFile, SampleMode
from .recognizers import UNSTRUCTURED_YEAR, RecognizerRegistry
from .rules import FINGERPRINTS, scan_rule_dirs

logger = logging.getLogger(__name__)

FINGERPRINT_SUFFIX = ".fp"
THRESHOLD_COEFFICIENT = 0.31


class FingerprintDeduplicator:
    """Collapses target files matching a prepared reference aggregator."""

    def __init__(
        self,
        reference: Aggregator,
        registry: RecognizerRegistry,
        *,
        coefficient: float = THRESHOLD_COEFFICIENT,
        current_year: int = UNSTRUCTURED_YEAR,
    ) -> None:
        self.reference = reference
        self.registry = registry
        self.coefficient = coefficient
        self.current_year = current_year

    @classmethod
    def from_files(
        cls,
        kind: ReportKind,
        files: Sequence[ParsedFile],
        registry: RecognizerRegistry,
        *,
        filter_dirs: Sequence[str | Path] = (),
        coefficient: float = THRESHOLD_COEFFICIENT,
        current_year: int = UNSTRUCTURED_YEAR,
    ) -> FingerprintDeduplicator:
        reference = Aggregator(
            kind,
            files,
            filter_enabled=True,
            filter_dirs=filter_dirs,
            sample=SampleMode.NONE,
        )
        reference.prepare()
        logger.info(
            "Fingerprint reference: %d file(s), %d key(s)", len(files), len(reference.entries)
        )
        return cls(reference, registry, coefficient=coefficient, current_year=current_year)

    @classmethod
    async def load(
        cls,
        kind: ReportKind,
        registry: RecognizerRegistry,
        *,
        fingerprint_dirs: Sequence[str | Path] = (),
        filter_dirs: Sequence[str | Path] = (),
        current_year: int,
        rng: random.Random | None = None,
    ) -> FingerprintDeduplicator:
        """Scan the fingerprint directories and build the reference dictionary."""
        paths = scan_rule_dirs(FINGERPRINTS, FINGERPRINT_SUFFIX, fingerprint_dirs)
        files = await load_inputs(paths, registry, current_year=current_year, rng=rng)
        return cls.from_files(
            kind, files, registry, filter_dirs=filter_dirs, current_year=current_year
        )

    def matches(self, keys: set[str]) -> int:
        return sum(1 for key in keys if self.reference.has_key(key))

    def run(self, target: Aggregator) -> int:
        """Collapse every matching file of target; returns how many collapsed."""
        collapsed = 0
        catch_all = self.registry.catch_all
        for index, file in enumerate(target.files):
            keys = target.file_keys(index)
            if not keys:
                continue
            count = self.matches(keys)
            threshold = self.coefficient * len(keys)
            logger.info(
                "Fingerprint %s: %d/%d key(s) known, threshold %.2f",
                file.name,
                count,
                len(keys),
                threshold,
            )
            if count <= threshold:
                continue

            name = Path(file.name).name
            record = catch_all.parse(0, name, current_year=self.current_year)
            target.collapse_file(keys, name, record)
            collapsed += 1
            logger.info("Collapsed %s into a single fingerprint entry", file.name)
        return collapsed
