"""Run options and configuration resolution."""

from __future__ import annotations

import os
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .models import ReportMode, SampleMode

FILTER_DIRS_ENV = "EXP_FILTER_DIRS"
FINGERPRINT_DIRS_ENV = "EXP_FINGERPRINT_DIRS"
RECOGNIZER_DIRS_ENV = "EXP_RECOGNIZER_DIRS"


class ReportOptions(BaseModel):
    """Fully resolved options for one run."""

    model_config = ConfigDict(frozen=True)

    mode: ReportMode
    filter: bool = True
    fingerprint: bool = False
    sample: SampleMode | None = Field(
        default=None, description="None selects the report's default sample mode."
    )
    deviation: int = Field(default=0, ge=0, le=2)
    year: int | None = Field(default=None, ge=1)
    tick: str = Field(default="#", min_length=1)
    wide: bool = False
    filter_dirs: tuple[str, ...] = ()
    fingerprint_dirs: tuple[str, ...] = ()
    recognizer_dirs: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _fingerprint_needs_report(self) -> ReportOptions:
        if self.mode.is_graph and self.fingerprint:
            raise ValueError("fingerprinting is only available for report modes")
        return self


def _env_dirs(name: str) -> tuple[str, ...]:
    raw = os.getenv(name)
    if not raw:
        return ()
    return tuple(d for d in raw.split(os.pathsep) if d)


def resolve_report_options(options: ReportOptions) -> ReportOptions:
    """Return options with directories from the environment appended."""
    extra = {
        "filter_dirs": options.filter_dirs + _env_dirs(FILTER_DIRS_ENV),
        "fingerprint_dirs": options.fingerprint_dirs + _env_dirs(FINGERPRINT_DIRS_ENV),
        "recognizer_dirs": options.recognizer_dirs + _env_dirs(RECOGNIZER_DIRS_ENV),
    }
    if all(extra[k] == getattr(options, k) for k in extra):
        return options
    return options.model_copy(update=extra)


def current_year(options: ReportOptions | None = None) -> int:
    """The year assumed for timestamps that carry none."""
    if options is not None and options.year is not None:
        return options.year
    return datetime.now().year
