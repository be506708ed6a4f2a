"""Log dialect recognizers.

Each recognizer pairs candidate expressions for one log dialect with the
acceptance rule used while classifying files and the parser producing
records.
"""

from __future__ import annotations

from .apache import apache_access_recognizer, apache_error_recognizer
from .base import (
    UNSTRUCTURED_YEAR,
    Recognizer,
    month_of,
    tally_above_threshold,
    tally_covers_sample,
    unstructured_record,
)
from .raw import RAW_NAME, raw_recognizer
from .registry import RecognizerRegistry, default_registry
from .snort import snort_recognizer
from .syslog import rsyslog_recognizer, securelog_recognizer, syslog_recognizer

__all__ = [
    "RAW_NAME",
    "UNSTRUCTURED_YEAR",
    "Recognizer",
    "RecognizerRegistry",
    "apache_access_recognizer",
    "apache_error_recognizer",
    "default_registry",
    "month_of",
    "raw_recognizer",
    "rsyslog_recognizer",
    "securelog_recognizer",
    "snort_recognizer",
    "syslog_recognizer",
    "tally_above_threshold",
    "tally_covers_sample",
    "unstructured_record",
]
