"""Syslog-family recognizers (BSD syslog, rsyslog ISO timestamps, securelog)."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from .base import Recognizer, tally_covers_sample

SYSLOG_PATTERN = (
    r"^(?P<date>(?P<strmonth>[A-Z][a-z]{2}) +(?P<day>[0-9][0-9]?) +"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})) +"
    r"(?P<host>[^ ]+) +(?P<daemon>[^ ]+): +(?P<log>.*)$"
)

RSYSLOG_PATTERN = (
    r"^(?P<date>(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})T"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})\.[0-9]+[-+][0-9]{2}:[0-9]{2}) +"
    r"(?P<host>[^ ]+) +(?P<daemon>[^ ]+): +(?P<log>.*)$"
)


def is_securelog(groups: Mapping[str, str | None]) -> bool:
    """Authentication traffic: sshd daemons or PAM module messages."""
    daemon = groups.get("daemon") or ""
    log = groups.get("log") or ""
    return daemon.startswith("sshd[") or log.startswith("pam_")


def is_plain_syslog(groups: Mapping[str, str | None]) -> bool:
    return not is_securelog(groups)


def syslog_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name="syslog",
        priority=10,
        patterns=(SYSLOG_PATTERN,),
        extra_check=is_plain_syslog,
        search_dirs=tuple(search_dirs),
    )


def securelog_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    # Same line shape as syslog, but only accepted when a whole sample agrees.
    return Recognizer(
        name="securelog",
        priority=20,
        patterns=(SYSLOG_PATTERN,),
        acceptance=tally_covers_sample,
        extra_check=is_securelog,
        search_dirs=tuple(search_dirs),
    )


def rsyslog_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name="rsyslog",
        priority=10,
        patterns=(RSYSLOG_PATTERN,),
        search_dirs=tuple(search_dirs),
    )
