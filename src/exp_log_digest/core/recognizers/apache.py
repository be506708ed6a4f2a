"""Apache access and error log recognizers."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from .base import Recognizer

# 127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326
ACCESS_PATTERN = (
    r"^(?P<host>[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}\.[0-9]{1,3}) +(?P<ident>[^ ]*) +(?P<user>[^ ]*) +"
    r"\[(?P<date>(?P<day>[0-9][0-9]?)/(?P<strmonth>[A-Z][a-z]{2})/(?P<year>[0-9]{4}):"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2}) +[-+][0-9]{4})\] +"
    r'(?P<log>"(?P<query>[^"]+)" +(?P<status>[0-9]{3}) +(?P<contentlength>[0-9]+|-)'
    r'(?: +"(?P<referer>[^"]*)" +"(?P<agent>[^"]*)")?)$'
)

# [Wed Oct 11 14:32:52 2000] [error] [client 127.0.0.1] client denied by server configuration
ERROR_PATTERN = (
    r"^\[(?P<date>(?P<strday>[A-Z][a-z]{2}) +(?P<strmonth>[A-Z][a-z]{2}) +(?P<day>[0-9][0-9]?) +"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})(?:\.[0-9]+)? +(?P<year>[0-9]{4}))\] +"
    r"(?P<log>\[(?P<level>[a-z_:]+)\] +(?:\[pid [^]]+\] +)?"
    r"(?:\[client (?P<host>[^]:]+)(?::[0-9]+)?\] +)?(?P<message>.*))$"
)


def apache_access_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name="apache_access",
        priority=10,
        patterns=(ACCESS_PATTERN,),
        search_dirs=tuple(search_dirs),
    )


def apache_error_recognizer(search_dirs: Sequence[str | Path] = ()) -> Recognizer:
    return Recognizer(
        name="apache_error",
        priority=10,
        patterns=(ERROR_PATTERN,),
        search_dirs=tuple(search_dirs),
    )
