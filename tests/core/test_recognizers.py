from __future__ import annotations

import pytest

from exp_log_digest.core.recognizers import (
    Recognizer,
    RecognizerRegistry,
    apache_access_recognizer,
    apache_error_recognizer,
    default_registry,
    month_of,
    raw_recognizer,
    rsyslog_recognizer,
    securelog_recognizer,
    snort_recognizer,
    syslog_recognizer,
)


def test_month_of() -> None:
    assert month_of("Jan") == 1
    assert month_of("Dec") == 12
    assert month_of("Foo") == 0


def test_syslog_parse_fields() -> None:
    record = syslog_recognizer().parse(
        3, "Mar  7 14:05:09 db1 postgres[88]:   checkpoint   starting", current_year=2024
    )

    assert (record.year, record.month, record.day) == (2024, 3, 7)
    assert (record.hour, record.minute, record.second) == (14, 5, 9)
    assert record.host == "db1"
    assert record.daemon == "postgres[88]"
    assert record.message == "checkpoint starting"
    assert record.line_no == 3
    assert record.recognizer == "syslog"


def test_securelog_and_syslog_are_disjoint() -> None:
    ssh = "Feb 10 12:00:01 gate sshd[901]: Accepted publickey for alice"
    pam = "Feb 10 12:00:01 gate su: pam_unix(su:session): session opened"
    plain = "Feb 10 12:00:01 gate kernel: eth0 up"

    secure = securelog_recognizer()
    syslog = syslog_recognizer()

    assert secure.matches(ssh) and not syslog.matches(ssh)
    assert secure.matches(pam) and not syslog.matches(pam)
    assert syslog.matches(plain) and not secure.matches(plain)


def test_rsyslog_parse_year_from_line() -> None:
    record = rsyslog_recognizer().parse(
        1, "2023-11-02T09:10:11.123456+01:00 box systemd[1]: Started job", current_year=2030
    )
    assert (record.year, record.month, record.day, record.hour) == (2023, 11, 2, 9)
    assert record.daemon == "systemd[1]"
    assert record.message == "Started job"


def test_apache_access_parse() -> None:
    line = '127.0.0.1 - frank [10/Oct/2000:13:55:36 -0700] "GET /apache_pb.gif HTTP/1.0" 200 2326'
    record = apache_access_recognizer().parse(1, line, current_year=2024)

    assert record.host == "127.0.0.1"
    assert (record.year, record.month, record.day) == (2000, 10, 10)
    assert record.message.startswith('"GET /apache_pb.gif')


def test_apache_error_parse_client_as_host() -> None:
    line = "[Wed Oct 11 14:32:52 2000] [error] [client 127.0.0.1] client denied by server configuration"
    record = apache_error_recognizer().parse(1, line, current_year=2024)

    assert record.host == "127.0.0.1"
    assert record.year == 2000
    assert record.message.startswith("[error]")


def test_snort_parse_uses_current_year() -> None:
    line = "10/11-14:32:52.123456  [**] [1:2003:8] MS-SQL Worm propagation attempt [**]"
    record = snort_recognizer().parse(1, line, current_year=2021)

    assert (record.year, record.month, record.day) == (2021, 10, 11)
    assert record.message.startswith("[**]")


def test_unmatched_line_becomes_unstructured_record() -> None:
    record = syslog_recognizer().parse(9, "garbage   line", current_year=2024)

    assert record.year == 1900
    assert (record.month, record.day, record.hour, record.minute, record.second) == (1, 1, 1, 1, 1)
    assert record.message == "garbage line"
    assert record.host == ""
    assert record.daemon == ""


def test_empty_unmatched_line_message_is_nothing() -> None:
    assert syslog_recognizer().parse(1, "", current_year=2024).message == "#"


def test_raw_matches_any_non_empty_line() -> None:
    raw = raw_recognizer()
    assert raw.matches("anything at all")
    assert not raw.matches("")


def test_extra_patterns_from_regexps_file(rule_dir) -> None:
    d = rule_dir("recognizers", {"snort.regexps": [r"^ALERT (?<log>.*)$"]})
    snort = snort_recognizer([d])

    assert len(snort.expressions) == 2
    assert snort.parse(1, "ALERT  port   scan", current_year=2024).message == "port scan"


def test_registry_orders_by_priority_then_name() -> None:
    names = [r.name for r in default_registry()]

    assert names[0] == "securelog"
    assert names[-1] == "raw"
    assert names[1:-1] == sorted(names[1:-1])


def test_registry_rejects_duplicate_names() -> None:
    with pytest.raises(ValueError):
        RecognizerRegistry([raw_recognizer(), raw_recognizer()])


def test_registry_catch_all() -> None:
    reg = RecognizerRegistry([syslog_recognizer(), raw_recognizer()])
    assert reg.catch_all.name == "raw"

    custom = Recognizer(name="only", priority=1, patterns=(r"^(?P<log>x)$",))
    assert RecognizerRegistry([custom]).catch_all is custom
