from __future__ import annotations

import random
from collections.abc import Callable
from pathlib import Path

import pytest

from exp_log_digest.core.recognizers import RecognizerRegistry, default_registry


@pytest.fixture
def syslog_lines() -> list[str]:
    return [
        "Jan  5 08:00:01 web1 kernel: eth0 link up",
        "Jan  5 08:00:02 web1 dhclient[411]: bound to 10.0.0.5 -- renewal in 300 seconds",
        "Jan  5 08:00:03 web1 kernel: eth0 link up",
        "Jan  5 08:01:00 web1 cron[512]: job started",
        "Jan  5 08:01:05 web2 cron[513]: job started",
        "Jan  5 08:02:00 web2 kernel: disk sda1 remounted",
        "Jan  5 08:03:00 web2 kernel: eth0 link up",
        "Jan  5 08:04:00 web1 cron[514]: job started",
        "Jan  5 08:05:00 web1 kernel: eth0 link up",
        "Jan  5 08:06:00 web2 ntpd[77]: time reset",
        "Jan  5 08:07:00 web2 kernel: eth0 link up",
        "Jan  5 08:08:00 web1 kernel: eth0 link up",
    ]


@pytest.fixture
def securelog_lines() -> list[str]:
    return [
        f"Feb 10 12:00:{i:02d} gate sshd[{900 + i}]: Accepted publickey for alice from 192.0.2.{i} port 5{i:04d}"
        for i in range(12)
    ]


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], Path]:
    def _write(path: Path, lines: list[str]) -> Path:
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def rule_dir(tmp_path: Path) -> Callable[[str, dict[str, list[str]]], Path]:
    """Create a rule directory holding the given files."""

    def _make(name: str, files: dict[str, list[str]]) -> Path:
        d = tmp_path / name
        d.mkdir(exist_ok=True)
        for filename, lines in files.items():
            (d / filename).write_text("".join(line + "\n" for line in lines), encoding="utf-8")
        return d

    return _make


@pytest.fixture
def registry() -> RecognizerRegistry:
    return default_registry()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
