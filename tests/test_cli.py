from __future__ import annotations

import io
import random
from pathlib import Path

import pytest

from exp_log_digest.cli import VERSION_TEXT, main
from exp_log_digest.core.models import ReportMode, SampleMode
from exp_log_digest.core.options import ReportOptions
from exp_log_digest.report import run_report


def test_no_mode_and_no_file_prints_version(capsys) -> None:
    main([])
    assert capsys.readouterr().out.strip() == VERSION_TEXT


def test_version_flag(capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["-V"])
    assert exc.value.code == 0
    assert "ExP version" in capsys.readouterr().out


@pytest.mark.parametrize(
    "argv",
    [
        ["-x", "-w", "f.log"],
        ["-x", "--wide", "f.log"],
        ["-x", "-t", "*", "f.log"],
        ["-s", "--nofilter", "f.log"],
        ["-m", "--fingerprint", "f.log"],
        ["-d", "--allsample", "f.log"],
        ["-x", "--dev", "3", "f.log"],
        ["f.log"],
    ],
)
def test_invalid_option_combinations_exit_2(argv: list[str]) -> None:
    with pytest.raises(SystemExit) as exc:
        main(argv)
    assert exc.value.code == 2


def test_option_validation_error_exits_2(tmp_path: Path, capsys) -> None:
    with pytest.raises(SystemExit) as exc:
        main(["-s", "--tick", "", str(tmp_path / "f.log")])
    assert exc.value.code == 2
    assert "Error" in capsys.readouterr().err


def test_host_report(tmp_path: Path, write_lines, syslog_lines, capsys) -> None:
    path = write_lines(tmp_path / "messages", syslog_lines)

    main(["-H", "--seed", "1", str(path)])

    assert capsys.readouterr().out.splitlines() == ["7:\tweb1", "5:\tweb2"]


def test_hash_report_nofilter(tmp_path: Path, write_lines, capsys) -> None:
    path = write_lines(tmp_path / "app.log", ["disk full"] * 3 + ["login ok"])

    main(["-x", "--nofilter", "--nosample", "--seed", "1", str(path)])

    assert capsys.readouterr().out.splitlines() == ["3:\tdisk full", "1:\tlogin ok"]


def test_hour_graph(tmp_path: Path, write_lines, syslog_lines, capsys) -> None:
    path = write_lines(tmp_path / "messages", syslog_lines)

    main(["-X", "--tick", "=", "--year", "2024", "--seed", "1", str(path)])

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 24
    assert lines[0].startswith("2024-01-05 08:00 | ===")
    assert lines[0].endswith(" 12")


def test_unreadable_input_prints_nothing(tmp_path: Path, capsys) -> None:
    main(["-x", str(tmp_path / "missing.log")])
    assert capsys.readouterr().out == ""


@pytest.mark.asyncio
async def test_run_report_wordcount(tmp_path: Path, write_lines) -> None:
    path = write_lines(tmp_path / "app.log", ["red blue", "red green", "red"])
    out = io.StringIO()
    options = ReportOptions(mode=ReportMode.WORDCOUNT, filter=False, sample=SampleMode.NONE)

    n = await run_report(options, [path], out=out, rng=random.Random(0))

    assert n == 3
    assert out.getvalue().splitlines() == ["3:\tred", "1:\tblue", "1:\tgreen"]


@pytest.mark.asyncio
async def test_run_report_reads_env_filter_dirs(tmp_path: Path, write_lines, rule_dir, monkeypatch) -> None:
    d = rule_dir("filters", {"hash.raw.stopwords": ["/[0-9]+/N/"]})
    monkeypatch.setenv("EXP_FILTER_DIRS", str(d))
    path = write_lines(tmp_path / "app.log", ["retry 1", "retry 2", "retry 3", "retry 4"])
    out = io.StringIO()

    await run_report(ReportOptions(mode=ReportMode.HASH), [path], out=out, rng=random.Random(0))

    assert out.getvalue().splitlines() == ["4:\tretry N"]
