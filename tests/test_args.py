"""Unit tests for the command line argument parser."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from telnet_runner.cli.args import parse_args
from telnet_runner.cli.console import log

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture(autouse=True)
def restore_log_level() -> Generator[None]:
    """Restore the package log level changed by parse_args."""
    level = log.level
    yield
    log.setLevel(level)


def test_parse_args_defaults() -> None:
    """Test defaults for a minimal command line."""
    args = parse_args(["-i", "hosts.csv", "-x", "show version"])

    if args.input != Path("hosts.csv") or args.commands != ["show version"]:
        pytest.fail(f"Unexpected arguments: {args}")
    if (args.port, args.timeout, args.prompt, args.err_prompt) != (23, 10.0, "$", "ERROR"):
        pytest.fail(f"Unexpected session defaults: {args}")
    if (args.input_format, args.output_format, args.concurrency) != ("csv", "plain", 10):
        pytest.fail(f"Unexpected file defaults: {args}")


def test_parse_args_repeated_commands_and_script() -> None:
    """Test repeated commands and a script file."""
    args = parse_args(["-i", "hosts.json", "-if", "json", "-x", "a", "-x", "b", "-s", "run.txt", "--prompt", "#"])

    if args.commands != ["a", "b"] or args.script != Path("run.txt") or args.prompt != "#":
        pytest.fail(f"Unexpected arguments: {args}")


@pytest.mark.parametrize(
    ("flags", "level"),
    [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
)
def test_parse_args_verbosity(flags: list[str], level: int) -> None:
    """Test that -v flags set the package log level."""
    parse_args(["-i", "hosts.csv", "-x", "a", *flags])

    if log.level != level:
        pytest.fail(f"Expected {logging.getLevelName(level)}, got {logging.getLevelName(log.level)}")


def test_parse_args_requires_commands() -> None:
    """Test that a run without commands is rejected."""
    with pytest.raises(SystemExit):
        parse_args(["-i", "hosts.csv"])


def test_parse_args_rejects_bad_port() -> None:
    """Test that out of range ports are rejected."""
    with pytest.raises(SystemExit):
        parse_args(["-i", "hosts.csv", "-x", "a", "-P", "70000"])


def test_parse_args_without_arguments_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    """Test that running bare prints help and exits cleanly."""
    with pytest.raises(SystemExit) as exc_info:
        parse_args([])

    if exc_info.value.code != 0 or "telnet_runner" not in capsys.readouterr().out:
        pytest.fail("Expected help output and exit code 0")
