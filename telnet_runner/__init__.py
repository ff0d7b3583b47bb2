"""Scripted telnet automation package.

This package provides a blocking Telnet client for driving command-line
interfaces exposed over telnet by network equipment and legacy servers. It
sends commands, waits for a configured prompt or error prompt, refuses any
option negotiation the server starts, and keeps a transcript of the session.

A small runner on top of the client executes command scripts against many
hosts concurrently, one session per host, with Rich progress and logging.
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from .cli import (
    complete_progress,
    console,
    create_progress,
    log,
    parse_args,
    update_progress,
)
from .clients.telnet import ErrorKind, TelnetClient, TelnetError
from .runner import RunSettings, run_session, run_sessions
from .types import CommandResult, HostJob, SessionResult

__all__ = [
    "CommandResult",
    "ErrorKind",
    "HostJob",
    "RunSettings",
    "SessionResult",
    "TelnetClient",
    "TelnetError",
    "complete_progress",
    "console",
    "create_progress",
    "log",
    "parse_args",
    "run_session",
    "run_sessions",
    "update_progress",
]

try:
    __version__ = version("telnet-runner")
except PackageNotFoundError:
    __version__ = "0.0.0"
