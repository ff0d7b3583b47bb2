"""Constants for the telnet runner."""

from __future__ import annotations

from pathlib import Path
from typing import Any

# Telnet control bytes

NUL_BYTE = 0x00
CR_BYTE = 0x0D  # Carriage return, terminates outbound commands
DC1_BYTE = 0x11  # Device control 1 (XON)
IAC_BYTE = 0xFF  # Interpret As Command byte

# Session defaults

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 23
DEFAULT_TIMEOUT = 10.0
DEFAULT_PROMPT = "$"
DEFAULT_ERR_PROMPT = "ERROR"
DEFAULT_ENCODING = "utf-8"
LOGIN_PROMPT = "Login:"
PASSWORD_PROMPT = "Password:"
LOGIN_SUCCESS_PROMPT = "OK"
MIN_PORT = 1
MAX_PORT = 65535

# CLI constants

CLI_ARGUMENTS: dict[str, list[tuple[Any]]] = {
    "connection": [
        (["-P", "--port"], {"type": int, "default": DEFAULT_PORT, "metavar": f"<{DEFAULT_PORT}>"}),
        (["-t", "--timeout"], {"type": float, "default": DEFAULT_TIMEOUT, "metavar": "<10>"}),
        (["--prompt"], {"default": DEFAULT_PROMPT, "metavar": f"<{DEFAULT_PROMPT}>"}),
        (["--err-prompt"], {"default": DEFAULT_ERR_PROMPT, "metavar": f"<{DEFAULT_ERR_PROMPT}>"}),
        (["-u", "--username"], {"help": "Login with this username when the inventory has none"}),
        (["-w", "--password"], {"help": "Password used together with --username"}),
    ],
    "operations": [
        (["-c", "--concurrency"], {"type": int, "default": 10, "metavar": "<10>"}),
        (
            ["-x", "--command"],
            {"action": "append", "default": [], "dest": "commands", "help": "Command to run (repeatable)"},
        ),
        (["-s", "--script"], {"help": "File with one command per line", "type": Path}),
        (["-v", "--verbose"], {"action": "count", "default": 0, "help": "Increase log verbosity"}),
    ],
    "files": [
        (["-i", "--input"], {"help": "Host inventory file path", "required": True, "type": Path}),
        (
            ["-if", "--input-format"],
            {"choices": ["csv", "json", "xlsx"], "default": "csv", "metavar": "<csv>|json|xlsx"},
        ),
        (["-o", "--output"], {"help": "Output file path (default: stdout)", "type": Path}),
        (
            ["-of", "--output-format"],
            {"choices": ["csv", "json", "plain", "xlsx"], "default": "plain", "metavar": "csv|json|<plain>|xlsx"},
        ),
    ],
}
CLI_HELP_DESCRIPTION: str = """Telnet runner: drive command-line interfaces over telnet.

This tool connects to every host in an inventory file, optionally logs
in, runs a list of commands waiting for the configured prompt after each
one, and collects the output. Use a script file or repeated --command
options to choose what to run, with customisable input and output options.
"""
CLI_HELP_EPILOGUE: str | None = "If an argument has a default, it's shown in <parentheses>."
CLI_HELP_NAME: str = "telnet_runner"
