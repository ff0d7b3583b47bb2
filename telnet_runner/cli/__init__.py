"""Command line interface components for the telnet runner.

This module provides CLI-related functionality including console output,
logging, progress tracking and inventory/result files for the command
line application built on the telnet client.
"""

from __future__ import annotations

from .args import parse_args
from .console import complete_progress, console, create_progress, log, set_verbosity, update_progress
from .files import FileReader, FileWriter, read_script
from .main import main

__all__ = [
    "FileReader",
    "FileWriter",
    "complete_progress",
    "console",
    "create_progress",
    "log",
    "main",
    "parse_args",
    "read_script",
    "set_verbosity",
    "update_progress",
]
