"""Type definitions module for scripted telnet sessions.

This module contains dataclass definitions and type hints used throughout the
telnet runner package. It provides standardised data structures for describing
the hosts a batch run targets and the results each session produces.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, TypeAlias

JSON_TYPE: TypeAlias = "bool | dict[str, JSON_TYPE] | float | int | list[JSON_TYPE] | str | None"


@dataclass(slots=True, frozen=True)
class HostJob:
    """A single host to drive, as read from the inventory file."""

    host: str
    port: int = 23
    username: str | None = None
    password: str | None = None
    prompt: str | None = None
    err_prompt: str | None = None

    @classmethod
    def from_row(cls, row: dict[str, Any], default_port: int = 23) -> HostJob:
        """Build a job from an inventory row, ignoring blank cells.

        Raises:
            ValueError: If the row has no host or an invalid port.
        """
        values = {key: str(value).strip() for key, value in row.items() if key and value is not None}
        values = {key: value for key, value in values.items() if value}
        if not values.get("host"):
            msg = f"Inventory row has no host: {row!r}"
            raise ValueError(msg)
        return cls(
            host=values["host"],
            port=int(values.get("port", default_port)),
            username=values.get("username"),
            password=values.get("password"),
            prompt=values.get("prompt"),
            err_prompt=values.get("err_prompt"),
        )


@dataclass(slots=True)
class CommandResult:
    """Outcome of one command executed on a host."""

    command: str
    output: str = ""
    error: str | None = None

    @property
    def success(self) -> bool:
        """Whether the command completed without error."""
        return self.error is None


@dataclass(slots=True)
class SessionResult:
    """Outcome of a whole scripted session against one host."""

    host: str
    port: int
    success: bool = False
    time_ms: float = 0.0
    error: str | None = None
    error_kind: str | None = None
    commands: list[CommandResult] = field(default_factory=list)

    def as_dict(self) -> dict[str, JSON_TYPE]:
        """Convert the result to a dictionary.

        Returns:
            Dictionary representation of the result
        """
        return {
            "host": self.host,
            "port": self.port,
            "success": self.success,
            "time_ms": self.time_ms,
            "error": self.error,
            "error_kind": self.error_kind,
            "output": "\n".join(
                f"{result.command}: {result.output if result.success else result.error}"
                for result in self.commands
            ),
        }
