"""Telnet protocol types module."""

from __future__ import annotations

from enum import IntEnum
from typing import NamedTuple

from telnet_runner.constants import CR_BYTE, DC1_BYTE, IAC_BYTE, NUL_BYTE

__all__ = [
    "CR_BYTE",
    "DC1_BYTE",
    "IAC_BYTE",
    "NUL_BYTE",
    "NegotiationResponse",
    "TelnetCommand",
    "TelnetOption",
    "TelnetSequence",
]


class TelnetCommand(IntEnum):
    """Telnet protocol commands."""

    IAC = IAC_BYTE  # Interpret As Command
    DONT = 254
    DO = 253
    WONT = 252
    WILL = 251

    @classmethod
    def is_negotiation(cls, cmd: int) -> bool:
        """Check if a command byte is a negotiation command.

        Returns:
            True if the command is a negotiation command, False otherwise
        """
        return cmd in {cls.DO, cls.DONT, cls.WILL, cls.WONT}

    @classmethod
    def is_local(cls, cmd: int) -> bool:
        """Check if a negotiation command concerns an option we would perform.

        DO and DONT ask about our side of the connection, WILL and WONT
        announce the remote side.

        Returns:
            True for DO/DONT, False otherwise
        """
        return cmd in {cls.DO, cls.DONT}


class TelnetOption(IntEnum):
    """Telnet protocol options, named for logging only."""

    BINARY = 0
    ECHO = 1
    SGA = 3  # Suppress Go Ahead
    STATUS = 5
    TIMING_MARK = 6
    TERMINAL_TYPE = 24
    NAWS = 31  # Negotiate About Window Size
    TERMINAL_SPEED = 32
    LINEMODE = 34
    NEW_ENVIRON = 39

    @classmethod
    def describe(cls, option: int) -> str:
        """Return a readable name for an option code.

        Returns:
            The option name, or its decimal code when unknown
        """
        try:
            return cls(option).name
        except ValueError:
            return str(option)


class TelnetSequence(NamedTuple):
    """Represents a complete telnet command sequence."""

    command: int
    option: int

    @classmethod
    def create_command(cls, command: int, option: int) -> bytes:
        """Create a simple telnet command sequence.

        Returns:
            The created command sequence
        """
        return bytes([TelnetCommand.IAC, command, option])


class NegotiationResponse:
    """Helper class for building negotiation responses."""

    @staticmethod
    def reject(command: int, option: int) -> bytes:
        """Reject a negotiation by responding negatively.

        This client never enables an option, so it always answers:
        - WONT in response to DO or DONT
        - DONT in response to WILL or WONT

        Args:
            command: The received command (DO, DONT, WILL, WONT)
            option: The option being negotiated

        Returns:
            The refusal to send back

        Raises:
            ValueError: If the command is not a negotiation command
        """
        if not TelnetCommand.is_negotiation(command):
            msg = f"Not a negotiation command: {command}"
            raise ValueError(msg)
        if TelnetCommand.is_local(command):
            return TelnetSequence.create_command(TelnetCommand.WONT, option)
        return TelnetSequence.create_command(TelnetCommand.DONT, option)
