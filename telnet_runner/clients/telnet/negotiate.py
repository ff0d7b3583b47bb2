"""Telnet protocol negotiation helper class."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from telnet_runner.cli.console import log

from .errors import ProtocolError, UnexpectedEndOfStreamError
from .types import NegotiationResponse, TelnetCommand, TelnetOption

if TYPE_CHECKING:
    from collections.abc import Callable


@dataclass(slots=True)
class TelnetNegotiator:
    """Helper class to refuse every telnet option the remote side offers.

    The negotiator is handed control right after an IAC byte has been read.
    It pulls the rest of the sequence itself and returns the reply to send.
    """

    # Tracking refused options
    refused_local: set[int] = field(default_factory=set)
    refused_remote: set[int] = field(default_factory=set)

    def handle_command(self, next_byte: Callable[[], int | None]) -> bytes:
        """Consume one command sequence following an IAC byte.

        Args:
            next_byte: Pulls the next byte from the stream, None at end of stream

        Returns:
            The refusal to send to the server

        Raises:
            ProtocolError: If the command byte is a doubled IAC or unknown
            UnexpectedEndOfStreamError: If the stream ends mid-sequence
        """
        cmd = self._pull(next_byte)

        if cmd == TelnetCommand.IAC:
            msg = "Unexpected doubled introducer"
            raise ProtocolError(msg)
        if not TelnetCommand.is_negotiation(cmd):
            msg = f"Unknown control byte {cmd}"
            raise ProtocolError(msg)

        option = self._pull(next_byte)
        return self._handle_negotiation(cmd, option)

    def _handle_negotiation(self, cmd: int, option: int) -> bytes:
        """Record and refuse a single negotiation command.

        Args:
            cmd: The telnet command (DO/DONT/WILL/WONT)
            option: The option being negotiated

        Returns:
            The response to send to the server
        """
        if TelnetCommand.is_local(cmd):
            self.refused_local.add(option)
        else:
            self.refused_remote.add(option)
        log.debug(
            "Refusing %s %s",
            TelnetCommand(cmd).name,
            TelnetOption.describe(option),
        )
        return NegotiationResponse.reject(cmd, option)

    @staticmethod
    def _pull(next_byte: Callable[[], int | None]) -> int:
        byte = next_byte()
        if byte is None:
            msg = "Stream ended inside a telnet command sequence"
            raise UnexpectedEndOfStreamError(msg)
        return byte

    def reset(self) -> None:
        """Forget previously refused options."""
        self.refused_local.clear()
        self.refused_remote.clear()
