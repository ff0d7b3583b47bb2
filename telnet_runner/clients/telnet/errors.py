"""Telnet client error types.

Every failure raised by the client derives from ``TelnetError`` and carries an
``ErrorKind`` so callers can branch on the kind of failure without matching on
exception classes. Where a partial response had been collected when the failure
happened, it is kept on the exception as ``buffer``.
"""

from __future__ import annotations

from enum import StrEnum
from typing import ClassVar


class ErrorKind(StrEnum):
    """Kinds of failure a telnet session can report."""

    CONNECTION = "connection"
    CONNECTION_CLOSED = "connection_closed"
    TIMEOUT = "timeout"
    END_OF_STREAM = "end_of_stream"
    REMOTE = "remote"
    PROTOCOL = "protocol"
    WRITE_FAILED = "write_failed"
    LOGIN_FAILED = "login_failed"


class TelnetError(Exception):
    """Base class for all telnet client failures."""

    kind: ClassVar[ErrorKind]

    def __init__(self, message: str, buffer: bytes = b"") -> None:
        """Store the message and any partial buffer content."""
        super().__init__(message)
        self.message = message
        self.buffer = bytes(buffer)

    def __str__(self) -> str:
        """Return the human readable cause."""
        return self.message


class TelnetConnectionError(TelnetError, ConnectionError):
    """Host could not be resolved, connected to or closed cleanly."""

    kind = ErrorKind.CONNECTION


class ConnectionClosedError(TelnetError):
    """Operation attempted without an open connection."""

    kind = ErrorKind.CONNECTION_CLOSED


class PromptTimeoutError(TelnetError, TimeoutError):
    """Prompt was not seen within the session timeout."""

    kind = ErrorKind.TIMEOUT


class UnexpectedEndOfStreamError(TelnetError, EOFError):
    """Stream ended before the prompt or byte count was reached."""

    kind = ErrorKind.END_OF_STREAM


class RemoteError(TelnetError):
    """Response ended with the configured error prompt."""

    kind = ErrorKind.REMOTE


class ProtocolError(TelnetError):
    """Malformed or unrecognised control sequence."""

    kind = ErrorKind.PROTOCOL


class WriteFailedError(TelnetError):
    """Outbound data could not be sent completely."""

    kind = ErrorKind.WRITE_FAILED


class LoginFailedError(TelnetError):
    """Any step of the login sequence failed; the cause is chained."""

    kind = ErrorKind.LOGIN_FAILED

    @property
    def cause(self) -> BaseException | None:
        """The failure that interrupted the login sequence."""
        return self.__cause__
