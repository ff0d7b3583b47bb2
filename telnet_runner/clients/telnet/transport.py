"""Byte stream transports for the telnet client.

The client pulls its input one byte at a time, so a transport only needs to
offer a blocking ``read_byte`` alongside ``send`` and ``close``. Anything
implementing the ``Transport`` protocol can stand in for a real socket, which
keeps the protocol engine independent of the network layer.
"""

from __future__ import annotations

import socket
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from telnet_runner.cli.console import log

RECV_SIZE = 4096


@runtime_checkable
class Transport(Protocol):
    """Ordered, reliable byte stream owned by a single session."""

    def read_byte(self, time_limit: float | None = None) -> int | None:
        """Return the next byte, or None once the stream has ended.

        A ``time_limit`` of None blocks until data arrives. When the limit
        expires first, ``TimeoutError`` is raised.
        """
        ...

    def send(self, data: bytes) -> int:
        """Send data and return the number of bytes actually sent."""
        ...

    def close(self) -> None:
        """Release the underlying stream."""
        ...


@dataclass(slots=True)
class SocketTransport:
    """Transport over a connected TCP socket.

    Data is received in chunks and handed out one byte at a time, so byte-wise
    reading does not cost a system call per byte.
    """

    sock: socket.socket
    _pending: bytearray = field(default_factory=bytearray)
    _pos: int = field(default=0)
    _eof: bool = field(default=False)

    @classmethod
    def open(cls, address: str, port: int, connect_timeout: float | None = None) -> SocketTransport:
        """Connect to an address and wrap the socket.

        Returns:
            A transport over the new connection

        Raises:
            OSError: If the connection attempt fails
        """
        log.debug("Opening socket to %s:%d", address, port)
        return cls(sock=socket.create_connection((address, port), timeout=connect_timeout))

    def read_byte(self, time_limit: float | None = None) -> int | None:
        """Return the next byte from the socket, or None at end of stream.

        Raises:
            TimeoutError: If no data arrives within time_limit seconds
        """
        if self._pos >= len(self._pending):
            if self._eof:
                return None
            if time_limit is not None and time_limit <= 0:
                msg = "timed out"
                raise TimeoutError(msg)
            self.sock.settimeout(time_limit)
            chunk = self.sock.recv(RECV_SIZE)
            if not chunk:
                self._eof = True
                return None
            self._pending[:] = chunk
            self._pos = 0
        byte = self._pending[self._pos]
        self._pos += 1
        return byte

    def send(self, data: bytes) -> int:
        """Send all of data, blocking without a time limit.

        Returns:
            The number of bytes handed to the socket
        """
        self.sock.settimeout(None)
        self.sock.sendall(data)
        return len(data)

    def close(self) -> None:
        """Close the socket."""
        self.sock.close()
