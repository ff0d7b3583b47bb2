"""Shared fixtures for the telnet runner test suite."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

import pytest

from telnet_runner.clients.telnet import TelnetClient

if TYPE_CHECKING:
    from collections.abc import Callable


class ScriptedTransport:
    """In-memory transport replaying a fixed byte script.

    Once the script is exhausted it either reports end of stream or, when
    ``stall`` is set, behaves like a silent socket: it waits out the time limit
    and raises TimeoutError.
    """

    def __init__(self, incoming: bytes = b"", *, stall: bool = False) -> None:
        """Initialise with the bytes the remote side will send."""
        self.incoming = bytearray(incoming)
        self.stall = stall
        self.sent: list[bytes] = []
        self.time_limits: list[float | None] = []
        self.closed = False

    def feed(self, data: bytes) -> None:
        """Queue more bytes from the remote side."""
        self.incoming.extend(data)

    def read_byte(self, time_limit: float | None = None) -> int | None:
        """Return the next scripted byte."""
        self.time_limits.append(time_limit)
        if self.incoming:
            return self.incoming.pop(0)
        if self.stall:
            time.sleep(max(time_limit or 0.0, 0.0))
            msg = "timed out"
            raise TimeoutError(msg)
        return None

    def send(self, data: bytes) -> int:
        """Record outbound data."""
        self.sent.append(bytes(data))
        return len(data)

    def close(self) -> None:
        """Mark the transport as closed."""
        self.closed = True

    @property
    def sent_bytes(self) -> bytes:
        """Everything sent so far, concatenated."""
        return b"".join(self.sent)


@pytest.fixture
def make_transport() -> Callable[..., ScriptedTransport]:
    """Fixture providing a factory for scripted transports."""
    return ScriptedTransport


@pytest.fixture
def make_client() -> Callable[..., tuple[TelnetClient, ScriptedTransport]]:
    """Fixture providing a factory for clients wired to a scripted transport."""

    def factory(incoming: bytes = b"", *, stall: bool = False, **kwargs: object) -> tuple[TelnetClient, ScriptedTransport]:
        transport = ScriptedTransport(incoming, stall=stall)
        client = TelnetClient(host="192.0.2.10", transport=transport, **kwargs)
        return client, transport

    return factory
