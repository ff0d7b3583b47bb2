"""Telnet Client Module.

This module provides a blocking, byte-at-a-time implementation of the Telnet
protocol for scripting command-line interfaces on devices that still use telnet.

Example usage:
    ```python
    from telnet_runner.clients.telnet import TelnetClient

    with TelnetClient.connect_to("device.example.com", 23, prompt="#") as client:
        client.login("admin", "secret")
        print(client.execute("show version"))
    ```
"""

from __future__ import annotations

from .client import TelnetClient
from .errors import (
    ConnectionClosedError,
    ErrorKind,
    LoginFailedError,
    PromptTimeoutError,
    ProtocolError,
    RemoteError,
    TelnetConnectionError,
    TelnetError,
    UnexpectedEndOfStreamError,
    WriteFailedError,
)
from .negotiate import TelnetNegotiator
from .transport import SocketTransport, Transport

__all__ = [
    "ConnectionClosedError",
    "ErrorKind",
    "LoginFailedError",
    "PromptTimeoutError",
    "ProtocolError",
    "RemoteError",
    "SocketTransport",
    "TelnetClient",
    "TelnetConnectionError",
    "TelnetError",
    "TelnetNegotiator",
    "Transport",
    "UnexpectedEndOfStreamError",
    "WriteFailedError",
]
