"""Synchronous scripted Telnet client implementation module.

This module provides a blocking Telnet client for driving command-line
interfaces: send a command, then read the response until a configured prompt
(or error prompt) shows up, refusing any option negotiation on the way.

The client keeps two buffers. The per-command buffer holds what has been read
since the last write or read started, and is what prompts are matched against.
The transcript records every byte exchanged over the whole session and is never
reset.
"""

from __future__ import annotations

import ipaddress
import socket
from dataclasses import dataclass, field
from time import monotonic
from typing import Any, Self

from telnet_runner.cli.console import log
from telnet_runner.constants import (
    DEFAULT_ENCODING,
    DEFAULT_ERR_PROMPT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_PROMPT,
    DEFAULT_TIMEOUT,
    LOGIN_PROMPT,
    LOGIN_SUCCESS_PROMPT,
    PASSWORD_PROMPT,
)

from .errors import (
    ConnectionClosedError,
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
from .types import CR_BYTE, IAC_BYTE

# Characters trimmed from command output, matching what a shell prompt leaves behind
TRIM_CHARS = " \t\n\r\0\x0b"


@dataclass(slots=True)
class TelnetClient:
    """Scripted Telnet client for command-line automation.

    Construction never touches the network; call ``connect()`` (or use the
    client as a context manager) to open the connection.

    Examples:
        Basic usage with context manager:

        ```python
        with TelnetClient("switch.example.com", prompt="#") as client:
            client.login("admin", "secret")
            print(client.execute("show version"))
        ```

        Manual connection management:

        ```python
        client = TelnetClient("switch.example.com", prompt="#")
        if client.connect():
            try:
                output = client.execute("show interfaces")
            finally:
                client.disconnect()
        ```
    """

    host: str = field(default=DEFAULT_HOST)
    port: int = field(default=DEFAULT_PORT)
    timeout: float = field(default=DEFAULT_TIMEOUT)
    prompt: str | bytes = field(default=DEFAULT_PROMPT)
    err_prompt: str | bytes = field(default=DEFAULT_ERR_PROMPT)
    binary_mode: bool = field(default=False)
    encoding: str = field(default=DEFAULT_ENCODING)
    transport: Transport | None = field(default=None)

    # Negotiation handler
    negotiator: TelnetNegotiator = field(default_factory=TelnetNegotiator)

    _buffer: bytearray = field(init=False, default_factory=bytearray)
    _transcript: bytearray = field(init=False, default_factory=bytearray)

    @classmethod
    def connect_to(cls, host: str, port: int = DEFAULT_PORT, **kwargs: Any) -> Self:
        """Create and connect to a telnet server in one step.

        Args:
            host: The hostname or IP address of the telnet server
            port: The port number of the telnet server
            **kwargs: Additional parameters to pass to the TelnetClient constructor

        Returns:
            A connected TelnetClient instance

        Raises:
            TelnetConnectionError: If the connection attempt fails
        """
        client = cls(host=host, port=port, **kwargs)
        client.open()
        return client

    def __enter__(self) -> Self:
        """Open the connection if needed and return the client.

        Raises:
            TelnetConnectionError: If the connection attempt fails
        """
        if not self.is_connected:
            self.open()
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Close the connection."""
        self.disconnect()

    @property
    def is_connected(self) -> bool:
        """Check if the client is currently connected."""
        return self.transport is not None

    @property
    def buffer(self) -> bytes:
        """Bytes read since the last write, read or explicit clear."""
        return bytes(self._buffer)

    @property
    def transcript(self) -> bytes:
        """Every byte sent and received during this session."""
        return bytes(self._transcript)

    # Connection lifecycle

    def connect(self) -> bool:
        """Establish telnet connection.

        Returns:
            True if connection was successful, False otherwise.
        """
        try:
            self.open()
        except TelnetConnectionError:
            log.exception("Telnet connection error")
            return False
        else:
            return True

    def open(self) -> None:
        """Resolve the host and open the connection.

        Raises:
            TelnetConnectionError: If the host cannot be resolved or connected to
        """
        if self.is_connected:
            return

        address = self._resolve_host()
        self.negotiator.reset()
        log.info("Connecting with telnet to %s:%d", self.host, self.port)
        try:
            self.transport = SocketTransport.open(address, self.port, connect_timeout=self.timeout)
        except OSError as e:
            msg = f"Cannot connect to {self.host} on port {self.port}"
            raise TelnetConnectionError(msg) from e
        log.debug("Connected with telnet to %s:%d", self.host, self.port)

    def _resolve_host(self) -> str:
        """Return a numeric address for the configured host.

        Raises:
            TelnetConnectionError: If the name does not resolve
        """
        try:
            ipaddress.ip_address(self.host)
        except ValueError:
            pass
        else:
            return self.host

        try:
            address = socket.gethostbyname(self.host)
        except OSError as e:
            msg = f"Cannot resolve {self.host}"
            raise TelnetConnectionError(msg) from e
        if address == self.host:
            msg = f"Cannot resolve {self.host}"
            raise TelnetConnectionError(msg)
        log.debug("Resolved %s to %s", self.host, address)
        return address

    def disconnect(self) -> None:
        """Close telnet connection.

        Raises:
            TelnetConnectionError: If closing the connection fails
        """
        if self.transport is None:
            return
        try:
            self.transport.close()
        except OSError as e:
            msg = "Error while closing telnet socket"
            raise TelnetConnectionError(msg) from e
        finally:
            self.transport = None
            log.debug("Closed telnet connection to %s:%d", self.host, self.port)

    # Execution facade

    def execute(
        self, command: str | bytes, prompt: str | bytes | None = None, err_prompt: str | bytes | None = None
    ) -> str | bool:
        """Run a command and return its output.

        In binary mode the command is written blindly and True is returned;
        the response is expected to be collected with ``read_bytes``.

        Args:
            command: The command to send, a carriage return is appended
            prompt: Prompt ending the response, defaults to the session prompt
            err_prompt: Prompt signalling failure, defaults to the session error prompt

        Returns:
            The response without its final (prompt) line, trimmed, or True in binary mode
        """
        if self.binary_mode:
            self.execute_blind(command)
            return True

        self.write(command)
        self.read(prompt, err_prompt)
        return self._buffer_text()

    def execute_blind(self, command: str | bytes, add_newline: bool = True) -> None:
        """Send a command without reading a response or disturbing the buffer."""
        saved = bytes(self._buffer)
        try:
            self.write(command, add_newline)
        finally:
            self._buffer[:] = saved

    def login(
        self,
        username: str,
        password: str,
        *,
        login_prompt: str = LOGIN_PROMPT,
        password_prompt: str = PASSWORD_PROMPT,
        success_prompt: str = LOGIN_SUCCESS_PROMPT,
    ) -> None:
        """Log in by answering the login and password prompts.

        Raises:
            LoginFailedError: If any step fails, chained to the original error
        """
        try:
            self.read(login_prompt)
            self.write(str(username))
            self.read(password_prompt)
            self.write(str(password))
            self.read(success_prompt)
        except TelnetError as e:
            log.debug("Login to %s failed: %s", self.host, e)
            msg = "Login failed."
            raise LoginFailedError(msg, e.buffer) from e

    def set_prompt(self, prompt: str | bytes) -> None:
        """Set the prompt that ends a response."""
        self.prompt = prompt

    def set_err_prompt(self, err_prompt: str | bytes) -> None:
        """Set the prompt that marks a failed command, empty to disable."""
        self.err_prompt = err_prompt

    def get_binary_mode(self) -> bool:
        """Return True if binary mode is enabled."""
        return self.binary_mode

    def set_binary_mode(self, binary_mode: bool = True) -> None:
        """Enable or disable binary mode."""
        self.binary_mode = binary_mode

    def clear_buffer(self) -> None:
        """Clear the per-command buffer; the transcript is kept."""
        self._buffer.clear()

    def get_transcript(self) -> bytes:
        """Return every byte exchanged so far."""
        return self.transcript

    # Read and write engines

    def read(self, prompt: str | bytes | None = None, err_prompt: str | bytes | None = None) -> bytes:
        """Read until the prompt ends the per-command buffer.

        Args:
            prompt: Prompt to wait for, defaults to the session prompt
            err_prompt: Error prompt to watch for, defaults to the session error prompt

        Returns:
            Everything read before the prompt

        Raises:
            ConnectionClosedError: If there is no open connection
            PromptTimeoutError: If the prompt is not seen within the timeout
            UnexpectedEndOfStreamError: If the stream ends first
            RemoteError: If the buffer ends with the error prompt
            ProtocolError: If a malformed command sequence arrives
        """
        self._require_connection()
        expected = self._encode(self.prompt if prompt is None else prompt)
        failure = self._encode(self.err_prompt if err_prompt is None else err_prompt)

        self.clear_buffer()

        start_time = monotonic()
        deadline = start_time + self.timeout
        while True:
            elapsed = monotonic() - start_time
            if elapsed > self.timeout:
                raise self._timeout_error(expected)

            try:
                byte = self._next_byte(self.timeout - elapsed)
                negotiated = byte == IAC_BYTE and self._negotiate_options(deadline)
            except TimeoutError as e:
                raise self._timeout_error(expected) from e

            if byte is None:
                msg = (
                    f"Couldn't find the requested: {expected!r}, "
                    f"it was not in the data returned from server: {bytes(self._buffer)!r}"
                )
                raise UnexpectedEndOfStreamError(msg, self._buffer)

            if negotiated:
                continue

            self._buffer.append(byte)

            # Error prompt wins when both match
            if failure and self._buffer.endswith(failure):
                msg = "Command has returned ERROR status"
                raise RemoteError(msg, self._buffer)
            if self._buffer.endswith(expected):
                return bytes(self._buffer[: len(self._buffer) - len(expected)])

    def read_bytes(self, count: int) -> bytes:
        """Read exactly count data bytes, without a time limit.

        Outside binary mode, negotiation sequences are handled and not counted.

        Raises:
            ValueError: If count is negative
            ConnectionClosedError: If there is no open connection
            UnexpectedEndOfStreamError: If the stream ends first
        """
        if count < 0:
            msg = f"Byte count must not be negative: {count}"
            raise ValueError(msg)
        self._require_connection()

        self.clear_buffer()

        remaining = count
        while remaining:
            byte = self._next_byte()
            if byte is None:
                msg = (
                    f"Couldn't find the requested {count} bytes, "
                    f"it was not in the data returned from server: {bytes(self._buffer)!r}"
                )
                raise UnexpectedEndOfStreamError(msg, self._buffer)

            if byte == IAC_BYTE and not self.binary_mode and self._negotiate_options():
                continue

            self._buffer.append(byte)
            remaining -= 1

        return bytes(self._buffer)

    def write(self, text: str | bytes, add_newline: bool = True) -> None:
        """Send text, terminated by a carriage return unless add_newline is False.

        Raises:
            ConnectionClosedError: If there is no open connection
            WriteFailedError: If the data could not be sent completely
        """
        self._require_connection()

        # Clear buffer from last command
        self.clear_buffer()

        data = self._encode(text)
        if add_newline:
            data += bytes([CR_BYTE])

        self._transcript.extend(data)
        self._send(data)

    # Byte source and negotiation

    def _next_byte(self, time_limit: float | None = None) -> int | None:
        """Read one byte and record it in the transcript.

        Raises:
            ConnectionClosedError: If there is no open connection
            TimeoutError: If the transport times out
            UnexpectedEndOfStreamError: If the transport fails
        """
        if self.transport is None:
            msg = "Telnet connection closed"
            raise ConnectionClosedError(msg)

        try:
            byte = self.transport.read_byte(time_limit)
        except TimeoutError:
            raise
        except OSError as e:
            msg = f"Telnet connection lost: {e}"
            raise UnexpectedEndOfStreamError(msg, self._buffer) from e

        if byte is not None:
            self._transcript.append(byte)
        return byte

    def _negotiate_options(self, deadline: float | None = None) -> bool:
        """Handle the command sequence after an IAC byte.

        In binary mode the IAC is payload: it goes into the buffer as is.

        Args:
            deadline: Monotonic time by which the sequence must be read, None to wait

        Returns:
            True when the caller should move on to the next byte
        """
        if self.binary_mode:
            self._buffer.append(self._transcript[-1])
            return True

        def next_byte() -> int | None:
            return self._next_byte(None if deadline is None else deadline - monotonic())

        try:
            reply = self.negotiator.handle_command(next_byte)
        except (ProtocolError, UnexpectedEndOfStreamError) as e:
            e.buffer = bytes(self._buffer)
            raise

        self._transcript.extend(reply)
        self._send(reply)
        return True

    def _send(self, data: bytes) -> None:
        if self.transport is None:
            msg = "Telnet connection closed"
            raise ConnectionClosedError(msg)
        try:
            sent = self.transport.send(data)
        except OSError as e:
            msg = "Error writing to socket"
            raise WriteFailedError(msg) from e
        if sent < len(data):
            msg = f"Error writing to socket: sent {sent} of {len(data)} bytes"
            raise WriteFailedError(msg)

    # Helpers

    def _require_connection(self) -> None:
        if not self.is_connected:
            msg = "Telnet connection closed"
            raise ConnectionClosedError(msg)

    def _encode(self, value: str | bytes) -> bytes:
        if isinstance(value, bytes):
            return value
        return value.encode(self.encoding)

    def _timeout_error(self, expected: bytes) -> PromptTimeoutError:
        msg = f"Couldn't find the requested: {expected!r} within {self.timeout} seconds"
        return PromptTimeoutError(msg, self._buffer)

    def _buffer_text(self) -> str:
        """Return the buffer without its last line (the prompt), trimmed."""
        lines = self._buffer.decode(self.encoding, errors="replace").split("\n")
        return "\n".join(lines[:-1]).strip(TRIM_CHARS)
