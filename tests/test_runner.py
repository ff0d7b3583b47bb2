"""Unit tests for the scripted session runner."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import MagicMock, patch

import pytest

from telnet_runner.clients.telnet import TelnetClient, TelnetConnectionError
from telnet_runner.runner import RunSettings, run_session, run_sessions
from telnet_runner.types import HostJob

from .conftest import ScriptedTransport

if TYPE_CHECKING:
    from collections.abc import Callable, Generator


def scripted_factory(incoming: bytes, created: list[ScriptedTransport] | None = None) -> Callable[..., TelnetClient]:
    """Return a client factory whose clients replay incoming."""

    def factory(**kwargs: object) -> TelnetClient:
        transport = ScriptedTransport(incoming)
        if created is not None:
            created.append(transport)
        return TelnetClient(transport=transport, **kwargs)

    return factory


@pytest.fixture
def mock_progress() -> Generator[dict[str, MagicMock]]:
    """Mock progress bar helpers to keep the live display out of tests."""
    with (
        patch("telnet_runner.runner.create_progress", return_value="task") as create,
        patch("telnet_runner.runner.update_progress") as update,
        patch("telnet_runner.runner.complete_progress") as complete,
    ):
        yield {"create": create, "update": update, "complete": complete}


def test_run_session_success() -> None:
    """Test a session that runs every command."""
    transports: list[ScriptedTransport] = []
    settings = RunSettings(client_factory=scripted_factory(b"v1.0\n$up 3 days\n$", transports))

    result = run_session(HostJob(host="192.0.2.1"), ["show version", "uptime"], settings)

    if not result.success or result.error is not None:
        pytest.fail(f"Session should succeed: {result}")
    if [(r.command, r.output) for r in result.commands] != [("show version", "v1.0"), ("uptime", "up 3 days")]:
        pytest.fail(f"Unexpected command results: {result.commands}")
    if transports[0].sent != [b"show version\r", b"uptime\r"] or not transports[0].closed:
        pytest.fail(f"Unexpected transport use: {transports[0].sent!r}")


def test_run_session_logs_in_with_job_credentials() -> None:
    """Test that inventory credentials trigger the login sequence."""
    transports: list[ScriptedTransport] = []
    settings = RunSettings(
        username="fallback", password="fallback", client_factory=scripted_factory(b"Login:Password:OKok\n$", transports)
    )
    job = HostJob(host="192.0.2.1", username="admin", password="secret")

    result = run_session(job, ["status"], settings)

    if not result.success:
        pytest.fail(f"Session should succeed: {result}")
    if transports[0].sent != [b"admin\r", b"secret\r", b"status\r"]:
        pytest.fail(f"Unexpected writes: {transports[0].sent!r}")


def test_run_session_uses_job_prompts() -> None:
    """Test that per-host prompts override the run defaults."""
    captured: dict[str, object] = {}

    def factory(**kwargs: object) -> TelnetClient:
        captured.update(kwargs)
        return TelnetClient(transport=ScriptedTransport(b"out\nrouter#"), **kwargs)

    settings = RunSettings(prompt="$", err_prompt="ERROR", timeout=3.0, client_factory=factory)
    job = HostJob(host="192.0.2.1", port=2323, prompt="#", err_prompt="%")

    result = run_session(job, ["show"], settings)

    if not result.success:
        pytest.fail(f"Session should succeed: {result}")
    expected = {"host": "192.0.2.1", "port": 2323, "timeout": 3.0, "prompt": "#", "err_prompt": "%"}
    if captured != expected:
        pytest.fail(f"Unexpected client settings: {captured}")


def test_run_session_stops_at_first_failure() -> None:
    """Test that a remote error stops the script and is recorded."""
    settings = RunSettings(client_factory=scripted_factory(b"ok\n$bad\nERROR"))

    result = run_session(HostJob(host="192.0.2.1"), ["good", "bad", "never"], settings)

    if result.success or result.error_kind != "remote":
        pytest.fail(f"Session should fail with a remote error: {result}")
    if [r.command for r in result.commands] != ["good", "bad"]:
        pytest.fail(f"Unexpected commands run: {result.commands}")
    if result.commands[0].error is not None or result.commands[1].success:
        pytest.fail("Only the second command should have failed")


def test_run_session_connection_failure() -> None:
    """Test that connection errors are captured on the result."""
    client = MagicMock()
    client.__enter__.side_effect = TelnetConnectionError("Cannot connect to 192.0.2.1 on port 23")
    settings = RunSettings(client_factory=MagicMock(return_value=client))

    result = run_session(HostJob(host="192.0.2.1"), ["show"], settings)

    if result.success or result.error_kind != "connection":
        pytest.fail(f"Session should fail with a connection error: {result}")
    if result.commands:
        pytest.fail("No command should have been attempted")


def test_session_result_as_dict() -> None:
    """Test the flattened result record."""
    settings = RunSettings(client_factory=scripted_factory(b"v1\n$"))
    record = run_session(HostJob(host="192.0.2.1"), ["ver"], settings).as_dict()

    if record["output"] != "ver: v1" or record["host"] != "192.0.2.1" or record["success"] is not True:
        pytest.fail(f"Unexpected record: {record}")


def test_host_job_from_row() -> None:
    """Test building jobs from inventory rows."""
    job = HostJob.from_row({"host": " 192.0.2.5 ", "port": "2323", "username": "", "prompt": "#"})

    if job != HostJob(host="192.0.2.5", port=2323, prompt="#"):
        pytest.fail(f"Unexpected job: {job}")
    if HostJob.from_row({"host": "h"}, default_port=8023).port != 8023:  # noqa: PLR2004
        pytest.fail("Default port not applied")
    with pytest.raises(ValueError, match="no host"):
        HostJob.from_row({"port": "23"})


@pytest.mark.asyncio
async def test_run_sessions_keeps_job_order(mock_progress: dict[str, MagicMock]) -> None:
    """Test that concurrent sessions return results in job order."""
    settings = RunSettings(client_factory=scripted_factory(b"done\n$"))
    jobs = [HostJob(host=f"192.0.2.{index}") for index in range(1, 6)]

    results = await run_sessions(jobs, ["run"], settings, max_concurrency=2)

    if [result.host for result in results] != [job.host for job in jobs]:
        pytest.fail(f"Results out of order: {[result.host for result in results]}")
    if not all(result.success for result in results):
        pytest.fail("Every session should succeed")
    mock_progress["create"].assert_called_once_with("Running 1 commands on 5 hosts", total=5)
    if mock_progress["update"].call_count != 5:  # noqa: PLR2004
        pytest.fail(f"Expected 5 progress updates, got {mock_progress['update'].call_count}")
    mock_progress["complete"].assert_called_once_with("task", "Completed 5 sessions")


@pytest.mark.asyncio
async def test_run_sessions_reports_unexpected_errors(mock_progress: dict[str, MagicMock]) -> None:
    """Test that unexpected errors complete the progress bar and propagate."""
    settings = RunSettings(client_factory=MagicMock(side_effect=RuntimeError("factory broke")))

    with pytest.raises(RuntimeError, match="factory broke"):
        await run_sessions([HostJob(host="192.0.2.1")], ["run"], settings, max_concurrency=1)

    mock_progress["complete"].assert_called_once_with("task", "Session run failed")
