"""Scripted telnet session runner.

This module runs a list of commands against many hosts, one telnet session per
host. Each session is strictly sequential and stays on a single worker thread,
while sessions for different hosts run concurrently with a configurable limit.
"""

from __future__ import annotations

from asyncio import (
    Semaphore,
    gather as asyncio_gather,
    to_thread as asyncio_to_thread,
)
from dataclasses import dataclass, field
from time import monotonic
from typing import TYPE_CHECKING

from telnet_runner.cli.console import complete_progress, create_progress, log, update_progress
from telnet_runner.clients.telnet import TelnetClient, TelnetError
from telnet_runner.constants import DEFAULT_ERR_PROMPT, DEFAULT_PROMPT, DEFAULT_TIMEOUT
from telnet_runner.types import CommandResult, HostJob, SessionResult

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


@dataclass(slots=True, frozen=True)
class RunSettings:
    """Settings shared by every session of a run."""

    timeout: float = DEFAULT_TIMEOUT
    prompt: str = DEFAULT_PROMPT
    err_prompt: str = DEFAULT_ERR_PROMPT
    username: str | None = None
    password: str | None = None
    client_factory: Callable[..., TelnetClient] = field(default=TelnetClient)


def _elapsed_ms(start_time: float) -> float:
    return round((monotonic() - start_time) * 1000, 2)


def run_session(job: HostJob, commands: Sequence[str], settings: RunSettings) -> SessionResult:
    """Connect to one host, log in if credentials are known and run the commands.

    Execution stops at the first failing command. Failures are recorded on the
    result rather than raised.

    Args:
        job: The host to drive
        commands: Commands to execute in order
        settings: Settings shared by the run

    Returns:
        SessionResult with per-command output
    """
    result = SessionResult(host=job.host, port=job.port)
    start_time = monotonic()

    client = settings.client_factory(
        host=job.host,
        port=job.port,
        timeout=settings.timeout,
        prompt=job.prompt or settings.prompt,
        err_prompt=job.err_prompt if job.err_prompt is not None else settings.err_prompt,
    )
    username = job.username or settings.username
    password = job.password if job.password is not None else settings.password

    try:
        with client:
            if username is not None:
                log.debug("Logging in to %s as %s", job.host, username)
                client.login(username, password or "")

            for command in commands:
                try:
                    output = client.execute(command)
                except TelnetError as e:
                    result.commands.append(CommandResult(command=command, error=str(e)))
                    raise
                result.commands.append(CommandResult(command=command, output=str(output)))

    except TelnetError as e:
        log.warning("Session to %s:%d failed: %s", job.host, job.port, e)
        result.error = str(e)
        result.error_kind = e.kind.value
    else:
        result.success = True
    finally:
        result.time_ms = _elapsed_ms(start_time)

    return result


async def run_sessions(
    jobs: Sequence[HostJob],
    commands: Sequence[str],
    settings: RunSettings,
    max_concurrency: int,
) -> list[SessionResult]:
    """Run the commands on every host concurrently.

    Args:
        jobs: Hosts to drive
        commands: Commands to execute on each host
        settings: Settings shared by the run
        max_concurrency: Maximum number of sessions open at once

    Returns:
        One SessionResult per job, in job order
    """
    semaphore = Semaphore(max(1, max_concurrency))
    total = len(jobs)

    task_id = create_progress(f"Running {len(commands)} commands on {total} hosts", total=total)

    async def session_task(job: HostJob) -> SessionResult:
        async with semaphore:
            log.debug("Starting session to %s:%d", job.host, job.port)
            result = await asyncio_to_thread(run_session, job, commands, settings)

            status = "✓" if result.success else "✗"
            update_progress(task_id, f"Running sessions: {job.host}:{job.port} {status}")

            return result

    try:
        results = await asyncio_gather(*(session_task(job) for job in jobs))
        complete_progress(task_id, f"Completed {total} sessions")
    except Exception:
        log.exception("Error running sessions")
        complete_progress(task_id, "Session run failed")
        raise
    else:
        return list(results)
