"""Main entry point for the telnet runner CLI."""

from __future__ import annotations

from telnet_runner.runner import RunSettings, run_sessions
from telnet_runner.types import HostJob

from .args import parse_args
from .console import console, log
from .files import FileReader, FileWriter, format_plain, read_script


async def main(argv: list[str] | None = None) -> int:
    """Run the configured commands on every inventory host.

    Returns:
        Process exit status: 0 when every session succeeded, 1 otherwise
    """
    args = parse_args(argv)

    commands = list(args.commands)
    if args.script is not None:
        commands.extend(read_script(args.script))

    inventory = FileReader(path=args.input, type=args.input_format).data
    if isinstance(inventory, dict):
        inventory = [inventory]
    jobs = [HostJob.from_row(row, default_port=args.port) for row in inventory]
    log.info("Loaded %d hosts from %s", len(jobs), args.input)

    settings = RunSettings(
        timeout=args.timeout,
        prompt=args.prompt,
        err_prompt=args.err_prompt,
        username=args.username,
        password=args.password,
    )
    results = await run_sessions(jobs, commands, settings, args.concurrency)
    records = [result.as_dict() for result in results]

    if args.output is None:
        console.print(format_plain(records))
    else:
        FileWriter(path=args.output, type=args.output_format, data=records)
        log.info("Wrote %d results to %s", len(records), args.output)

    return 0 if all(result.success for result in results) else 1
