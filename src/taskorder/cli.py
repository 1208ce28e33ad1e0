# cli.py
from __future__ import annotations

import json
import logging
import sys
from typing import Any, TextIO

import click

from taskorder.api import settings
from taskorder.client import APIClient, APIError
from taskorder.errors import JobError
from taskorder.formatter import to_bash_script, to_json
from taskorder.jobs import process
from taskorder.ui.console import Console, set_console, get_console

FORMATS = click.Choice(["json", "bash"], case_sensitive=False)


def load_job_file(job_file: TextIO) -> Any:
    """
    Decode a job document from an open file.

    Raises:
        SystemExit: If the file is not valid JSON
    """
    console = get_console()
    try:
        return json.load(job_file)
    except json.JSONDecodeError as e:
        console.print_error(
            "Invalid job file",
            f"Could not parse JSON from {job_file.name}",
            details=[str(e)],
            suggestion='A job file looks like:\n  {"tasks": [{"name": "build", "command": "make"}]}',
        )
        sys.exit(1)


def _debug_traceback(ctx: click.Context) -> None:
    if ctx.obj.get("debug", False):
        import traceback
        traceback.print_exc()


@click.group()
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Enable debug mode (show stack traces and detailed output)",
)
@click.pass_context
def cli(ctx, debug):
    """taskorder: resolve task dependencies into an execution order."""
    console = Console(debug=debug)
    set_console(console)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


@cli.command()
@click.argument("job_file", type=click.File("r"))
@click.option("--format", "fmt", type=FORMATS, default="json", show_default=True, help="Output format")
@click.option("--output", "-o", type=click.File("w"), default="-", help="Write result to this file (default: stdout)")
@click.option("--print-plan/--no-print-plan", default=False, show_default=True, help="Print the task order to stderr")
@click.pass_context
def sort(ctx, job_file, fmt, output, print_plan):
    """Sort the tasks of JOB_FILE (use - for stdin) locally."""
    console = get_console()
    job_data = load_job_file(job_file)

    try:
        tasks = process(job_data)
    except JobError as e:
        console.print_error(
            e.error_type,
            str(e),
            details=[f"kind={e.kind}", f"status={e.status_code}"] if console.debug else None,
        )
        _debug_traceback(ctx)
        sys.exit(1)

    if print_plan:
        console.print_plan(tasks)

    if fmt.lower() == "bash":
        output.write(to_bash_script(tasks))
    else:
        output.write(json.dumps(to_json(tasks), indent=2) + "\n")


@cli.command()
@click.option("--host", default=settings.HOST, show_default=True, help="Bind address")
@click.option("--port", default=settings.PORT, type=int, show_default=True, help="Bind port")
@click.option(
    "--log-level",
    default=settings.LOG_LEVEL,
    type=click.Choice(["critical", "error", "warning", "info", "debug"], case_sensitive=False),
    show_default=True,
    help="Log level for the service",
)
@click.pass_context
def serve(ctx, host, port, log_level):
    """Run the HTTP service (POST /api/jobs/process)."""
    import uvicorn

    console = get_console()
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    console.print_debug(f"Starting service on {host}:{port}")

    try:
        uvicorn.run("taskorder.api.main:app", host=host, port=port, log_level=log_level.lower())
    except KeyboardInterrupt:
        console.print_info("\nService stopped by user")
        sys.exit(0)


@cli.command()
@click.argument("job_file", type=click.File("r"))
@click.option("--api", default=settings.API_URL, show_default=True, help="Service base URL")
@click.option("--format", "fmt", type=FORMATS, default="json", show_default=True, help="Response format")
@click.pass_context
def submit(ctx, job_file, api, fmt):
    """Submit JOB_FILE to a running taskorder service and print the result."""
    console = get_console()
    job_data = load_job_file(job_file)
    client = APIClient(api)

    try:
        body = client.process_job(job_data, fmt=fmt.lower())
    except APIError as e:
        if e.error_type:
            console.print_error(e.error_type, str(e), details=[f"HTTP {e.status}"])
        else:
            console.print_error(
                "API request failed",
                str(e),
                suggestion=f"Check that the service at {api} is running:\n  taskorder serve",
            )
        _debug_traceback(ctx)
        sys.exit(1)

    click.echo(body, nl=not body.endswith("\n"))


if __name__ == "__main__":
    cli()
