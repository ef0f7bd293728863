"""Command-line front end for DataBridger.

Usage:
    databridger configure --user root --database app
    databridger select users --where "age > 18"
    databridger insert users name=victor age=30
    databridger query "SELECT * FROM users WHERE age > ?" 18
"""

from __future__ import annotations

import argparse
import json
import logging
import logging.handlers
import os
import sys
from typing import Any, Optional, Sequence

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from databridger.client import DataBridger
from databridger.db.connector import Connector, Result
from databridger.errors import DataBridgerError

console = Console()
err_console = Console(stderr=True)

log = logging.getLogger("databridger")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbosity: int = 0, log_file: Optional[str] = None) -> None:
    """Attach a stderr handler and, optionally, a rotating log file."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    log.setLevel(logging.DEBUG)
    for handler in list(log.handlers):
        log.removeHandler(handler)

    stream = logging.StreamHandler(sys.stderr)
    stream.setLevel(level)
    stream.setFormatter(formatter)
    log.addHandler(stream)

    # Persistent log file, rotates at 5MB
    if log_file:
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        log.addHandler(file_handler)


def parse_value(text: str) -> Any:
    """Turn a command-line token into int, float, None or str."""
    if text.lower() == "null":
        return None
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            continue
    return text


def _parse_assignments(pairs: Sequence[str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for pair in pairs:
        column, sep, value = pair.partition("=")
        if not sep or not column:
            raise argparse.ArgumentTypeError(f"Expected column=value, got {pair!r}")
        values[column] = parse_value(value)
    return values


def print_result(result: Result) -> None:
    if isinstance(result, int):
        console.print(f"{result} row(s) affected")
        return
    if not result:
        console.print("[dim]No rows.[/dim]")
        return

    table = Table(show_header=True, header_style="bold cyan")
    columns = list(result[0].keys())
    for column in columns:
        table.add_column(escape(str(column)))
    for row in result:
        table.add_row(
            *(
                "[dim]NULL[/dim]" if row.get(c) is None else escape(str(row.get(c)))
                for c in columns
            )
        )
    console.print(table)
    console.print(f"[dim]{len(result)} row(s)[/dim]")


# =============================================================================
# COMMANDS
# =============================================================================


def cmd_configure(client: DataBridger, args: argparse.Namespace) -> int:
    settings: dict[str, Any] = {
        "hostname": args.hostname,
        "user": args.user,
        "password": args.password,
        "database": args.database,
        "port": args.port,
    }
    if args.connect_timeout is not None:
        settings["connect_timeout"] = args.connect_timeout
    client.configure(settings)
    console.print(f"Saved connection settings to [bold]{client.store.path}[/bold]")
    return 0


def cmd_show(client: DataBridger, args: argparse.Namespace) -> int:
    config = client.read_config()
    if config is None:
        err_console.print(f"Not configured ({client.store.path})")
        return 1
    console.print_json(json.dumps(config.redacted()))
    return 0


def cmd_ping(client: DataBridger, args: argparse.Namespace) -> int:
    with Connector.from_store(client.store) as db:
        alive = db.ping()
    if alive:
        console.print(f"[green]OK[/green] connected to {escape(db.database)}")
        return 0
    err_console.print(f"[red]Ping failed[/red]: {escape(db.last_error())}")
    return 1


def cmd_select(client: DataBridger, args: argparse.Namespace) -> int:
    print_result(client.select(args.table, args.where))
    return 0


def cmd_insert(client: DataBridger, args: argparse.Namespace) -> int:
    print_result(client.insert(args.table, _parse_assignments(args.values)))
    return 0


def cmd_query(client: DataBridger, args: argparse.Namespace) -> int:
    params = [parse_value(p) for p in args.params]
    print_result(client.query(args.sql, params))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="databridger", description="MySQL CRUD helper"
    )
    parser.add_argument("--config", help="Path to the JSON settings file")
    parser.add_argument(
        "--verbose", "-v", action="count", default=0, help="More log output (-vv for debug)"
    )
    parser.add_argument("--log-file", help="Also write logs to this rotating file")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("configure", help="Save connection settings")
    p.add_argument("--hostname", default="localhost")
    p.add_argument("--user", required=True)
    p.add_argument(
        "--password",
        default=os.getenv("DATABRIDGER_PASSWORD", ""),
        help="Defaults to $DATABRIDGER_PASSWORD, or empty",
    )
    p.add_argument("--database", required=True)
    p.add_argument("--port", type=int, default=3306)
    p.add_argument("--connect-timeout", type=int, help="Seconds")
    p.set_defaults(handler=cmd_configure)

    p = sub.add_parser("show", help="Print the saved settings (password hidden)")
    p.set_defaults(handler=cmd_show)

    p = sub.add_parser("ping", help="Connect, create the database if needed, and ping")
    p.set_defaults(handler=cmd_ping)

    p = sub.add_parser("select", help="Select rows from a table")
    p.add_argument("table")
    p.add_argument(
        "--where",
        action="append",
        default=[],
        help="Raw condition fragment, repeatable (joined with AND)",
    )
    p.set_defaults(handler=cmd_select)

    p = sub.add_parser("insert", help="Insert one row")
    p.add_argument("table")
    p.add_argument("values", nargs="+", metavar="column=value")
    p.set_defaults(handler=cmd_insert)

    p = sub.add_parser("query", help="Run raw SQL with ? placeholders")
    p.add_argument("sql")
    p.add_argument("params", nargs="*")
    p.set_defaults(handler=cmd_query)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    load_dotenv()
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose, args.log_file)

    client = DataBridger(args.config)
    try:
        return args.handler(client, args)
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except DataBridgerError as e:
        log.debug(f"{e.kind.value}: {e}")
        err_console.print(f"[red]{e.stage} error[/red]: {escape(str(e))}")
        return 1
    return 1
