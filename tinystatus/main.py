"""Entry point for tinystatus."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

import uvicorn
from rich.console import Console
from rich.panel import Panel

from tinystatus.config import Settings
from tinystatus.page.status_page import StatusPage

console = Console(stderr=True)
logger = logging.getLogger("tinystatus")


def parse_addr(addr: str, default_host: str = "0.0.0.0") -> tuple[str, int]:
    """Split ``host:port`` (host optional, e.g. ``:8080``)."""
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid address '{addr}': expected [host]:port")
    return host.strip("[]") or default_host, int(port)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tinystatus",
        description="Run HTTP / ping / TCP checks and render a status page.",
    )
    parser.add_argument("checks", nargs="?", help="CSV file containing all checks")
    parser.add_argument("incidents", nargs="?", help="File containing incidents to display")
    parser.add_argument("--title", help="Title of the status page")
    parser.add_argument("--timeout", type=float, help="Seconds to wait for a probe before aborting")
    parser.add_argument("--daemon", action="store_true", help="Serve the page with an embedded web server")
    parser.add_argument("--addr", help="Address the daemon listens on, e.g. ':8080'")
    parser.add_argument("--interval", type=float, help="Seconds between two page renderings")
    parser.add_argument("--level", help="Log verbosity (DEBUG, INFO, WARNING, ...)")
    return parser


def settings_from_args(args: argparse.Namespace, base: Settings | None = None) -> Settings:
    """Overlay command-line flags on environment settings."""
    base = base or Settings()
    update: dict[str, Any] = {}
    if args.checks:
        update["checks_path"] = args.checks
    if args.incidents:
        update["incidents_path"] = args.incidents
    if args.title:
        update["page_title"] = args.title
    if args.timeout:
        update["probe_timeout"] = args.timeout
    if args.interval:
        update["refresh_interval"] = args.interval
    if args.level:
        update["log_level"] = args.level.upper()
    if args.addr:
        update["api_host"], update["api_port"] = parse_addr(args.addr, base.api_host)
    return base.model_copy(update=update)


def run_server(page: StatusPage, settings: Settings) -> None:
    """Serve the status page, refreshing it every ``refresh_interval``."""
    from tinystatus.page.server import create_app

    console.print(Panel(
        f"tinystatus listening on {settings.api_host}:{settings.api_port}",
        style="bold green",
    ))
    uvicorn.run(
        create_app(page, interval=settings.refresh_interval),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
    )

    page = StatusPage(settings)
    if args.daemon:
        run_server(page, settings)
        return

    try:
        html = page.render()
    except OSError as e:
        logger.error("Failed to render the status page: %s", e)
        sys.exit(1)
    sys.stdout.write(html)


if __name__ == "__main__":
    main()
