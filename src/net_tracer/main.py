from __future__ import annotations

import argparse
import asyncio
import ipaddress
import logging
import signal
import sys
from typing import Optional, Sequence

from . import config
from .log import console, setup_logging
from .monitor import Monitor, notify_quietly
from .notify import DesktopNotifier, Notifier
from .ping import IPAddress, PingTransportError, Prober, SystemPinger
from .ui import build_summary

log = logging.getLogger(__name__)


def parse_destination(value: str) -> IPAddress:
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"could not parse IP address: {value!r}"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="net-tracer",
        description="Ping a host continuously and raise desktop alerts "
        "on high latency, errors and packet loss.",
    )
    parser.add_argument(
        "destination",
        nargs="?",
        type=parse_destination,
        default=parse_destination(config.DEFAULT_DESTINATION),
        help=f"IPv4 or IPv6 address to probe (default {config.DEFAULT_DESTINATION})",
    )
    return parser


async def main_async(
    destination: IPAddress,
    pinger: Prober,
    notifier: Notifier,
    stop_event: Optional[asyncio.Event] = None,
) -> Monitor:
    """The main asynchronous entry point of the application."""
    if stop_event is None:
        stop_event = asyncio.Event()

    loop = asyncio.get_running_loop()

    def _signal_handler():
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:  # Windows
            signal.signal(sig, lambda s, f: _signal_handler())

    await notify_quietly(notifier, config.STARTUP_MESSAGE)
    log.info("Monitoring %s every %.0f ms", destination, config.SAMPLE_PERIOD_SECONDS * 1000)

    monitor = Monitor(destination, pinger, notifier)
    task = asyncio.create_task(monitor.run(stop_event))

    await stop_event.wait()

    # Graceful shutdown
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)

    console.print()
    console.print(build_summary(monitor, monitor.clock()))
    return monitor


def main(argv: Optional[Sequence[str]] = None):
    args = build_parser().parse_args(argv)
    setup_logging(config.LOG_LEVEL)

    try:
        pinger = SystemPinger.create(config.PING_TIMEOUT_SECONDS)
    except PingTransportError as exc:
        log.error("Failed to create pinger: %s", exc)
        sys.exit(1)

    try:
        asyncio.run(main_async(args.destination, pinger, DesktopNotifier()))
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":  # pragma: no cover
    main()
