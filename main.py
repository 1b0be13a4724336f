"""Entry point for the throughput server and measurement client."""

from __future__ import annotations

import argparse
import logging
import threading
from typing import List, Optional

from bulkspeed import bootstrap

LOGGER = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Parallel HTTP throughput tester")
    parser.add_argument("--config", help="Path to config.yaml", default="config.yaml")
    commands = parser.add_subparsers(dest="command", required=True)

    server = commands.add_parser("server", help="Serve /download and /upload")
    server.add_argument("--host", default=None, help="Override listen host")
    server.add_argument("--port", type=int, default=None, help="Override listen port")

    client = commands.add_parser("client", help="Run one download + upload speed test")
    client.add_argument("--url", default=None, help="Override server base URL")

    monitor = commands.add_parser("monitor", help="Repeat the speed test on the configured interval")
    monitor.add_argument("--url", default=None, help="Override server base URL")

    export = commands.add_parser("export", help="Write stored samples to CSV")
    export.add_argument("--output", default=None, help="Write here instead of the data directory")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    context = bootstrap(args.config, base_url=getattr(args, "url", None))
    config = context.config

    if args.command == "server":
        host = args.host or config.server.host
        port = args.port or config.server.port
        LOGGER.info("Starting server on %s:%s", host, port)
        context.create_server().run(host=host, port=port, threaded=True)

    elif args.command == "client":
        context.measurements.run_speedtest()

    elif args.command == "monitor":
        config.scheduler.enabled = True
        context.scheduler.start(run_immediately=True)
        try:
            threading.Event().wait()
        except KeyboardInterrupt:
            LOGGER.info("Stopping monitor")
        finally:
            context.scheduler.shutdown()

    elif args.command == "export":
        if args.output:
            with open(args.output, "w", encoding="utf-8", newline="") as handle:
                handle.write(context.exporter.build_csv().getvalue())
            LOGGER.info("Exported samples to %s", args.output)
        else:
            LOGGER.info("Exported samples to %s", context.exporter.write_snapshot())


if __name__ == "__main__":
    main()
