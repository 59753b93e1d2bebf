"""Main runtime for the mcwatch service.

Resolves the target once, sets up the notification services, then polls the
server until the process is stopped or the failure limit is reached.
"""

from pathlib import Path
import asyncio
import logging
import sys

# Allow running this file directly (e.g., python watcher/watcher.py).
if __package__ is None or __package__ == "":
    sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from notify.config import ConfigError, NotifyConfig
from notify.dispatcher import NotificationDispatcher
from watcher.cli import parse_cli_args
from watcher.logging_utils import default_log_path, setup_logging
from watcher.poller import FatalError, Poller, Target, WatchContext
from watcher.srv import resolve_target

LOGGER_NAME = "mcwatch"
LOGGER_NAMES = (LOGGER_NAME, "mcping", "watcher", "notify")
FALLBACK_LOG_FILE = Path(__file__).resolve().parent / "logs" / "mcwatch.log"


async def main_async(cli_args, logger) -> None:
    """Resolve the target, start the notifiers, and poll indefinitely."""
    target = Target(cli_args.hostname, cli_args.port)
    if not cli_args.no_srv:
        target = await resolve_target(cli_args.hostname, cli_args.port)
    context = WatchContext(hostname=cli_args.hostname, target=target)

    services = NotifyConfig(Path(cli_args.config)).build_services(context)
    dispatcher = NotificationDispatcher(services)
    await dispatcher.init()

    poller = Poller(
        target,
        dispatcher.notify,
        interval=cli_args.interval,
        timeout=cli_args.timeout or None,
    )
    try:
        await poller.run()
    finally:
        logger.info("Stopping notification services")
        await dispatcher.stop()


def main(argv=None) -> int:
    """Program entry point. Returns the process exit status."""
    cli_args = parse_cli_args(argv)
    log_file = setup_logging(
        (default_log_path(), FALLBACK_LOG_FILE),
        LOGGER_NAMES,
        level=logging.DEBUG if cli_args.verbose else logging.INFO,
    )
    logger = logging.getLogger(LOGGER_NAME)
    logger.info("Starting watcher for %s:%s. Log file: %s", cli_args.hostname, cli_args.port, log_file)

    try:
        asyncio.run(main_async(cli_args, logger))
    except ConfigError as e:
        logger.error("failed to initialize: %s", e)
        return 1
    except FatalError as e:
        logger.critical("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted, exiting.")
    return 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
