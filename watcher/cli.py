import argparse

from watcher.poller import DEFAULT_PORT, POLL_INTERVAL

DEFAULT_CONFIG_PATH = "notify.json"
DEFAULT_TIMEOUT = 5.0


def port_number(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{raw}' is not a valid port number")
    if not 0 < port <= 0xFFFF:
        raise argparse.ArgumentTypeError(f"'{raw}' is not a valid port number: out of range")
    return port


def build_cli_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcwatch",
        description="Watch a Minecraft server and notify when its player count changes.",
    )
    parser.add_argument("hostname", help="Server hostname.")
    parser.add_argument(
        "port",
        nargs="?",
        type=port_number,
        default=DEFAULT_PORT,
        help=f"Server port (default: {DEFAULT_PORT}). Overridden by an SRV record.",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=POLL_INTERVAL,
        help=f"Seconds between status pings (default: {POLL_INTERVAL}).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"Connect/read timeout in seconds, 0 to disable (default: {DEFAULT_TIMEOUT}).",
    )
    parser.add_argument(
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Notification services config file (default: {DEFAULT_CONFIG_PATH}).",
    )
    parser.add_argument(
        "--no-srv",
        action="store_true",
        help="Skip the _minecraft._tcp SRV lookup.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log protocol details at debug level.",
    )
    return parser


def parse_cli_args(argv=None) -> argparse.Namespace:
    parser = build_cli_parser()
    cli_args = parser.parse_args(argv)
    if cli_args.interval < 0:
        parser.error("--interval must be >= 0")
    if cli_args.timeout < 0:
        parser.error("--timeout must be >= 0")
    return cli_args
