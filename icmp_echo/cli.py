#!/usr/bin/env python3
"""
icmp-echo - ICMP Echo round-trip timer
======================================

USAGE:
    icmp-echo HOST [options]

OPTIONS:
    -c, --count <n>           Number of echo requests (default: 4)
    -s, --size <bytes>        Payload bytes after the header (default: 56)
    -i, --interval <sec>      Delay between requests (default: 1.0)
    -W, --timeout <sec>       Receive deadline per request (default: none)
    --buffer-size <bytes>     Receive buffer capacity (default: 100)
    --dgram                   Use an unprivileged ping socket (Linux)
    --legacy-checksum         Drop an odd trailing byte from the checksum
    --config <file>           JSON configuration file
    -v, --verbose             Debug logging
    -q, --quiet               Errors only
    --no-color                Plain output

EXAMPLES:
    sudo icmp-echo 127.0.0.1 -c 1
    icmp-echo example.com --dgram -s 0 -W 2
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from . import __version__
from .config.config_manager import ConfigError, ConfigManager
from .core.echo_session import EchoSession, EchoTimeoutError, UnsupportedAddressError
from .core.icmp_packet import HEADER_SIZE
from .core.network_utils import ResolutionError, resolve
from .core.raw_socket import SocketCreationError, TransmitError
from .output.console import ConsoleFormatter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_REPLY = 1
EXIT_USAGE = 2
EXIT_NO_PERMISSION = 77


# =============================================================================
# INPUT VALIDATION FUNCTIONS
# =============================================================================

def validate_int(value: str, field_name: str, min_value: int = 0, max_value: Optional[int] = None) -> int:
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise argparse.ArgumentTypeError(f"{field_name} must be an integer, got '{value}'")

    if int_value < min_value:
        raise argparse.ArgumentTypeError(f"{field_name} must be at least {min_value}, got {int_value}")

    if max_value is not None and int_value > max_value:
        raise argparse.ArgumentTypeError(f"{field_name} must be at most {max_value}, got {int_value}")

    return int_value


def validate_seconds(value: str, field_name: str, allow_zero: bool = True) -> float:
    try:
        seconds = float(value)
    except (ValueError, TypeError):
        raise argparse.ArgumentTypeError(f"{field_name} must be a number, got '{value}'")

    if seconds < 0 or (seconds == 0 and not allow_zero):
        raise argparse.ArgumentTypeError(f"{field_name} must be positive, got {seconds:g}")

    return seconds


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icmp-echo",
        description="Send ICMP Echo Requests and time the replies",
        epilog=__doc__.split("EXAMPLES:", 1)[1],
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('host',
                        help='Target hostname or IPv4 address')
    parser.add_argument('-c', '--count',
                        type=lambda x: validate_int(x, "Count", 1),
                        help='Number of echo requests')
    parser.add_argument('-s', '--size',
                        type=lambda x: validate_int(x, "Size", 0, 65507),
                        help='Payload bytes')
    parser.add_argument('-i', '--interval',
                        type=lambda x: validate_seconds(x, "Interval"),
                        help='Seconds between requests')
    parser.add_argument('-W', '--timeout',
                        type=lambda x: validate_seconds(x, "Timeout", allow_zero=False),
                        help='Receive deadline in seconds')

    advanced_group = parser.add_argument_group('Advanced')
    advanced_group.add_argument('--buffer-size',
                                type=lambda x: validate_int(x, "Buffer size", 1, 65535),
                                help='Receive buffer capacity in bytes')
    advanced_group.add_argument('--dgram',
                                action='store_true',
                                help='Use an unprivileged ping socket')
    advanced_group.add_argument('--legacy-checksum',
                                action='store_true',
                                help='Ignore an odd trailing byte when checksumming')
    advanced_group.add_argument('--config',
                                metavar='FILE',
                                help='JSON configuration file')

    verbosity_group = parser.add_mutually_exclusive_group()
    verbosity_group.add_argument('-v', '--verbose',
                                 action='store_true',
                                 help='Debug logging')
    verbosity_group.add_argument('-q', '--quiet',
                                 action='store_true',
                                 help='Errors only')

    parser.add_argument('--no-color',
                        action='store_true',
                        help='Disable colored output')
    parser.add_argument('--version',
                        action='version',
                        version=f'%(prog)s {__version__}')
    return parser


def setup_logging(level_name: str, verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    else:
        level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(level=level, format='%(asctime)s - %(levelname)s - %(message)s')


def load_config(args: argparse.Namespace) -> ConfigManager:
    """Load the config file, then layer command-line overrides on top."""
    config = ConfigManager(args.config)
    if args.config:
        config.load()

    overrides = {
        "cli.count": args.count,
        "cli.interval": args.interval,
        "icmp.payload_size": args.size,
        "network.timeout": args.timeout,
        "network.recv_buffer_size": args.buffer_size,
        "network.socket_type": "dgram" if args.dgram else None,
        "icmp.checksum_mode": "legacy" if args.legacy_checksum else None,
    }
    for key, value in overrides.items():
        if value is not None:
            config.set(key, value)
    return config


def run(host: str, config: ConfigManager, console: ConsoleFormatter) -> int:
    """Resolve ``host`` once and ping it ``cli.count`` times."""
    try:
        address = resolve(host)
    except ResolutionError as e:
        print(console.error(str(e)), file=sys.stderr)
        return EXIT_USAGE

    payload_size = config.get("icmp.payload_size")
    count = config.get("cli.count")
    interval = config.get("cli.interval")
    session = EchoSession(**config.session_kwargs())

    print(console.banner(host, str(address), payload_size, payload_size + HEADER_SIZE))

    replies = 0
    for i in range(count):
        try:
            response = session.ping(address, payload_size)
        except SocketCreationError as e:
            print(console.error(str(e)), file=sys.stderr)
            return EXIT_NO_PERMISSION if e.privileged else EXIT_USAGE
        except UnsupportedAddressError as e:
            print(console.error(str(e)), file=sys.stderr)
            return EXIT_USAGE
        except (TransmitError, EchoTimeoutError) as e:
            print(console.no_reply(str(address), session.sequence, str(e)))
        else:
            if response.ok:
                replies += 1
                print(console.reply(response.packet_len, response.address, response.sequence,
                                    response.elapsed_ms, response.truncated))
            else:
                print(console.no_reply(response.address, response.sequence, str(response.error)))

        if i + 1 < count and interval:
            time.sleep(interval)

    return EXIT_OK if replies else EXIT_NO_REPLY


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args)
    except ConfigError as e:
        parser.error(str(e))

    setup_logging(config.get("general.log_level"), args.verbose, args.quiet)
    console = ConsoleFormatter(colors=config.get("general.colors_enabled") and not args.no_color)

    try:
        return run(args.host, config, console)
    except KeyboardInterrupt:
        logger.debug("Interrupted")
        return EXIT_NO_REPLY


if __name__ == "__main__":
    sys.exit(main())
