"""
Command line entry point: parse arguments, run the pool, print results.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence, TextIO, Tuple

from . import __version__
from .core.results import ResultEntry
from .core.runner import run
from .utils.config import Config, ConfigError, load_config
from .utils.logger import setup_logging
from .utils.monitoring import FetchMonitor, MetricsCollector
from .utils.urls import normalize_urls

DEFAULT_MAX_WORKERS = 10
PARALLEL_ARG = "-parallel"
INCORRECT_PARALLEL_MSG = 'Incorrect "-parallel" argument'
INSUFFICIENT_ARGS_MSG = "You should provide at least one URL"


class ArgumentsError(Exception):
    """Invalid command line arguments."""


class _ArgumentParser(argparse.ArgumentParser):
    """Raises instead of printing usage and exiting."""

    def error(self, message):
        if PARALLEL_ARG in message:
            raise ArgumentsError(INCORRECT_PARALLEL_MSG)
        raise ArgumentsError(message)


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = _ArgumentParser(
        prog="urlhash",
        description="Fetch URLs in parallel and print an MD5 digest of each response body",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        allow_abbrev=False,
        epilog="""
Examples:
  urlhash google.com                         # http://google.com, 10 workers
  urlhash -parallel 3 a.com b.com c.com      # at most 3 requests in flight
  urlhash --config config.yaml example.com   # settings from a YAML file
        """
    )

    parser.add_argument(
        PARALLEL_ARG,
        dest='parallel',
        metavar='N',
        help=f'Maximum number of concurrent requests (default: {DEFAULT_MAX_WORKERS})'
    )

    parser.add_argument(
        '--config',
        help='Path to a YAML configuration file'
    )

    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Override the configured log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'urlhash {__version__}'
    )

    parser.add_argument('urls', nargs='*', metavar='URL')

    return parser


def parse_workers(value: Optional[str], default: int = DEFAULT_MAX_WORKERS) -> int:
    """Validate the -parallel value; None means it was not given."""
    if value is None:
        return default
    try:
        workers = int(value)
    except ValueError:
        raise ArgumentsError(INCORRECT_PARALLEL_MSG) from None
    if workers < 1:
        raise ArgumentsError(INCORRECT_PARALLEL_MSG)
    return workers


def parse_args(args: Sequence[str], default_workers: int = DEFAULT_MAX_WORKERS
               ) -> Tuple[int, List[str], argparse.Namespace]:
    """
    Parse command line arguments.

    Returns:
        (worker count, normalized URLs, parsed namespace)

    Raises:
        ArgumentsError: with the message to show the user
    """
    if not args:
        raise ArgumentsError(INSUFFICIENT_ARGS_MSG)

    namespace = build_parser().parse_intermixed_args(list(args))
    workers = parse_workers(namespace.parallel, default_workers)

    if not namespace.urls:
        raise ArgumentsError(INSUFFICIENT_ARGS_MSG)

    return workers, normalize_urls(namespace.urls), namespace


def print_results(results: Sequence[ResultEntry], out: Optional[TextIO] = None):
    """Print one line per result entry."""
    for entry in results:
        print(entry.format_line(), file=out)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point."""
    args = sys.argv[1:] if argv is None else list(argv)
    logger = logging.getLogger(__name__)

    try:
        # the config file can change the default worker count, so load it first
        config_path = _peek_config_path(args)
        config = load_config(config_path)
        workers, urls, namespace = parse_args(args, config.fetcher.max_workers)
    except (ArgumentsError, ConfigError) as e:
        print(str(e))
        return 1

    try:
        setup_logging(config.logging, namespace.log_level)
    except OSError as e:
        print(f"Cannot open log file: {e}")
        return 1

    monitor = _init_monitoring(config)

    try:
        results = run(urls, workers, config, monitor)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 1

    print_results(results)

    logger.info(f"Run summary: {monitor.get_summary()}")
    logger.debug(f"Metrics:\n{monitor.metrics.export_text()}")
    return 0


def _peek_config_path(args: Sequence[str]) -> Optional[str]:
    """Find the --config value before the full parse."""
    for i, arg in enumerate(args):
        if arg == '--config' and i + 1 < len(args):
            return args[i + 1]
        if arg.startswith('--config='):
            return arg.split('=', 1)[1]
    return None


def _init_monitoring(config: Config) -> FetchMonitor:
    """Create the run monitor and start the exporter when enabled."""
    metrics = MetricsCollector(
        enable_prometheus=config.monitoring.metrics_enabled,
        prometheus_port=config.monitoring.prometheus_port
    )
    metrics.start_prometheus_server()
    return FetchMonitor(metrics)
