"""Main entry point for the Docker stats collector."""
import argparse
import logging
import signal
import sys

from pythonjsonlogger import jsonlogger

from dockerstats.config import load_config
from dockerstats.client import CollectorError, DockerClient, MalformedResponse, TargetNotFound
from dockerstats.engine import StatsPipeline
from dockerstats.self_metrics import create_self_metrics

# Monitoring plugin exit statuses
EXIT_OK = 0
EXIT_CONFIG_ERROR = 1
EXIT_CRITICAL = 2
EXIT_UNKNOWN = 3


def setup_logging(log_level: str, log_format: str):
    """Setup logging configuration; stdout is reserved for metric lines."""
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    if log_format == "json":
        handler.setFormatter(jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            rename_fields={"asctime": "time", "levelname": "level", "name": "logger"}
        ))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        ))

    logging.basicConfig(level=level, handlers=[handler])

    # Reduce noise from some libraries
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("docker").setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Docker stats collector - one metric line per container"
    )
    parser.add_argument("--config", "-c", help="Path to configuration YAML file")
    parser.add_argument("--scheme", "-s", help="Metric naming scheme, text to prepend to metric")
    parser.add_argument("--container-name", "-N", dest="container",
                        help="Name of container to collect metrics for")
    parser.add_argument("--docker-host", "-H", dest="docker_host",
                        help="Docker API URI: unix:///path, /path, host:port, http(s)://host[:port]")
    parser.add_argument("--names", "-n", dest="friendly_names", action="store_true", default=None,
                        help="Use friendly name if available")
    parser.add_argument("--match", "-m", dest="name_parts",
                        help="Partial names by splitting and returning at index(es), e.g. 3,4")
    parser.add_argument("--delimiter", "-d", dest="delimiter", help="Delimiter used with --match")
    parser.add_argument("--tags", "-t", help="List of key=value tags separated by commas")
    parser.add_argument("--name-as-tags", dest="names_as_tags", action="store_true", default=None,
                        help="Include container name as a tag")
    parser.add_argument("--labels-as-tags", dest="labels_as_tags", action="store_true", default=None,
                        help="Include labels from containers as tags")
    parser.add_argument("--extra-stats", "-e", dest="extra_stats",
                        help="List of key=value stats separated by commas")
    parser.add_argument("--ioinfo", "-i", dest="io_info", action="store_true", default=None,
                        help="Enable block I/O metrics")
    parser.add_argument("--percentage", "-P", dest="cpu_percent", action="store_true", default=None,
                        help="Add cpu usage percentage metric")
    parser.add_argument("--interval", dest="interval_s", type=int,
                        help="Repeat collection every N seconds (0 = run once)")
    parser.add_argument("--timeout", dest="timeout_s", type=int, help="Docker API timeout in seconds")
    parser.add_argument("--skip-failed", dest="fail_fast", action="store_false", default=None,
                        help="Log and skip containers whose stats cannot be fetched")
    parser.add_argument("--self-metrics-port", dest="self_metrics_port", type=int,
                        help="Serve collector self metrics on this port")
    parser.add_argument("--log-level", dest="log_level", help="Logging level")
    return parser


def main(argv=None) -> int:
    """Main function."""
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k != "config"}

    # Load configuration
    try:
        config = load_config(args.config, overrides)
    except Exception as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    setup_logging(config.log_level, config.log_format)
    logger = logging.getLogger(__name__)
    logger.debug(f"Configuration: {config.model_dump()}")

    try:
        client = DockerClient(config.docker_host, timeout=config.timeout_s)
        pipeline = StatsPipeline(
            config,
            client,
            self_metrics=create_self_metrics(config.self_metrics_port)
        )

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down...")
            pipeline.stop()

        signal.signal(signal.SIGINT, signal_handler)
        signal.signal(signal.SIGTERM, signal_handler)

        pipeline.run()
    except TargetNotFound as e:
        logger.critical(str(e))
        return EXIT_CRITICAL
    except MalformedResponse as e:
        logger.error(f"Malformed response: {e}")
        return EXIT_UNKNOWN
    except CollectorError as e:
        logger.critical(str(e))
        return EXIT_CRITICAL

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
