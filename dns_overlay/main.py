#!/usr/bin/env python3
"""
Main entry point for the DNS overlay
Resolves hostnames through the overlay from the command line
"""

import argparse
import logging
import logging.handlers
import os
import sys

from dns_overlay.constants import (
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    LOG_FORMAT,
    RESOLVER_MODE_FORWARD,
    RESOLVER_MODES,
    SYSLOG_FORMAT,
)


def setup_logging(log_file=None, log_level="INFO", syslog=False):
    """Setup logging configuration"""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    # Setup root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(LOG_FORMAT)

    # Console logging goes to stderr, stdout carries the lookup results
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file and log_file.lower() != "none":
        try:
            log_dir = os.path.dirname(log_file)
            if log_dir and not os.path.exists(log_dir):
                os.makedirs(log_dir, mode=0o755)

            file_handler = logging.handlers.RotatingFileHandler(
                log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUP_COUNT
            )
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
        except OSError as e:
            print(f"Warning: Could not setup file logging to {log_file}: {e}", file=sys.stderr)

    if syslog:
        try:
            syslog_handler = logging.handlers.SysLogHandler(address="/dev/log")
            syslog_handler.setFormatter(logging.Formatter(SYSLOG_FORMAT))
            root_logger.addHandler(syslog_handler)
        except OSError as e:
            print(f"Warning: Could not setup syslog: {e}", file=sys.stderr)


def _parse_override(value):
    """argparse type for HOST=ADDR"""
    hostname, sep, address = value.partition("=")
    if not sep or not hostname or not address:
        raise argparse.ArgumentTypeError(f"expected HOST=ADDR, got {value!r}")
    return hostname.strip(), address.strip()


def _build_parser():
    parser = argparse.ArgumentParser(
        prog="dns-overlay", description="Resolve hostnames through the DNS overlay"
    )
    parser.add_argument("hostnames", nargs="+", metavar="HOSTNAME", help="Hostnames to resolve")
    parser.add_argument("-c", "--config", help="Configuration file path")
    parser.add_argument("--hosts-file", help="Hosts file to load ('none' to disable)")
    parser.add_argument("--resolver", choices=RESOLVER_MODES, help="Real resolver to fall back to")
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        type=_parse_override,
        metavar="HOST=ADDR",
        help="Scoped override for this run (repeatable)",
    )
    parser.add_argument("--log-level", help="Logging level (DEBUG, INFO, WARNING, ERROR)")
    return parser


def _build_static_table(config, args):
    from dns_overlay.builder import hosts, new_builder, to
    from dns_overlay.hosts_file import load_hosts_file

    builder = new_builder()
    for hostname, address in config.get_overrides():
        builder = builder.map(hosts(hostname), to(address))
    table = builder.build().table

    hosts_file = args.hosts_file or config.get_hosts_file()
    if hosts_file and hosts_file.lower() != "none":
        table = table.merged(load_hosts_file(hosts_file))
    return table


def _build_resolver(config, args):
    from dns_overlay.dns_resolver import ForwardingResolver, SystemResolver

    mode = args.resolver or config.get("resolver", "mode")
    if mode == RESOLVER_MODE_FORWARD:
        return ForwardingResolver(
            config.get_upstream_servers(), timeout=config.getfloat("resolver", "timeout")
        )
    return SystemResolver()


def main(argv=None):
    """Main entry point"""
    args = _build_parser().parse_args(argv)

    from dns_overlay.config import DNSOverlayConfig
    from dns_overlay.errors import DNSOverlayError
    from dns_overlay.name_service import OverlayNameService
    from dns_overlay.overrides import set_override

    config = DNSOverlayConfig(args.config)
    setup_logging(
        log_file=config.get("log-file", "log-file"),
        log_level=args.log_level or config.get("log-file", "debug-level", "INFO"),
        syslog=config.getboolean("log-file", "syslog", False),
    )
    logger = logging.getLogger(__name__)

    try:
        service = OverlayNameService(
            static_table=_build_static_table(config, args),
            resolver=_build_resolver(config, args),
        )
    except DNSOverlayError as e:
        logger.error(f"Invalid override configuration: {e}")
        return 2

    for hostname, address in args.override:
        set_override(hostname, address)

    failed = 0
    for hostname in args.hostnames:
        try:
            addresses = service.lookup_all_host_addr(hostname)
        except DNSOverlayError as e:
            logger.error(str(e))
            failed += 1
            continue
        print(f"{hostname}: {', '.join(str(address) for address in addresses)}")

    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
