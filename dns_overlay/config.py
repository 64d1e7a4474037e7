import configparser
import logging
import os
import sys
from typing import Any, List, Optional, Tuple

from dns_overlay.constants import (
    DEFAULT_CONFIG_PATH,
    DEFAULT_HOSTS_FILE,
    DEFAULT_UPSTREAM_SERVER,
    DNS_DEFAULT_PORT,
    DNS_QUERY_TIMEOUT,
    RESOLVER_MODE_SYSTEM,
)


class DNSOverlayConfig:
    """Configuration manager for the DNS overlay"""

    DEFAULT_CONFIG_PATH = DEFAULT_CONFIG_PATH
    DEFAULT_CONFIG = {
        'dns-overlay': {
            'hosts-file': DEFAULT_HOSTS_FILE,
        },
        'resolver': {
            'mode': RESOLVER_MODE_SYSTEM,
            'server-address': DEFAULT_UPSTREAM_SERVER,
            'server-port': str(DNS_DEFAULT_PORT),
            'timeout': str(DNS_QUERY_TIMEOUT),
        },
        'overrides': {},
        'log-file': {
            'log-file': 'none',
            'debug-level': 'INFO',
            'syslog': 'false',
        }
    }

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path or self.DEFAULT_CONFIG_PATH
        self.config = configparser.ConfigParser(interpolation=None)
        self._load_defaults()
        self._load_config()

    def _load_defaults(self):
        """Load default configuration"""
        for section, options in self.DEFAULT_CONFIG.items():
            self.config.add_section(section)
            for key, value in options.items():
                self.config.set(section, key, value)

    def _load_config(self):
        """Load configuration from file"""
        if os.path.exists(self.config_path):
            try:
                self.config.read(self.config_path)
            except configparser.Error as e:
                print(f"Error reading config file {self.config_path}: {e}", file=sys.stderr)
                sys.exit(1)
        else:
            print(f"Warning: Config file {self.config_path} not found, using defaults", file=sys.stderr)

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        """Get configuration value"""
        try:
            return self.config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError):
            return fallback

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        """Get integer configuration value"""
        try:
            return self.config.getint(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getfloat(self, section: str, option: str, fallback: float = 0.0) -> float:
        """Get float configuration value"""
        try:
            return self.config.getfloat(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """Get boolean configuration value"""
        try:
            return self.config.getboolean(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError, ValueError):
            return fallback

    def get_hosts_file(self) -> Optional[str]:
        """Hosts file path, or None when disabled with 'none'"""
        path = self.get('dns-overlay', 'hosts-file', DEFAULT_HOSTS_FILE)
        if not path or path.lower() == 'none':
            return None
        return path

    def get_overrides(self) -> List[Tuple[str, str]]:
        """Static overrides from the [overrides] section, in file order

        Option names are lower-cased by configparser, which matches the
        lookup key normalization.
        """
        if not self.config.has_section('overrides'):
            return []
        return [(host, address.strip()) for host, address in self.config.items('overrides')]

    def get_upstream_servers(self) -> List[Tuple[str, int]]:
        """Get list of upstream DNS servers with ports

        Supports multiple formats:
        - Comma-separated list: "1.1.1.1,8.8.8.8,9.9.9.9"
        - With ports: "1.1.1.1:53,8.8.8.8:53,192.168.1.1:5353"
        - IPv6: "[2606:4700:4700::1111],[2001:4860:4860::8888]"
        - IPv6 with ports: "[2606:4700:4700::1111]:53"

        Falls back to the single server-address option.

        Returns:
            List of (host, port) tuples
        """
        servers = []
        default_port = self.getint('resolver', 'server-port', DNS_DEFAULT_PORT)

        server_addresses = self.get('resolver', 'server-addresses')
        if server_addresses:
            for server_spec in server_addresses.split(','):
                server_spec = server_spec.strip()
                if not server_spec:
                    continue
                servers.append(self._parse_server(server_spec, default_port))

        if not servers:
            server_address = self.get('resolver', 'server-address', DEFAULT_UPSTREAM_SERVER)
            servers.append((server_address, default_port))

        return servers

    @staticmethod
    def _parse_server(server_spec: str, default_port: int) -> Tuple[str, int]:
        """Split one "host", "host:port", "[v6]" or "[v6]:port" entry"""
        if server_spec.startswith('['):
            bracket_end = server_spec.find(']')
            if bracket_end == -1:
                host = server_spec[1:]
                logging.warning(f"Unbalanced bracket in server '{server_spec}', using {host} port {default_port}")
                return host, default_port
            host = server_spec[1:bracket_end]
            port_str = server_spec[bracket_end + 2:] if server_spec[bracket_end + 1:].startswith(':') else ''
        elif server_spec.count(':') == 1:
            host, port_str = server_spec.split(':')
        else:
            # Bare IPv4 address or unbracketed IPv6 address
            host, port_str = server_spec, ''

        if not port_str:
            return host, default_port
        try:
            return host, int(port_str)
        except ValueError:
            logging.warning(f"Invalid port '{port_str}' for server '{host}', using default {default_port}")
            return host, default_port
