# dns_overlay/constants.py
# Version: 1.0.0
# DNS overlay constants - all hardcoded values in one place for easy configuration

"""
DNS Overlay Constants

All hardcoded values are defined here at the top of the module for easy
visibility and modification.
"""

# =============================================================================
# DNS PROTOCOL CONSTANTS
# =============================================================================
DNS_DEFAULT_PORT = 53
IPV4_ADDRESS_LENGTH = 4  # Packed IPv4 address size in bytes
IPV6_ADDRESS_LENGTH = 16  # Packed IPv6 address size in bytes

# =============================================================================
# TIMEOUT SETTINGS
# =============================================================================
DNS_QUERY_TIMEOUT = 5.0  # Seconds to wait for an upstream DNS response

# =============================================================================
# RESOLVER SETTINGS
# =============================================================================
RESOLVER_MODE_SYSTEM = "system"  # Platform resolver (getaddrinfo)
RESOLVER_MODE_FORWARD = "forward"  # Query upstream DNS servers directly
RESOLVER_MODES = (RESOLVER_MODE_SYSTEM, RESOLVER_MODE_FORWARD)
DEFAULT_UPSTREAM_SERVER = "8.8.8.8"
REACTOR_THREAD_NAME = "dns-overlay-reactor"

# =============================================================================
# FILES
# =============================================================================
DEFAULT_CONFIG_PATH = "/etc/dns-overlay/dns-overlay.cfg"
DEFAULT_HOSTS_FILE = "/etc/hosts"

# =============================================================================
# LOGGING AND DEBUGGING
# =============================================================================
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SYSLOG_FORMAT = "dns-overlay[%(process)d]: %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUP_COUNT = 5
LOG_LOOKUP_DETAILS = True  # Log which layer answered each lookup
