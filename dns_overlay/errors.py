# dns_overlay/errors.py
# Version: 1.0.0
# Error taxonomy for the DNS overlay

"""
DNS Overlay Errors

Configuration and caller errors (InvalidArgument, InvalidAddressFormat,
DuplicateHostMapping) are ValueErrors. UnknownHost is the legitimate
"nothing found" outcome of a real resolver. ResolutionFailed is the only
error the public lookup entry point raises for a failed resolution.
"""


class DNSOverlayError(Exception):
    """Base class for all DNS overlay errors"""

    pass


class InvalidArgument(DNSOverlayError, ValueError):
    """A hostname argument was None, empty or not a string"""

    pass


class InvalidAddressFormat(DNSOverlayError, ValueError):
    """A configured or overridden address is not a numeric IPv4/IPv6 literal"""

    def __init__(self, address):
        super().__init__(f"Invalid numeric address: {address!r}")
        self.address = address


class DuplicateHostMapping(DNSOverlayError, ValueError):
    """The same hostname was mapped more than once in a configuration"""

    def __init__(self, hostname: str, first: str, second: str):
        super().__init__(
            f"Host {hostname} is mapped twice: to {first} and to {second}"
        )
        self.hostname = hostname
        self.first = first
        self.second = second


class UnknownHost(DNSOverlayError, LookupError):
    """The real resolver found no address for a hostname"""

    def __init__(self, hostname: str, reason=None):
        message = f"Unknown host: {hostname}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.hostname = hostname
        self.reason = reason


class ResolutionFailed(DNSOverlayError):
    """Wrapper for any failure observed by a caller of the public lookup

    The original error is kept in ``cause`` (and chained as ``__cause__``).
    """

    def __init__(self, hostname: str, cause: BaseException):
        super().__init__(f"Failed to resolve {hostname}: {cause}")
        self.hostname = hostname
        self.cause = cause
