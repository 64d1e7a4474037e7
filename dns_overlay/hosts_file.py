# dns_overlay/hosts_file.py
# Version: 1.0.0
# Load /etc/hosts style files into a static override table

import logging
from typing import List, Tuple

from twisted.python.filepath import FilePath

from dns_overlay.address import is_numeric_address
from dns_overlay.static_table import StaticOverrideTable

logger = logging.getLogger(__name__)


def parse_hosts(content: bytes) -> List[Tuple[str, str]]:
    """
    Parse hosts file content into (hostname, address) pairs

    The first address given for a hostname wins, as with the system
    resolver. Lines whose first field is not a numeric address are skipped.
    """
    entries = []
    seen = set()

    for lineno, raw_line in enumerate(content.splitlines(), start=1):
        line = raw_line.split(b"#", 1)[0].strip()
        if not line:
            continue

        parts = line.split()
        try:
            fields = [part.decode("ascii") for part in parts]
        except UnicodeDecodeError:
            logger.debug(f"Skipping non-ASCII hosts line {lineno}")
            continue

        address, names = fields[0], fields[1:]
        if not is_numeric_address(address) or "%" in address:
            logger.debug(f"Skipping hosts line {lineno}: invalid address {address!r}")
            continue

        for name in names:
            hostname = name.lower()
            if hostname in seen:
                continue
            seen.add(hostname)
            entries.append((hostname, address))

    return entries


def load_hosts_file(path: str) -> StaticOverrideTable:
    """Read a hosts file; a missing or unreadable file gives an empty table"""
    hosts_path = FilePath(path)
    try:
        content = hosts_path.getContent()
    except OSError as e:
        logger.warning(f"Could not read hosts file {path}: {e}")
        return StaticOverrideTable()

    entries = parse_hosts(content)
    logger.info(f"Loaded {len(entries)} host entries from {path}")
    return StaticOverrideTable(entries)
