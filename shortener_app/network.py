"""
Trusted-subnet check for internal endpoints.
"""

import ipaddress
from typing import Optional


def is_trusted(ip: Optional[str], subnet: Optional[str]) -> bool:
    """
    True if `ip` falls inside the CIDR `subnet`.

    An empty subnet trusts nobody; a missing or unparsable IP is never trusted.
    """
    if not subnet or not ip:
        return False
    try:
        network = ipaddress.ip_network(subnet.strip(), strict=False)
        address = ipaddress.ip_address(ip.strip())
    except ValueError:
        return False
    return address in network
