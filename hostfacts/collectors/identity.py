"""
hostfacts.collectors.identity

AUTHOR: carter-vin

OS identity probe for the network document
- hostname: short host name
- domain: DNS domain when one can be determined, else None
- fqdn: hostname.domain, or hostname alone

No network calls beyond the resolver lookup socket.getfqdn() performs
"""

from __future__ import annotations

import socket
from dataclasses import dataclass
from typing import Callable, Optional


@dataclass(frozen=True)
class HostIdentity:
    hostname: str
    domain: Optional[str]

    @property
    def fqdn(self) -> str:
        if self.domain:
            return f"{self.hostname}.{self.domain}"
        return self.hostname


def split_identity(hostname: str, fqdn: str) -> HostIdentity:
    """
    Derive (hostname, domain) from the raw host name and the resolver fqdn

    Precedence for domain:
    1) dotted suffix of the host name itself
    2) fqdn suffix when fqdn extends the host name
    3) None
    """
    hostname = hostname.strip()
    fqdn = fqdn.strip()

    short, dot, domain = hostname.partition(".")
    if dot and domain:
        return HostIdentity(hostname=short, domain=domain)

    prefix = f"{hostname}."
    if fqdn.startswith(prefix) and len(fqdn) > len(prefix):
        return HostIdentity(hostname=hostname, domain=fqdn[len(prefix):])

    return HostIdentity(hostname=hostname, domain=None)


def probe_host_identity() -> HostIdentity:
    """
    Collect host identity from the OS
    """
    hostname = socket.gethostname()
    return split_identity(hostname, socket.getfqdn(hostname))


IdentityProbe = Callable[[], HostIdentity]
