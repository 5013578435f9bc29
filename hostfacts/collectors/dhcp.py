"""
hostfacts.collectors.dhcp
AUTHOR: carter-vin

DHCP server lookup from client lease files

Sources, first hit wins:
- systemd-networkd: /run/systemd/netif/leases/<ifindex>      SERVER_ADDRESS=
- NetworkManager:   /var/lib/NetworkManager/internal-<uuid>-<ifname>.lease   SERVER_ADDRESS=
- dhclient:         /var/lib/dhcp/dhclient.<ifname>.leases
                    /var/lib/dhclient/dhclient-<ifname>.leases
                    last "option dhcp-server-identifier <ip>;"

Unreadable or unparseable leases are skipped: a missing dhcp value is a
normal state for statically configured interfaces.
"""

from __future__ import annotations

import ipaddress
import re
from pathlib import Path
from typing import Iterable, Optional

from hostfacts.rawsource import DEFAULT_ROOT, host_path

NETWORKD_LEASES = "/run/systemd/netif/leases"
NETWORKMANAGER_LEASES = "/var/lib/NetworkManager"
DHCLIENT_LEASES = (
    "/var/lib/dhcp/dhclient.{ifname}.leases",
    "/var/lib/dhclient/dhclient-{ifname}.leases",
)

_DHCLIENT_SERVER = re.compile(r"option\s+dhcp-server-identifier\s+([0-9.]+)\s*;")


def _read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def _parse_ipv4(value: str) -> Optional[ipaddress.IPv4Address]:
    try:
        return ipaddress.IPv4Address(value.strip())
    except ValueError:
        return None


def parse_server_address(contents: str) -> Optional[ipaddress.IPv4Address]:
    """
    SERVER_ADDRESS=<ip> from a networkd / NetworkManager lease
    """
    for line in contents.splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == "SERVER_ADDRESS":
            return _parse_ipv4(value)
    return None


def parse_dhclient_server(contents: str) -> Optional[ipaddress.IPv4Address]:
    """
    Most recent dhcp-server-identifier from a dhclient lease database
    """
    matches = _DHCLIENT_SERVER.findall(contents)
    if not matches:
        return None
    return _parse_ipv4(matches[-1])


class DhcpLeaseProbe:
    def __init__(self, root: Path = DEFAULT_ROOT) -> None:
        self.root = root

    def _keyfile_candidates(self, ifname: str, ifindex: Optional[int]) -> Iterable[Path]:
        if ifindex is not None:
            yield host_path(self.root, f"{NETWORKD_LEASES}/{ifindex}")
        nm_dir = host_path(self.root, NETWORKMANAGER_LEASES)
        if nm_dir.is_dir():
            # internal-<connection uuid>-<ifname>.lease; ifnames may contain dashes
            pattern = re.compile(rf"internal-[0-9a-f-]{{36}}-{re.escape(ifname)}\.lease")
            yield from sorted(p for p in nm_dir.glob("internal-*.lease") if pattern.fullmatch(p.name))

    def lookup(self, ifname: str, ifindex: Optional[int] = None) -> Optional[ipaddress.IPv4Address]:
        for path in self._keyfile_candidates(ifname, ifindex):
            contents = _read_text(path)
            if contents is None:
                continue
            server = parse_server_address(contents)
            if server is not None:
                return server

        for template in DHCLIENT_LEASES:
            contents = _read_text(host_path(self.root, template.format(ifname=ifname)))
            if contents is None:
                continue
            server = parse_dhclient_server(contents)
            if server is not None:
                return server

        return None
