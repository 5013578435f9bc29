"""
hostfacts.collectors.network
AUTHOR: carter-vin

Network collector
- raw device records from `ip -j addr show` (iproute2 JSON)
- one normalized Interface per device name
- primary interface: first device that is up, physical, and has an IPv4 binding
- primary interface fields mirrored at the top level of the document

Address policy:
- bindings / bindings6 hold every address of the family, in record order
- ip / ip6 (and prefix, network) come from the first address of the family
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Optional, Sequence

from hostfacts.collectors.dhcp import DhcpLeaseProbe
from hostfacts.collectors.identity import HostIdentity, IdentityProbe, probe_host_identity
from hostfacts.errors import NoPrimaryInterface, ProbeParseError
from hostfacts.rawsource import DEFAULT_ROOT, DEFAULT_TIMEOUT_S, run_json_command

DEFAULT_IP_COMMAND = ("ip", "-j", "addr", "show")

PHYSICAL_LINK_TYPES = frozenset({"ether", "ieee802.11", "infiniband"})

DhcpLookup = Callable[[str, Optional[int]], Optional[ipaddress.IPv4Address]]
JsonRunner = Callable[[Sequence[str], float], Any]


class InterfaceState(str, Enum):
    UP = "up"
    DOWN = "down"
    UNKNOWN = "unknown"


def classify_state(operstate: Any) -> InterfaceState:
    if operstate == "UP":
        return InterfaceState.UP
    if operstate == "DOWN":
        return InterfaceState.DOWN
    return InterfaceState.UNKNOWN


def _str_or_none(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass
class InterfaceFields:
    """
    Per-device attributes shared by every interface entry and the top-level mirror

    Optional address fields stay None when the family has no entry
    """

    state: InterfaceState = InterfaceState.UNKNOWN
    link_type: Optional[str] = None
    mac: Optional[str] = None
    mtu: Optional[int] = None
    ip: Optional[ipaddress.IPv4Address] = None
    prefix: Optional[int] = None
    network: Optional[ipaddress.IPv4Address] = None
    ip6: Optional[ipaddress.IPv6Address] = None
    prefix6: Optional[int] = None
    network6: Optional[ipaddress.IPv6Address] = None
    dhcp: Optional[ipaddress.IPv4Address] = None
    scope6: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state.value,
            "type": self.link_type,
            "mac": self.mac,
            "mtu": self.mtu,
            "ip": _str_or_none(self.ip),
            "prefix": self.prefix,
            "network": _str_or_none(self.network),
            "ip6": _str_or_none(self.ip6),
            "prefix6": self.prefix6,
            "network6": _str_or_none(self.network6),
            "dhcp": _str_or_none(self.dhcp),
            "scope6": self.scope6,
        }


@dataclass
class Interface:
    name: str
    fields: InterfaceFields
    ifindex: Optional[int] = None
    bindings: list[ipaddress.IPv4Address] = field(default_factory=list)
    bindings6: list[ipaddress.IPv6Address] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "bindings": [str(a) for a in self.bindings],
            "bindings6": [str(a) for a in self.bindings6],
            **self.fields.to_dict(),
        }


@dataclass(frozen=True)
class NetworkFacts:
    hostname: str
    domain: Optional[str]
    fqdn: str
    primary: str
    interfaces: dict[str, Interface]

    def to_dict(self) -> dict[str, Any]:
        # Primary fields first so host-level keys win on any collision
        return {
            **self.interfaces[self.primary].fields.to_dict(),
            "hostname": self.hostname,
            "domain": self.domain,
            "fqdn": self.fqdn,
            "primary": self.primary,
            "interfaces": {name: iface.to_dict() for name, iface in self.interfaces.items()},
        }


def _parse_address(entry: Any) -> Optional[tuple[str, ipaddress.IPv4Interface | ipaddress.IPv6Interface, Optional[str]]]:
    """
    (family, interface address, scope) for one addr_info entry, or None when unusable
    """
    if not isinstance(entry, dict):
        return None

    family = entry.get("family")
    local = entry.get("local")
    prefixlen = entry.get("prefixlen")
    if family not in ("inet", "inet6") or not isinstance(local, str):
        return None
    if not isinstance(prefixlen, int) or isinstance(prefixlen, bool):
        return None

    try:
        addr = ipaddress.ip_interface(f"{local}/{prefixlen}")
    except ValueError:
        return None

    if (family == "inet") != (addr.version == 4):
        return None

    return family, addr, _str_or_none(entry.get("scope"))


def parse_interface(record: dict[str, Any], dhcp_lookup: Optional[DhcpLookup] = None) -> Interface:
    name = record["ifname"]
    ifindex = record.get("ifindex") if isinstance(record.get("ifindex"), int) else None
    mtu = record.get("mtu") if isinstance(record.get("mtu"), int) else None

    iface = Interface(
        name=name,
        ifindex=ifindex,
        fields=InterfaceFields(
            state=classify_state(record.get("operstate")),
            link_type=_str_or_none(record.get("link_type")),
            mac=_str_or_none(record.get("address")),
            mtu=mtu,
        ),
    )

    addr_info = record.get("addr_info") or []
    if not isinstance(addr_info, list):
        addr_info = []

    fields = iface.fields
    for entry in addr_info:
        parsed = _parse_address(entry)
        if parsed is None:
            continue
        family, addr, scope = parsed

        if family == "inet":
            iface.bindings.append(addr.ip)
            if fields.ip is None:
                fields.ip = addr.ip
                fields.prefix = addr.network.prefixlen
                fields.network = addr.network.network_address
        else:
            iface.bindings6.append(addr.ip)
            if fields.ip6 is None:
                fields.ip6 = addr.ip
                fields.prefix6 = addr.network.prefixlen
                fields.network6 = addr.network.network_address
                fields.scope6 = scope

    if dhcp_lookup is not None and iface.bindings:
        fields.dhcp = dhcp_lookup(name, ifindex)

    return iface


def parse_interfaces(
    records: Any,
    dhcp_lookup: Optional[DhcpLookup] = None,
    *,
    probe: str = "ip addr",
) -> dict[str, Interface]:
    """
    Normalize raw device records into {device name: Interface}

    Raises ProbeParseError when the payload is not a list of device objects;
    malformed address entries inside a device are skipped

    Empty {} records are placeholders iproute2 prints for devices filtered
    out by a family flag (ip -j -4 addr) and are skipped
    """
    if not isinstance(records, list):
        raise ProbeParseError(probe, f"expected a list of devices, got {type(records).__name__}")

    interfaces: dict[str, Interface] = {}
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise ProbeParseError(probe, f"device record {index} is not an object")
        if not record:
            continue
        name = record.get("ifname")
        if not isinstance(name, str) or not name:
            raise ProbeParseError(probe, f"device record {index} has no ifname")
        if name in interfaces:
            continue
        interfaces[name] = parse_interface(record, dhcp_lookup)

    return interfaces


def is_primary_candidate(iface: Interface) -> bool:
    return (
        iface.fields.state is InterfaceState.UP
        and iface.fields.link_type in PHYSICAL_LINK_TYPES
        and bool(iface.bindings)
    )


def select_primary(interfaces: dict[str, Interface]) -> str:
    """
    First interface (record order) that is up, physical, and has IPv4
    """
    for name, iface in interfaces.items():
        if is_primary_candidate(iface):
            return name
    raise NoPrimaryInterface(
        "primary interface",
        f"no up physical interface with an IPv4 address among {sorted(interfaces)}",
    )


def build_network_facts(identity: HostIdentity, interfaces: dict[str, Interface]) -> NetworkFacts:
    primary = select_primary(interfaces)
    return NetworkFacts(
        hostname=identity.hostname,
        domain=identity.domain,
        fqdn=identity.fqdn,
        primary=primary,
        interfaces=interfaces,
    )


class NetworkCollector:
    name = "network"

    def __init__(
        self,
        root: Path = DEFAULT_ROOT,
        command: Sequence[str] = DEFAULT_IP_COMMAND,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        runner: JsonRunner = run_json_command,
        identity_probe: IdentityProbe = probe_host_identity,
    ) -> None:
        self.root = root
        self.command = tuple(command)
        self.timeout_s = timeout_s
        self.runner = runner
        self.identity_probe = identity_probe

    def collect(self) -> dict[str, Any]:
        records = self.runner(self.command, self.timeout_s)
        dhcp = DhcpLeaseProbe(self.root)
        interfaces = parse_interfaces(records, dhcp.lookup, probe=" ".join(self.command))
        facts = build_network_facts(self.identity_probe(), interfaces)
        return facts.to_dict()
