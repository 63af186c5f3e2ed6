"""Enumeration of the host's network adapters."""

from __future__ import annotations

import ipaddress
import logging
import socket
import sys
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Mapping

import psutil

log = logging.getLogger(__name__)

DESCRIPTION_MAX = 1025
_BAD_WORDS = ("virtual", "ppp", "tunnel", "vpn")
_GOOD_WORDS = ("realtek", "intel", "wireless")


class IfaceType(Enum):
    ETHERNET = 0
    WIRELESS = 1


@dataclass(frozen=True)
class AdapterInfo:
    """A network adapter: name, hardware address and IPv4 address."""

    description: str
    mac_address: bytes = bytes(6)
    ipv4_address: bytes = bytes(4)
    type: IfaceType = IfaceType.ETHERNET
    id: int = 0


class NoAdaptersError(LookupError):
    """No usable network adapter was found."""


def parse_ipv4(text: str) -> bytes:
    """Four address bytes from dotted text; each field wraps at 256."""
    fields = text.split(".")
    if len(fields) > 4:
        raise ValueError(f"too many fields in IPv4 address {text!r}")
    result = bytearray(4)
    for index, part in enumerate(fields):
        for char in part:
            if char.isdigit():
                result[index] = (result[index] * 10 + int(char)) & 0xFF
    return bytes(result)


def adapter_score(adapter: AdapterInfo) -> int:
    """Preference of an adapter: named physical ones first, tunnels and VPNs last."""
    score = 1 if adapter.description else 0
    description = adapter.description.lower()
    score += sum(-1 if bad in description else 1 for bad in _BAD_WORDS)
    score += sum(1 if good in description else -1 for good in _GOOD_WORDS)
    return score


def sort_adapters(adapters: Iterable[AdapterInfo]) -> list[AdapterInfo]:
    """Adapters ordered from the most to the least preferred."""
    return sorted(adapters, key=adapter_score, reverse=True)


def _parse_mac(text: str) -> bytes:
    parts = [p for p in text.replace("-", ":").split(":") if p]
    try:
        raw = bytes(int(p, 16) for p in parts)
    except ValueError:
        return bytes(6)
    return raw[:6].ljust(6, b"\0")


def _is_loopback(name: str, addresses: Iterable[Any], stats: Any) -> bool:
    flags = getattr(stats, "flags", "") if stats is not None else ""
    if "loopback" in flags.split(","):
        return True
    for address in addresses:
        if address.family in (socket.AF_INET, socket.AF_INET6):
            try:
                if ipaddress.ip_address(address.address.split("%")[0]).is_loopback:
                    return True
            except ValueError:
                continue
    return name == "lo"


def _collect(
    addrs: Mapping[str, list[Any]], stats: Mapping[str, Any], windows: bool
) -> list[AdapterInfo]:
    adapters = []
    for name, addresses in addrs.items():
        if not addresses or _is_loopback(name, addresses, stats.get(name)):
            continue
        mac = bytes(6)
        ipv4 = bytes(4)
        for address in addresses:
            if address.family == socket.AF_INET:
                try:
                    ipv4 = ipaddress.IPv4Address(address.address).packed
                except ValueError:
                    ipv4 = parse_ipv4(address.address)
            elif address.family == psutil.AF_LINK:
                mac = _parse_mac(address.address)
        log.debug("adapter %s mac %s", name, mac.hex(":"))
        if windows and not any(mac):
            continue
        adapters.append(
            AdapterInfo(description=name[:DESCRIPTION_MAX], mac_address=mac, ipv4_address=ipv4)
        )
    return sort_adapters(adapters) if windows else adapters


def get_adapter_infos() -> list[AdapterInfo]:
    """All non-loopback network adapters; raises NoAdaptersError when there are none."""
    try:
        addrs = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except OSError as exc:
        raise NoAdaptersError(f"cannot list network interfaces: {exc}") from exc
    adapters = _collect(addrs, stats, sys.platform.startswith("win"))
    if not adapters:
        raise NoAdaptersError("no network adapter found")
    return adapters