"""Processor vendor, brand and hypervisor information."""

from __future__ import annotations

import platform
from dataclasses import dataclass
from pathlib import Path

BRAND_UNAVAILABLE = "NA"
CPUINFO_PATH = Path("/proc/cpuinfo")


@dataclass(frozen=True)
class CpuInfo:
    """What is known about the processor.

    ``signature`` holds the processor signature in the layout of cpuid leaf 1
    (stepping, model, family, type, extended model, extended family).
    """

    vendor: str = ""
    brand: str = BRAND_UNAVAILABLE
    hypervisor_set: bool = False
    signature: int = 0
    brand_index: int = 0

    @property
    def model(self) -> int:
        """Signature bits with the reserved ones squeezed out, brand index on top."""
        eax = self.signature
        return (eax & 0x3FFF) | (eax & 0x3FF8000) >> 2 | (self.brand_index & 0xFF) << 24


def _first_block(text: str) -> dict[str, str]:
    fields: dict[str, str] = {}
    for line in text.splitlines():
        if not line.strip():
            if fields:
                break
            continue
        key, sep, value = line.partition(":")
        if sep:
            fields.setdefault(key.strip().lower(), value.strip())
    return fields


def _to_int(value: str | None) -> int:
    try:
        return int(value or "0", 0)
    except ValueError:
        return 0


def _encode_signature(family: int, model: int, stepping: int) -> int:
    base_family = min(family, 0xF)
    extended_family = family - 0xF if family >= 0xF else 0
    return (
        (stepping & 0xF)
        | (model & 0xF) << 4
        | base_family << 8
        | ((model >> 4) & 0xF) << 16
        | (extended_family & 0xFF) << 20
    )


def parse_cpuinfo(text: str) -> CpuInfo:
    """Build a CpuInfo from the first processor entry of a cpuinfo listing."""
    fields = _first_block(text)
    flags = fields.get("flags", "").split()
    return CpuInfo(
        vendor=fields.get("vendor_id", ""),
        brand=fields.get("model name") or BRAND_UNAVAILABLE,
        hypervisor_set="hypervisor" in flags,
        signature=_encode_signature(
            _to_int(fields.get("cpu family")),
            _to_int(fields.get("model")),
            _to_int(fields.get("stepping")),
        ),
    )


def read_cpu_info(path: str | Path = CPUINFO_PATH) -> CpuInfo:
    """Read processor information, falling back to what the platform reports."""
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return CpuInfo(brand=platform.processor() or BRAND_UNAVAILABLE)
    return parse_cpuinfo(text)