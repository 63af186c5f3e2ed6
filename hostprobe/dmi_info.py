"""Firmware (DMI) vendor information."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)

DMI_DIR = Path("/sys/class/dmi/id")
_MAX_READ = 256


@dataclass(frozen=True)
class DmiInfo:
    """Vendor strings read from the system firmware tables."""

    sys_vendor: str = ""
    bios_vendor: str = ""
    bios_description: str = ""
    cpu_manufacturer: str = ""
    cpu_cores: int = 0


def _read(path: Path) -> str:
    with path.open("rb") as handle:
        return handle.read(_MAX_READ).decode("utf-8", errors="replace")


def read_dmi_info(base_dir: str | Path = DMI_DIR) -> DmiInfo:
    """Read DMI identification from a sysfs-style directory; unreadable entries stay empty."""
    base = Path(base_dir)
    sys_vendor_path = base / "sys_vendor"

    # bios_vendor is taken from the sys_vendor entry as well.
    try:
        bios_vendor = _read(sys_vendor_path).strip().upper()
    except OSError as exc:
        log.debug("Can not read sys_vendor %s", exc)
        bios_vendor = ""

    try:
        bios_description = _read(base / "modalias").strip().upper()
    except OSError as exc:
        log.debug("Can not read bios_description %s", exc)
        bios_description = ""

    try:
        sys_vendor = _read(sys_vendor_path)
        if len(sys_vendor) >= 2 and sys_vendor[-2] in "\r\n":
            sys_vendor = sys_vendor[:-1]
    except OSError as exc:
        log.debug("Can not read sys_vendor %s", exc)
        sys_vendor = ""

    return DmiInfo(
        sys_vendor=sys_vendor,
        bios_vendor=bios_vendor,
        bios_description=bios_description,
    )