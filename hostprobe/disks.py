"""Discovery of the host's disks, their serial numbers, labels and mount preference."""

from __future__ import annotations

import logging
import os
import platform
import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

log = logging.getLogger(__name__)

MAX_PATH = 1024
LABEL_MAX = 255
SN_SIZE = 8
MAX_UNITS = 40

UUID_DIR = Path("/dev/disk/by-uuid")
LABEL_DIRS: tuple[Path, ...] = (Path("/dev/disk/by-label"), Path("/dev/disk/by-partlabel"))
BLKID_LOCATIONS: tuple[Path, ...] = (Path("/run/blkid/blkid.tab"), Path("/etc/blkid.tab"))
FSTAB_PATH = Path("/etc/fstab")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


@dataclass
class DiskInfo:
    """A disk or partition: its identifier, device name, serial bytes and label."""

    id: int
    device: str = ""
    disk_sn: bytes = field(default_factory=lambda: bytes(SN_SIZE))
    sn_initialized: bool = False
    label: str = ""
    label_initialized: bool = False
    preferred: bool = False


class DiskNotFoundError(LookupError):
    """No disk information could be gathered."""


def parse_uuid(uuid: str, size: int = SN_SIZE) -> bytes:
    """Fold the hex digits of a uuid into ``size`` bytes by xor, skipping other characters."""
    digits = "".join(char for char in uuid if char in _HEX_DIGITS)
    if len(digits) % 2:
        digits += "0"
    result = bytearray(size)
    for index, value in enumerate(bytes.fromhex(digits)):
        result[index % size] ^= value
    return bytes(result)


def parse_disk_id(uuid: str, size: int = SN_SIZE) -> bytes:
    """Fold the characters of a disk id into ``size`` bytes by xor."""
    result = bytearray(size)
    for index, value in enumerate(uuid.encode("utf-8", errors="replace")):
        result[index % size] ^= value
    return bytes(result)


def _attribute(source: str, name: str) -> str:
    marker = f'{name}="'
    start = source.find(marker)
    if start < 0:
        return ""
    start += len(marker)
    end = source.find('"', start)
    return source[start:] if end < 0 else source[start:end]


def parse_blkid(content: str) -> tuple[list[DiskInfo], dict[str, int]]:
    """Disks described by a blkid cache file, with a map from uuid to disk id.

    Swap partitions are taken as preferred: they are unlikely to sit on a
    removable disk.
    """
    disks: list[DiskInfo] = []
    disk_by_uuid: dict[str, int] = {}
    old_pos = 0
    while (pos := content.find("</device>", old_pos)) >= 0:
        entry = content[old_pos:pos]
        disk_id = len(disks)
        uuid = _attribute(entry, "UUID")
        disk_by_uuid.setdefault(uuid, disk_id)
        disks.append(
            DiskInfo(
                id=disk_id,
                device=entry[entry.rfind(">") + 1 :][: MAX_PATH - 1],
                disk_sn=parse_uuid(uuid, SN_SIZE),
                sn_initialized=True,
                label=_attribute(entry, "PARTLABEL")[: LABEL_MAX - 1],
                label_initialized=True,
                preferred=_attribute(entry, "TYPE") == "swap",
            )
        )
        old_pos = pos + 1
    return disks, disk_by_uuid


def disks_from_blkid(
    locations: Iterable[str | Path] = BLKID_LOCATIONS,
) -> tuple[list[DiskInfo], dict[str, int]]:
    """Parse the first readable blkid cache among ``locations``."""
    for location in locations:
        try:
            content = Path(location).read_text(encoding="utf-8", errors="replace")
        except OSError:
            continue
        return parse_blkid(content)
    raise DiskNotFoundError("no readable blkid cache")


def disks_from_dev(uuid_dir: str | Path = UUID_DIR) -> tuple[list[DiskInfo], dict[str, int]]:
    """Disks linked from a by-uuid directory, identified by the inode they point to.

    USB devices are skipped and at most MAX_UNITS disks are listed.
    """
    disks: list[DiskInfo] = []
    disk_by_uuid: dict[str, int] = {}
    try:
        entries = sorted(os.scandir(uuid_dir), key=lambda entry: entry.name)
    except OSError as exc:
        log.debug("Open %s fail: %s", uuid_dir, exc)
        return disks, disk_by_uuid

    for entry in entries:
        if len(disks) >= MAX_UNITS:
            break
        if entry.name.startswith("usb"):
            continue
        try:
            inode = os.stat(entry.path).st_ino
        except OSError as exc:
            log.debug("Error %s during stat of %s", exc, entry.path)
            continue
        try:
            target = os.readlink(entry.path)
        except OSError as exc:
            log.debug("Error %s during readlink of %s", exc, entry.path)
            continue
        disk_by_uuid.setdefault(entry.name, inode)
        if any(disk.id == inode for disk in disks):
            continue
        device = target.rpartition("/")[2][: MAX_PATH - 1]
        log.debug("Found disk inode %d device %s, sn %s", inode, device, entry.name)
        disks.append(
            DiskInfo(
                id=inode,
                device=device,
                disk_sn=parse_uuid(entry.name, SN_SIZE),
                sn_initialized=True,
            )
        )
    return disks, disk_by_uuid


def read_disk_labels(
    disks: list[DiskInfo], label_dirs: Iterable[str | Path] = LABEL_DIRS
) -> None:
    """Set the labels of ``disks`` from the first label directory that can be opened."""
    for label_dir in label_dirs:
        try:
            entries = list(os.scandir(label_dir))
        except OSError as exc:
            log.debug("Open %s for reading disk labels fail: %s", label_dir, exc)
            continue
        for entry in entries:
            try:
                inode = os.stat(entry.path).st_ino
            except OSError as exc:
                log.debug("Stat %s fail: %s", entry.path, exc)
                continue
            disk = next((d for d in disks if d.id == inode), None)
            if disk is not None:
                disk.label = entry.name[: LABEL_MAX - 1]
                disk.label_initialized = True
                log.debug("Label for disk %d device %s set to %s", inode, disk.device, disk.label)
        return


def parse_fstab(text: str) -> list[str]:
    """The file-system names (first fields) listed in an fstab."""
    names = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        name = stripped.split()[0]
        names.append(_OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), name))
    return names


def set_preferred_disks(
    disks: list[DiskInfo], disk_by_uuid: Mapping[str, int], fstab_entries: Iterable[str]
) -> None:
    """Mark as preferred the disks that fstab mounts; removable ones usually are not listed."""
    for entry in fstab_entries:
        if entry.startswith("UUID="):
            disk_id = disk_by_uuid.get(entry[5:])
            if disk_id is None:
                log.debug("fstab device %s found, but no corresponding disk", entry)
                continue
            match = next((d for d in disks if d.id == disk_id), None)
        elif entry.startswith("LABEL="):
            label = entry[6:]
            match = next((d for d in disks if d.label == label), None)
        else:
            device = entry.rpartition("/")[2]
            match = next((d for d in disks if d.device == device), None)
        if match is not None:
            match.preferred = True
            log.debug("Disk %d device %s set as preferred", match.id, match.device)


def get_disk_infos() -> list[DiskInfo]:
    """Disks of this host: by-uuid links first, the blkid cache otherwise, then fstab preference."""
    disks, disk_by_uuid = disks_from_dev(UUID_DIR)
    read_disk_labels(disks, LABEL_DIRS)
    if not disks:
        disks, disk_by_uuid = disks_from_blkid(BLKID_LOCATIONS)
    try:
        fstab = Path(FSTAB_PATH).read_text(encoding="utf-8", errors="replace")
    except OSError:
        log.debug("%s not accessible", FSTAB_PATH)
    else:
        set_preferred_disks(disks, disk_by_uuid, parse_fstab(fstab))
    return disks


def machine_name() -> bytes:
    """The first six bytes of the host name, zero padded."""
    return platform.node().encode("utf-8", errors="replace")[:6].ljust(6, b"\0")


def module_name() -> str:
    """Path of the running executable."""
    try:
        path = os.readlink(f"/proc/{os.getpid()}/exe")
    except OSError:
        path = os.path.realpath(sys.executable) if sys.executable else ""
    if not path:
        raise OSError("cannot determine the executable path")
    return path[: MAX_PATH - 1]