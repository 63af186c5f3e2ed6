"""Parsing of raw SMBIOS firmware tables."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum

from .dmi_info import DmiInfo

_HEADER = struct.Struct("<BBH")
_RAW_HEADER = struct.Struct("<BBBBI")


class SmbiosType(IntEnum):
    BIOS_INFO = 0
    SYSTEM_INFO = 1
    BASEBOARD_INFO = 2
    MODULE_INFO = 2
    SYSTEM_ENCLOSURE = 3
    SYSTEM_CHASSIS = 3
    PROCESSOR_INFO = 4
    MEMORY_CONTROLLER_INFO = 5
    MEMORY_MODULE_INFO = 6
    CACHE_INFO = 7
    PORT_CONNECTOR_INFO = 8
    SYSTEM_SLOTS = 9
    ONBOARD_DEVICE_INFO = 10
    OEM_STRINGS = 11
    SYSTEM_CONFIG_OPTIONS = 12
    LANGUAGE_INFO = 13
    GROUP_ASSOCIATIONS = 14
    SYSTEM_EVENT_LOG = 15
    MEMORY_ARRAY = 16
    MEMORY_DEVICE = 17
    MEMORY_ERROR_INFO_32_BIT = 18
    MEMORY_ARRAY_MAPPED_ADDR = 19
    MEMORY_DEVICE_MAPPED_ADDR = 20
    BUILTIN_POINTING_DEVICE = 21
    PORTABLE_BATTERY = 22
    SYSTEM_RESET = 23
    HARDWARE_SECURITY = 24
    SYSTEM_POWER_CONTROLS = 25
    VOLTAGE_PROBE = 26
    COOLING_DEVICE = 27
    TEMPERATURE_PROBE = 28
    ELECTRICAL_CURRENT_PROBE = 29
    OUT_OF_BAND_REMOTE_ACCESS = 30
    BIS_ENTRY_POINT = 31
    SYSTEM_BOOT_INFO = 32
    MEMORY_ERROR_INFO_64_BIT = 33
    MANAGEMENT_DEVICE = 34
    MANAGEMENT_DEVICE_COMPONENT = 35
    MANAGEMENT_DEVICE_THRESHOLD = 36
    MEMORY_CHANNEL = 37
    IPMI_DEVICE_INFO = 38
    SYSTEM_POWER_SUPPLY = 39
    ADDITIONAL_INFO = 40
    ONBOARD_DEVICE_EXTINFO = 41
    MANAGEMENT_CONTROLLER_HOST = 42
    INACTIVE = 126
    END_OF_TABLE = 127


@dataclass(frozen=True)
class SmbiosStructure:
    """One table entry: the formatted area (header included) and its string set."""

    type: int
    length: int
    handle: int
    formatted: bytes
    strings: tuple[str, ...]

    def string(self, index: int) -> str | None:
        """The string with 1-based ``index``; None for 0 or an absent string."""
        if 1 <= index <= len(self.strings):
            return self.strings[index - 1]
        return None

    def byte(self, offset: int) -> int:
        """Byte of the formatted area at ``offset``, 0 when the entry is too short."""
        return self.formatted[offset] if offset < len(self.formatted) else 0


def _read_strings(data: bytes, pos: int) -> tuple[tuple[str, ...], int]:
    if pos >= len(data):
        raise ValueError(f"missing string set at offset {pos}")
    if data[pos] == 0:
        return (), pos + 2
    strings = []
    while True:
        nul = data.find(b"\0", pos)
        if nul < 0:
            raise ValueError(f"unterminated string at offset {pos}")
        if nul == pos:
            return tuple(strings), pos + 1
        strings.append(data[pos:nul].decode("latin-1"))
        pos = nul + 1


def parse_smbios(data: bytes) -> list[SmbiosStructure]:
    """Split an SMBIOS structure table into its entries."""
    data = bytes(data)
    structures = []
    offset = 0
    while offset < len(data):
        if len(data) - offset < _HEADER.size:
            raise ValueError(f"truncated structure header at offset {offset}")
        type_, length, handle = _HEADER.unpack_from(data, offset)
        if length < _HEADER.size:
            raise ValueError(f"invalid structure length {length} at offset {offset}")
        strings_start = offset + length
        if strings_start > len(data):
            raise ValueError(f"structure at offset {offset} runs past the table")
        strings, next_offset = _read_strings(data, strings_start)
        structures.append(
            SmbiosStructure(type_, length, handle, data[offset:strings_start], strings)
        )
        offset = next_offset
    return structures


def split_raw_smbios(buffer: bytes) -> bytes:
    """Return the structure table from a raw firmware buffer with its 8-byte header."""
    buffer = bytes(buffer)
    if len(buffer) < _RAW_HEADER.size:
        raise ValueError("raw SMBIOS buffer shorter than its header")
    *_, length = _RAW_HEADER.unpack_from(buffer)
    table = buffer[_RAW_HEADER.size : _RAW_HEADER.size + length]
    if len(table) < length:
        raise ValueError(f"raw SMBIOS buffer declares {length} bytes, holds {len(table)}")
    return table


def _indexed_string(structure: SmbiosStructure, offset: int) -> str | None:
    index = structure.byte(offset)
    if 0 < index < structure.length:
        return structure.string(index)
    return None


def dmi_info_from_smbios(raw: bytes) -> DmiInfo:
    """Extract vendor and processor information from a raw SMBIOS buffer."""
    sys_vendor = bios_vendor = bios_description = cpu_manufacturer = ""
    cpu_cores = 0
    for structure in parse_smbios(split_raw_smbios(raw)):
        if structure.type == SmbiosType.BASEBOARD_INFO:
            name = _indexed_string(structure, 4)
            if name is not None:
                sys_vendor = name
        elif structure.type == SmbiosType.BIOS_INFO:
            vendor = _indexed_string(structure, 4)
            if vendor is not None:
                bios_vendor = vendor
        elif structure.type == SmbiosType.PROCESSOR_INFO:
            manufacturer = _indexed_string(structure, 7)
            if manufacturer is not None:
                cpu_manufacturer = manufacturer
            cpu_cores = structure.byte(35)
        elif structure.type == SmbiosType.SYSTEM_INFO:
            manufacturer = _indexed_string(structure, 4)
            product = _indexed_string(structure, 5)
            if manufacturer is not None and product is not None:
                bios_description = manufacturer + product
    return DmiInfo(
        sys_vendor=sys_vendor,
        bios_vendor=bios_vendor,
        bios_description=bios_description,
        cpu_manufacturer=cpu_manufacturer,
        cpu_cores=cpu_cores,
    )