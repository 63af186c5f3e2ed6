"""Enumerations and records shared by the host probing and licensing code."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class EventType(IntEnum):
    """Outcome and progress events reported while checking a license."""

    LICENSE_OK = 0
    LICENSE_FILE_NOT_FOUND = 1
    LICENSE_SERVER_NOT_FOUND = 2
    ENVIRONMENT_VARIABLE_NOT_DEFINED = 3
    FILE_FORMAT_NOT_RECOGNIZED = 4
    LICENSE_MALFORMED = 5
    PRODUCT_NOT_LICENSED = 6
    PRODUCT_EXPIRED = 7
    LICENSE_CORRUPTED = 8
    IDENTIFIERS_MISMATCH = 9

    LICENSE_SPECIFIED = 100
    LICENSE_FOUND = 101
    PRODUCT_FOUND = 102
    SIGNATURE_VERIFIED = 103


class LicenseType(IntEnum):
    LOCAL = 0
    REMOTE = 1  # remote licenses are not supported


class Severity(IntEnum):
    INFO = 0
    WARN = 1
    ERROR = 2


class LicenseDataType(IntEnum):
    """How the license data handed in by the application is to be read."""

    LICENSE_PATH = 0  # ';'-separated list of license file paths
    LICENSE_PLAIN_DATA = 1  # the license content itself
    LICENSE_ENCODED = 2  # the license content, encoded


class VirtualizationDetail(IntEnum):
    BARE_TO_METAL = 0
    VMWARE = 1
    VIRTUALBOX = 2
    V_XEN = 3
    KVM = 4
    HV = 5
    PARALLELS = 6
    V_OTHER = 7


class CloudProvider(IntEnum):
    PROV_UNKNOWN = 0
    ON_PREMISE = 1
    GOOGLE_CLOUD = 2
    AZURE_CLOUD = 3
    AWS = 4
    ALI_CLOUD = 5


class VirtualizationSummary(IntEnum):
    NONE = 0
    CONTAINER = 1
    VM = 2


@dataclass(frozen=True)
class AuditEvent:
    """One event recorded while validating a license."""

    severity: Severity
    event_type: EventType
    license_reference: str = ""
    param2: str = ""


@dataclass(frozen=True)
class LicenseLocation:
    """Where, or what, the license data is."""

    license_data_type: LicenseDataType
    license_data: str = ""


@dataclass(frozen=True)
class CallerInformation:
    """What the calling software asks to verify.

    An empty feature name selects the project's default feature.
    """

    version: str = ""
    feature_name: str = ""
    magic: int = 0


@dataclass
class LicenseInfo:
    """Details of a license that was examined."""

    status: list[AuditEvent] = field(default_factory=list)
    expiry_date: str = ""
    days_left: int = 0
    has_expiry: bool = False
    linked_to_pc: bool = False
    license_type: LicenseType = LicenseType.LOCAL
    proprietary_data: str = ""
    license_version: int = 0


@dataclass(frozen=True)
class ExecutionEnvironmentInfo:
    """Summary of where the program is running."""

    cloud_provider: CloudProvider = CloudProvider.PROV_UNKNOWN
    virtualization: VirtualizationSummary = VirtualizationSummary.NONE
    virtualization_detail: VirtualizationDetail = VirtualizationDetail.BARE_TO_METAL