"""Detection of containers, virtual machines and cloud providers."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .cpu_info import CpuInfo, read_cpu_info
from .datatypes import (
    CloudProvider,
    ExecutionEnvironmentInfo,
    VirtualizationDetail,
    VirtualizationSummary,
)
from .dmi_info import DmiInfo, read_dmi_info

log = logging.getLogger(__name__)

CGROUP_PATH = Path("/proc/self/cgroup")
SYSTEMD_CONTAINER_PATH = Path("/var/run/systemd/container")

# Hypervisor signatures as reported by the processor vendor or brand string.
VIRTUAL_CPU_NAMES: dict[str, VirtualizationDetail] = {
    "bhyve bhyve ": VirtualizationDetail.V_OTHER,
    "KVM": VirtualizationDetail.KVM,
    "MICROSOFT": VirtualizationDetail.HV,
    " lrpepyh vr": VirtualizationDetail.HV,
    "prl hyperv  ": VirtualizationDetail.PARALLELS,
    "VMWARE": VirtualizationDetail.VMWARE,
    "XenVMMXenVMM": VirtualizationDetail.V_XEN,
    "ACRNACRNACRN": VirtualizationDetail.V_OTHER,
    "VBOX": VirtualizationDetail.VIRTUALBOX,
}

# Virtual machine vendors as reported by the firmware.
VM_VENDORS: dict[str, VirtualizationDetail] = {
    "VMWARE": VirtualizationDetail.VMWARE,
    "MICROSOFT": VirtualizationDetail.HV,
    "PARALLELS": VirtualizationDetail.PARALLELS,
    "VITRUAL MACHINE": VirtualizationDetail.V_OTHER,
    "INNOTEK GMBH": VirtualizationDetail.VIRTUALBOX,
    "POWERVM": VirtualizationDetail.V_OTHER,
    "BOCHS": VirtualizationDetail.V_OTHER,
    "KVM": VirtualizationDetail.KVM,
}


class ContainerType(Enum):
    NONE = 0
    DOCKER = 1
    LXC = 2


def container_from_cgroup(text: str) -> ContainerType:
    """Container kind named by the first cgroup line mentioning one."""
    for line in text.splitlines():
        result = ContainerType.NONE
        if "docker" in line:
            result = ContainerType.DOCKER
        if "lxc" in line:
            result = ContainerType.LXC
        if result is not ContainerType.NONE:
            return result
    return ContainerType.NONE


def container_from_systemd(text: str) -> ContainerType:
    """Container kind from the systemd container marker file's content.

    The marker's presence alone means a container; docker is assumed unless
    a line names lxc first.
    """
    for line in text.splitlines():
        if "docker" in line:
            return ContainerType.DOCKER
        if "lxc" in line:
            return ContainerType.LXC
    return ContainerType.DOCKER


def _read_text(path: str | Path) -> str | None:
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        return None


def detect_container(
    cgroup_path: str | Path = CGROUP_PATH,
    systemd_path: str | Path = SYSTEMD_CONTAINER_PATH,
) -> ContainerType:
    """Look at the cgroup listing, then the systemd marker, for a container."""
    cgroup = _read_text(cgroup_path)
    result = ContainerType.NONE if cgroup is None else container_from_cgroup(cgroup)
    if result is ContainerType.NONE:
        marker = _read_text(systemd_path)
        if marker is not None:
            result = container_from_systemd(marker)
    return result


def _find_in_map(table: dict[str, VirtualizationDetail], data: str) -> VirtualizationDetail:
    return next(
        (detail for key, detail in table.items() if key in data),
        VirtualizationDetail.BARE_TO_METAL,
    )


@dataclass(frozen=True)
class ExecutionEnvironment:
    """Where the program runs, judged from processor, firmware and container hints."""

    cpu_info: CpuInfo = field(default_factory=CpuInfo)
    dmi_info: DmiInfo = field(default_factory=DmiInfo)
    container_type: ContainerType = ContainerType.NONE

    @classmethod
    def detect(cls) -> ExecutionEnvironment:
        """Probe the running system."""
        container = (
            ContainerType.NONE if sys.platform.startswith("win") else detect_container()
        )
        return cls(
            cpu_info=read_cpu_info(),
            dmi_info=read_dmi_info(),
            container_type=container,
        )

    def is_docker(self) -> bool:
        return self.container_type is ContainerType.DOCKER

    def is_container(self) -> bool:
        """True for any container technology (docker or lxc)."""
        return self.container_type is not ContainerType.NONE

    def virtualization(self) -> VirtualizationSummary:
        if self.is_container():
            return VirtualizationSummary.CONTAINER
        if (
            self.virtualization_detail() is not VirtualizationDetail.BARE_TO_METAL
            or self.is_cloud()
        ):
            return VirtualizationSummary.VM
        return VirtualizationSummary.NONE

    def virtualization_detail(self) -> VirtualizationDetail:
        dmi = self.dmi_info
        probes = (
            (VM_VENDORS, dmi.bios_description),
            (VM_VENDORS, dmi.bios_vendor),
            (VM_VENDORS, dmi.sys_vendor),
            (VIRTUAL_CPU_NAMES, self.cpu_info.vendor),
            (VIRTUAL_CPU_NAMES, self.cpu_info.brand),
        )
        for table, data in probes:
            result = _find_in_map(table, data)
            if result is not VirtualizationDetail.BARE_TO_METAL:
                return result
        if self.cpu_info.hypervisor_set or self.is_cloud():
            return VirtualizationDetail.V_OTHER
        return VirtualizationDetail.BARE_TO_METAL

    def cloud_provider(self) -> CloudProvider:
        description = self.dmi_info.bios_description
        bios_vendor = self.dmi_info.bios_vendor
        sys_vendor = self.dmi_info.sys_vendor
        if not (description or bios_vendor or sys_vendor):
            return CloudProvider.PROV_UNKNOWN
        if "SEABIOS" in bios_vendor or "ALIBABA" in description or "ALIBABA" in sys_vendor:
            return CloudProvider.ALI_CLOUD
        if "GOOGLE" in sys_vendor or "GOOGLECOMPUTEENGINE" in description:
            return CloudProvider.GOOGLE_CLOUD
        if "AWS" in bios_vendor or "AMAZON" in description or "AWS" in sys_vendor:
            return CloudProvider.AWS
        if any(name in description for name in ("HP-COMPAQ", "ASUS", "DELL")):
            return CloudProvider.ON_PREMISE
        return CloudProvider.PROV_UNKNOWN

    def is_cloud(self) -> bool:
        return self.cloud_provider() not in (CloudProvider.ON_PREMISE, CloudProvider.PROV_UNKNOWN)

    def info(self) -> ExecutionEnvironmentInfo:
        return ExecutionEnvironmentInfo(
            cloud_provider=self.cloud_provider(),
            virtualization=self.virtualization(),
            virtualization_detail=self.virtualization_detail(),
        )