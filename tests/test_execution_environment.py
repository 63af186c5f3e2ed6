import pytest

from hostprobe.cpu_info import CpuInfo
from hostprobe.datatypes import (
    CloudProvider,
    VirtualizationDetail,
    VirtualizationSummary,
)
from hostprobe.dmi_info import DmiInfo
from hostprobe.execution_environment import (
    ContainerType,
    ExecutionEnvironment,
    container_from_cgroup,
    container_from_systemd,
    detect_container,
)


def test_cgroup_docker():
    text = "12:pids:/docker/0123abcd\n11:cpu:/\n"
    assert container_from_cgroup(text) is ContainerType.DOCKER


def test_cgroup_lxc():
    assert container_from_cgroup("3:cpu:/lxc/box\n") is ContainerType.LXC


def test_cgroup_first_match_wins():
    assert container_from_cgroup("1:a:/lxc/x\n2:b:/docker/y\n") is ContainerType.LXC


def test_cgroup_none():
    assert container_from_cgroup("0::/init.scope\n") is ContainerType.NONE


@pytest.mark.parametrize(
    "text, expected",
    [
        ("docker\n", ContainerType.DOCKER),
        ("lxc\n", ContainerType.LXC),
        ("", ContainerType.DOCKER),
        ("podman\n", ContainerType.DOCKER),
    ],
)
def test_systemd_marker(text, expected):
    assert container_from_systemd(text) is expected


def test_detect_container_missing_files(tmp_path):
    assert detect_container(tmp_path / "cgroup", tmp_path / "container") is ContainerType.NONE


def test_detect_container_falls_back_to_systemd(tmp_path):
    cgroup = tmp_path / "cgroup"
    cgroup.write_text("0::/\n")
    marker = tmp_path / "container"
    marker.write_text("lxc\n")
    assert detect_container(cgroup, marker) is ContainerType.LXC


def test_detect_container_cgroup_first(tmp_path):
    cgroup = tmp_path / "cgroup"
    cgroup.write_text("1:cpu:/docker/abc\n")
    marker = tmp_path / "container"
    marker.write_text("lxc\n")
    assert detect_container(cgroup, marker) is ContainerType.DOCKER


def test_container_summary():
    env = ExecutionEnvironment(
        cpu_info=CpuInfo(hypervisor_set=True), container_type=ContainerType.DOCKER
    )
    assert env.virtualization() is VirtualizationSummary.CONTAINER
    assert env.is_container()
    assert env.is_docker()


def test_lxc_is_container_not_docker():
    env = ExecutionEnvironment(container_type=ContainerType.LXC)
    assert env.is_container()
    assert not env.is_docker()


def test_bare_metal():
    env = ExecutionEnvironment(
        cpu_info=CpuInfo(vendor="GenuineIntel", brand="Intel(R) Core(TM)"),
        dmi_info=DmiInfo(bios_description="DMI:BVNDELL INC."),
    )
    assert env.virtualization() is VirtualizationSummary.NONE
    assert not env.is_container()
    assert not env.is_docker()
    assert env.virtualization_detail() is VirtualizationDetail.BARE_TO_METAL
    assert env.cloud_provider() is CloudProvider.ON_PREMISE


def test_vm_from_firmware():
    env = ExecutionEnvironment(dmi_info=DmiInfo(bios_description="DMI:BVNINNOTEK GMBH:"))
    assert env.virtualization_detail() is VirtualizationDetail.VIRTUALBOX
    assert env.virtualization() is VirtualizationSummary.VM
    assert not env.is_container()


def test_vm_from_cpu_vendor():
    env = ExecutionEnvironment(cpu_info=CpuInfo(vendor="XenVMMXenVMM"))
    assert env.virtualization_detail() is VirtualizationDetail.V_XEN


def test_kvm_from_cpu_brand():
    env = ExecutionEnvironment(cpu_info=CpuInfo(vendor="AuthenticAMD", brand="Common KVM processor"))
    assert env.virtualization_detail() is VirtualizationDetail.KVM


def test_hypervisor_bit_only():
    env = ExecutionEnvironment(cpu_info=CpuInfo(vendor="GenuineIntel", hypervisor_set=True))
    assert env.virtualization_detail() is VirtualizationDetail.V_OTHER
    assert env.virtualization() is VirtualizationSummary.VM


def test_firmware_takes_precedence_over_cpu():
    env = ExecutionEnvironment(
        cpu_info=CpuInfo(vendor="KVMKVMKVM"),
        dmi_info=DmiInfo(bios_vendor="VMWARE, INC."),
    )
    assert env.virtualization_detail() is VirtualizationDetail.VMWARE


@pytest.mark.parametrize(
    "dmi, provider",
    [
        (DmiInfo(bios_vendor="SEABIOS"), CloudProvider.ALI_CLOUD),
        (DmiInfo(sys_vendor="ALIBABA CLOUD"), CloudProvider.ALI_CLOUD),
        (DmiInfo(sys_vendor="GOOGLE"), CloudProvider.GOOGLE_CLOUD),
        (DmiInfo(bios_description="DMI:GOOGLECOMPUTEENGINE"), CloudProvider.GOOGLE_CLOUD),
        (DmiInfo(bios_vendor="AWS"), CloudProvider.AWS),
        (DmiInfo(bios_description="DMI:AMAZON EC2"), CloudProvider.AWS),
        (DmiInfo(bios_description="DMI:ASUS"), CloudProvider.ON_PREMISE),
        (DmiInfo(bios_description="SOMETHING ELSE"), CloudProvider.PROV_UNKNOWN),
        (DmiInfo(), CloudProvider.PROV_UNKNOWN),
    ],
)
def test_cloud_provider(dmi, provider):
    assert ExecutionEnvironment(dmi_info=dmi).cloud_provider() is provider


def test_cloud_means_vm():
    env = ExecutionEnvironment(dmi_info=DmiInfo(bios_vendor="SEABIOS"))
    assert env.is_cloud()
    assert env.virtualization_detail() is VirtualizationDetail.V_OTHER
    info = env.info()
    assert info.cloud_provider is CloudProvider.ALI_CLOUD
    assert info.virtualization is VirtualizationSummary.VM
    assert info.virtualization_detail is VirtualizationDetail.V_OTHER


def test_sys_vendor_is_case_sensitive():
    env = ExecutionEnvironment(dmi_info=DmiInfo(sys_vendor="Google"))
    assert env.cloud_provider() is CloudProvider.PROV_UNKNOWN


def test_detect_is_consistent():
    env = ExecutionEnvironment.detect()
    summary = env.virtualization()
    assert (summary is VirtualizationSummary.CONTAINER) == env.is_container()
    if summary is VirtualizationSummary.NONE:
        assert env.virtualization_detail() is VirtualizationDetail.BARE_TO_METAL
    assert env.info().virtualization is summary