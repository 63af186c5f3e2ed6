import pytest

from hostprobe.cpu_info import CpuInfo, parse_cpuinfo, read_cpu_info

SAMPLE = """processor\t: 0
vendor_id\t: GenuineIntel
cpu family\t: 6
model\t\t: 158
model name\t: Example CPU @ 3.00GHz
stepping\t: 10
flags\t\t: fpu vme sse2 hypervisor

processor\t: 1
vendor_id\t: OtherVendor
model name\t: Second CPU
"""


def test_parse_reads_first_processor():
    cpu = parse_cpuinfo(SAMPLE)
    assert cpu.vendor == "GenuineIntel"
    assert cpu.brand == "Example CPU @ 3.00GHz"
    assert cpu.hypervisor_set is True


def test_model_keeps_signature_fields():
    cpu = parse_cpuinfo(SAMPLE)
    assert cpu.model & 0xF == 10
    assert (cpu.model >> 4) & 0xF == 158 & 0xF
    assert (cpu.model >> 8) & 0xF == 6
    assert (cpu.model >> 14) & 0xF == 158 >> 4


def test_missing_fields_give_defaults():
    cpu = parse_cpuinfo("processor : 0\n")
    assert cpu.vendor == ""
    assert cpu.brand == "NA"
    assert cpu.hypervisor_set is False
    assert cpu.model == 0


def test_no_hypervisor_flag():
    cpu = parse_cpuinfo("vendor_id : AuthenticAMD\nflags : fpu sse\n")
    assert cpu.hypervisor_set is False
    assert cpu.vendor == "AuthenticAMD"


@pytest.mark.parametrize("brand_index", [1, 0x7F, 0xFF])
def test_brand_index_in_top_byte(brand_index):
    cpu = CpuInfo(signature=0x000906EA, brand_index=brand_index)
    assert cpu.model >> 24 == brand_index


def test_reserved_bits_are_dropped():
    assert CpuInfo(signature=0xC000).model == 0
    assert CpuInfo(signature=0x3000).model & 0x3000 == 0x3000


def test_read_from_file(tmp_path):
    path = tmp_path / "cpuinfo"
    path.write_text(SAMPLE)
    assert read_cpu_info(path) == parse_cpuinfo(SAMPLE)


def test_read_missing_file_has_no_signature(tmp_path):
    cpu = read_cpu_info(tmp_path / "absent")
    assert cpu.signature == 0
    assert cpu.hypervisor_set is False
    assert cpu.brand != ""