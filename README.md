# hostprobe

`hostprobe` collects facts about the machine it runs on, of the kind that
software tying a licence to a host builds an identifier from, and checks RSA
signatures over such data. It is a library; it has no command of its own.

## Modules

- `hostprobe.cpu_info`: `CpuInfo` (vendor, brand, hypervisor flag, processor
  signature and the derived `model` word). `read_cpu_info()` reads
  `/proc/cpuinfo` and falls back to what the platform reports;
  `parse_cpuinfo(text)` works on the text of such a listing.
- `hostprobe.dmi_info`: `DmiInfo` and `read_dmi_info(base_dir)`, which reads
  `sys_vendor` and `modalias` from a sysfs directory (default
  `/sys/class/dmi/id`). Entries that cannot be read stay empty.
- `hostprobe.smbios`: parsing of raw SMBIOS tables. `split_raw_smbios()`
  strips the 8-byte header of a firmware table buffer, `parse_smbios()` splits
  the table into `SmbiosStructure` entries, and `dmi_info_from_smbios()` turns
  a raw buffer into a `DmiInfo` (BIOS vendor, baseboard vendor, system
  manufacturer + product, processor manufacturer and core count). Malformed
  tables raise `ValueError`.
- `hostprobe.execution_environment`: `ExecutionEnvironment` with
  `virtualization()`, `virtualization_detail()`, `cloud_provider()`,
  `is_cloud()`, `is_container()`, `is_docker()` and `info()`.
  Container detection looks at `/proc/self/cgroup`, then at
  `/var/run/systemd/container` (`detect_container`, `container_from_cgroup`,
  `container_from_systemd`).
- `hostprobe.network`: `get_adapter_infos()` lists non-loopback adapters as
  `AdapterInfo` records (name, MAC bytes, IPv4 bytes) and raises
  `NoAdaptersError` when none is found. On Windows adapters with an all-zero
  MAC are dropped and the rest are ordered by `sort_adapters()`, which ranks
  them with `adapter_score()` (named adapters and words such as "intel" or
  "realtek" up, "virtual", "vpn", "tunnel" and "ppp" down).
- `hostprobe.disks`: `get_disk_infos()` returns `DiskInfo` records from
  `/dev/disk/by-uuid` (labels from `/dev/disk/by-label` or
  `/dev/disk/by-partlabel`), or from the blkid cache when that gives nothing,
  and marks disks listed in `/etc/fstab` as preferred. It raises
  `DiskNotFoundError` when neither source can be read. The pieces are usable
  on their own: `parse_uuid`, `parse_disk_id`, `parse_blkid`,
  `disks_from_blkid`, `disks_from_dev`, `read_disk_labels`, `parse_fstab`,
  `set_preferred_disks`. `machine_name()` gives the first six bytes of the host
  name and `module_name()` the path of the running executable.
- `hostprobe.signature`: `verify_signature(data, signature_b64, public_key)`
  checks a base64 RSA PKCS#1 v1.5 / SHA-256 signature and returns `True` or
  `False`. The key is a `cryptography` RSA public key or PKCS#1
  `RSAPublicKey` DER bytes; `load_public_key()` and `parse_rsa_public_key()`
  read the DER, raising `DerError` when it is malformed.
- `hostprobe.datatypes`: enumerations (`EventType`, `VirtualizationSummary`,
  `VirtualizationDetail`, `CloudProvider`, ...) and records (`LicenseInfo`,
  `LicenseLocation`, `CallerInformation`, `AuditEvent`,
  `ExecutionEnvironmentInfo`) shared by the other modules and by callers.

## Usage

```python
from hostprobe.execution_environment import ExecutionEnvironment

env = ExecutionEnvironment.detect()
print(env.virtualization())         # VirtualizationSummary.NONE / CONTAINER / VM
print(env.virtualization_detail())  # e.g. VirtualizationDetail.KVM
print(env.cloud_provider())         # e.g. CloudProvider.AWS
print(env.info())
```

```python
from hostprobe.network import get_adapter_infos, NoAdaptersError

try:
    for adapter in get_adapter_infos():
        print(adapter.description, adapter.mac_address.hex(":"), adapter.ipv4_address)
except NoAdaptersError:
    print("no usable network adapter")
```

```python
from hostprobe.disks import get_disk_infos, DiskNotFoundError

try:
    for disk in get_disk_infos():
        print(disk.id, disk.device, disk.label, disk.disk_sn.hex(), disk.preferred)
except DiskNotFoundError:
    print("no disk information available")
```

```python
from hostprobe.signature import load_public_key, verify_signature

public_key = load_public_key(der_bytes)  # PKCS#1 RSAPublicKey in DER form
ok = verify_signature("data that was signed", signature_b64, public_key)
```

## What it does not do

- It does not read or validate licence files and does not compute a hardware
  identifier string; the records in `hostprobe.datatypes` only describe such
  data.
- It does not query firmware tables on Windows: `dmi_info_from_smbios()` needs
  the raw buffer to be supplied. `read_dmi_info()` and the disk functions read
  Linux paths.
- It does not sign data; it only verifies signatures.

## Running the tests

```
pip install "hostprobe[test]"
pytest
```