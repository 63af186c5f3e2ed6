"""Host facts (CPU, DMI/SMBIOS, execution environment, network, disks) and RSA signature checks."""

__version__ = "0.1.0"