[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hostprobe"
version = "0.1.0"
description = "Host facts for hardware identification: CPU, DMI/SMBIOS, execution environment, network adapters, disks and RSA signature checks"
requires-python = ">=3.10"
keywords = [
    "hardware",
    "identification",
    "dmi",
    "smbios",
    "virtualization",
    "container",
    "network",
    "disk",
    "signature",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: System :: Hardware",
]
dependencies = [
    "psutil",
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hostprobe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
strict = true
