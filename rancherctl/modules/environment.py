"""Operating system and architecture detection."""
import logging
import platform
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from ..errors import UnsupportedEnvironmentError

logger = logging.getLogger("rancherctl.environment")

OS_RELEASE = Path("/etc/os-release")

# RKE2 conflicts with NetworkManager's cloud setup on RHEL derivatives.
# https://docs.rke2.io/known_issues#networkmanager
NM_CLOUD_SETUP = "nm-cloud-setup.service"


@dataclass(frozen=True)
class PackageManager:
    name: str
    install: List[str]
    update: List[str]


@dataclass(frozen=True)
class OSInfo:
    distro: str
    package_manager: PackageManager
    conflicting_services: List[str] = field(default_factory=list)


APT = PackageManager("apt", ["apt-get", "install", "-y"], ["apt-get", "update"])
YUM = PackageManager("yum", ["yum", "install", "-y"], ["yum", "update", "-y"])
DNF = PackageManager("dnf", ["dnf", "install", "-y"], ["dnf", "update", "-y"])
ZYPPER = PackageManager("zypper", ["zypper", "install", "-y"], ["zypper", "refresh"])

DISTROS: Dict[str, PackageManager] = {
    "ubuntu": APT,
    "debian": APT,
    "centos": YUM,
    "rhel": YUM,
    "rocky": YUM,
    "almalinux": YUM,
    "fedora": DNF,
    "sles": ZYPPER,
    "suse": ZYPPER,
    "opensuse-leap": ZYPPER,
}

RHEL_FAMILY = ("centos", "rhel", "rocky", "almalinux")

ARCHITECTURES = {
    "x86_64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
}


def parse_os_release(text: str) -> Dict[str, str]:
    """Parse os-release(5) content without evaluating it."""
    values = {}
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, _, value = line.partition("=")
        try:
            parts = shlex.split(value)
        except ValueError:
            parts = [value]
        values[key.strip()] = parts[0] if parts else ""
    return values


def detect_os(os_release: Path = OS_RELEASE) -> OSInfo:
    if not os_release.is_file():
        raise UnsupportedEnvironmentError(f"Unsupported distro. {os_release} not found.")

    distro = parse_os_release(os_release.read_text()).get("ID", "")
    package_manager = DISTROS.get(distro)
    if package_manager is None:
        raise UnsupportedEnvironmentError(f"Unsupported Linux distro: {distro or '<unknown>'}")

    services = [NM_CLOUD_SETUP] if distro in RHEL_FAMILY else []
    logger.debug(f"Detected distro {distro} using {package_manager.name}")
    return OSInfo(distro=distro, package_manager=package_manager, conflicting_services=services)


def detect_arch(machine: Optional[str] = None) -> str:
    machine = machine or platform.machine()
    try:
        return ARCHITECTURES[machine]
    except KeyError:
        raise UnsupportedEnvironmentError(f"Unsupported architecture: {machine}") from None


def disable_conflicting_services(host, os_info: OSInfo) -> None:
    for service in os_info.conflicting_services:
        logger.info(f"Disabling {service} (conflicts with RKE2)...")
        for action in ("disable", "stop", "mask"):
            # the unit is absent on some images
            host.run(["systemctl", action, service], privileged=True, check=False)
