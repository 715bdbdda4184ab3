"""Host platform information."""
from dataclasses import dataclass
from pathlib import Path
import platform

from .. import constants


@dataclass(frozen=True)
class HostInfo:
    """Operating system, architecture and home directory of this host."""
    os_name: str
    arch: str
    home: Path


def normalize_os(system: str) -> str:
    """Map platform.system() output to a short OS name ('linux', 'macos', ...)."""
    return constants.SYSTEM_MAP.get(system, system.lower())


def normalize_arch(machine: str) -> str:
    """Get standardized architecture.

    Returns:
        str: 'x64' for x86_64/AMD64, 'arm64' for ARM64/aarch64, otherwise the
        lowercase machine name
    """
    machine = machine.lower()
    return constants.ARCH_MAP.get(machine, machine)


def get_host_info() -> HostInfo:
    """Look up the current host.

    Compute this once at startup and pass it to whoever needs it.
    """
    return HostInfo(
        os_name=normalize_os(platform.system()),
        arch=normalize_arch(platform.machine()),
        home=Path.home(),
    )


def is_windows(host: HostInfo) -> bool:
    """Check if host runs Windows."""
    return host.os_name == "windows"
