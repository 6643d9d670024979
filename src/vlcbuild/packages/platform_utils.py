"""Platform Detection Utilities.

This module turns the invoking build system's target triple and the process
environment into an immutable PlatformContext. Every resolution step reads
the environment through the context, never through os.environ directly.

Supported Targets:
    - Operating systems: windows, macos, linux
    - Architectures: x86, x86_64, arm, aarch64
"""

import os
import platform
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Literal, Mapping, Optional, Tuple


class PlatformError(Exception):
    """Raised when the target platform or architecture is unsupported."""

    pass


TargetOS = Literal["windows", "macos", "linux"]
TargetArch = Literal["x86", "x86_64", "arm", "aarch64"]

# Environment variables read by the pipeline
ENV_TARGET_OS = "VLCBUILD_TARGET_OS"
ENV_TARGET_ARCH = "VLCBUILD_TARGET_ARCH"
ENV_LIB_DIR = "VLC_LIB_DIR"
ENV_INCLUDE_DIR = "VLC_INCLUDE_DIR"
ENV_INSTALL_DIR = "VLC_INSTALL_DIR"

ARCH_LIB_DIR_VARS = {
    "x86": "VLC_LIB_DIR_X86",
    "x86_64": "VLC_LIB_DIR_X86_64",
    "arm": "VLC_LIB_DIR_ARM",
    "aarch64": "VLC_LIB_DIR_AARCH64",
}

_OS_ALIASES = {
    "windows": "windows",
    "win32": "windows",
    "darwin": "macos",
    "macos": "macos",
    "osx": "macos",
    "linux": "linux",
}

_ARCH_ALIASES = {
    "x86": "x86",
    "i386": "x86",
    "i686": "x86",
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "aarch64": "aarch64",
    "arm64": "aarch64",
    "arm": "arm",
    "armhf": "arm",
}


def normalize_os(name: str) -> str:
    """Map an OS identifier (platform.system() style or triple style) to a TargetOS.

    Raises:
        PlatformError: If the OS is not supported
    """
    key = name.strip().lower()
    if key in _OS_ALIASES:
        return _OS_ALIASES[key]
    raise PlatformError(f"Unsupported platform: {name}")


def normalize_arch(name: str) -> str:
    """Map an architecture identifier to a TargetArch.

    Raises:
        PlatformError: If the architecture is unknown
    """
    key = name.strip().lower()
    if key in _ARCH_ALIASES:
        return _ARCH_ALIASES[key]
    if key.startswith("armv7") or key.startswith("armv6"):
        return "arm"
    raise PlatformError(f"Unsupported architecture: {name}")


@dataclass(frozen=True)
class PlatformContext:
    """Target OS, target architecture and a snapshot of the environment."""

    target_os: TargetOS
    target_arch: TargetArch
    env: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Freeze the snapshot so later os.environ changes can't leak in
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))

    @property
    def is_windows(self) -> bool:
        return self.target_os == "windows"

    @property
    def is_macos(self) -> bool:
        return self.target_os == "macos"

    @property
    def is_linux(self) -> bool:
        return self.target_os == "linux"

    def get(self, name: str) -> Optional[str]:
        """Return an environment value, treating empty strings as unset.

        Windows variable names are case-insensitive (os.environ reports
        them uppercased there), so for Windows targets a case-insensitive
        match is used when the exact name is absent.

        Raises:
            PlatformError: If the value is malformed (contains a NUL byte)
        """
        value = self.env.get(name)
        if value is None and self.is_windows:
            folded = name.upper()
            value = next((v for k, v in self.env.items() if k.upper() == folded), None)
        if not value:
            return None
        if "\x00" in value:
            raise PlatformError(f"Malformed value for {name}: contains NUL byte")
        return value

    @property
    def arch_lib_dir_var(self) -> str:
        """Name of the architecture-specific lib directory override variable."""
        return ARCH_LIB_DIR_VARS[self.target_arch]


class PlatformDetector:
    """Builds PlatformContext instances from the host or an explicit triple."""

    @staticmethod
    def detect_host() -> Tuple[str, str]:
        """Detect host OS and architecture.

        Returns:
            Tuple of (target_os, target_arch)

        Raises:
            PlatformError: If the host is not supported
        """
        return normalize_os(platform.system()), normalize_arch(platform.machine())

    @staticmethod
    def from_environment(
        env: Optional[Mapping[str, str]] = None,
        target_os: Optional[str] = None,
        target_arch: Optional[str] = None,
    ) -> PlatformContext:
        """Create a PlatformContext.

        Explicit arguments win over VLCBUILD_TARGET_OS/VLCBUILD_TARGET_ARCH,
        which win over host detection.

        Args:
            env: Environment mapping (default: os.environ)
            target_os: Explicit target OS
            target_arch: Explicit target architecture

        Raises:
            PlatformError: If the OS or architecture is unsupported
        """
        snapshot = dict(os.environ if env is None else env)

        os_name = target_os or snapshot.get(ENV_TARGET_OS)
        arch_name = target_arch or snapshot.get(ENV_TARGET_ARCH)

        if not os_name or not arch_name:
            host_os, host_arch = PlatformDetector.detect_host()
            os_name = os_name or host_os
            arch_name = arch_name or host_arch

        return PlatformContext(
            target_os=normalize_os(os_name),
            target_arch=normalize_arch(arch_name),
            env=snapshot,
        )
