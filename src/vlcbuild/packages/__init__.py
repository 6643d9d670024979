"""Host and toolchain integration for vlcbuild.

This module handles platform detection, pkg-config queries and MSVC
toolchain discovery.
"""

from .pkg_config import PackageRegistry, RegistryResult
from .platform_utils import PlatformContext, PlatformDetector, PlatformError
from .toolchain import MsvcToolchain, MsvcTools, ToolchainError

__all__ = [
    "PackageRegistry",
    "RegistryResult",
    "PlatformContext",
    "PlatformDetector",
    "PlatformError",
    "MsvcToolchain",
    "MsvcTools",
    "ToolchainError",
]
