"""
Location strategy for an installed libVLC.

Resolution runs three tiers in fixed priority order and merges their
contributions (see resolved_config.MERGE_POLICY):

1. Explicit overrides (VLC_LIB_DIR_<ARCH>, VLC_LIB_DIR, VLC_INCLUDE_DIR)
2. pkg-config query for "libvlc" (optional)
3. Platform defaults (Windows Program Files, macOS app bundle, Linux bare names)

The engine never fails. Consumers decide whether a missing field is fatal.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Tuple

from ..packages.pkg_config import PackageRegistry
from ..packages.platform_utils import (
    ENV_INCLUDE_DIR,
    ENV_INSTALL_DIR,
    ENV_LIB_DIR,
    PlatformContext,
)
from .resolved_config import Contribution, ResolvedConfig, merge_contributions

REGISTRY_PACKAGE = "libvlc"


class PlatformStrategy(ABC):
    """Platform-specific knowledge about where libVLC is usually installed."""

    # Runtime library file names, in staging order
    LIBRARY_FILES: Tuple[str, ...] = ()

    # Link units passed to the linker, target library first
    LINK_LIBRARIES: Tuple[str, ...] = ("vlc", "vlccore")

    # Extra system libraries the link needs on this platform
    SYSTEM_LIBRARIES: Tuple[str, ...] = ()

    # Whether a missing import library must be synthesized from the DLL
    NEEDS_IMPORT_LIBRARY = False

    @abstractmethod
    def default_tier(self, ctx: PlatformContext) -> List[Contribution]:
        """Contributions from conventional install locations.

        Args:
            ctx: Platform context

        Returns:
            Ordered (field, value) contributions
        """
        pass


class WindowsStrategy(PlatformStrategy):
    """VLC installed by the official Windows installer."""

    LIBRARY_FILES = ("libvlc.dll", "libvlccore.dll")
    LINK_LIBRARIES = ("libvlc", "libvlccore")
    # MSVC moved vsnprintf out of msvcrt; libvlc_log_* pulls it in
    SYSTEM_LIBRARIES = ("legacy_stdio_definitions",)
    NEEDS_IMPORT_LIBRARY = True

    VENDOR = "VideoLAN"
    PRODUCT = "VLC"

    def install_root(self, ctx: PlatformContext) -> Path:
        """VLC_INSTALL_DIR, or <ProgramFiles>/VideoLAN/VLC."""
        override = ctx.get(ENV_INSTALL_DIR)
        if override:
            return Path(override)

        program_files = None
        if ctx.target_arch == "x86":
            program_files = ctx.get("ProgramFiles(x86)")
        program_files = program_files or ctx.get("ProgramFiles") or r"C:\Program Files"
        return Path(program_files) / self.VENDOR / self.PRODUCT

    def default_tier(self, ctx: PlatformContext) -> List[Contribution]:
        root = self.install_root(ctx)
        sdk = root / "sdk"
        contributions: List[Contribution] = [("include_dir", sdk / "include")]

        lib_dir = sdk / "lib"
        if not lib_dir.exists() and (root / self.LIBRARY_FILES[0]).exists():
            # Runtime-only install: link against the DLLs in the root
            lib_dir = root
        contributions.append(("lib_dir", lib_dir))
        contributions.append(("link_paths", lib_dir))
        contributions.append(("plugins_dir", root / "plugins"))
        # DLLs sit in the install root, next to sdk/
        contributions.append(("runtime_dir", root))
        return contributions


class MacOSStrategy(PlatformStrategy):
    """VLC.app application bundle."""

    LIBRARY_FILES = ("libvlc.dylib", "libvlccore.dylib")

    DEFAULT_BUNDLE = Path("/Applications/VLC.app/Contents")

    def bundle_root(self, ctx: PlatformContext) -> Path:
        """VLC_INSTALL_DIR, or the bundle's Contents directory."""
        override = ctx.get(ENV_INSTALL_DIR)
        return Path(override) if override else self.DEFAULT_BUNDLE

    @staticmethod
    def _prefer(primary: Path, fallback: Path) -> Path:
        return primary if primary.exists() else fallback

    def default_tier(self, ctx: PlatformContext) -> List[Contribution]:
        root = self.bundle_root(ctx)
        include_dir = self._prefer(root / "MacOS" / "include", root / "include")
        lib_dir = self._prefer(root / "MacOS" / "lib", root / "lib")
        return [
            ("include_dir", include_dir),
            ("lib_dir", lib_dir),
            ("link_paths", lib_dir),
            ("plugins_dir", root / "Frameworks" / "plugins"),
            ("plugins_dir", root / "MacOS" / "plugins"),
        ]


class LinuxStrategy(PlatformStrategy):
    """Distribution packages; directories are expected from pkg-config."""

    LIBRARY_FILES = ("libvlc.so", "libvlccore.so")

    def default_tier(self, ctx: PlatformContext) -> List[Contribution]:
        return []


def strategy_for(ctx: PlatformContext) -> PlatformStrategy:
    """Select the platform strategy for a context."""
    if ctx.is_windows:
        return WindowsStrategy()
    if ctx.is_macos:
        return MacOSStrategy()
    return LinuxStrategy()


def override_tier(ctx: PlatformContext) -> List[Contribution]:
    """Contributions from explicit override variables.

    The architecture-specific lib directory variable is consulted before the
    generic VLC_LIB_DIR.
    """
    contributions: List[Contribution] = []

    lib_dir = ctx.get(ctx.arch_lib_dir_var) or ctx.get(ENV_LIB_DIR)
    if lib_dir:
        contributions.append(("lib_dir", Path(lib_dir)))
        contributions.append(("link_paths", Path(lib_dir)))

    include_dir = ctx.get(ENV_INCLUDE_DIR)
    if include_dir:
        contributions.append(("include_dir", Path(include_dir)))

    return contributions


def registry_tier(registry: PackageRegistry) -> Tuple[List[Contribution], bool]:
    """Contributions from the package registry.

    Returns:
        Tuple of (contributions, whether the query succeeded)
    """
    result = registry.probe(REGISTRY_PACKAGE)
    if result is None:
        return [], False

    contributions: List[Contribution] = []
    for path in result.include_paths:
        contributions.append(("include_dir", path))
        contributions.append(("include_paths", path))
    for path in result.link_paths:
        contributions.append(("lib_dir", path))
        contributions.append(("link_paths", path))
    return contributions, True


class LocationEngine:
    """Resolves a ResolvedConfig for a PlatformContext.

    Example usage:
        ctx = PlatformDetector.from_environment()
        config = LocationEngine(ctx).resolve()
        if config.lib_dir is None:
            ...
    """

    def __init__(
        self,
        ctx: PlatformContext,
        registry: Optional[PackageRegistry] = None,
        use_registry: bool = True,
        strategy: Optional[PlatformStrategy] = None,
    ):
        """
        Initialize location engine.

        Args:
            ctx: Platform context
            registry: Package registry (default: pkg-config on PATH)
            use_registry: Whether to run the registry tier
            strategy: Platform strategy (default: selected from ctx)
        """
        self.ctx = ctx
        self.use_registry = use_registry
        self.registry = registry if registry is not None else PackageRegistry()
        self.strategy = strategy or strategy_for(ctx)

    def resolve(self) -> ResolvedConfig:
        """Run all tiers and merge their contributions."""
        contributions = override_tier(self.ctx)

        registry_hit = False
        if self.use_registry:
            registry_contributions, registry_hit = registry_tier(self.registry)
            contributions.extend(registry_contributions)

        contributions.extend(self.strategy.default_tier(self.ctx))
        contributions.extend(("lib_files", name) for name in self.strategy.LIBRARY_FILES)

        return merge_contributions(contributions, registry_hit=registry_hit)
