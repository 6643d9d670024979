"""MSVC toolchain discovery.

Import-library synthesis needs two tools from a Visual Studio installation:
dumpbin.exe (export table listing) and lib.exe (archiver). They are taken
from PATH when a developer prompt is active, otherwise located through
vswhere.exe.
"""

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from .platform_utils import PlatformContext


class ToolchainError(Exception):
    """Raised when the MSVC toolchain cannot be located."""

    pass


Which = Callable[[str], Optional[str]]
Runner = Callable[[List[str]], "subprocess.CompletedProcess[str]"]


def _default_runner(cmd: List[str]) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(cmd, capture_output=True, text=True, timeout=60, check=False)


@dataclass(frozen=True)
class MsvcTools:
    """Resolved tool paths."""

    dumpbin: Path
    lib: Path


class MsvcToolchain:
    """Locates dumpbin.exe and lib.exe."""

    VSWHERE_RELATIVE = Path("Microsoft Visual Studio") / "Installer" / "vswhere.exe"

    # (host dir, target dir) per target architecture, preferred first
    HOST_TARGET_DIRS = {
        "x86_64": [("Hostx64", "x64"), ("Hostx86", "x64")],
        "x86": [("Hostx64", "x86"), ("Hostx86", "x86")],
    }

    def __init__(
        self,
        ctx: PlatformContext,
        which: Optional[Which] = None,
        runner: Optional[Runner] = None,
    ):
        """Initialize toolchain finder.

        Args:
            ctx: Platform context (environment snapshot and target arch)
            which: PATH lookup function (default: shutil.which)
            runner: Callable executing a command list (for tests)
        """
        self.ctx = ctx
        self.which = which or shutil.which
        self.runner = runner or _default_runner

    def locate(self) -> MsvcTools:
        """Find dumpbin and lib.

        Returns:
            MsvcTools with both tool paths

        Raises:
            ToolchainError: If either tool cannot be found
        """
        dumpbin = self.which("dumpbin")
        lib = self.which("lib")
        if dumpbin and lib:
            return MsvcTools(dumpbin=Path(dumpbin), lib=Path(lib))

        install = self._find_vs_installation()
        if install is None:
            raise ToolchainError(
                "MSVC toolchain not found: dumpbin/lib are not on PATH and "
                + "no Visual Studio installation was reported by vswhere"
            )

        bin_dir = self._find_bin_dir(install)
        if bin_dir is None:
            raise ToolchainError(
                "MSVC toolchain not found: no dumpbin.exe/lib.exe for "
                + f"{self.ctx.target_arch} under {install}"
            )
        return MsvcTools(dumpbin=bin_dir / "dumpbin.exe", lib=bin_dir / "lib.exe")

    def _vswhere_path(self) -> Optional[Path]:
        for var in ("ProgramFiles(x86)", "ProgramFiles"):
            base = self.ctx.get(var)
            if base:
                candidate = Path(base) / self.VSWHERE_RELATIVE
                if candidate.exists():
                    return candidate
        return None

    def _find_vs_installation(self) -> Optional[Path]:
        """Ask vswhere for the latest installation with the C++ tools."""
        vswhere = self._vswhere_path()
        if vswhere is None:
            return None

        try:
            result = self.runner([
                str(vswhere),
                "-latest",
                "-products", "*",
                "-requires", "Microsoft.VisualStudio.Component.VC.Tools.x86.x64",
                "-property", "installationPath",
            ])
        except (OSError, subprocess.SubprocessError) as e:
            raise ToolchainError(f"Failed to run vswhere: {e}") from e

        if result.returncode != 0:
            return None
        output = result.stdout.strip()
        if not output:
            return None
        return Path(output.splitlines()[0].strip())

    def _find_bin_dir(self, install: Path) -> Optional[Path]:
        msvc_root = install / "VC" / "Tools" / "MSVC"
        if not msvc_root.is_dir():
            return None

        # Newest toolset version first
        versions = sorted(
            (p for p in msvc_root.iterdir() if p.is_dir()),
            key=lambda p: [int(part) if part.isdigit() else 0 for part in p.name.split(".")],
            reverse=True,
        )
        for version_dir in versions:
            for host, target in self.HOST_TARGET_DIRS.get(self.ctx.target_arch, []):
                bin_dir = version_dir / "bin" / host / target
                if (bin_dir / "dumpbin.exe").exists() and (bin_dir / "lib.exe").exists():
                    return bin_dir
        return None
