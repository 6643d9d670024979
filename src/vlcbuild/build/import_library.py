"""Import Library Synthesizer.

MSVC cannot link against a DLL directly; it needs an import library (.lib).
When the VLC install ships no SDK import libraries, one is generated from the
DLL's export table:

    dumpbin /EXPORTS libvlc.dll  ->  libvlc.def  ->  lib /DEF  ->  libvlc.lib

Design:
    - Machine type is validated in the constructor, before any tool runs
    - Both tools run synchronously; the .lib exists when synthesize() returns
    - The DLL itself is never modified
"""

import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional

from ..packages.toolchain import MsvcTools


class ImportLibraryError(Exception):
    """Raised when import library synthesis fails."""
    pass


Runner = Callable[[List[str], Path], "subprocess.CompletedProcess[str]"]

# dumpbin prints "ordinal hint RVA      name"; the name starts at this column
EXPORT_NAME_COLUMN = 26

MACHINE_TYPES: Dict[str, str] = {
    "x86": "X86",
    "x86_64": "X64",
}


def _default_runner(cmd: List[str], cwd: Path) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(cmd, cwd=str(cwd), capture_output=True, text=True, timeout=120, check=False)


def machine_type(target_arch: str) -> str:
    """Return lib.exe's /MACHINE value for an architecture.

    Raises:
        ImportLibraryError: For architectures other than x86 and x86_64
    """
    try:
        return MACHINE_TYPES[target_arch]
    except KeyError:
        raise ImportLibraryError(
            f"Import library synthesis supports only x86 and x86_64, not {target_arch}"
        ) from None


def parse_exports(dumpbin_output: str, prefix: str) -> List[str]:
    """Extract exported symbol names with a given prefix.

    Args:
        dumpbin_output: Output of `dumpbin /EXPORTS`
        prefix: Required symbol prefix (e.g., "libvlc_")

    Returns:
        Matching names in export table order
    """
    symbols = []
    for line in dumpbin_output.splitlines():
        name = line[EXPORT_NAME_COLUMN:].strip()
        if name.startswith(prefix):
            symbols.append(name)
    return symbols


def render_def(symbols: List[str]) -> str:
    """Render a module-definition file listing the given exports."""
    return "EXPORTS\r\n" + "".join(f"{symbol}\r\n" for symbol in symbols)


class ImportLibrarySynthesizer:
    """Generates an import library from a DLL's export table."""

    def __init__(
        self,
        tools: MsvcTools,
        target_arch: str,
        out_dir: Path,
        runner: Optional[Runner] = None,
        show_progress: bool = True,
    ):
        """Initialize synthesizer.

        Args:
            tools: dumpbin and lib paths
            target_arch: Target architecture (x86 or x86_64)
            out_dir: Directory receiving the .def and .lib files
            runner: Callable(cmd, cwd) executing a tool (for tests)
            show_progress: Whether to print progress

        Raises:
            ImportLibraryError: If the architecture is unsupported
        """
        self.machine = machine_type(target_arch)
        self.tools = tools
        self.out_dir = Path(out_dir)
        self.runner = runner or _default_runner
        self.show_progress = show_progress

    def synthesize(self, dll_path: Path, name: str, prefix: str) -> Path:
        """Create <out_dir>/<name>.lib from a DLL.

        Args:
            dll_path: DLL to read exports from
            name: Output base name (e.g., "libvlc")
            prefix: Symbol prefix to keep (e.g., "libvlc_")

        Returns:
            Path to the generated import library

        Raises:
            ImportLibraryError: If a tool fails or no matching exports exist
        """
        if not dll_path.exists():
            raise ImportLibraryError(f"DLL not found: {dll_path}")

        self.out_dir.mkdir(parents=True, exist_ok=True)
        def_path = self.out_dir / f"{name}.def"
        lib_path = self.out_dir / f"{name}.lib"

        if self.show_progress:
            print(f"Generating {lib_path.name} from {dll_path.name}...")

        exports = self._run(
            [str(self.tools.dumpbin), "/EXPORTS", str(dll_path).rstrip("\\")],
            "dumpbin",
        )
        symbols = parse_exports(exports.stdout, prefix)
        if not symbols:
            raise ImportLibraryError(
                f"No exports starting with '{prefix}' found in {dll_path}"
            )

        def_path.write_bytes(render_def(symbols).encode("utf-8"))

        self._run(
            [
                str(self.tools.lib),
                "/NOLOGO",
                f"/DEF:{def_path}",
                f"/OUT:{lib_path}",
                f"/MACHINE:{self.machine}",
            ],
            "lib",
        )

        if not lib_path.exists():
            raise ImportLibraryError(f"Import library was not created: {lib_path}")

        if self.show_progress:
            print(f"✓ Created {lib_path.name} ({len(symbols)} exports)")

        return lib_path

    def _run(self, cmd: List[str], tool: str) -> "subprocess.CompletedProcess[str]":
        try:
            result = self.runner(cmd, self.out_dir)
        except subprocess.TimeoutExpired as e:
            raise ImportLibraryError(f"{tool} timed out") from e
        except OSError as e:
            raise ImportLibraryError(f"Failed to run {tool}: {e}") from e

        if result.returncode != 0:
            error_msg = f"{tool} failed with exit code {result.returncode}\n"
            error_msg += f"stderr: {result.stderr}\n"
            error_msg += f"stdout: {result.stdout}"
            raise ImportLibraryError(error_msg)
        return result
