"""Package registry queries through pkg-config.

The registry is best-effort: a missing pkg-config binary, an unknown package
or a failing invocation are all reported as a miss (None) so resolution can
fall back to the remaining tiers.
"""

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

Runner = Callable[[List[str]], "subprocess.CompletedProcess[str]"]


@dataclass(frozen=True)
class RegistryResult:
    """Paths reported by the registry for one package."""

    include_paths: Tuple[Path, ...] = ()
    link_paths: Tuple[Path, ...] = ()


def _default_runner(cmd: List[str]) -> "subprocess.CompletedProcess[str]":
    return subprocess.run(cmd, capture_output=True, text=True, timeout=30, check=False)


def _parse_flags(output: str, prefix: str) -> Tuple[Path, ...]:
    paths = []
    for token in shlex.split(output):
        if token.startswith(prefix) and len(token) > len(prefix):
            paths.append(Path(token[len(prefix):]))
    return tuple(paths)


class PackageRegistry:
    """Queries pkg-config for a package's include and link directories."""

    def __init__(
        self,
        pkg_config: Optional[str] = None,
        runner: Optional[Runner] = None,
    ):
        """Initialize registry.

        Args:
            pkg_config: Path to pkg-config (default: looked up on PATH)
            runner: Callable executing a command list (for tests)
        """
        self.pkg_config = pkg_config or shutil.which("pkg-config")
        self.runner = runner or _default_runner

    def probe(self, package: str) -> Optional[RegistryResult]:
        """Query the registry for a package.

        Args:
            package: pkg-config package name (e.g., "libvlc")

        Returns:
            RegistryResult, or None if the package could not be found
        """
        if not self.pkg_config:
            logging.debug("pkg-config not found on PATH, skipping registry query")
            return None

        try:
            cflags = self.runner([self.pkg_config, "--cflags-only-I", package])
            if cflags.returncode != 0:
                logging.debug(f"pkg-config could not find {package}: {cflags.stderr.strip()}")
                return None
            libs = self.runner([self.pkg_config, "--libs-only-L", package])
            if libs.returncode != 0:
                logging.debug(f"pkg-config --libs failed for {package}: {libs.stderr.strip()}")
                return None
        except (OSError, subprocess.SubprocessError) as e:
            logging.warning(f"pkg-config query for {package} failed: {e}")
            return None

        return RegistryResult(
            include_paths=_parse_flags(cflags.stdout, "-I"),
            link_paths=_parse_flags(libs.stdout, "-L"),
        )
