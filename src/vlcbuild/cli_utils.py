"""Console reporting for the vlcbuild commands.

Failures are printed with a short hint naming the setting that usually fixes
them (an override variable, a CLI flag, a developer prompt), keyed by the
error class the pipeline reported.
"""

import sys
import traceback
from pathlib import Path
from typing import Dict, List, Optional

from vlcbuild.build.orchestrator import BuildResult
from vlcbuild.build.resolved_config import ResolvedConfig

# Exit statuses
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

INSTALL_HINT = (
    "Point VLC_LIB_DIR (or VLC_LIB_DIR_<ARCH>) at the directory holding the libVLC "
    "libraries, or VLC_INSTALL_DIR at the VLC installation."
)

# Error class name -> what to try next
FAILURE_HINTS: Dict[str, str] = {
    "BindingsError": (
        "Set VLC_INCLUDE_DIR to the directory containing vlc/vlc.h, "
        "or build with --copy-bindings."
    ),
    "ToolchainError": (
        "Run from a Visual Studio developer prompt, or install the "
        "\"Desktop development with C++\" workload."
    ),
    "ImportLibraryError": INSTALL_HINT,
    "BuildOrchestratorError": INSTALL_HINT,
    "StagingError": "Check free space and permissions in the output directory.",
    "PlatformError": "Pass --target-os/--target-arch or set VLCBUILD_TARGET_OS/VLCBUILD_TARGET_ARCH.",
    "BuildConfigError": "Fix the [vlcbuild] section of vlcbuild.ini.",
}


class ErrorFormatter:
    """Prints pipeline outcomes with ANSI colors."""

    RED = "\033[1;31m"
    GREEN = "\033[1;32m"
    YELLOW = "\033[1;33m"
    RESET = "\033[0m"

    @staticmethod
    def print_error(title: str, message: str, hint: Optional[str] = None) -> None:
        print()
        print(f"{ErrorFormatter.RED}✗ {title}{ErrorFormatter.RESET}")
        print()
        print(message)
        if hint:
            print()
            print(f"Hint: {hint}")
        print()

    @staticmethod
    def print_success(message: str) -> None:
        print()
        print(f"{ErrorFormatter.GREEN}✓ {message}{ErrorFormatter.RESET}")

    @staticmethod
    def print_warning(message: str) -> None:
        print(f"{ErrorFormatter.YELLOW}! {message}{ErrorFormatter.RESET}")

    @staticmethod
    def hint_for(error_type: Optional[str]) -> Optional[str]:
        """Hint for a pipeline error class name, if one is known."""
        if error_type is None:
            return None
        return FAILURE_HINTS.get(error_type)

    @staticmethod
    def print_build_failure(result: BuildResult) -> None:
        """Print a failed BuildResult with the hint for its error class."""
        ErrorFormatter.print_error(
            "libVLC build configuration failed",
            result.message,
            ErrorFormatter.hint_for(result.error_type),
        )

    @staticmethod
    def print_config_error(error: Exception) -> None:
        """Print a configuration error raised before the pipeline ran."""
        ErrorFormatter.print_error(
            "Configuration error",
            str(error),
            ErrorFormatter.hint_for(type(error).__name__),
        )

    @staticmethod
    def location_warnings(resolved: ResolvedConfig, needs_import_library: bool = False) -> List[str]:
        """Warnings for fields a later build step will need but were not found.

        Args:
            resolved: Location result
            needs_import_library: Whether the target synthesizes import libraries
        """
        warnings = []
        if resolved.include_dir is None and not resolved.registry_hit:
            warnings.append("libVLC headers not found: --generate-bindings will fail")
        if not resolved.library_dirs() and not resolved.registry_hit:
            warnings.append("libVLC libraries not found: " + INSTALL_HINT)
        elif needs_import_library and not resolved.registry_hit:
            if not any((d / "libvlc.dll").exists() for d in resolved.library_dirs()):
                warnings.append("libvlc.dll not found: import libraries cannot be generated")
        return warnings

    @staticmethod
    def handle_keyboard_interrupt() -> None:
        ErrorFormatter.print_warning("Interrupted; build output may be incomplete")
        sys.exit(EXIT_INTERRUPTED)

    @staticmethod
    def handle_unexpected_error(error: Exception, verbose: bool = False) -> None:
        """Report an exception the pipeline does not classify, then exit 1."""
        ErrorFormatter.print_error("Unexpected error", f"{type(error).__name__}: {error}")
        if verbose:
            print(traceback.format_exc())
        else:
            print("Run with -v for a traceback.")
        sys.exit(EXIT_FAILURE)


def require_project_dir(project_dir: Path) -> None:
    """Exit with status 2 unless project_dir is an existing directory."""
    if not project_dir.is_dir():
        reason = "is not a directory" if project_dir.exists() else "does not exist"
        ErrorFormatter.print_error("Invalid project directory", f"{project_dir} {reason}")
        sys.exit(EXIT_USAGE)
