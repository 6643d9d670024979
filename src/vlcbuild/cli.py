"""
Command-line interface for vlcbuild.

This module provides the `vlcbuild` CLI tool used from a project's build
step to locate libVLC and prepare declarations and link settings.
"""

import argparse
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from vlcbuild import __version__
from vlcbuild.build import BuildOrchestrator
from vlcbuild.build.location import strategy_for
from vlcbuild.cli_utils import ErrorFormatter, require_project_dir
from vlcbuild.config import BuildConfig, BuildConfigError
from vlcbuild.config.build_config import BINDINGS_COPY, BINDINGS_GENERATE
from vlcbuild.packages import PlatformDetector, PlatformError


@dataclass
class BuildArgs:
    """Arguments for the build command."""

    project_dir: Path
    out_dir: Optional[Path] = None
    bindings: Optional[str] = None
    use_pkg_config: Optional[bool] = None
    bundle_runtime: Optional[bool] = None
    target_os: Optional[str] = None
    target_arch: Optional[str] = None
    verbose: bool = False


@dataclass
class LocateArgs:
    """Arguments for the locate command."""

    project_dir: Path
    use_pkg_config: Optional[bool] = None
    target_os: Optional[str] = None
    target_arch: Optional[str] = None
    verbose: bool = False


def build_command(args: BuildArgs) -> None:
    """Run the full pipeline for a project.

    Examples:
        vlcbuild build                       # Build current directory
        vlcbuild build --generate-bindings   # Parse installed headers
        vlcbuild build --bundle-runtime      # Stage DLLs and plugins
        vlcbuild build --target-arch x86     # Cross-target 32-bit
    """
    print(f"vlcbuild v{__version__}")
    print()

    try:
        config = BuildConfig.load(args.project_dir).with_overrides(
            bindings=args.bindings,
            use_pkg_config=args.use_pkg_config,
            bundle_runtime=args.bundle_runtime,
            out_dir=args.out_dir,
        )
        ctx = PlatformDetector.from_environment(
            target_os=args.target_os, target_arch=args.target_arch
        )
        orchestrator = BuildOrchestrator(ctx=ctx, verbose=args.verbose)

        result = orchestrator.build(project_dir=args.project_dir, config=config)

        if result.success:
            ErrorFormatter.print_success("libVLC configured")
            print()
            print(f"Declarations: {result.declarations}")
            print(f"Link config:  {result.link_json}")
            for lib in result.import_libraries:
                print(f"Import lib:   {lib}")
            if result.staging is not None:
                print(f"Staged:       {len(result.staging.libraries)} libraries, "
                      + f"{result.staging.plugin_count} plugin files")
                for name in result.staging.missing:
                    ErrorFormatter.print_warning(f"Not staged: {name}")
            print(f"Time: {result.build_time:.2f}s")
            sys.exit(0)
        else:
            ErrorFormatter.print_build_failure(result)
            sys.exit(1)

    except (BuildConfigError, PlatformError) as e:
        ErrorFormatter.print_config_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def locate_command(args: LocateArgs) -> None:
    """Print where libVLC was found.

    Examples:
        vlcbuild locate
        vlcbuild locate --no-pkg-config
    """
    try:
        config = BuildConfig.load(args.project_dir).with_overrides(
            use_pkg_config=args.use_pkg_config
        )
        ctx = PlatformDetector.from_environment(
            target_os=args.target_os, target_arch=args.target_arch
        )
        resolved = BuildOrchestrator(ctx=ctx, verbose=args.verbose).locate(
            use_pkg_config=config.use_pkg_config
        )

        print(f"libVLC for {ctx.target_os}/{ctx.target_arch}:")
        print(resolved.describe())
        needs_import_library = strategy_for(ctx).NEEDS_IMPORT_LIBRARY
        for warning in ErrorFormatter.location_warnings(resolved, needs_import_library):
            ErrorFormatter.print_warning(warning)
        sys.exit(0)

    except (BuildConfigError, PlatformError) as e:
        ErrorFormatter.print_config_error(e)
        sys.exit(1)
    except KeyboardInterrupt:
        ErrorFormatter.handle_keyboard_interrupt()
    except Exception as e:
        ErrorFormatter.handle_unexpected_error(e, args.verbose)


def _add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        type=Path,
        default=Path.cwd(),
        help="Project directory (default: current directory)",
    )
    parser.add_argument(
        "--no-pkg-config",
        dest="use_pkg_config",
        action="store_const",
        const=False,
        default=None,
        help="Skip the pkg-config query",
    )
    parser.add_argument(
        "--target-os",
        default=None,
        help="Target OS (default: VLCBUILD_TARGET_OS or host)",
    )
    parser.add_argument(
        "--target-arch",
        default=None,
        help="Target architecture (default: VLCBUILD_TARGET_ARCH or host)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show verbose output",
    )


def main() -> None:
    """vlcbuild - locate libVLC and prepare it for linking."""
    parser = argparse.ArgumentParser(
        prog="vlcbuild",
        description="vlcbuild - locate libVLC and prepare it for linking",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"vlcbuild {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Build command
    build_parser = subparsers.add_parser(
        "build",
        help="Locate libVLC, write declarations and link configuration",
    )
    _add_common_arguments(build_parser)
    bindings_group = build_parser.add_mutually_exclusive_group()
    bindings_group.add_argument(
        "--generate-bindings",
        dest="bindings",
        action="store_const",
        const=BINDINGS_GENERATE,
        default=None,
        help="Generate declarations from the installed headers",
    )
    bindings_group.add_argument(
        "--copy-bindings",
        dest="bindings",
        action="store_const",
        const=BINDINGS_COPY,
        help="Copy the pre-generated declarations",
    )
    build_parser.add_argument(
        "--bundle-runtime",
        action="store_const",
        const=True,
        default=None,
        help="Copy runtime libraries and plugins into the output directory",
    )
    build_parser.add_argument(
        "-o",
        "--out-dir",
        type=Path,
        default=None,
        help="Output directory (default: build/vlc in the project)",
    )

    # Locate command
    locate_parser = subparsers.add_parser(
        "locate",
        help="Show where libVLC was found",
    )
    _add_common_arguments(locate_parser)

    parsed_args = parser.parse_args()

    # If no command specified, show help
    if not parsed_args.command:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if parsed_args.verbose else logging.WARNING,
        format="%(levelname)s: %(message)s",
    )

    require_project_dir(parsed_args.project_dir)

    if parsed_args.command == "build":
        build_command(BuildArgs(
            project_dir=parsed_args.project_dir,
            out_dir=parsed_args.out_dir,
            bindings=parsed_args.bindings,
            use_pkg_config=parsed_args.use_pkg_config,
            bundle_runtime=parsed_args.bundle_runtime,
            target_os=parsed_args.target_os,
            target_arch=parsed_args.target_arch,
            verbose=parsed_args.verbose,
        ))
    elif parsed_args.command == "locate":
        locate_command(LocateArgs(
            project_dir=parsed_args.project_dir,
            use_pkg_config=parsed_args.use_pkg_config,
            target_os=parsed_args.target_os,
            target_arch=parsed_args.target_arch,
            verbose=parsed_args.verbose,
        ))


if __name__ == "__main__":
    main()
