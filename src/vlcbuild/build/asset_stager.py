"""Runtime Asset Stager.

Copies the resolved runtime libraries and the plugin tree into the build
output so the final binary can be distributed alongside them.

Individual library files are best-effort (a system-wide install may already
satisfy them). The plugin tree is all-or-nothing: a partial copy would break
plugin discovery at run time without any visible error.
"""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from .resolved_config import ResolvedConfig


class StagingError(Exception):
    """Raised when the plugin tree cannot be staged."""
    pass


@dataclass
class StagingResult:
    """Files staged into the build output."""

    libraries: List[Path] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)
    plugins_dir: Optional[Path] = None
    plugin_count: int = 0


class AssetStager:
    """Copies runtime libraries and plugins into the build output."""

    PLUGINS_SUBDIR = "plugins"
    PARTIAL_SUFFIX = ".partial"

    def __init__(self, out_dir: Path, show_progress: bool = True):
        """Initialize stager.

        Args:
            out_dir: Build output root
            show_progress: Whether to show progress output
        """
        self.out_dir = Path(out_dir)
        self.show_progress = show_progress

    def stage(self, config: ResolvedConfig) -> StagingResult:
        """Stage libraries and plugins described by a ResolvedConfig.

        Raises:
            StagingError: If the plugin tree copy fails
        """
        self.out_dir.mkdir(parents=True, exist_ok=True)
        result = StagingResult()

        for name in config.lib_files:
            staged = self.stage_library(config.library_dir_for(name), name)
            if staged is None:
                result.missing.append(name)
            else:
                result.libraries.append(staged)

        if config.plugins_dir is not None:
            result.plugins_dir, result.plugin_count = self.stage_plugins(config.plugins_dir)

        return result

    def stage_library(self, lib_dir: Optional[Path], name: str) -> Optional[Path]:
        """Copy one runtime library into the output root.

        Returns:
            Destination path, or None if the source is missing
        """
        if lib_dir is None:
            logging.warning(f"Cannot stage {name}: library directory not resolved")
            return None

        source = lib_dir / name
        if not source.exists():
            logging.warning(f"Cannot stage {name}: {source} does not exist")
            return None

        dest = self.out_dir / name
        try:
            shutil.copy2(source, dest)
        except OSError as e:
            logging.warning(f"Failed to copy {source} to {dest}: {e}")
            return None

        if self.show_progress:
            print(f"Staged {name}")
        return dest

    def stage_plugins(self, plugins_dir: Path):
        """Replace <out_dir>/plugins with a copy of plugins_dir.

        The tree is copied into a sibling directory first and only renamed
        over <out_dir>/plugins once every file is in place, so a failed copy
        leaves the previous plugins untouched.

        Returns:
            Tuple of (destination directory, number of files copied)

        Raises:
            StagingError: If any part of the copy fails
        """
        dest = self.out_dir / self.PLUGINS_SUBDIR
        partial = self.out_dir / f"{self.PLUGINS_SUBDIR}{self.PARTIAL_SUFFIX}"

        try:
            if partial.exists():
                shutil.rmtree(partial)
            partial.mkdir(parents=True)

            files = sorted(p for p in plugins_dir.rglob("*") if p.is_file())
            for source in tqdm(
                files,
                desc="Staging plugins",
                unit="file",
                disable=not self.show_progress,
            ):
                target = partial / source.relative_to(plugins_dir)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(source, target)

            if dest.exists():
                shutil.rmtree(dest)
            partial.rename(dest)
        except OSError as e:
            shutil.rmtree(partial, ignore_errors=True)
            raise StagingError(f"Failed to stage plugins from {plugins_dir}: {e}") from e

        return dest, len(files)
