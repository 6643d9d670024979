"""
vlcbuild.ini configuration parser.

This module loads the build configuration for a project: which declaration
mode to use, whether to query pkg-config, whether to stage runtime assets,
and where the build output goes.

Example vlcbuild.ini:
    [vlcbuild]
    bindings = generate
    use_pkg_config = yes
    bundle_runtime = no
    out_dir = build/vlc
"""

import configparser
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

CONFIG_FILE = "vlcbuild.ini"
SECTION = "vlcbuild"

BINDINGS_COPY = "copy"
BINDINGS_GENERATE = "generate"
BINDINGS_MODES = (BINDINGS_COPY, BINDINGS_GENERATE)


class BuildConfigError(Exception):
    """Exception raised for vlcbuild.ini configuration errors."""

    pass


@dataclass(frozen=True)
class BuildConfig:
    """Build-time switches for the pipeline."""

    bindings: str = BINDINGS_COPY
    use_pkg_config: bool = True
    bundle_runtime: bool = False
    out_dir: Path = Path("build") / "vlc"

    def __post_init__(self):
        if self.bindings not in BINDINGS_MODES:
            raise BuildConfigError(
                f"Invalid bindings mode '{self.bindings}'. "
                + f"Expected one of: {', '.join(BINDINGS_MODES)}"
            )

    @property
    def generate_bindings(self) -> bool:
        return self.bindings == BINDINGS_GENERATE

    def resolve_out_dir(self, project_dir: Path) -> Path:
        """Output directory, relative paths anchored at the project directory."""
        if self.out_dir.is_absolute():
            return self.out_dir
        return project_dir / self.out_dir

    def with_overrides(
        self,
        bindings: Optional[str] = None,
        use_pkg_config: Optional[bool] = None,
        bundle_runtime: Optional[bool] = None,
        out_dir: Optional[Path] = None,
    ) -> "BuildConfig":
        """Return a copy with non-None arguments applied (CLI flags)."""
        changes = {}
        if bindings is not None:
            changes["bindings"] = bindings
        if use_pkg_config is not None:
            changes["use_pkg_config"] = use_pkg_config
        if bundle_runtime is not None:
            changes["bundle_runtime"] = bundle_runtime
        if out_dir is not None:
            changes["out_dir"] = Path(out_dir)
        return replace(self, **changes)

    @classmethod
    def load(cls, project_dir: Path) -> "BuildConfig":
        """
        Load <project_dir>/vlcbuild.ini, or defaults if it doesn't exist.

        Raises:
            BuildConfigError: If the file cannot be parsed or holds invalid values
        """
        ini_path = project_dir / CONFIG_FILE
        if not ini_path.exists():
            return cls()
        return cls.from_ini(ini_path)

    @classmethod
    def from_ini(cls, ini_path: Path) -> "BuildConfig":
        """
        Parse a vlcbuild.ini file.

        Raises:
            BuildConfigError: If the file cannot be parsed or holds invalid values
        """
        parser = configparser.ConfigParser(inline_comment_prefixes=(";", "#"))
        try:
            parser.read(ini_path, encoding="utf-8")
        except configparser.Error as e:
            raise BuildConfigError(f"Failed to parse {ini_path}: {e}") from e

        if SECTION not in parser:
            return cls()

        section = parser[SECTION]
        defaults = cls()
        try:
            return cls(
                bindings=section.get("bindings", defaults.bindings).strip().lower(),
                use_pkg_config=section.getboolean("use_pkg_config", defaults.use_pkg_config),
                bundle_runtime=section.getboolean("bundle_runtime", defaults.bundle_runtime),
                out_dir=Path(section.get("out_dir", str(defaults.out_dir)).strip()),
            )
        except ValueError as e:
            raise BuildConfigError(f"Invalid value in {ini_path}: {e}") from e
