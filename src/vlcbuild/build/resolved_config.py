"""
Resolved library configuration and the tier merge policy.

Resolution tiers emit ordered (field, value) contributions. They are folded
into a ResolvedConfig with one rule per field kind:

- scalar fields keep the first contributed value that exists on disk
- collection fields concatenate every existing value, dropping duplicates
  while preserving first-seen order
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

SCALAR = "scalar"
COLLECTION = "collection"

# Field name -> (merge kind, must exist on disk)
MERGE_POLICY: Dict[str, Tuple[str, bool]] = {
    "include_dir": (SCALAR, True),
    "lib_dir": (SCALAR, True),
    "plugins_dir": (SCALAR, True),
    "runtime_dir": (SCALAR, True),
    "lib_files": (COLLECTION, False),
    "include_paths": (COLLECTION, True),
    "link_paths": (COLLECTION, True),
}

Contribution = Tuple[str, Union[Path, str]]


@dataclass(frozen=True)
class ResolvedConfig:
    """Where the native library lives on this machine.

    None for a scalar means no tier found an existing path for it.
    """

    include_dir: Optional[Path] = None
    lib_dir: Optional[Path] = None
    lib_files: Tuple[str, ...] = ()
    plugins_dir: Optional[Path] = None
    runtime_dir: Optional[Path] = None
    include_paths: Tuple[Path, ...] = ()
    link_paths: Tuple[Path, ...] = ()
    registry_hit: bool = False

    def resolved_paths(self) -> List[Path]:
        """All on-disk paths recorded in this configuration."""
        paths = [
            p
            for p in (self.include_dir, self.lib_dir, self.plugins_dir, self.runtime_dir)
            if p is not None
        ]
        paths.extend(self.include_paths)
        paths.extend(self.link_paths)
        return paths

    def all_include_paths(self) -> List[Path]:
        """include_dir followed by registry include paths, de-duplicated."""
        return _dedup(([self.include_dir] if self.include_dir else []) + list(self.include_paths))

    def library_dirs(self) -> List[Path]:
        """Directories holding runtime libraries: lib_dir, then runtime_dir."""
        return _dedup(p for p in (self.lib_dir, self.runtime_dir) if p is not None)

    def library_dir_for(self, filename: str) -> Optional[Path]:
        """First library directory containing filename.

        Falls back to the first candidate directory when none holds the file,
        so callers can report where it was expected.
        """
        dirs = self.library_dirs()
        for directory in dirs:
            if (directory / filename).exists():
                return directory
        return dirs[0] if dirs else None

    def with_link_path(self, path: Path) -> "ResolvedConfig":
        """Return a copy with an extra link search path appended."""
        return ResolvedConfig(
            include_dir=self.include_dir,
            lib_dir=self.lib_dir,
            lib_files=self.lib_files,
            plugins_dir=self.plugins_dir,
            runtime_dir=self.runtime_dir,
            include_paths=self.include_paths,
            link_paths=tuple(_dedup(list(self.link_paths) + [Path(path)])),
            registry_hit=self.registry_hit,
        )

    def describe(self) -> str:
        """Human-readable multi-line summary."""
        def fmt(value):
            return str(value) if value is not None else "(not found)"

        lines = [
            f"  include_dir:   {fmt(self.include_dir)}",
            f"  lib_dir:       {fmt(self.lib_dir)}",
            f"  plugins_dir:   {fmt(self.plugins_dir)}",
            f"  runtime_dir:   {fmt(self.runtime_dir)}",
            f"  lib_files:     {', '.join(self.lib_files) or '(none)'}",
            f"  include_paths: {', '.join(str(p) for p in self.include_paths) or '(none)'}",
            f"  link_paths:    {', '.join(str(p) for p in self.link_paths) or '(none)'}",
            f"  pkg-config:    {'found' if self.registry_hit else 'not used'}",
        ]
        return "\n".join(lines)


def _dedup(items: Iterable) -> List:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def merge_contributions(
    contributions: Iterable[Contribution],
    registry_hit: bool = False,
) -> ResolvedConfig:
    """Fold tier contributions into a ResolvedConfig.

    Args:
        contributions: (field, value) pairs in tier priority order
        registry_hit: Whether the package registry tier succeeded

    Returns:
        ResolvedConfig honoring MERGE_POLICY

    Raises:
        KeyError: If a contribution names an unknown field
    """
    scalars: Dict[str, Path] = {}
    collections: Dict[str, List] = {
        name: [] for name, (kind, _) in MERGE_POLICY.items() if kind == COLLECTION
    }

    for name, value in contributions:
        kind, must_exist = MERGE_POLICY[name]
        if must_exist:
            value = Path(value)
            if not value.exists():
                continue
        if kind == SCALAR:
            scalars.setdefault(name, value)
        elif value not in collections[name]:
            collections[name].append(value)

    return ResolvedConfig(
        include_dir=scalars.get("include_dir"),
        lib_dir=scalars.get("lib_dir"),
        plugins_dir=scalars.get("plugins_dir"),
        runtime_dir=scalars.get("runtime_dir"),
        lib_files=tuple(str(f) for f in collections["lib_files"]),
        include_paths=tuple(collections["include_paths"]),
        link_paths=tuple(collections["link_paths"]),
        registry_hit=registry_hit,
    )
