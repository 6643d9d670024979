"""
Linker directive emission.

Directives are written once per build, in two forms:

- text lines on the link configuration channel (stdout by default)::

      vlcbuild:link-search=native=/usr/lib/x86_64-linux-gnu
      vlcbuild:link-lib=dylib=vlc
      vlcbuild:link-lib=dylib=vlccore

- <out_dir>/link.json for setuptools/cffi consumers
"""

import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, TextIO, Tuple

DIRECTIVE_PREFIX = "vlcbuild:"
LINK_JSON = "link.json"


@dataclass(frozen=True)
class LinkDirectives:
    """Search directories and libraries to hand to the linker."""

    search_paths: Tuple[Path, ...]
    libraries: Tuple[str, ...]
    include_dirs: Tuple[Path, ...] = ()

    def lines(self) -> List[str]:
        """Directive lines, search paths first."""
        out = [f"{DIRECTIVE_PREFIX}link-search=native={path}" for path in self.search_paths]
        out.extend(f"{DIRECTIVE_PREFIX}link-lib=dylib={name}" for name in self.libraries)
        return out

    def as_extension_kwargs(self) -> Dict[str, List[str]]:
        """Keyword arguments for setuptools.Extension / FFI.set_source."""
        return {
            "include_dirs": [str(p) for p in self.include_dirs],
            "library_dirs": [str(p) for p in self.search_paths],
            "libraries": list(self.libraries),
        }

    @classmethod
    def load(cls, path: Path) -> "LinkDirectives":
        """Read directives back from a link.json file."""
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        return cls(
            search_paths=tuple(Path(p) for p in data.get("library_dirs", [])),
            libraries=tuple(data.get("libraries", [])),
            include_dirs=tuple(Path(p) for p in data.get("include_dirs", [])),
        )


def build_directives(
    search_paths,
    libraries,
    include_dirs=(),
) -> LinkDirectives:
    """Create LinkDirectives with duplicate entries removed, order kept."""
    return LinkDirectives(
        search_paths=tuple(dict.fromkeys(Path(p) for p in search_paths)),
        libraries=tuple(dict.fromkeys(libraries)),
        include_dirs=tuple(dict.fromkeys(Path(p) for p in include_dirs)),
    )


class LinkEmitter:
    """Writes LinkDirectives to the link configuration channel."""

    def __init__(self, out_dir: Path, stream: Optional[TextIO] = None):
        """
        Initialize emitter.

        Args:
            out_dir: Build output directory receiving link.json
            stream: Text stream for directive lines (default: sys.stdout)
        """
        self.out_dir = Path(out_dir)
        self.stream = stream

    def emit(self, directives: LinkDirectives) -> Path:
        """Print directive lines and write link.json.

        Returns:
            Path to link.json
        """
        stream = self.stream or sys.stdout
        for line in directives.lines():
            stream.write(line + "\n")
        stream.flush()

        self.out_dir.mkdir(parents=True, exist_ok=True)
        link_json = self.out_dir / LINK_JSON
        link_json.write_text(
            json.dumps(directives.as_extension_kwargs(), indent=2) + "\n",
            encoding="utf-8",
        )
        return link_json
