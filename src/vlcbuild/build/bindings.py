"""
Foreign-interface declarations for libVLC.

Two mutually exclusive modes, chosen by build configuration:

- BindingsGenerator parses the installed headers with pycparser and keeps
  only libVLC declarations (names containing "vlc", plus vsnprintf which the
  logging callback signature depends on).
- BindingsCopier copies the checked-in declaration module shipped with the
  package, for machines without headers or a C preprocessor.

Both write <out_dir>/vlc_cdef.h, which is valid input for cffi's FFI.cdef().
"""

import re
import shutil
import subprocess
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from pycparser import c_ast, c_generator, parse_file
from pycparser.c_parser import ParseError


class BindingsError(Exception):
    """Raised when declarations cannot be generated or copied."""
    pass


DECLARATIONS_FILE = "vlc_cdef.h"
WRAPPER_HEADER = "wrapper.h"
MAIN_HEADER = Path("vlc") / "vlc.h"
PREGENERATED = Path(__file__).resolve().parent.parent / "assets" / DECLARATIONS_FILE

NAME_TOKEN = "vlc"
EXTRA_NAMES = frozenset({"vsnprintf"})

# GCC/MSVC extensions pycparser does not understand
CPP_DEFINES = [
    "-D__attribute__(x)=",
    "-D__extension__=",
    "-D__restrict=",
    "-D__restrict__=",
    "-D__inline=",
    "-D__inline__=",
    "-D__asm__(x)=",
    "-D__asm(x)=",
    "-D__declspec(x)=",
    "-D__THROW=",
    "-D__wur=",
    "-D_Noreturn=",
    "-D__signed__=signed",
    "-D__volatile__=volatile",
    "-D__int128=long long",
    "-D_Float128=long double",
    "-D__float128=long double",
    "-D__builtin_va_list=char*",
    "-D_Static_assert(x,y)=",
]

# libc spells these through private typedefs that cffi does not know
TYPE_ALIASES = {
    "__gnuc_va_list": "va_list",
}

Parser = Callable[[Path, Sequence[Path]], c_ast.FileAST]


def _declaration_name(node: c_ast.Node) -> Optional[str]:
    if isinstance(node, c_ast.Typedef):
        return node.name
    if isinstance(node, c_ast.Decl):
        if node.name:
            return node.name
        if isinstance(node.type, (c_ast.Struct, c_ast.Union, c_ast.Enum)):
            return node.type.name
    return None


def is_wanted(name: Optional[str]) -> bool:
    """Whether a declaration name belongs to libVLC's public interface."""
    if not name:
        return False
    return NAME_TOKEN in name or name in EXTRA_NAMES


def select_declarations(ast: c_ast.FileAST) -> List[c_ast.Node]:
    """Filter top-level declarations down to the libVLC subset.

    Function bodies (static inline helpers) are dropped; cffi only
    accepts declarations.
    """
    selected = []
    for node in ast.ext:
        if isinstance(node, c_ast.FuncDef):
            continue
        if not is_wanted(_declaration_name(node)):
            continue
        if isinstance(node, c_ast.Decl) and isinstance(node.type, c_ast.FuncDecl):
            node.storage = []
            node.funcspec = []
        selected.append(node)
    return selected


def render_declarations(nodes: Iterable[c_ast.Node], header_comment: str = "") -> str:
    """Render declarations as C source, one per statement, duplicates dropped."""
    generator = c_generator.CGenerator()
    seen = set()
    lines = []
    for node in nodes:
        text = generator.visit(node).strip() + ";"
        for alias, replacement in TYPE_ALIASES.items():
            text = re.sub(rf"\b{alias}\b", replacement, text)
        if text not in seen:
            seen.add(text)
            lines.append(text)

    prefix = f"/* {header_comment} */\n\n" if header_comment else ""
    return prefix + "\n".join(lines) + "\n"


class BindingsGenerator:
    """Generates vlc_cdef.h from the installed libVLC headers."""

    def __init__(
        self,
        out_dir: Path,
        cpp_path: str = "cpp",
        parser: Optional[Parser] = None,
        show_progress: bool = True,
    ):
        """
        Initialize generator.

        Args:
            out_dir: Build output directory
            cpp_path: C preprocessor executable
            parser: Callable(header, include_paths) -> FileAST (for tests)
            show_progress: Whether to print progress
        """
        self.out_dir = Path(out_dir)
        self.cpp_path = cpp_path
        self.parser = parser or self._parse_with_cpp
        self.show_progress = show_progress

    def _parse_with_cpp(self, header: Path, include_paths: Sequence[Path]) -> c_ast.FileAST:
        cpp_args = [f"-I{path}" for path in include_paths] + CPP_DEFINES
        return parse_file(str(header), use_cpp=True, cpp_path=self.cpp_path, cpp_args=cpp_args)

    def generate(self, include_paths: Sequence[Path], system_headers: bool = False) -> Path:
        """Parse headers and write the declaration module.

        Args:
            include_paths: Directories searched for <vlc/vlc.h>
            system_headers: Headers may sit on the preprocessor's default
                search path (pkg-config reported the package without -I
                flags), so a miss in include_paths is left to cpp

        Returns:
            Path to the generated vlc_cdef.h

        Raises:
            BindingsError: If the headers are missing, unparsable, or yield
                no libVLC declarations
        """
        found = any((Path(p) / MAIN_HEADER).exists() for p in include_paths)
        if not found and not system_headers:
            searched = ", ".join(str(p) for p in include_paths) or "(none)"
            raise BindingsError(
                f"libVLC headers not found: no {MAIN_HEADER.as_posix()} in {searched}. "
                + "Set VLC_INCLUDE_DIR or install the libvlc development package."
            )

        self.out_dir.mkdir(parents=True, exist_ok=True)
        wrapper = self.out_dir / WRAPPER_HEADER
        wrapper.write_text("#include <vlc/vlc.h>\n", encoding="utf-8")

        if self.show_progress:
            print(f"Generating libVLC declarations from {wrapper}...")

        try:
            ast = self.parser(wrapper, list(include_paths))
        except ParseError as e:
            raise BindingsError(f"Failed to parse libVLC headers: {e}") from e
        except (RuntimeError, subprocess.CalledProcessError) as e:
            # pycparser reports a missing cpp as RuntimeError and lets a
            # failing cpp (header not found) raise CalledProcessError
            raise BindingsError(f"C preprocessor failed: {e}") from e

        declarations = select_declarations(ast)
        if not declarations:
            raise BindingsError(
                "Header parsing produced no libVLC declarations; check the include path"
            )

        output = self.out_dir / DECLARATIONS_FILE
        output.write_text(
            render_declarations(declarations, "Generated by vlcbuild. Do not edit."),
            encoding="utf-8",
        )

        if self.show_progress:
            print(f"✓ Wrote {len(declarations)} declarations to {output}")
        return output


class BindingsCopier:
    """Copies the pre-generated declaration module into the build output."""

    def __init__(self, out_dir: Path, source: Optional[Path] = None):
        """
        Initialize copier.

        Args:
            out_dir: Build output directory
            source: Pre-generated module (default: packaged assets/vlc_cdef.h)
        """
        self.out_dir = Path(out_dir)
        self.source = Path(source) if source is not None else PREGENERATED

    def copy(self) -> Path:
        """Copy the declaration module.

        Raises:
            BindingsError: If the pre-generated module is missing
        """
        if not self.source.is_file():
            raise BindingsError(f"Couldn't find pre-generated declarations: {self.source}")

        self.out_dir.mkdir(parents=True, exist_ok=True)
        output = self.out_dir / DECLARATIONS_FILE
        try:
            shutil.copyfile(self.source, output)
        except OSError as e:
            raise BindingsError(f"Failed to copy {self.source} to {output}: {e}") from e
        return output
