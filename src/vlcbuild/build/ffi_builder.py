"""
CFFI builder for the libVLC extension module.

Consumes the build output of the pipeline: the declaration module
(vlc_cdef.h) and the link configuration (link.json). Typical use from a
project's build script:

    from vlcbuild.build.ffi_builder import make_ffibuilder

    ffibuilder = make_ffibuilder(Path("build/vlc"))
    ffibuilder.compile(verbose=True)
"""

from pathlib import Path
from typing import Optional

from cffi import FFI

from .bindings import DECLARATIONS_FILE
from .link_emitter import LINK_JSON, LinkDirectives

MODULE_NAME = "vlcbuild._libvlc_cffi"

SOURCE = """
#include <stdarg.h>
#include <stdio.h>
#include <vlc/vlc.h>
"""


def make_ffibuilder(out_dir: Path, module_name: Optional[str] = None) -> FFI:
    """Create an FFI configured from a pipeline build output directory.

    Args:
        out_dir: Directory holding vlc_cdef.h and link.json
        module_name: Extension module name (default: vlcbuild._libvlc_cffi)

    Returns:
        FFI with cdef() and set_source() applied

    Raises:
        FileNotFoundError: If the pipeline has not produced its outputs
    """
    out_dir = Path(out_dir)
    declarations = out_dir / DECLARATIONS_FILE
    link_json = out_dir / LINK_JSON

    if not declarations.exists():
        raise FileNotFoundError(f"{declarations} not found; run `vlcbuild build` first")
    if not link_json.exists():
        raise FileNotFoundError(f"{link_json} not found; run `vlcbuild build` first")

    directives = LinkDirectives.load(link_json)

    ffibuilder = FFI()
    ffibuilder.cdef(declarations.read_text(encoding="utf-8"))
    ffibuilder.set_source(
        module_name or MODULE_NAME,
        SOURCE,
        **directives.as_extension_kwargs(),
    )
    return ffibuilder
