"""Tests for the packaging shim."""

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def test_setup_shim_imports_only_setuptools():
    tree = ast.parse((ROOT / "setup.py").read_text(encoding="utf-8"))
    imported = [
        node.module if isinstance(node, ast.ImportFrom) else alias.name
        for node in tree.body
        if isinstance(node, (ast.Import, ast.ImportFrom))
        for alias in node.names
    ]
    assert imported == ["setuptools"]


def test_declared_package_data_exists():
    assert (ROOT / "src" / "vlcbuild" / "assets" / "vlc_cdef.h").is_file()
    assert '"assets/vlc_cdef.h"' in (ROOT / "setup.py").read_text(encoding="utf-8")
