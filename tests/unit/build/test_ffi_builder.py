"""Tests for the CFFI builder and the pre-generated declarations."""

import json

import pytest
from cffi import FFI

from vlcbuild.build.bindings import PREGENERATED
from vlcbuild.build.ffi_builder import MODULE_NAME, make_ffibuilder


def test_pregenerated_declarations_parse():
    ffi = FFI()
    ffi.cdef(PREGENERATED.read_text(encoding="utf-8"))

    assert ffi.typeof("libvlc_instance_t *").kind == "pointer"
    assert ffi.typeof("libvlc_event_t").kind == "struct"
    assert ffi.typeof("libvlc_log_cb").kind == "function"


class TestMakeFfibuilder:
    """Test cases for make_ffibuilder()."""

    @pytest.fixture
    def out_dir(self, tmp_path):
        (tmp_path / "vlc_cdef.h").write_text(PREGENERATED.read_text(encoding="utf-8"))
        (tmp_path / "link.json").write_text(json.dumps({
            "include_dirs": ["/usr/include"],
            "library_dirs": ["/usr/lib"],
            "libraries": ["vlc", "vlccore"],
        }))
        return tmp_path

    def test_configures_source(self, out_dir):
        ffibuilder = make_ffibuilder(out_dir)

        module_name, source, _, kwargs = ffibuilder._assigned_source
        assert module_name == MODULE_NAME
        assert "#include <vlc/vlc.h>" in source
        assert kwargs["libraries"] == ["vlc", "vlccore"]
        assert kwargs["library_dirs"] == ["/usr/lib"]
        assert kwargs["include_dirs"] == ["/usr/include"]

    def test_custom_module_name(self, out_dir):
        ffibuilder = make_ffibuilder(out_dir, module_name="myapp._vlc")

        assert ffibuilder._assigned_source[0] == "myapp._vlc"

    def test_missing_declarations(self, tmp_path):
        (tmp_path / "link.json").write_text("{}")

        with pytest.raises(FileNotFoundError, match="vlc_cdef.h"):
            make_ffibuilder(tmp_path)

    def test_missing_link_config(self, tmp_path):
        (tmp_path / "vlc_cdef.h").write_text("")

        with pytest.raises(FileNotFoundError, match="link.json"):
            make_ffibuilder(tmp_path)
