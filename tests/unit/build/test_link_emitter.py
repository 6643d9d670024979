"""Unit tests for linker directive emission."""

import io
import json
from pathlib import Path

from vlcbuild.build.link_emitter import LINK_JSON, LinkDirectives, LinkEmitter, build_directives


class TestLinkDirectives:
    """Test cases for LinkDirectives."""

    def test_duplicates_removed_order_kept(self):
        directives = build_directives(
            search_paths=[Path("/b"), Path("/a"), Path("/b")],
            libraries=["vlc", "vlccore", "vlc"],
        )
        assert directives.search_paths == (Path("/b"), Path("/a"))
        assert directives.libraries == ("vlc", "vlccore")

    def test_lines_search_paths_first(self):
        directives = build_directives([Path("/opt/vlc/lib")], ["vlc", "vlccore"])
        assert directives.lines() == [
            f"vlcbuild:link-search=native={Path('/opt/vlc/lib')}",
            "vlcbuild:link-lib=dylib=vlc",
            "vlcbuild:link-lib=dylib=vlccore",
        ]

    def test_core_library_is_separate_unit(self):
        directives = build_directives([], ["vlc", "vlccore"])
        assert len([line for line in directives.lines() if "link-lib" in line]) == 2

    def test_extension_kwargs(self):
        directives = build_directives([Path("/lib")], ["vlc"], [Path("/inc")])
        assert directives.as_extension_kwargs() == {
            "include_dirs": [str(Path("/inc"))],
            "library_dirs": [str(Path("/lib"))],
            "libraries": ["vlc"],
        }


class TestLinkEmitter:
    """Test cases for LinkEmitter."""

    def test_emit(self, tmp_path):
        stream = io.StringIO()
        directives = build_directives([tmp_path / "lib"], ["vlc", "vlccore"], [tmp_path / "inc"])

        link_json = LinkEmitter(tmp_path / "out", stream=stream).emit(directives)

        assert stream.getvalue().splitlines() == directives.lines()
        assert link_json == tmp_path / "out" / LINK_JSON
        data = json.loads(link_json.read_text())
        assert data["libraries"] == ["vlc", "vlccore"]
        assert data["library_dirs"] == [str(tmp_path / "lib")]

    def test_load_round_trip(self, tmp_path):
        directives = build_directives([tmp_path / "lib"], ["libvlc", "libvlccore"], [tmp_path / "inc"])
        link_json = LinkEmitter(tmp_path, stream=io.StringIO()).emit(directives)
        assert LinkDirectives.load(link_json) == directives
