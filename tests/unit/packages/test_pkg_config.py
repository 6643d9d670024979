"""Unit tests for the pkg-config registry."""

import subprocess
from pathlib import Path

from vlcbuild.packages.pkg_config import PackageRegistry


class TestPackageRegistry:
    """Test cases for PackageRegistry."""

    def test_probe_success(self, fake_runner):
        runner = fake_runner({
            "--cflags-only-I": (0, "-I/usr/include -I/usr/include/vlc/plugins\n"),
            "--libs-only-L": (0, "-L/usr/lib/x86_64-linux-gnu\n"),
        })
        registry = PackageRegistry(pkg_config="pkg-config", runner=runner)

        result = registry.probe("libvlc")

        assert result is not None
        assert result.include_paths == (Path("/usr/include"), Path("/usr/include/vlc/plugins"))
        assert result.link_paths == (Path("/usr/lib/x86_64-linux-gnu"),)
        assert runner.calls[0] == ["pkg-config", "--cflags-only-I", "libvlc"]

    def test_probe_empty_flags(self, fake_runner):
        runner = fake_runner({"--cflags-only-I": (0, "\n"), "--libs-only-L": (0, "")})
        result = PackageRegistry(pkg_config="pkg-config", runner=runner).probe("libvlc")
        assert result is not None
        assert result.include_paths == ()
        assert result.link_paths == ()

    def test_package_not_found(self, fake_runner):
        runner = fake_runner({"--cflags-only-I": (1, "")})
        assert PackageRegistry(pkg_config="pkg-config", runner=runner).probe("libvlc") is None

    def test_missing_pkg_config_binary(self, fake_runner):
        runner = fake_runner()
        registry = PackageRegistry(runner=runner)
        registry.pkg_config = None
        assert registry.probe("libvlc") is None
        assert runner.calls == []

    def test_runner_exception_is_a_miss(self):
        def runner(cmd):
            raise subprocess.TimeoutExpired(cmd, 30)

        assert PackageRegistry(pkg_config="pkg-config", runner=runner).probe("libvlc") is None

    def test_quoted_paths_with_spaces(self, fake_runner):
        runner = fake_runner({
            "--cflags-only-I": (0, '"-I/opt/my vlc/include"'),
            "--libs-only-L": (0, ""),
        })
        result = PackageRegistry(pkg_config="pkg-config", runner=runner).probe("libvlc")
        assert result.include_paths == (Path("/opt/my vlc/include"),)
