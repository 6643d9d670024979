"""Unit tests for MSVC toolchain discovery."""

from pathlib import Path

import pytest

from vlcbuild.packages.toolchain import MsvcToolchain, ToolchainError


def _install_vs(root: Path, version: str, host: str, target: str) -> Path:
    bin_dir = root / "VC" / "Tools" / "MSVC" / version / "bin" / host / target
    bin_dir.mkdir(parents=True)
    (bin_dir / "dumpbin.exe").touch()
    (bin_dir / "lib.exe").touch()
    return bin_dir


def _install_vswhere(program_files_x86: Path) -> Path:
    vswhere = program_files_x86 / "Microsoft Visual Studio" / "Installer" / "vswhere.exe"
    vswhere.parent.mkdir(parents=True)
    vswhere.touch()
    return vswhere


class TestMsvcToolchain:
    """Test cases for MsvcToolchain.locate()."""

    def test_tools_on_path(self, make_ctx, fake_runner):
        tools = {"dumpbin": r"C:\VS\dumpbin.exe", "lib": r"C:\VS\lib.exe"}
        runner = fake_runner()
        toolchain = MsvcToolchain(make_ctx("windows"), which=tools.get, runner=runner)

        found = toolchain.locate()

        assert found.dumpbin == Path(r"C:\VS\dumpbin.exe")
        assert found.lib == Path(r"C:\VS\lib.exe")
        assert runner.calls == []

    def test_vswhere_lookup(self, tmp_path, make_ctx, fake_runner):
        pf86 = tmp_path / "pf86"
        vswhere = _install_vswhere(pf86)
        install = tmp_path / "VS2022"
        _install_vs(install, "14.29.30133", "Hostx64", "x64")
        newest = _install_vs(install, "14.38.33130", "Hostx64", "x64")

        runner = fake_runner({"installationPath": (0, f"{install}\r\n")})
        ctx = make_ctx("windows", "x86_64", **{"ProgramFiles(x86)": str(pf86)})
        found = MsvcToolchain(ctx, which=lambda name: None, runner=runner).locate()

        assert found.dumpbin == newest / "dumpbin.exe"
        assert found.lib == newest / "lib.exe"
        assert runner.calls[0][0] == str(vswhere)

    def test_x86_target_uses_x86_tools(self, tmp_path, make_ctx, fake_runner):
        pf86 = tmp_path / "pf86"
        _install_vswhere(pf86)
        install = tmp_path / "VS"
        _install_vs(install, "14.38.33130", "Hostx64", "x64")
        x86_bin = _install_vs(install, "14.38.33130", "Hostx64", "x86")

        runner = fake_runner({"installationPath": (0, str(install))})
        ctx = make_ctx("windows", "x86", **{"ProgramFiles(x86)": str(pf86)})
        found = MsvcToolchain(ctx, which=lambda name: None, runner=runner).locate()

        assert found.dumpbin == x86_bin / "dumpbin.exe"

    def test_vswhere_found_with_uppercase_environment(self, tmp_path, make_ctx, fake_runner):
        pf86 = tmp_path / "pf86"
        vswhere = _install_vswhere(pf86)
        install = tmp_path / "VS"
        newest = _install_vs(install, "14.38.33130", "Hostx64", "x64")

        runner = fake_runner({"installationPath": (0, str(install))})
        ctx = make_ctx("windows", "x86_64", **{"PROGRAMFILES(X86)": str(pf86)})
        found = MsvcToolchain(ctx, which=lambda name: None, runner=runner).locate()

        assert found.lib == newest / "lib.exe"
        assert runner.calls[0][0] == str(vswhere)

    def test_no_vswhere(self, tmp_path, make_ctx):
        ctx = make_ctx("windows", **{"ProgramFiles(x86)": str(tmp_path)})
        with pytest.raises(ToolchainError, match="toolchain not found"):
            MsvcToolchain(ctx, which=lambda name: None).locate()

    def test_vswhere_reports_nothing(self, tmp_path, make_ctx, fake_runner):
        pf86 = tmp_path / "pf86"
        _install_vswhere(pf86)
        runner = fake_runner({"installationPath": (0, "")})
        ctx = make_ctx("windows", **{"ProgramFiles(x86)": str(pf86)})
        with pytest.raises(ToolchainError, match="toolchain not found"):
            MsvcToolchain(ctx, which=lambda name: None, runner=runner).locate()

    def test_installation_without_tools(self, tmp_path, make_ctx, fake_runner):
        pf86 = tmp_path / "pf86"
        _install_vswhere(pf86)
        install = tmp_path / "VS"
        (install / "VC" / "Tools" / "MSVC" / "14.38.33130").mkdir(parents=True)

        runner = fake_runner({"installationPath": (0, str(install))})
        ctx = make_ctx("windows", **{"ProgramFiles(x86)": str(pf86)})
        with pytest.raises(ToolchainError, match="no dumpbin.exe/lib.exe"):
            MsvcToolchain(ctx, which=lambda name: None, runner=runner).locate()
