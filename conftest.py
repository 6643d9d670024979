"""
Pytest configuration for vlcbuild test suite.

This configuration enables the --full flag to run integration tests and
provides fakes for the external tools the pipeline invokes.
"""

import subprocess

import pytest

from vlcbuild.packages.platform_utils import PlatformContext


def pytest_addoption(parser):
    """Add custom command-line options."""
    parser.addoption(
        "--full",
        action="store_true",
        default=False,
        help="Run full test suite including integration tests (slow)",
    )


def pytest_configure(config):
    """Configure pytest based on command-line options."""
    if config.getoption("--full"):
        # Remove the default marker expression that excludes integration tests
        markexpr = config.getoption("-m", "")
        if markexpr == "not integration":
            # Clear the marker expression to run all tests
            config.option.markexpr = ""


class FakeRunner:
    """Records commands and replies with canned CompletedProcess results.

    Replies are matched by the first reply key found in the joined command
    line; unmatched commands exit with status 1.
    """

    def __init__(self, replies=None, on_call=None):
        self.replies = replies or {}
        self.on_call = on_call
        self.calls = []

    def __call__(self, cmd, cwd=None):
        self.calls.append(list(cmd))
        if self.on_call is not None:
            self.on_call(cmd)
        line = " ".join(str(part) for part in cmd)
        for key, (returncode, stdout) in self.replies.items():
            if key in line:
                return subprocess.CompletedProcess(cmd, returncode, stdout=stdout, stderr="")
        return subprocess.CompletedProcess(cmd, 1, stdout="", stderr="unexpected command")


@pytest.fixture
def make_ctx():
    """Factory for PlatformContext with an explicit environment."""

    def _make(target_os="linux", target_arch="x86_64", **env):
        return PlatformContext(target_os=target_os, target_arch=target_arch, env=env)

    return _make


@pytest.fixture
def fake_runner():
    """Factory for FakeRunner instances."""
    return FakeRunner
