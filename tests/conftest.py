"""Shared fixtures."""

import os
import sys
import textwrap

import pytest

from bugreport_mcp.validation.config import ServerConfig


@pytest.fixture
def config(tmp_path):
    """Config with a token and output directories under tmp_path."""
    return ServerConfig(
        github_token="test-token",
        default_owner="acme",
        default_repo="widgets",
        summaries_dir=tmp_path / "summaries",
        bugreports_dir=tmp_path / "bugreports",
    )


@pytest.fixture
def fake_adb(tmp_path):
    """
    Write an executable shell script standing in for adb.

    Returns a function taking the script body and returning its path.
    """
    if sys.platform == "win32":
        pytest.skip("shell script stand-in for adb needs a POSIX shell")

    def _write(body: str, name: str = "adb") -> str:
        path = tmp_path / "bin" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("#!/bin/sh\n" + textwrap.dedent(body))
        os.chmod(path, 0o755)
        return str(path)

    return _write
