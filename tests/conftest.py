"""Shared test fixtures."""

import io
import os
import sys
import textwrap
from pathlib import Path

import pytest
from rich.console import Console

from ulb.backend.invocation import BackendInvocation
from ulb.tui.loop import UILoop

VALID_CONFIG = 'distro = "fedora"\nimage_name = "test-iso"\n'


@pytest.fixture
def backend_script(tmp_path):
    """Factory: write a Python backend script, return an invocation for it.

    The script body gets ``sys``, ``json`` and ``time`` pre-imported.
    """
    def _make(body: str, name: str = "backend.py") -> BackendInvocation:
        script = tmp_path / name
        script.write_text(
            "import json, sys, time\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        return BackendInvocation(
            executable=Path(sys.executable),
            arguments=(str(script),),
            working_dir=tmp_path,
        )
    return _make


@pytest.fixture
def fake_backend(tmp_path):
    """Factory: an executable backend (sh wrapper around a Python script)."""
    if os.name == "nt":
        pytest.skip("sh wrapper needs a POSIX shell")

    def _make(body: str) -> Path:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / "backend_impl.py"
        script.write_text(
            "import json, sys, time\n" + textwrap.dedent(body),
            encoding="utf-8",
        )
        wrapper = bin_dir / "backend"
        wrapper.write_text(
            f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n',
            encoding="utf-8",
        )
        wrapper.chmod(0o755)
        return wrapper
    return _make


@pytest.fixture
def quiet_ui():
    """Factory for UI loops that render into a string buffer."""
    def _make(**kwargs) -> UILoop:
        console = Console(file=io.StringIO(), width=80)
        kwargs.setdefault("read_keys", False)
        kwargs.setdefault("tick_interval", 0.02)
        return UILoop(console, **kwargs)
    return _make


@pytest.fixture
def project_dir(tmp_path):
    """A project directory with a valid Config.toml."""
    root = tmp_path / "project"
    root.mkdir()
    (root / "Config.toml").write_text(VALID_CONFIG, encoding="utf-8")
    return root
