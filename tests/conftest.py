"""
Shared test fixtures for deskopen tests.
"""

import os
from pathlib import Path

import pytest

from deskopen.core.config import Config


class XdgTree:
    """Throwaway XDG layout under tmp_path with helpers to populate it."""

    def __init__(self, root: Path):
        self.root = root
        self.config_home = root / "config-home"
        self.config_dir = root / "etc-xdg"
        self.data_home = root / "data-home"
        self.data_dir = root / "usr-share"
        for d in (self.config_home, self.config_dir, self.data_home, self.data_dir):
            d.mkdir(parents=True)

    def config(self, **overrides) -> Config:
        values = dict(
            config_home=self.config_home,
            config_dirs=(self.config_dir,),
            data_home=self.data_home,
            data_dirs=(self.data_dir,),
        )
        values.update(overrides)
        return Config(**values)

    def write(self, path: Path, text: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
        return path

    def mimeapps(self, directory: Path, lines: str, name: str = "mimeapps.list") -> Path:
        return self.write(directory / name, f"[Default Applications]\n{lines}\n")

    def desktop(
        self,
        rel: str,
        exec_line: str,
        data_dir: Path | None = None,
        icon: str | None = None,
        name: str | None = None,
    ) -> Path:
        """Write applications/<rel> with a [Desktop Entry] group."""
        body = ["[Desktop Entry]", "Type=Application", f"Exec={exec_line}"]
        if icon is not None:
            body.append(f"Icon={icon}")
        if name is not None:
            body.append(f"Name={name}")
        base = data_dir if data_dir is not None else self.data_dir
        return self.write(base / "applications" / rel, "\n".join(body) + "\n")


@pytest.fixture
def xdg(tmp_path):
    """An empty XDG tree; use .config() for the matching Config."""
    return XdgTree(tmp_path / "xdg")


@pytest.fixture
def make_exe(tmp_path, monkeypatch):
    """Factory for executables in a bin dir that is the whole PATH."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    monkeypatch.setenv("PATH", str(bin_dir))

    def _make(name: str) -> Path:
        exe = bin_dir / name
        exe.write_text("#!/bin/sh\nexit 0\n")
        exe.chmod(0o755)
        return exe

    return _make


@pytest.fixture
def exec_calls(monkeypatch):
    """Record os.execv calls instead of replacing the test process."""
    calls = []

    def _fake_execv(path, argv):
        calls.append((os.fspath(path), list(argv)))

    monkeypatch.setattr("deskopen.core.command.os.execv", _fake_execv)
    return calls


@pytest.fixture
def sniffer(tmp_path):
    """Factory for a fake MIME sniffer command printing a fixed answer."""

    def _make(output: str, returncode: int = 0) -> tuple[str, ...]:
        script = tmp_path / "fake-sniffer"
        script.write_text(f"#!/bin/sh\nprintf '%s\\n' '{output}'\nexit {returncode}\n")
        script.chmod(0o755)
        return (str(script),)

    return _make
