"""Test configuration and fixtures for copytree."""

import logging
import os
import sys
from pathlib import Path

import pytest

from copytree.cli.signal_handler import signal_handler


def pytest_addoption(parser):
    """Add custom command-line options for tests."""
    parser.addoption("--run-cli-tests", action="store_true", default=False, help="Run CLI integration tests (slow)")


@pytest.fixture(autouse=True)
def reset_copytree_logger():
    """Undo logging set up by the CLI so that caplog sees every record."""
    yield
    logger = logging.getLogger("copytree")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def reset_signal_flags():
    """Start every test with no recorded SIGINT/SIGPIPE and clear any it sets."""
    signal_handler.sigpipe_received.clear()
    signal_handler.sigint_received.clear()
    yield signal_handler
    signal_handler.sigpipe_received.clear()
    signal_handler.sigint_received.clear()


@pytest.fixture
def project(tmp_path):
    """A small project tree.

    project/
    ├─ .gitignore        (ignores *.log and build/)
    ├─ README.md
    ├─ app.log
    ├─ build/
    │  └─ out.js
    ├─ docs/
    │  └─ guide.md
    ├─ logo.bin          (binary)
    └─ src/
       ├─ main.py
       └─ util.py
    """
    root = tmp_path / "project"
    root.mkdir()
    (root / ".gitignore").write_text("*.log\nbuild/\n")
    (root / "README.md").write_text("# Project\n")
    (root / "app.log").write_text("log line\n")
    (root / "build").mkdir()
    (root / "build" / "out.js").write_text("console.log(1)\n")
    (root / "docs").mkdir()
    (root / "docs" / "guide.md").write_text("Guide\n")
    (root / "logo.bin").write_bytes(b"\x89BIN\x00\x01\x02\x03")
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("print('main')\n")
    (root / "src" / "util.py").write_text("def util():\n    return 1\n")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Return a helper creating files below tmp_path from {relative path: str or bytes}."""

    def write_tree(files: dict, base: Path = tmp_path) -> Path:
        for relative, content in files.items():
            path = base / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content)
        return base

    return write_tree


@pytest.fixture
def undecodable_tree(tmp_path):
    """A directory holding good.txt and a file whose name is not valid UTF-8."""
    if sys.platform in ("win32", "darwin"):
        pytest.skip("filesystem requires valid Unicode file names")
    root = tmp_path / "odd"
    root.mkdir()
    (root / "good.txt").write_text("fine\n")
    try:
        (root / os.fsdecode(b"bad\xff.txt")).write_text("odd name\n")
    except (OSError, UnicodeError):
        pytest.skip("filesystem rejects undecodable file names")
    return root
