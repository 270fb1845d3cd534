"""
Shared fixtures for debup tests.
"""

import pytest

from debup.config import Config
from debup.logging_config import setup_logging


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    """Keep host settings out of the tests and let caplog see debup records."""
    monkeypatch.delenv("DEBUP_CONFIG", raising=False)
    monkeypatch.delenv("DEBUP_DEBUG", raising=False)
    monkeypatch.delenv("DEBUP_LOG_FILE", raising=False)
    monkeypatch.setenv("DEBUP_COLOR", "0")
    setup_logging(propagate=True)


@pytest.fixture
def config():
    return Config()


def which_from(*available):
    """shutil.which replacement knowing only the given executables."""
    paths = {
        "apt": "/usr/bin/apt",
        "flatpak": "/usr/bin/flatpak",
        "rustup": "/home/user/.cargo/bin/rustup",
        "cargo": "/home/user/.cargo/bin/cargo",
        "go": "/home/user/.local/go/bin/go",
    }

    def which(name, *args, **kwargs):
        return paths.get(name) if name in available else None

    return which


def outputs_from(mapping):
    """run_capture replacement answering by command prefix."""
    def run_capture(args, *a, **kw):
        command = " ".join(args)
        for prefix, output in mapping.items():
            if command.startswith(prefix):
                return output
        return ""

    return run_capture
