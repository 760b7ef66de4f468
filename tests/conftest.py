"""
Shared test fixtures for shellword tests.
"""

import pytest

from shellword.core.config import Config, configure_logging
from shellword.core.errors import SubstitutionError
from shellword.core.expand import Environment


@pytest.fixture
def env():
    """Environment with TEST_VAR set and TEST_VAR2 unset."""
    return Environment({"TEST_VAR": "test value", "HOME": "/home/user"})


@pytest.fixture
def make_env():
    """Factory for environments built from keyword arguments."""

    def _make(**variables: str) -> Environment:
        return Environment(variables)

    return _make


@pytest.fixture
def echo_runner():
    """Fake command runner that behaves like echo(1) and records each argv."""
    calls: list[list[str]] = []

    def _run(argv: list[str]) -> str:
        calls.append(argv)
        if argv[0] != "echo":
            raise SubstitutionError(" ".join(argv), "command not found", returncode=127)
        return " ".join(argv[1:]) + "\n"

    _run.calls = calls
    return _run


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Run with no user, project or env config and logging switched off afterwards."""
    monkeypatch.setattr("shellword.core.config.USER_CONFIG", tmp_path / "nonexistent")
    monkeypatch.delenv("SHELLWORD_CONFIG", raising=False)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    yield workdir
    configure_logging(Config())
