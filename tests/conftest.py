"""Shared fixtures for File Namer tests."""

from datetime import datetime

import pytest

from file_namer.core.assembler import FilenameAssembler


@pytest.fixture
def fixed_now():
    """A fixed clock reading: 2026-10-17 09:30:15."""
    return datetime(2026, 10, 17, 9, 30, 15)


@pytest.fixture
def assembler(fixed_now):
    """Assembler with a frozen clock."""
    return FilenameAssembler(clock=lambda: fixed_now)


@pytest.fixture
def save_dir(tmp_path):
    """Empty, writable target directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    """Isolated data directory picked up through FILE_NAMER_HOME."""
    path = tmp_path / "data"
    monkeypatch.setenv("FILE_NAMER_HOME", str(path))
    return path
