"""Shared fixtures for the packing test suite."""

from pathlib import Path

import pytest


@pytest.fixture
def make_repo(tmp_path):
    """
    Build a sample repository under ``tmp_path``.

    Takes a mapping of relative path to content (str written as UTF-8,
    bytes written raw) and returns the repository root.
    """

    def _make(files: dict[str, str | bytes]) -> Path:
        for relative_path, content in files.items():
            path = tmp_path / relative_path
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _make
