"""Shared pytest fixtures for guse-zip tests."""

import io
import zipfile

import pytest
from typer.testing import CliRunner


def build_zip(entries: list[tuple[str, bytes | None]]) -> bytes:
    """
    Build zip bytes from (name, content) pairs in the given order.

    A content of None writes a directory entry.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        for name, content in entries:
            if content is None:
                info = zipfile.ZipInfo(name if name.endswith("/") else f"{name}/")
                info.external_attr = 0x10
                zf.writestr(info, b"")
            else:
                zf.writestr(name, content)
    return buffer.getvalue()


SAMPLE_ENTRIES = [
    ("wf/", None),
    ("wf/jobA/", None),
    ("wf/jobA/script.sh", b"echo hi"),
    ("wf/jobB/", None),
    ("wf/jobB/script.py", b"print(1)"),
    ("workflow.xml", b"<graph/>"),
]


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def make_zip():
    """Factory building zip bytes from (name, content) entries."""
    return build_zip


@pytest.fixture
def sample_zip_bytes():
    """A valid two-node workflow archive."""
    return build_zip(SAMPLE_ENTRIES)


@pytest.fixture
def sample_zip(tmp_path, sample_zip_bytes):
    """A valid two-node workflow archive written to disk."""
    path = tmp_path / "workflow.zip"
    path.write_bytes(sample_zip_bytes)
    return path


@pytest.fixture
def sample_config(tmp_path):
    """Create a sample config file."""
    config_file = tmp_path / "gusezip.yaml"
    config_file.write_text(
        """
archive:
  compression: stored

output:
  overwrite: true

logging:
  level: DEBUG
"""
    )
    return config_file
