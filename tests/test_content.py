import logging

import pytest

from showsite.content import ContentNotFoundError, FileContentLoader
from showsite.resolver import ResolvedPath


def test_load_returns_raw_bytes(tmp_path):
    source = tmp_path / "post.md"
    source.write_bytes(b"# Caf\xc3\xa9\n")
    loader = FileContentLoader()
    assert loader.load(ResolvedPath(source, tmp_path)) == b"# Caf\xc3\xa9\n"


def test_missing_file_raises_not_found(tmp_path):
    missing = tmp_path / "missing.md"
    with pytest.raises(ContentNotFoundError) as excinfo:
        FileContentLoader().load(ResolvedPath(missing, tmp_path))
    assert excinfo.value.path == missing
    assert isinstance(excinfo.value.__cause__, FileNotFoundError)


def test_directory_raises_not_found(tmp_path):
    folder = tmp_path / "folder.md"
    folder.mkdir()
    with pytest.raises(ContentNotFoundError):
        FileContentLoader().load(ResolvedPath(folder, tmp_path))


def test_load_logs_path_before_reading(tmp_path, caplog):
    missing = tmp_path / "gone.md"
    with caplog.at_level(logging.INFO, logger="showsite.content"):
        with pytest.raises(ContentNotFoundError):
            FileContentLoader().load(ResolvedPath(missing, tmp_path))
    assert f"Loading file: {missing}" in caplog.text


def test_nul_byte_path_raises_not_found(tmp_path):
    bad = tmp_path / "a\x00b.md"
    with pytest.raises(ContentNotFoundError) as excinfo:
        FileContentLoader().load(ResolvedPath(bad, tmp_path))
    assert isinstance(excinfo.value.__cause__, ValueError)
