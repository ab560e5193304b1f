"""Tests for reading locator batch files."""

import pytest

from s3rollback.domain.errors import InputFileError, InvalidInput
from s3rollback.infrastructure.locator_file import read_locator_lines


class TestReadLocatorLines:
    def test_skips_blank_lines(self, tmp_path):
        path = tmp_path / "objects.txt"
        path.write_text("s3://b/one\n\n   \ns3://b/two\n", encoding="utf-8")

        assert read_locator_lines(path) == ["s3://b/one", "s3://b/two"]

    def test_handles_crlf(self, tmp_path):
        path = tmp_path / "objects.txt"
        path.write_bytes(b"s3://b/one\r\ns3://b/two\r\n")

        assert read_locator_lines(path) == ["s3://b/one", "s3://b/two"]

    def test_utf8_keys(self, tmp_path):
        path = tmp_path / "objects.txt"
        path.write_text("s3://b/résumé.pdf\n", encoding="utf-8")

        assert read_locator_lines(path) == ["s3://b/résumé.pdf"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputFileError, match="Cannot read"):
            read_locator_lines(tmp_path / "nope.txt")

    def test_missing_file_is_invalid_input(self, tmp_path):
        with pytest.raises(InvalidInput):
            read_locator_lines(tmp_path / "nope.txt")
