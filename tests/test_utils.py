"""
Unit tests for configuration, logging filters and input validators.
"""

import logging

import pytest
from pydantic import ValidationError

from utils.config import Config
from utils.logger import SensitiveDataFilter
from utils.validators import (
    sanitize_filename,
    validate_image_path,
    validate_inspection_id,
    validate_page_args,
)


class TestConfig:
    """Tests for Config validation."""

    def test_defaults(self):
        cfg = Config(_env_file=None, HSE_API_BASE_URL="https://api.example.com/")

        assert cfg.api_base_url == "https://api.example.com"
        assert cfg.max_upload_bytes == 3_000_000
        assert cfg.compress_max_side == 1600
        assert cfg.compress_quality == 70

    def test_rejects_bad_base_url(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, HSE_API_BASE_URL="ftp://api.example.com")

    def test_rejects_bad_quality(self):
        with pytest.raises(ValidationError):
            Config(_env_file=None, COMPRESS_QUALITY=100)

    def test_log_file_disabled_by_default(self):
        cfg = Config(_env_file=None, LOG_TO_FILE=False)
        assert cfg.get_log_file() is None

    def test_log_file_enabled(self, temp_dir):
        cfg = Config(_env_file=None, LOG_TO_FILE=True, LOG_DIR=str(temp_dir / "logs"))

        assert cfg.get_log_file() == temp_dir / "logs" / "hse_client.log"
        assert (temp_dir / "logs").is_dir()


def test_sensitive_data_masked():
    record = logging.LogRecord(
        "test", logging.INFO, __file__, 1, "Authorization: Bearer abc.def-123 token=xyz", None, None
    )

    SensitiveDataFilter().filter(record)

    assert "abc.def-123" not in record.msg
    assert "xyz" not in record.msg
    assert "Bearer ***MASKED***" in record.msg


class TestValidators:
    """Tests for input validators."""

    @pytest.mark.parametrize("value", ["abc", "insp_01-XYZ", "  abc  "])
    def test_valid_inspection_ids(self, value):
        is_valid, error, normalized = validate_inspection_id(value)

        assert is_valid is True
        assert error is None
        assert normalized == value.strip()

    @pytest.mark.parametrize("value", ["", None, "a/b", "../x", "a b", "x" * 129])
    def test_invalid_inspection_ids(self, value):
        is_valid, error, normalized = validate_inspection_id(value)

        assert is_valid is False
        assert error
        assert normalized is None

    @pytest.mark.parametrize("page,page_size,expected", [
        (1, 10, True),
        (0, 10, False),
        (1, 0, False),
        (1, 100, True),
        (1, 101, False),
    ])
    def test_page_args(self, page, page_size, expected):
        assert validate_page_args(page, page_size)[0] is expected

    def test_image_path(self, temp_dir):
        good = temp_dir / "photo.jpg"
        good.write_bytes(b"\xff\xd8")
        empty = temp_dir / "empty.png"
        empty.write_bytes(b"")
        wrong = temp_dir / "notes.txt"
        wrong.write_text("hi")
        heic = temp_dir / "photo.heic"
        heic.write_bytes(b"\x00\x00\x00\x18ftypheic")

        assert validate_image_path(str(good))[0] is True
        assert validate_image_path(str(empty)) == (False, "File is empty", None)
        assert validate_image_path(str(wrong))[1] == "Invalid file type: txt"
        assert validate_image_path(str(heic))[1] == "Invalid file type: heic"
        assert validate_image_path(str(temp_dir / "nope.jpg"))[0] is False
        assert validate_image_path(str(temp_dir))[1].startswith("Not a file")

    def test_sanitize_filename(self):
        assert sanitize_filename("/etc/passwd") == "passwd"
        assert sanitize_filename("site photo?.jpg") == "site_photo_.jpg"
