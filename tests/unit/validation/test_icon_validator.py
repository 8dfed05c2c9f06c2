"""Unit tests for icon signature validation."""

import pytest

from claudia_build.errors import NotFoundError, ValidationError
from claudia_build.validation import (
    ICO_SIGNATURE,
    IconValidator,
    format_signature,
    validate,
)


class TestValidate:
    """Test cases for the validate() function."""

    @pytest.mark.parametrize(
        "data",
        [
            b"\x00\x00\x01\x00",
            b"\x00\x00\x01\x00\x02\x00rest-of-icon",
        ],
    )
    def test_valid_ico_passes(self, tmp_path, data):
        """Files starting with 00 00 01 00 pass."""
        icon = tmp_path / "icon.ico"
        icon.write_bytes(data)

        report = validate(icon, ICO_SIGNATURE)

        assert report.passed
        assert report.observed == ICO_SIGNATURE
        assert report.observed_hex == "00 00 01 00"
        assert report.expected_hex == "00 00 01 00"

    @pytest.mark.parametrize(
        "data,observed_hex",
        [
            (b"\x89PNG\r\n\x1a\n", "89 50 4e 47"),
            (b"\x00\x00\x02\x00cursor", "00 00 02 00"),
            (b"GIF89a", "47 49 46 38"),
        ],
    )
    def test_wrong_signature_fails(self, tmp_path, data, observed_hex):
        """Any other leading bytes fail, with the observed bytes reported."""
        icon = tmp_path / "icon.ico"
        icon.write_bytes(data)

        report = validate(icon, ICO_SIGNATURE)

        assert not report.passed
        assert report.observed_hex == observed_hex
        assert report.expected_hex == "00 00 01 00"

    def test_reads_only_signature_length(self, tmp_path):
        """Only the first len(signature) bytes end up in the report."""
        icon = tmp_path / "icon.ico"
        icon.write_bytes(b"\x00\x00\x01\x00" + b"\xff" * 4096)

        report = validate(icon, ICO_SIGNATURE)

        assert len(report.observed) == 4

    def test_short_file_fails(self, tmp_path):
        """A file shorter than the signature fails with what was read."""
        icon = tmp_path / "icon.ico"
        icon.write_bytes(b"\x00\x00")

        report = validate(icon, ICO_SIGNATURE)

        assert not report.passed
        assert report.observed_hex == "00 00"

    def test_missing_file_raises(self, tmp_path):
        """A missing file raises NotFoundError."""
        with pytest.raises(NotFoundError):
            validate(tmp_path / "missing.ico", ICO_SIGNATURE)

    def test_not_found_is_file_not_found_error(self, tmp_path):
        """NotFoundError can be handled as a FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            validate(tmp_path / "missing.ico", ICO_SIGNATURE)

    def test_format_signature(self):
        """Bytes format as lowercase, space-separated hex pairs."""
        assert format_signature(b"\x89PNG") == "89 50 4e 47"
        assert format_signature(b"") == ""


class TestIconValidator:
    """Test cases for the IconValidator gate."""

    def test_all_valid(self, tmp_path):
        """Valid icons produce passing reports."""
        first = tmp_path / "a.ico"
        second = tmp_path / "b.ico"
        first.write_bytes(ICO_SIGNATURE + b"a")
        second.write_bytes(ICO_SIGNATURE + b"b")

        reports = IconValidator().validate_icons([first, second])

        assert [r.path for r in reports] == [first, second]
        assert all(r.passed for r in reports)

    def test_png_disguised_as_ico(self, tmp_path):
        """A PNG named .ico is rejected with both signatures and a hint."""
        icon = tmp_path / "icon.ico"
        icon.write_bytes(b"\x89PNG\r\n\x1a\n")

        with pytest.raises(ValidationError) as exc_info:
            IconValidator().validate_icons([icon])

        message = str(exc_info.value)
        assert "Expected: 00 00 01 00" in message
        assert "Found:    89 50 4e 47" in message
        assert "PNG" in message

    def test_stops_at_first_invalid(self, tmp_path):
        """Validation stops at the first bad icon."""
        bad = tmp_path / "bad.ico"
        bad.write_bytes(b"nope")
        missing = tmp_path / "missing.ico"

        with pytest.raises(ValidationError):
            IconValidator().validate_icons([bad, missing])

    def test_missing_icon(self, tmp_path):
        """A missing icon propagates NotFoundError."""
        with pytest.raises(NotFoundError):
            IconValidator().validate_icons([tmp_path / "icon.ico"])
