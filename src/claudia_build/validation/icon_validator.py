"""Icon Signature Validation.

This module checks resource files against their expected magic signature
before any native build work starts.

A PNG saved under an .ico name passes through the frontend build untouched and
only fails much later inside the Windows resource compiler (RC2175). Checking
the first four bytes up front turns that into an early, actionable error.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from ..errors import NotFoundError, ValidationError

# Multi-resolution icon container (reserved=0, type=1)
ICO_SIGNATURE = b"\x00\x00\x01\x00"
PNG_SIGNATURE = b"\x89PNG"


def format_signature(data: bytes) -> str:
    """Format bytes as space-separated hex pairs (e.g. '00 00 01 00')."""
    return " ".join(f"{byte:02x}" for byte in data)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of checking one file's leading bytes."""

    path: Path
    observed: bytes
    expected: bytes
    passed: bool

    @property
    def observed_hex(self) -> str:
        return format_signature(self.observed)

    @property
    def expected_hex(self) -> str:
        return format_signature(self.expected)


def validate(path: Path, expected_signature: bytes) -> ValidationReport:
    """Compare the leading bytes of a file against a signature.

    Only ``len(expected_signature)`` bytes are read.

    Args:
        path: File to inspect
        expected_signature: Required leading bytes

    Returns:
        ValidationReport with observed and expected signatures

    Raises:
        NotFoundError: If the file does not exist
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)

    with open(path, "rb") as f:
        observed = f.read(len(expected_signature))

    return ValidationReport(
        path=path,
        observed=observed,
        expected=expected_signature,
        passed=observed == expected_signature,
    )


class IconValidator:
    """Validation gate for the icon files a native build embeds."""

    def __init__(self, expected_signature: bytes = ICO_SIGNATURE):
        self.expected_signature = expected_signature

    def validate_icons(self, icon_paths: Iterable[Path]) -> List[ValidationReport]:
        """Validate every icon file, stopping at the first bad one.

        Args:
            icon_paths: Icon files to check

        Returns:
            Reports for all files (all passing)

        Raises:
            NotFoundError: If an icon file is missing
            ValidationError: If an icon file has the wrong signature
        """
        logging.info("Validating icon files...")
        reports = []
        for icon_path in icon_paths:
            report = validate(icon_path, self.expected_signature)
            logging.debug(f"{report.path}: signature {report.observed_hex}")
            if not report.passed:
                raise ValidationError(self._describe_failure(report))
            logging.info(f"{report.path} is a valid ICO file ({report.observed_hex})")
            reports.append(report)
        return reports

    @staticmethod
    def _describe_failure(report: ValidationReport) -> str:
        lines = [
            f"Invalid icon format: {report.path}",
            f"  Expected: {report.expected_hex}",
            f"  Found:    {report.observed_hex or '<empty file>'}",
        ]
        if report.observed.startswith(PNG_SIGNATURE):
            lines.append(
                "  The file is a PNG image. Convert it to a real ICO container; "
                + "the Windows resource compiler rejects it with RC2175."
            )
        return "\n".join(lines)
