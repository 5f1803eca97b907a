"""
Name: Attachment Intake Tests

Responsibilities:
  - Validate PDF-only / size-limited attachments
  - Stored names are generated server-side (archivo-<ms>-<random><ext>)
  - discard() is best-effort
"""

import re
from unittest.mock import MagicMock

import pytest

from obras.application.attachments import (
    AttachmentErrorCode,
    AttachmentIntake,
    format_size,
    normalize_mime_type,
)
from obras.infrastructure.storage import LocalFileStorageAdapter
from obras.infrastructure.storage.errors import StorageError, StorageNotFoundError

pytestmark = pytest.mark.unit

NAME_RE = re.compile(r"^archivo-1700000000000-[0-9a-f]{16}\.pdf$")


@pytest.fixture
def storage(tmp_path):
    return LocalFileStorageAdapter(tmp_path)


@pytest.fixture
def intake(storage):
    return AttachmentIntake(storage, max_bytes=1024, clock_ms=lambda: 1700000000000)


class TestHelpers:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("application/pdf", "application/pdf"),
            ("Application/PDF; charset=binary", "application/pdf"),
            (None, ""),
        ],
    )
    def test_normalize_mime_type(self, raw, expected):
        assert normalize_mime_type(raw) == expected

    def test_format_size(self):
        assert format_size(2 * 1024 * 1024) == "2 MB"
        assert format_size(512 * 1024) == "512 KB"
        assert format_size(1000) == "1000 bytes"


class TestAccept:
    def test_accepts_pdf_and_stores_it(self, intake, storage, pdf_bytes):
        result = intake.accept(pdf_bytes, "application/pdf", original_filename="acta.pdf")

        assert result.error is None
        assert NAME_RE.match(result.stored_name)
        assert storage.resolve_path(result.stored_name).read_bytes() == pdf_bytes

    def test_client_filename_is_not_used(self, intake, pdf_bytes):
        result = intake.accept(
            pdf_bytes, "application/pdf", original_filename="../../etc/passwd.pdf"
        )
        assert NAME_RE.match(result.stored_name)

    def test_unusual_extension_falls_back_to_pdf(self, intake, pdf_bytes):
        result = intake.accept(
            pdf_bytes, "application/pdf", original_filename="acta.p$f"
        )
        assert result.stored_name.endswith(".pdf")

    def test_stored_names_are_unique(self, intake, pdf_bytes):
        names = {intake.accept(pdf_bytes, "application/pdf").stored_name for _ in range(5)}
        assert len(names) == 5

    def test_empty_content_is_validation_error(self, intake):
        result = intake.accept(b"", "application/pdf")
        assert result.stored_name is None
        assert result.error.code == AttachmentErrorCode.VALIDATION_ERROR

    def test_non_pdf_rejected(self, intake, storage):
        result = intake.accept(b"PNG...", "image/png")
        assert result.error.code == AttachmentErrorCode.UNSUPPORTED_MEDIA
        assert list(storage.base_dir.iterdir()) == []

    def test_oversized_rejected_with_limit_in_message(self, intake, storage):
        result = intake.accept(b"x" * 2048, "application/pdf")
        assert result.error.code == AttachmentErrorCode.PAYLOAD_TOO_LARGE
        assert "1 KB" in result.error.message
        assert list(storage.base_dir.iterdir()) == []

    def test_reported_size_wins_over_truncated_content(self, intake, pdf_bytes):
        result = intake.accept(pdf_bytes, "application/pdf", size_bytes=4096)
        assert result.error.code == AttachmentErrorCode.PAYLOAD_TOO_LARGE

    def test_exact_limit_is_accepted(self, intake):
        result = intake.accept(b"x" * 1024, "application/pdf")
        assert result.error is None


class TestDiscard:
    def test_discard_removes_file(self, intake, storage, pdf_bytes):
        stored = intake.accept(pdf_bytes, "application/pdf").stored_name
        assert intake.discard(stored) is True
        assert list(storage.base_dir.iterdir()) == []

    def test_discard_missing_returns_false(self, intake):
        assert intake.discard("archivo-missing.pdf") is False
        assert intake.discard(None) is False

    def test_discard_never_raises(self):
        storage = MagicMock()
        storage.delete_file.side_effect = StorageError("disk error")
        intake = AttachmentIntake(storage)
        assert intake.discard("archivo-1.pdf") is False

        storage.delete_file.side_effect = StorageNotFoundError("archivo-1.pdf")
        assert intake.discard("archivo-1.pdf") is False

    def test_public_url(self):
        assert (
            AttachmentIntake.public_url("archivo-1.pdf") == "/uploads/pdfs/archivo-1.pdf"
        )
