from unittest.mock import Mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from infrastructure.storage import StorageException, StorageFactory, StorageFile
from marketplace.ordering.domain.services.attachment_service import (
    AttachmentService,
    AttachmentUploadError,
    sanitize_filename,
)


@pytest.mark.unit
class TestAttachmentService:
    def setup_method(self):
        self.storage = StorageFactory.create_memory()
        self.service = AttachmentService(storage=self.storage, max_workers=2)

    def test_store_writes_every_file_in_order(self):
        files = [
            SimpleUploadedFile("front.pdf", b"%PDF-front", content_type="application/pdf"),
            SimpleUploadedFile("back.png", b"\x89PNG-back", content_type="image/png"),
            SimpleUploadedFile("notes.txt", b"hello"),
        ]

        refs = self.service.store(files)

        assert [r.filename for r in refs] == ["front.pdf", "back.png", "notes.txt"]
        assert [r.mime_type for r in refs][:2] == ["application/pdf", "image/png"]
        assert all(r.kind == "file" for r in refs)
        assert len({r.file_id for r in refs}) == 3
        for ref in refs:
            assert ref.storage_key.startswith(f"orders/attachments/{ref.file_id}/")
            assert self.storage.exists(ref.storage_key)
        assert self.service.open(refs[0].storage_key).read() == b"%PDF-front"

    def test_store_records_kind_and_size(self):
        receipt = SimpleUploadedFile("gcash.jpg", b"12345", content_type="image/jpeg")

        (ref,) = self.service.store([receipt], kind="down_payment_receipt")

        assert ref.kind == "down_payment_receipt"
        assert ref.size == 5

    def test_store_nothing(self):
        assert self.service.store([]) == []
        assert self.service.store(None) == []

    def test_filename_is_sanitized(self):
        upload = SimpleUploadedFile("../../etc/my poster.pdf", b"x")

        (ref,) = self.service.store([upload])

        assert ref.filename == "my_poster.pdf"
        assert ".." not in ref.storage_key

    def test_failed_write_discards_the_whole_batch(self):
        stored_keys = []

        def upload(file, path, content_type):
            if "bad" in path:
                raise StorageException("bucket unavailable")
            stored_keys.append(path)
            return StorageFile(key=path, url="", size=1, content_type=content_type, bucket="test")

        storage = Mock()
        storage.upload.side_effect = upload
        service = AttachmentService(storage=storage, max_workers=1)

        files = [SimpleUploadedFile("good.pdf", b"1"), SimpleUploadedFile("bad.pdf", b"2")]

        with pytest.raises(AttachmentUploadError):
            service.store(files)

        assert len(stored_keys) == 1
        storage.delete.assert_called_once_with(stored_keys[0])

    def test_discard_ignores_storage_errors(self):
        storage = Mock()
        storage.delete.side_effect = StorageException("gone")
        service = AttachmentService(storage=storage)
        ref = Mock(storage_key="orders/attachments/abc/file.pdf")

        service.discard([ref, ref])

        assert storage.delete.call_count == 2


@pytest.mark.unit
@pytest.mark.parametrize(
    "name, expected",
    [
        ("poster.pdf", "poster.pdf"),
        ("C:\\Users\\me\\design file.ai", "design_file.ai"),
        ("..", "upload"),
        ("", "upload"),
        (None, "upload"),
    ],
)
def test_sanitize_filename(name, expected):
    assert sanitize_filename(name) == expected
