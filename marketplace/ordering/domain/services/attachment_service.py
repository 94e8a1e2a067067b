"""
AttachmentService - Order file intake

Writes customer uploads (design files, down-payment receipts) to the blob
store before the order row exists. A batch is all-or-nothing: if any write
fails, the blobs already written are deleted and AttachmentUploadError is
raised, so no order ever references a partial set of files.
"""

import mimetypes
import secrets
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import BinaryIO, Iterable, List, Optional

from django.conf import settings
from django.core.exceptions import SuspiciousFileOperation
from django.utils.text import get_valid_filename

from infrastructure.storage.interface import StorageException, StorageInterface
from marketplace.infra.observability.metrics import attachment_upload_failures_total
from marketplace.services.base import BaseService

ATTACHMENT_PREFIX = "orders/attachments"


class AttachmentUploadError(Exception):
    """A batch of attachments could not be stored; nothing from it was kept."""


@dataclass
class AttachmentRef:
    file_id: str
    filename: str
    mime_type: str
    size: int
    storage_key: str
    kind: str = "file"


def sanitize_filename(name: Optional[str]) -> str:
    base = (name or "").replace("\\", "/").rsplit("/", 1)[-1]
    try:
        cleaned = get_valid_filename(base)
    except SuspiciousFileOperation:
        # "", "." and ".."
        cleaned = ""
    return cleaned[:200] or "upload"


class AttachmentService(BaseService):
    def __init__(self, storage: StorageInterface, max_workers: Optional[int] = None):
        super().__init__()
        self.storage = storage
        self.max_workers = max_workers or getattr(settings, "ATTACHMENT_UPLOAD_WORKERS", 4)

    @BaseService.log_performance
    def store(self, files: Iterable, kind: str = "file") -> List[AttachmentRef]:
        """
        Write every file concurrently and return refs in input order.

        Args:
            files: Django UploadedFile objects (anything with ``name``,
                   ``size``, ``content_type`` and a readable body)
            kind: "file" or "down_payment_receipt"

        Raises:
            AttachmentUploadError: If any write fails (after cleanup)
        """
        files = [f for f in files or [] if f is not None]
        if not files:
            return []

        refs: List[Optional[AttachmentRef]] = [None] * len(files)
        failures = []

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(files)), thread_name_prefix="attach") as pool:
            futures = {pool.submit(self._write_one, upload, kind): index for index, upload in enumerate(files)}
            for future in as_completed(futures):
                index = futures[future]
                try:
                    refs[index] = future.result()
                except StorageException as e:
                    failures.append((files[index], e))

        if failures:
            written = [ref for ref in refs if ref is not None]
            self.discard(written)
            attachment_upload_failures_total.inc()
            names = ", ".join(getattr(upload, "name", "?") for upload, _ in failures)
            self.logger.error(f"Attachment batch failed ({len(failures)}/{len(files)}): {names}")
            raise AttachmentUploadError(f"Failed to store attachment(s): {names}") from failures[0][1]

        return refs

    def _write_one(self, upload, kind: str) -> AttachmentRef:
        file_id = secrets.token_hex(12)
        filename = sanitize_filename(getattr(upload, "name", None))
        mime_type = (
            getattr(upload, "content_type", None)
            or mimetypes.guess_type(filename)[0]
            or "application/octet-stream"
        )
        key = f"{ATTACHMENT_PREFIX}/{file_id}/{filename}"

        if hasattr(upload, "seek"):
            upload.seek(0)
        stored = self.storage.upload(upload, key, mime_type)

        return AttachmentRef(
            file_id=file_id,
            filename=filename,
            mime_type=mime_type,
            size=stored.size if stored.size is not None else getattr(upload, "size", 0),
            storage_key=stored.key,
            kind=kind,
        )

    def discard(self, refs: Iterable[AttachmentRef]) -> None:
        """Delete blobs best-effort; failures are logged only."""
        for ref in refs:
            try:
                self.storage.delete(ref.storage_key)
            except StorageException as e:
                self.logger.warning(f"Could not delete orphaned attachment {ref.storage_key}: {e}")

    def open(self, storage_key: str) -> BinaryIO:
        """
        Open a stored attachment for reading.

        Raises:
            StorageException: If the blob is missing or unreadable
        """
        return self.storage.open(storage_key)
