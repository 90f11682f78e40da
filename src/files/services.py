"""Upload storage: filename sanitisation, size limits and metadata rows."""

import logging
import mimetypes
import re
import uuid
from pathlib import PurePath

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import transaction
from rest_framework.exceptions import ValidationError

from .models import File

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^\w.\-]")
_DOTDOT = re.compile(r"\.{2,}")

MAX_FILENAME_LENGTH = 255


def sanitise_filename(name: str) -> str:
    """Return a safe, filesystem-friendly filename."""
    name = PurePath((name or "").replace("\\", "/")).name
    name = _UNSAFE.sub("_", name)
    name = _DOTDOT.sub(".", name)
    name = name.strip("._")
    if not name:
        raise ValidationError({"file": ["Invalid filename."]})
    if len(name) > MAX_FILENAME_LENGTH:
        raise ValidationError({"file": [f"Filename too long (max {MAX_FILENAME_LENGTH} chars)."]})
    return name


def _stored_name(safe_name: str) -> str:
    # Random prefix keeps two uploads of "report.pdf" apart on disk.
    return f"{uuid.uuid4().hex}_{safe_name}"[:MAX_FILENAME_LENGTH]


def validate_upload(upload) -> str:
    """Enforce the size limit and return the sanitised name; nothing is written."""
    max_bytes = settings.FILE_UPLOAD_MAX_BYTES
    if upload.size is not None and upload.size > max_bytes:
        raise ValidationError(
            {"file": [f"File exceeds maximum size ({max_bytes // 1024 // 1024} MB)."]}
        )
    return sanitise_filename((upload.name or "upload")[:MAX_FILENAME_LENGTH])


def _build_record(uploader, upload, safe_name: str, article, category) -> File:
    content_type = getattr(upload, "content_type", None) or mimetypes.guess_type(safe_name)[0]
    return File(
        filename=_stored_name(safe_name),
        original_name=(upload.name or "upload")[:MAX_FILENAME_LENGTH],
        file_type=content_type or "application/octet-stream",
        file_size=upload.size or 0,
        uploaded_by=uploader,
        article=article,
        category=category,
    )


def store_uploads(uploader, uploads, article=None, category=None) -> list[File]:
    """Persist a batch of uploads through the default storage, all or nothing.

    Every part is validated before any binary is written. If a write or row
    insert fails, the binaries already stored for the batch are removed and
    no rows survive. Authorization is the caller's job.
    """
    checked = [(upload, validate_upload(upload)) for upload in uploads]
    written: list[str] = []
    records: list[File] = []
    try:
        with transaction.atomic():
            for upload, safe_name in checked:
                record = _build_record(uploader, upload, safe_name, article, category)
                record.file.save(record.filename, upload, save=False)
                written.append(record.file.name)
                record.filename = PurePath(record.file.name).name
                record.save()
                records.append(record)
    except Exception:
        for name in written:
            default_storage.delete(name)
        raise
    for record in records:
        logger.info("File %s uploaded by %s (%s bytes)", record.pk, getattr(uploader, "pk", None), record.file_size)
    return records


def store_upload(uploader, upload, article=None, category=None) -> File:
    """Single-file form of ``store_uploads``."""
    return store_uploads(uploader, [upload], article=article, category=category)[0]


def delete_file(file_id: int) -> bool:
    """Delete the row by id and remove its binary once the transaction commits."""
    record = File.objects.filter(pk=file_id).first()
    if record is None:
        return False
    stored = record.file.name
    storage = record.file.storage
    with transaction.atomic():
        record.delete()
        if stored:
            transaction.on_commit(lambda: storage.delete(stored))
    logger.info("File %s deleted", file_id)
    return True


__all__ = ["delete_file", "sanitise_filename", "store_upload", "store_uploads", "validate_upload"]
