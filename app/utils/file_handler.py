"""
File handling utilities for resume uploads
"""
import os
import secrets
import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from starlette.datastructures import UploadFile

from app.config import settings
from app.core.exceptions import UploadError
from app.utils.validation import FieldError

# Object key extension per accepted MIME type
RESUME_EXTENSIONS = {
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
}


@dataclass
class AcceptedFile:
    """A resume that passed intake checks, read into memory"""
    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def select_single_file(uploads: Sequence) -> Optional[UploadFile]:
    """
    Pick the one resume out of the form values for the resume field

    Args:
        uploads: Every form value posted under the resume field

    Returns:
        Optional[UploadFile]: The file, or None when nothing was attached

    Raises:
        UploadError: If more than one file was sent
    """
    files = [u for u in uploads if isinstance(u, UploadFile) and u.filename]
    if len(files) > 1:
        raise UploadError(
            "Too many files",
            errors=[FieldError("resume", "Please upload only one resume file")]
        )
    return files[0] if files else None


def validate_file_type(content_type: Optional[str], allowed_types: Optional[List[str]] = None) -> str:
    """
    Validate the declared MIME type

    Raises:
        UploadError: If the type is not PDF, DOC or DOCX
    """
    allowed = allowed_types or settings.allowed_resume_types
    declared = (content_type or "").split(";")[0].strip().lower()
    if declared not in allowed:
        raise UploadError(
            "Invalid file type",
            errors=[FieldError("resume", "Please upload a PDF, DOC, or DOCX file", content_type)]
        )
    return declared


def validate_file_size(file_size: Optional[int], max_size: Optional[int] = None) -> None:
    """
    Validate file size

    Args:
        file_size: Size of file in bytes, None when unknown

    Raises:
        UploadError: If file size exceeds maximum
    """
    limit = max_size or settings.MAX_RESUME_SIZE
    if file_size is not None and file_size > limit:
        max_size_mb = limit / (1024 * 1024)
        raise UploadError(
            "File too large",
            errors=[FieldError("resume", f"Resume file must be less than {max_size_mb:g}MB", file_size)]
        )


def generate_storage_key(content_type: str) -> str:
    """
    Generate a collision-resistant object key

    The extension follows the accepted MIME type; the browser's filename
    never reaches the key

    Args:
        content_type: Accepted MIME type

    Returns:
        str: resumes/resume_<epoch ms>_<random>.<ext>
    """
    extension = RESUME_EXTENSIONS.get(content_type, "")
    timestamp = int(time.time() * 1000)
    token = secrets.token_hex(8)
    return f"resumes/resume_{timestamp}_{token}{extension}"


async def read_upload_file(
    upload_file: UploadFile,
    max_size: Optional[int] = None,
    allowed_types: Optional[List[str]] = None
) -> AcceptedFile:
    """
    Check and read an uploaded resume

    Type and declared size are checked before any content is read; the read
    itself stops one byte past the limit

    Raises:
        UploadError: If the file is the wrong type or too large
    """
    limit = max_size or settings.MAX_RESUME_SIZE
    content_type = validate_file_type(upload_file.content_type, allowed_types)
    validate_file_size(getattr(upload_file, "size", None), limit)

    contents = await upload_file.read(limit + 1)
    validate_file_size(len(contents), limit)

    return AcceptedFile(
        filename=os.path.basename(upload_file.filename or "resume"),
        content_type=content_type,
        content=contents
    )
