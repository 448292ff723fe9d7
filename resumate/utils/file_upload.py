"""
File Upload Utility - Validate resume files before they go to n8n.

Supported formats: PDF, DOC, DOCX, TXT
Max file size: 5MB

Text extraction is done by the n8n workflow, so files are only
checked and read here.
"""

from typing import Tuple
from fastapi import UploadFile, HTTPException


MAX_FILE_SIZE_MB = 5
MAX_FILE_SIZE_BYTES = MAX_FILE_SIZE_MB * 1024 * 1024

MIME_TYPES = {
    '.pdf': 'application/pdf',
    '.doc': 'application/msword',
    '.docx': 'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    '.txt': 'text/plain',
}
ALLOWED_EXTENSIONS = set(MIME_TYPES)


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_resume_upload(file: UploadFile) -> Tuple[bytes, str, str]:
    """
    Validate and read an uploaded resume.

    Returns:
        Tuple of (content, filename, mimetype)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: PDF, DOC, DOCX, TXT"
        )

    content = await file.read()

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    if len(content) > MAX_FILE_SIZE_BYTES:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {MAX_FILE_SIZE_MB}MB"
        )

    mimetype = file.content_type or MIME_TYPES[ext]
    if mimetype == 'application/octet-stream':
        mimetype = MIME_TYPES[ext]

    return content, file.filename, mimetype
