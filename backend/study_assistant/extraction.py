from __future__ import annotations
import io
import logging

import docx
import PyPDF2
from fastapi import UploadFile

from .errors import ValidationError
from .settings import settings

logger = logging.getLogger(__name__)

PDF = "application/pdf"
TXT = "text/plain"
DOCX = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
ALLOWED_TYPES = (PDF, TXT, DOCX)

_EXTENSION_TYPES = {".pdf": PDF, ".txt": TXT, ".docx": DOCX}


def _resolve_type(upload: UploadFile) -> str:
	content_type = (upload.content_type or "").split(";")[0].strip().lower()
	if content_type in ALLOWED_TYPES:
		return content_type
	# Some browsers send application/octet-stream; fall back to the file extension
	name = (upload.filename or "").lower()
	for ext, mime in _EXTENSION_TYPES.items():
		if name.endswith(ext) and content_type in ("", "application/octet-stream"):
			return mime
	raise ValidationError("Invalid file type. Only PDF, DOCX, and TXT files are allowed.")


def extract_text_from_bytes(data: bytes, content_type: str) -> str:
	if content_type == PDF:
		reader = PyPDF2.PdfReader(io.BytesIO(data))
		return "\n".join(page.extract_text() or "" for page in reader.pages)
	if content_type == DOCX:
		document = docx.Document(io.BytesIO(data))
		return "\n".join(paragraph.text for paragraph in document.paragraphs)
	if content_type == TXT:
		return data.decode("utf-8", errors="ignore")
	raise ValueError(f"Unsupported file type: {content_type}")


async def read_upload_text(upload: UploadFile) -> str:
	"""Validate an upload and return its text.

	Raises :class:`ValidationError` for wrong types, oversized files,
	unreadable documents and documents without any text.
	"""
	content_type = _resolve_type(upload)
	data = await upload.read(settings.max_upload_bytes + 1)
	if len(data) > settings.max_upload_bytes:
		limit_mb = settings.max_upload_bytes // (1024 * 1024)
		raise ValidationError(f"File too large. Maximum size is {limit_mb}MB.")
	try:
		text = extract_text_from_bytes(data, content_type)
	except Exception as err:
		logger.warning("Text extraction failed for %s (%s): %s", upload.filename, content_type, err)
		raise ValidationError(
			"Failed to process the uploaded file. Please ensure it's a valid PDF, DOCX, or TXT file."
		) from err
	if not text.strip():
		raise ValidationError("No text could be extracted from the file")
	logger.info("Extracted %d characters from %s", len(text), upload.filename)
	return text
