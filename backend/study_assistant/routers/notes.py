from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile

from ..errors import ValidationError
from ..extraction import read_upload_text
from ..fallbacks import notes_fallback
from ..gemini_client import TextGenerator
from ..pipeline import generate_structured, get_generator
from ..prompts import build_notes_prompt
from ..schemas import FeatureKind, NotesTextRequest

router = APIRouter(prefix="/api/notes", tags=["notes"])

MAX_TEXT_LENGTH = 50000
PREVIEW_LENGTH = 500


async def _summarize(generator: TextGenerator, text: str, failure_message: str):
	notes, _ = await generate_structured(
		generator,
		FeatureKind.NOTES,
		build_notes_prompt(text),
		lambda: notes_fallback(text),
		failure_message=failure_message,
	)
	return notes


@router.post("/process")
async def process_file(
	file: Optional[UploadFile] = File(default=None),
	generator: TextGenerator = Depends(get_generator),
):
	if file is None or not file.filename:
		raise ValidationError("No file uploaded")
	try:
		text = await read_upload_text(file)
		notes = await _summarize(generator, text, "Failed to process file")
	finally:
		await file.close()
	preview = text[:PREVIEW_LENGTH] + ("..." if len(text) > PREVIEW_LENGTH else "")
	return {
		"success": True,
		"summary": notes["summary"],
		"flashcards": notes["flashcards"],
		"originalText": preview,
		"fileName": file.filename,
	}


@router.post("/process-text")
async def process_text(req: NotesTextRequest, generator: TextGenerator = Depends(get_generator)):
	text = req.text or ""
	if not text.strip():
		raise ValidationError("No text provided")
	if len(text) > MAX_TEXT_LENGTH:
		raise ValidationError("Text too long. Please limit to 50,000 characters.")
	notes = await _summarize(generator, text, "Failed to process text")
	return {
		"success": True,
		"summary": notes["summary"],
		"flashcards": notes["flashcards"],
	}


@router.get("/health")
async def notes_health():
	return {"status": "Notes service is running"}
