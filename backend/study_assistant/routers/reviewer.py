from __future__ import annotations
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..errors import ValidationError
from ..fallbacks import code_review_fallback
from ..gemini_client import TextGenerator
from ..pipeline import generate_structured, get_generator
from ..prompts import build_code_review_prompt
from ..schemas import CodeReviewRequest, FeatureKind

router = APIRouter(prefix="/api/reviewer", tags=["reviewer"])


@router.post("/review")
async def review_code(req: CodeReviewRequest, generator: TextGenerator = Depends(get_generator)):
	code = req.code or ""
	language = (req.language or "").strip()
	if not code.strip():
		raise ValidationError("Code is required for review")
	if not language:
		raise ValidationError("Programming language is required")
	review, _ = await generate_structured(
		generator,
		FeatureKind.CODE_REVIEW,
		build_code_review_prompt(code, language),
		lambda: code_review_fallback(code, language),
		failure_message="Failed to review code",
	)
	return {
		"success": True,
		"review": review,
		"language": language,
		"timestamp": datetime.now(timezone.utc).isoformat(),
	}
