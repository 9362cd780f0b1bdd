from __future__ import annotations
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..errors import ValidationError
from ..gemini_client import TextGenerator
from ..pipeline import generate_text, get_generator
from ..prompts import build_chat_prompt
from ..schemas import ChatRequest

router = APIRouter(prefix="/api", tags=["chat"])

CONNECTION_TEST_PROMPT = "Say hello and confirm the AI Student Assistant API is working correctly."


@router.post("/gemini/test")
async def test_connection(generator: TextGenerator = Depends(get_generator)):
	text = await generate_text(generator, CONNECTION_TEST_PROMPT, failure_message="Failed to connect to Gemini API")
	return {
		"success": True,
		"message": text.strip(),
		"timestamp": datetime.now(timezone.utc).isoformat(),
	}


@router.post("/chat/message")
@router.post("/gemini/message", include_in_schema=False)
async def send_message(req: ChatRequest, generator: TextGenerator = Depends(get_generator)):
	message = (req.message or "").strip()
	if not message:
		raise ValidationError("Message is required")
	text = await generate_text(
		generator,
		build_chat_prompt(message, req.conversationHistory),
		failure_message="Failed to get AI response",
	)
	return {
		"success": True,
		"response": text.strip(),
		"sessionId": req.sessionId,
		"timestamp": datetime.now(timezone.utc).isoformat(),
	}
