from __future__ import annotations
from fastapi import APIRouter, Depends

from ..errors import ValidationError
from ..fallbacks import diagram_fallback
from ..gemini_client import TextGenerator
from ..normalizer import strip_code_fences
from ..pipeline import generate_structured, get_generator
from ..prompts import build_diagram_prompt
from ..schemas import DiagramRequest, FeatureKind

router = APIRouter(prefix="/api/diagram", tags=["diagram"])


@router.post("/generate")
async def generate_diagram(req: DiagramRequest, generator: TextGenerator = Depends(get_generator)):
	description = (req.prompt or "").strip()
	if not description:
		raise ValidationError("Prompt is required to generate a diagram")
	diagram, _ = await generate_structured(
		generator,
		FeatureKind.DIAGRAM,
		build_diagram_prompt(description, req.diagramType),
		lambda: diagram_fallback(description, req.diagramType),
		failure_message="Failed to generate diagram",
	)
	# Providers sometimes fence the Mermaid code inside the JSON string as well
	diagram["mermaidCode"] = strip_code_fences(diagram["mermaidCode"]) or diagram["mermaidCode"]
	return {
		"success": True,
		**diagram,
		"prompt": description,
	}
