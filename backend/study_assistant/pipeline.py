from __future__ import annotations
import logging
from typing import Any, Callable, Dict, Tuple

from fastapi import Request

from .errors import ApiError, ProviderError
from .gemini_client import TextGenerator
from .normalizer import normalize_or_fallback
from .schemas import RESULT_SCHEMAS, FeatureKind

logger = logging.getLogger(__name__)


def get_generator(request: Request) -> TextGenerator:
	"""FastAPI dependency returning the provider client injected by ``create_app``."""
	return request.app.state.generator


async def generate_text(generator: TextGenerator, prompt: str, *, failure_message: str) -> str:
	"""Single provider round-trip; provider failures become a 500 ``ApiError``."""
	try:
		return await generator.generate(prompt)
	except ProviderError as err:
		logger.error("Provider call failed: %s", err)
		raise ApiError(failure_message, status_code=500, details=str(err)) from err


async def generate_structured(
	generator: TextGenerator,
	feature: FeatureKind,
	prompt: str,
	fallback: Callable[[], Dict[str, Any]],
	*,
	failure_message: str,
) -> Tuple[Dict[str, Any], bool]:
	"""Prompt -> provider -> normalizer, with ``fallback`` on unparseable output.

	Returns ``(result, used_fallback)``. Only a provider failure escapes.
	"""
	raw = await generate_text(generator, prompt, failure_message=failure_message)
	result, used_fallback = normalize_or_fallback(raw, RESULT_SCHEMAS[feature], fallback)
	logger.info("%s result ready (fallback=%s)", feature.value, used_fallback)
	return result, used_fallback
