from __future__ import annotations
import logging
import httpx
from typing import Any, Dict, List, Optional, Protocol

from .errors import ProviderError
from .settings import settings

logger = logging.getLogger(__name__)

GENERATION_CONFIG: Dict[str, Any] = {
	"temperature": 0.7,
	"topK": 40,
	"topP": 0.95,
	"maxOutputTokens": 8192,
}

SAFETY_SETTINGS: List[Dict[str, str]] = [
	{"category": category, "threshold": "BLOCK_MEDIUM_AND_ABOVE"}
	for category in (
		"HARM_CATEGORY_HARASSMENT",
		"HARM_CATEGORY_HATE_SPEECH",
		"HARM_CATEGORY_SEXUALLY_EXPLICIT",
		"HARM_CATEGORY_DANGEROUS_CONTENT",
	)
]


class TextGenerator(Protocol):
	"""Anything that turns a prompt into provider text.

	Implementations raise :class:`ProviderError` on timeouts, provider-reported
	errors and empty content.
	"""

	async def generate(self, prompt: str) -> str:
		...


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		*,
		base_url: Optional[str] = None,
		model: Optional[str] = None,
		timeout: Optional[float] = None,
		http_client: Optional[httpx.AsyncClient] = None,
	) -> None:
		# A missing key is reported per call so the app can still boot and validate input
		self.api_key = api_key or settings.gemini_api_key
		self.model = model or settings.gemini_model
		self.provider = settings.gemini_provider
		if self.provider == "vertex":
			region = settings.vertex_region
			project = settings.vertex_project or "placeholder-project"
			# Vertex AI Generative REST endpoint (API key via header)
			self.base_url = base_url or (
				f"https://{region}-aiplatform.googleapis.com/v1/projects/{project}/locations/{region}/publishers/google/models/{self.model}:generateContent"
			)
			self._auth_in_query = False
		else:
			# Google AI Studio (Generative Language API)
			self.base_url = base_url or f"https://generativelanguage.googleapis.com/v1beta/models/{self.model}:generateContent"
			self._auth_in_query = True
		self._client = http_client or httpx.AsyncClient(timeout=timeout or settings.gemini_timeout_seconds)

	@property
	def configured(self) -> bool:
		return bool(self.api_key)

	async def generate(self, prompt: str) -> str:
		payload: Dict[str, Any] = {
			"contents": [{"parts": [{"text": prompt}]}],
			"generationConfig": GENERATION_CONFIG,
			"safetySettings": SAFETY_SETTINGS,
		}
		return await self._post_payload(payload)

	async def _post_payload(self, payload: Dict[str, Any]) -> str:
		if not self.api_key:
			raise ProviderError("GEMINI_API_KEY is not configured")
		params: Dict[str, Any] = {}
		headers: Dict[str, str] = {}
		if self._auth_in_query:
			params["key"] = self.api_key
		else:
			headers["x-goog-api-key"] = self.api_key
		try:
			r = await self._client.post(self.base_url, params=params, headers=headers, json=payload)
			r.raise_for_status()
		except httpx.TimeoutException as err:
			raise ProviderError(f"Gemini request timed out: {err}") from err
		except httpx.HTTPStatusError as err:
			raise ProviderError(
				f"Gemini returned HTTP {err.response.status_code}: {err.response.text[:300]}"
			) from err
		except httpx.RequestError as err:
			raise ProviderError(f"Gemini request failed: {err}") from err
		try:
			data = r.json()
			parts = data["candidates"][0]["content"]["parts"]
			text = "".join(str(p.get("text", "")) for p in parts)
		except (ValueError, KeyError, IndexError, TypeError, AttributeError) as err:
			raise ProviderError(f"Unexpected Gemini response: {r.text[:300]}") from err
		if not text.strip():
			raise ProviderError("Gemini returned empty content")
		logger.debug("Gemini returned %d characters", len(text))
		return text

	async def aclose(self) -> None:
		await self._client.aclose()
