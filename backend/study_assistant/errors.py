"""Error taxonomy shared by the routes, the provider client and the normalizer.

Only ``ValidationError`` and ``ApiError``/``ProviderError`` ever reach the HTTP
layer; ``NormalizationFailure`` and its subclasses are absorbed by the
fallback path in :mod:`study_assistant.normalizer`.
"""
from __future__ import annotations
from typing import Optional


class ApiError(Exception):
	"""An error rendered as a ``{"success": false, "error": ...}`` envelope."""

	status_code: int = 500

	def __init__(self, message: str, *, status_code: Optional[int] = None, details: Optional[str] = None) -> None:
		super().__init__(message)
		self.message = message
		if status_code is not None:
			self.status_code = status_code
		self.details = details


class ValidationError(ApiError):
	"""A required request field is missing, empty or out of range."""

	status_code = 400


class ProviderError(Exception):
	"""The generative-language provider call failed, timed out or returned nothing."""


class NormalizationFailure(Exception):
	"""Provider text could not be turned into a structured result."""

	kind = "NormalizationFailure"


class NoJsonFound(NormalizationFailure):
	kind = "NoJsonFound"


class MalformedJson(NormalizationFailure):
	kind = "MalformedJson"


class SchemaMismatch(NormalizationFailure):
	kind = "SchemaMismatch"
