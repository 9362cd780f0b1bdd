"""Turn free-form provider text into a validated structured result.

The JSON extraction is deliberately naive: the payload is assumed to be the
text between the first ``{`` and the last ``}``. Braces inside string values
or trailing prose that contains ``}`` can defeat it; such failures end up on
the fallback path rather than being repaired here.
"""
from __future__ import annotations
import json
import logging
import math
import re
from typing import Any, Callable, Dict, Tuple, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import MalformedJson, NoJsonFound, NormalizationFailure, SchemaMismatch

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^\s*```[ \t]*[\w+.-]*[ \t]*\r?\n?")
_TRAILING_FENCE = re.compile(r"\r?\n?[ \t]*```\s*$")
_BARE_LANG_TAG = re.compile(r"^\s*(?:json|javascript|js|mermaid)[ \t]*\r?\n", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
	"""Remove wrapper fences and a leading bare language-tag line."""
	cleaned = _LEADING_FENCE.sub("", text or "", count=1)
	cleaned = _TRAILING_FENCE.sub("", cleaned, count=1)
	cleaned = _BARE_LANG_TAG.sub("", cleaned, count=1)
	return cleaned.strip()


def _reject_constant(name: str) -> Any:
	raise ValueError(f"non-standard JSON constant {name}")


def _finite_float(literal: str) -> float:
	value = float(literal)
	if math.isinf(value):
		raise ValueError(f"number out of range: {literal[:40]}")
	return value


def extract_json_object(text: str) -> Dict[str, Any]:
	first = text.find("{")
	last = text.rfind("}")
	if first == -1 or last == -1 or last < first:
		raise NoJsonFound("no JSON object delimiters in provider output")
	candidate = text[first : last + 1]
	try:
		# NaN, Infinity and overflowing floats cannot be serialized back into a response
		data = json.loads(candidate, parse_constant=_reject_constant, parse_float=_finite_float)
	except (ValueError, RecursionError) as err:
		raise MalformedJson(f"invalid JSON between braces: {err}") from err
	if not isinstance(data, dict):
		raise MalformedJson("JSON payload is not an object")
	return data


def normalize(raw: str, schema: Type[BaseModel]) -> Dict[str, Any]:
	"""Parse ``raw`` and validate it against ``schema``.

	Raises a :class:`NormalizationFailure` subclass on any failure. Pure:
	the same input always yields the same result.
	"""
	data = extract_json_object(strip_code_fences(raw))
	try:
		model = schema.model_validate(data)
	except PydanticValidationError as err:
		missing = ", ".join(".".join(str(p) for p in e["loc"]) for e in err.errors()[:5])
		raise SchemaMismatch(f"{schema.__name__} validation failed at: {missing}") from err
	return model.model_dump()


def normalize_or_fallback(
	raw: str,
	schema: Type[BaseModel],
	fallback: Callable[[], Dict[str, Any]],
) -> Tuple[Dict[str, Any], bool]:
	"""Return ``(result, used_fallback)``; normalization failures never escape."""
	try:
		return normalize(raw, schema), False
	except NormalizationFailure as failure:
		logger.warning("%s for %s, using fallback: %s", failure.kind, schema.__name__, failure)
		return fallback(), True
