#!/usr/bin/env python3
"""Gemini text generation through the google-genai SDK."""
from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional

from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from langsmith.run_helpers import traceable

from clients.base import call_with_retries
from configs.config import Config
from utils.errors import (
	ConfigurationError,
	GenerationError,
	PermanentGenerationError,
	TransientGenerationError,
	classify_generation_error,
)

logger = logging.getLogger(__name__)

KNOWN_MODELS = [
	"gemini-3-flash",
	"gemini-2.0-flash",
	"gemini-2.0-flash-lite",
	"gemini-1.5-flash",
	"gemini-1.5-flash-8b",
	"gemini-1.5-pro",
]

TRANSIENT_HTTP_CODES = {408, 429, 500, 502, 503, 504}

_SAFETY_CATEGORIES = (
	types.HarmCategory.HARM_CATEGORY_HARASSMENT,
	types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
	types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
	types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)


def validate_api_key(api_key: str) -> None:
	if not api_key or not api_key.strip():
		raise ConfigurationError("Gemini API key is required")
	# Keys are typically 39 characters
	if len(api_key.strip()) < 20:
		raise ConfigurationError("Gemini API key appears to be invalid (too short)")


def validate_model(model: str) -> None:
	"""Accept any model name; warn when it is neither known nor gemini-*."""
	if model not in KNOWN_MODELS and not model.startswith("gemini-"):
		logger.warning(
			f"Model '{model}' is not a recognized Gemini model. Known models: {', '.join(KNOWN_MODELS)}"
		)


def classify_gemini_error(exc: Exception) -> GenerationError:
	code = getattr(exc, "code", None)
	if isinstance(exc, genai_errors.APIError) and isinstance(code, int):
		if code in TRANSIENT_HTTP_CODES:
			return TransientGenerationError(f"Gemini API error {code}: {exc}", cause=exc)
		return PermanentGenerationError(f"Gemini API error {code}: {exc}", cause=exc)
	return classify_generation_error(exc)


class GeminiClient:
	def __init__(
		self,
		api_key: Optional[str] = None,
		model: Optional[str] = None,
		max_tokens: int = 8192,
		temperature: float = 0.7,
		*,
		client: Optional[Any] = None,
		max_attempts: Optional[int] = None,
		backoff_s: Optional[float] = None,
		sleep: Optional[Callable[[float], None]] = None,
	) -> None:
		cfg = Config.get_gemini_config()
		api_key = api_key or cfg["api_key"]
		model = model or cfg["model"]
		validate_api_key(api_key)
		validate_model(model)
		self.model = model
		self.max_tokens = int(max_tokens)
		self.temperature = float(temperature)
		self.max_attempts = max_attempts
		self.backoff_s = backoff_s
		self._sleep = sleep
		self._client = client or genai.Client(api_key=api_key)

	def _config(self, system_prompt: str) -> types.GenerateContentConfig:
		safety: List[types.SafetySetting] = [
			types.SafetySetting(category=c, threshold=types.HarmBlockThreshold.BLOCK_ONLY_HIGH)
			for c in _SAFETY_CATEGORIES
		]
		return types.GenerateContentConfig(
			system_instruction=system_prompt,
			max_output_tokens=self.max_tokens,
			temperature=self.temperature,
			safety_settings=safety,
		)

	def _invoke(self, system_prompt: str, user_prompt: str) -> str:
		try:
			response = self._client.models.generate_content(
				model=self.model,
				contents=user_prompt,
				config=self._config(system_prompt),
			)
			text = response.text if response is not None else None
		except Exception as e:  # noqa: BLE001
			raise classify_gemini_error(e) from e
		if response is None:
			raise PermanentGenerationError("No response received from Gemini API", code="EMPTY")
		if not text or not text.strip():
			raise PermanentGenerationError("Empty response received from Gemini API", code="EMPTY")
		return text.strip()

	@traceable(name="gemini_generate")
	def generate(self, system_prompt: str, user_prompt: str) -> str:
		"""Generate text, retrying transient failures with exponential backoff."""
		logger.debug(f"Using Gemini model: {self.model}")
		logger.debug(f"Max tokens: {self.max_tokens}, Temperature: {self.temperature}")
		text = call_with_retries(
			lambda: self._invoke(system_prompt, user_prompt),
			max_attempts=self.max_attempts,
			backoff_s=self.backoff_s,
			sleep=self._sleep,
		)
		logger.debug(f"Successfully generated description ({len(text)} characters)")
		return text
