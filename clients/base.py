#!/usr/bin/env python3
"""Common surface for text generators and the provider factory."""
from __future__ import annotations

from typing import Callable, Optional, Protocol

from configs.config import Config
from utils.errors import TransientGenerationError
from utils.wrap import with_retries

RETRYABLE = "TRANSIENT"
FATAL = "FATAL"


class TextGenerator(Protocol):
	model: str

	def generate(self, system_prompt: str, user_prompt: str) -> str:
		...


def retry_class(exc: Exception) -> str:
	return RETRYABLE if isinstance(exc, TransientGenerationError) else FATAL


def call_with_retries(
	fn: Callable[[], str],
	*,
	max_attempts: Optional[int] = None,
	backoff_s: Optional[float] = None,
	sleep: Optional[Callable[[float], None]] = None,
) -> str:
	"""Run one generation call under the configured retry policy.

	Only TransientGenerationError is retried; everything else propagates on
	the first failure.
	"""
	cfg = Config.get_retry_config()
	kwargs = {}
	if sleep is not None:
		kwargs["sleep"] = sleep
	return with_retries(
		fn,
		max_attempts=max_attempts if max_attempts is not None else int(cfg["max_attempts"]),
		backoff_s=backoff_s if backoff_s is not None else float(cfg["backoff_s"]),
		retry_on={RETRYABLE},
		classify_exc=retry_class,
		**kwargs,
	)


def build_generator(inputs) -> TextGenerator:
	"""Create the generator selected by `inputs.provider`.

	Provider SDKs are imported lazily so only the one in use must be installed.
	"""
	if inputs.provider == "bedrock":
		from clients.bedrock_client import BedrockClient
		return BedrockClient(
			model_id=inputs.resolved_model,
			max_output_tokens=inputs.max_tokens,
			temperature=inputs.temperature,
		)
	from clients.gemini_client import GeminiClient
	return GeminiClient(
		api_key=inputs.gemini_api_key,
		model=inputs.resolved_model,
		max_tokens=inputs.max_tokens,
		temperature=inputs.temperature,
	)
