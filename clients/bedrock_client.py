#!/usr/bin/env python3
from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

import boto3
from botocore.exceptions import ReadTimeoutError, EndpointConnectionError, ClientError
from langsmith.run_helpers import traceable

from clients.base import call_with_retries
from configs.config import Config
from utils.errors import GenerationError, PermanentGenerationError, TransientGenerationError

logger = logging.getLogger(__name__)


def classify_bedrock_error(exc: Exception) -> GenerationError:
	if isinstance(exc, GenerationError):
		return exc
	if isinstance(exc, ReadTimeoutError):
		return TransientGenerationError(f"Bedrock error: {exc}", code="TIMEOUT", cause=exc)
	if isinstance(exc, EndpointConnectionError):
		return TransientGenerationError(f"Bedrock error: {exc}", code="NETWORK", cause=exc)
	if isinstance(exc, ClientError):
		err = exc.response.get("Error", {}) if hasattr(exc, "response") else {}
		status = err.get("Code", "") or err.get("StatusCode", "")
		msg = err.get("Message", "")
		low = (str(status) + " " + str(msg)).lower()
		if "throttl" in low or "429" in low or "rate limit" in low or "toomanyrequests" in low:
			return TransientGenerationError(f"Bedrock error: {exc}", code="RATE_LIMIT", cause=exc)
		if "serviceunavailable" in low or "internalserver" in low or "modeltimeout" in low or "modelnotready" in low:
			return TransientGenerationError(f"Bedrock error: {exc}", code="SERVER", cause=exc)
		if "unauthorized" in low or "accessdenied" in low or "403" in low or "401" in low:
			return PermanentGenerationError(f"Bedrock error: {exc}", code="UNAUTHORIZED", cause=exc)
		return PermanentGenerationError(f"Bedrock error: {exc}", cause=exc)
	return PermanentGenerationError(f"Bedrock error: {exc}", cause=exc)


class BedrockClient:
	def __init__(
		self,
		model_id: Optional[str] = None,
		max_output_tokens: int = 2000,
		temperature: float = 0.7,
		*,
		runtime: Optional[Any] = None,
		max_attempts: Optional[int] = None,
		backoff_s: Optional[float] = None,
		sleep: Optional[Callable[[float], None]] = None,
	) -> None:
		cfg = Config.get_bedrock_config()
		self.region = cfg.get("region_name", Config.AWS_REGION)
		self.model = model_id or cfg.get("model_id", Config.BEDROCK_MODEL_ID)
		self.max_output_tokens = int(max_output_tokens)
		self.temperature = float(temperature)
		self.max_attempts = max_attempts
		self.backoff_s = backoff_s
		self._sleep = sleep
		self._runtime = runtime or boto3.client("bedrock-runtime", region_name=self.region)

	def _invoke(self, system_prompt: str, user_prompt: str) -> str:
		# Anthropic messages payload on Bedrock
		body = {
			"anthropic_version": "bedrock-2023-05-31",
			"max_tokens": self.max_output_tokens,
			"temperature": self.temperature,
			"system": system_prompt,
			"messages": [
				{"role": "user", "content": [{"type": "text", "text": user_prompt}]}
			],
		}
		try:
			response = self._runtime.invoke_model(
				modelId=self.model,
				contentType="application/json",
				accept="application/json",
				body=json.dumps(body).encode("utf-8"),
			)
		except Exception as e:  # noqa: BLE001
			raise classify_bedrock_error(e) from e

		payload = response.get("body")
		raw = payload.read() if hasattr(payload, "read") else payload
		try:
			data = json.loads(raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw)
			# { ..., "content": [{"type":"text","text":"..."}], ... }
			text = "".join(block.get("text", "") for block in data.get("content", []) if block.get("type") == "text")
		except (json.JSONDecodeError, TypeError, AttributeError) as e:
			raise PermanentGenerationError(f"Invalid JSON response from Bedrock: {e}", cause=e) from e
		if not text.strip():
			raise PermanentGenerationError("Empty text content in response", code="EMPTY")
		return text.strip()

	@traceable(name="bedrock_generate")
	def generate(self, system_prompt: str, user_prompt: str) -> str:
		logger.debug(f"Using Bedrock model: {self.model} ({self.region})")
		return call_with_retries(
			lambda: self._invoke(system_prompt, user_prompt),
			max_attempts=self.max_attempts,
			backoff_s=self.backoff_s,
			sleep=self._sleep,
		)


__all__ = ["BedrockClient", "classify_bedrock_error"]
