"""Validated action inputs, built once per run and passed explicitly."""

import math
import os
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, Field, ValidationError, field_validator

from configs.config import Config
from utils.errors import ConfigurationError
from utils.markers import DEFAULT_MARKER, markers_for
from utils.update_policy import UpdateMode

PROVIDERS = ("gemini", "bedrock")

MAX_TOKENS_RANGE = (1, 32768)
TEMPERATURE_RANGE = (0.0, 2.0)

# input name -> default, mirroring action.yml
INPUT_DEFAULTS: Dict[str, str] = {
	"gemini_api_key": "",
	"github_token": "",
	"model": "",
	"provider": "gemini",
	"update_mode": "smart",
	"max_tokens": "8192",
	"temperature": "0.7",
	"system_prompt": "",
	"custom_instructions": "",
	"include_file_changes": "true",
	"include_commit_messages": "true",
	"max_diff_size": "50000",
	"exclude_patterns": "",
	"generation_marker": DEFAULT_MARKER,
	"language": "en",
}


def _input_env_name(name: str) -> str:
	# Same transformation the Actions runner applies to `with:` keys
	return "INPUT_" + name.replace(" ", "_").upper()


def read_inputs(environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
	"""Read raw action inputs from INPUT_* variables, falling back to defaults.

	Blank values count as unset.
	"""
	env = os.environ if environ is None else environ
	raw: Dict[str, str] = {}
	for name, default in INPUT_DEFAULTS.items():
		value = (env.get(_input_env_name(name)) or "").strip()
		raw[name] = value or default
	return raw


class ActionInputs(BaseModel):
	"""All per-run settings. Immutable once built."""

	gemini_api_key: str = Field("", description="Gemini API key (provider=gemini)")
	github_token: str = Field(..., description="Token used for GitHub REST calls")
	model: str = Field("", description="Generator model; provider default when blank")
	provider: str = Field("gemini", description="Text generation backend")
	update_mode: UpdateMode = Field(UpdateMode.SMART, description="How to merge generated text")
	max_tokens: int = Field(8192, description="Maximum output tokens for the generator")
	temperature: float = Field(0.7, description="Sampling temperature")
	system_prompt: str = Field("", description="Custom system prompt; default prompt when blank")
	custom_instructions: str = Field("", description="Extra instructions appended to the user prompt")
	include_file_changes: bool = Field(True, description="Include file list and patches")
	include_commit_messages: bool = Field(True, description="Include commit messages")
	max_diff_size: int = Field(50000, description="Character budget for all patches")
	exclude_patterns: Tuple[str, ...] = Field(default_factory=tuple, description="Globs of files to leave out")
	generation_marker: str = Field(DEFAULT_MARKER, description="Base marker for the generated block")
	language: str = Field("en", description="Language code for the description")

	model_config = {"frozen": True, "extra": "ignore"}

	@field_validator("github_token")
	@classmethod
	def _require_token(cls, value: str) -> str:
		if not value or not value.strip():
			raise ValueError("github_token is required")
		return value.strip()

	@field_validator("provider", mode="before")
	@classmethod
	def _check_provider(cls, value: Any) -> str:
		raw = str(value or "gemini").strip().lower()
		if raw not in PROVIDERS:
			raise ValueError(f"Invalid provider: {value}. Must be one of: {', '.join(PROVIDERS)}")
		return raw

	@field_validator("update_mode", mode="before")
	@classmethod
	def _check_mode(cls, value: Any) -> UpdateMode:
		return UpdateMode.parse(value)

	@field_validator("max_tokens")
	@classmethod
	def _check_max_tokens(cls, value: int) -> int:
		low, high = MAX_TOKENS_RANGE
		if value < low or value > high:
			raise ValueError(f"Invalid max_tokens: {value}. Must be between {low} and {high}")
		return value

	@field_validator("temperature")
	@classmethod
	def _check_temperature(cls, value: float) -> float:
		low, high = TEMPERATURE_RANGE
		if not math.isfinite(value) or value < low or value > high:
			raise ValueError(f"Invalid temperature: {value}. Must be between {low} and {high}")
		return value

	@field_validator("max_diff_size")
	@classmethod
	def _check_max_diff_size(cls, value: int) -> int:
		if value < 1:
			raise ValueError(f"Invalid max_diff_size: {value}. Must be a positive integer")
		return value

	@field_validator("include_file_changes", "include_commit_messages", mode="before")
	@classmethod
	def _parse_flag(cls, value: Any) -> bool:
		if isinstance(value, bool):
			return value
		# Anything but an explicit "false" keeps the section
		return str(value).strip().lower() != "false"

	@field_validator("exclude_patterns", mode="before")
	@classmethod
	def _split_patterns(cls, value: Any) -> Tuple[str, ...]:
		if value is None:
			return ()
		items = value.split(",") if isinstance(value, str) else list(value)
		return tuple(p.strip() for p in items if p and p.strip())

	@field_validator("generation_marker", mode="before")
	@classmethod
	def _check_marker(cls, value: Any) -> str:
		return markers_for(str(value or DEFAULT_MARKER)).start

	@field_validator("language", mode="before")
	@classmethod
	def _normalize_language(cls, value: Any) -> str:
		return str(value or "en").strip().lower()

	@property
	def resolved_model(self) -> str:
		if self.model:
			return self.model
		if self.provider == "bedrock":
			return Config.BEDROCK_MODEL_ID
		return Config.GEMINI_DEFAULT_MODEL

	@classmethod
	def build(cls, **values: Any) -> "ActionInputs":
		"""Validate values and raise ConfigurationError instead of ValidationError."""
		try:
			return cls(**values)
		except ValidationError as e:
			raise ConfigurationError(_describe_validation_error(e)) from e

	@classmethod
	def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides: Any) -> "ActionInputs":
		values: Dict[str, Any] = dict(read_inputs(environ))
		if not values["github_token"]:
			values["github_token"] = Config.GITHUB_TOKEN or ""
		if not values["gemini_api_key"]:
			values["gemini_api_key"] = Config.GEMINI_API_KEY
		values.update({k: v for k, v in overrides.items() if v is not None})
		return cls.build(**values)


def _describe_validation_error(error: ValidationError) -> str:
	messages = []
	for item in error.errors():
		msg = str(item.get("msg", ""))
		if msg.startswith("Value error, "):
			msg = msg[len("Value error, "):]
		field = ".".join(str(p) for p in item.get("loc", ()))
		if field and field not in msg:
			msg = f"{field}: {msg}"
		messages.append(msg)
	return "; ".join(messages) or str(error)
