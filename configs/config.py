import os
from typing import Dict, Any

from dotenv import load_dotenv

# Local runs read secrets from .env; inside Actions the environment is already set
load_dotenv()


class Config:
	"""Process-level settings for the PR description action.

	Per-run inputs (mode, marker, budgets) live in `configs.inputs.ActionInputs`.
	"""

	# GitHub Configuration
	GITHUB_API_URL = os.getenv("GITHUB_API_URL", "https://api.github.com").rstrip('/')
	GITHUB_TOKEN = os.getenv("GITHUB_TOKEN") or os.getenv("GITHUB_PAT")
	GITHUB_USER_AGENT = os.getenv("GITHUB_USER_AGENT", "gemini-pr-description-action/1.0")
	HTTP_TIMEOUT_S = int(os.getenv("HTTP_TIMEOUT_S", "30"))
	GITHUB_MAX_PAGES = int(os.getenv("GITHUB_MAX_PAGES", "30"))

	# Gemini Configuration
	GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
	GEMINI_DEFAULT_MODEL = os.getenv("GEMINI_DEFAULT_MODEL", "gemini-3-flash")

	# AWS Bedrock Configuration
	AWS_REGION = os.getenv("AWS_REGION", "us-east-1")
	BEDROCK_MODEL_ID = os.getenv("BEDROCK_MODEL_ID", "anthropic.claude-3-sonnet-20240229-v1:0")

	# Generation retries
	GENERATION_MAX_ATTEMPTS = int(os.getenv("GENERATION_MAX_ATTEMPTS", "3"))
	GENERATION_BACKOFF_BASE_S = float(os.getenv("GENERATION_BACKOFF_BASE_S", "1.0"))

	# LangSmith Configuration
	LANGSMITH_API_KEY = os.getenv("LANGSMITH_API_KEY", "")
	LANGSMITH_PROJECT = os.getenv("LANGSMITH_PROJECT", "pr-description")
	LANGSMITH_ENDPOINT = os.getenv("LANGSMITH_ENDPOINT", "https://api.smith.langchain.com")

	# Workflow files provided by the Actions runner
	GITHUB_EVENT_PATH = os.getenv("GITHUB_EVENT_PATH", "")
	GITHUB_REPOSITORY = os.getenv("GITHUB_REPOSITORY", "")

	@classmethod
	def get_github_config(cls) -> Dict[str, Any]:
		"""Get GitHub configuration for the REST client."""
		return {
			"api_url": cls.GITHUB_API_URL,
			"token": cls.GITHUB_TOKEN,
			"timeout_s": cls.HTTP_TIMEOUT_S,
			"user_agent": cls.GITHUB_USER_AGENT,
			"max_pages": cls.GITHUB_MAX_PAGES,
		}

	@classmethod
	def get_gemini_config(cls) -> Dict[str, Any]:
		return {
			"api_key": cls.GEMINI_API_KEY,
			"model": cls.GEMINI_DEFAULT_MODEL,
		}

	@classmethod
	def get_bedrock_config(cls) -> Dict[str, Any]:
		"""Get Bedrock configuration."""
		return {
			"region_name": cls.AWS_REGION,
			"model_id": cls.BEDROCK_MODEL_ID
		}

	@classmethod
	def get_retry_config(cls) -> Dict[str, Any]:
		"""Get generator retry configuration.

		Returns:
			Mapping with max attempts and the backoff base in seconds.
		"""
		return {
			"max_attempts": cls.GENERATION_MAX_ATTEMPTS,
			"backoff_s": cls.GENERATION_BACKOFF_BASE_S,
		}

	@classmethod
	def get_langsmith_config(cls) -> Dict[str, Any]:
		"""Get LangSmith configuration."""
		return {
			"api_key": cls.LANGSMITH_API_KEY,
			"project": cls.LANGSMITH_PROJECT,
			"endpoint": cls.LANGSMITH_ENDPOINT
		}
