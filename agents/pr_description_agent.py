#!/usr/bin/env python3
"""PR description agent.

Fetches pull request context, asks the configured text generator for a
description and merges it into the PR body according to the update mode.
"""

import json
import logging
import sys
from typing import Optional, Tuple

from clients.base import TextGenerator, build_generator
from configs.config import Config
from configs.inputs import ActionInputs
from utils import action_io
from utils.errors import ActionError, ConfigurationError, PersistError
from utils.github_client import GithubApiError, GithubClient
from utils.pr_fetcher import PRFetcher, context_from_event
from utils.pr_models import GenerationResult, PRContext
from utils.prompt_builder import build_user_prompt, get_system_prompt
from utils.update_policy import apply_update_mode, should_generate

# Set up logging
logger = logging.getLogger(__name__)

PRRef = Tuple[str, str, int]


class PRDescriptionAgent:
	"""Runs one fetch → decide → generate → splice → persist pass for a single PR."""

	def __init__(
		self,
		inputs: ActionInputs,
		*,
		fetcher: Optional[PRFetcher] = None,
		generator: Optional[TextGenerator] = None,
	):
		"""Initialize the agent.

		Building the generator validates provider settings (API key, model)
		before any network call is made.

		Args:
			inputs: Validated action inputs
			fetcher: Optional PRFetcher. If None, one is built on a GithubClient.
			generator: Optional text generator. If None, built from inputs.provider.
		"""
		self.inputs = inputs
		self.generator = generator or build_generator(inputs)
		self.fetcher = fetcher or PRFetcher(GithubClient(token=inputs.github_token))
		logger.debug(f"Using model: {self.model}")
		logger.debug(f"Update mode: {inputs.update_mode.value}")

	@property
	def model(self) -> str:
		return getattr(self.generator, "model", None) or self.inputs.resolved_model

	def load_context(self, pr_ref: Optional[PRRef] = None) -> PRContext:
		"""Fetch the PR, using the event payload only to locate it.

		The body is always read from the API so a re-run sees the latest edit.
		"""
		if pr_ref is None:
			event_pr = context_from_event()
			pr_ref = (event_pr.owner, event_pr.repo, event_pr.pull_number)
		owner, repo, number = pr_ref
		return self.fetcher.get_pr_context(owner, repo, number)

	def generate(self, pr: PRContext) -> str:
		diff = self.fetcher.fetch_diff(pr, self.inputs.max_diff_size, self.inputs.exclude_patterns)
		logger.info(f"📊 Found {len(diff.files)} changed files, {len(diff.commits)} commits")
		logger.info(f"   +{diff.total_additions} additions, -{diff.total_deletions} deletions")

		system_prompt = get_system_prompt(self.inputs.system_prompt, self.inputs.language)
		user_prompt, meta = build_user_prompt(
			pr,
			diff,
			custom_instructions=self.inputs.custom_instructions,
			include_file_changes=self.inputs.include_file_changes,
			include_commit_messages=self.inputs.include_commit_messages,
		)
		logger.debug(f"System prompt length: {len(system_prompt)}")
		logger.debug(f"User prompt meta: {json.dumps(meta)}")

		logger.info(f"Generating PR description with {self.model}...")
		text = self.generator.generate(system_prompt, user_prompt)
		logger.info(f"Generated description: {len(text)} characters")
		return text

	def persist(self, pr: PRContext, description: str) -> None:
		try:
			self.fetcher.client.update_pull_request_body(pr.owner, pr.repo, pr.pull_number, description)
		except GithubApiError as e:
			raise PersistError(
				f"Failed to update description of {pr.full_name}#{pr.pull_number}: {e}",
				code=getattr(e, "code", "UNKNOWN"),
				cause=e,
			) from e
		logger.info(f"Successfully updated PR #{pr.pull_number} description")

	def run(self, pr_ref: Optional[PRRef] = None, *, dry_run: bool = False) -> GenerationResult:
		"""Process one pull request.

		Raises:
			ActionError: on any fatal error; nothing is written unless every
				earlier step succeeded.
		"""
		pr = self.load_context(pr_ref)
		logger.info(f"Processing PR #{pr.pull_number}: {pr.title}")

		decision = should_generate(pr.current_description, self.inputs.update_mode)
		if not decision.generate:
			logger.info(f"⏭️ Skipping generation: {decision.reason}")
			return GenerationResult(
				description=pr.current_description,
				generated=False,
				model=self.model,
				reason=decision.reason,
			)
		logger.info(f"📝 {decision.reason}")

		generated_text = self.generate(pr)
		final_description = apply_update_mode(
			pr.current_description,
			generated_text,
			self.inputs.update_mode,
			self.inputs.generation_marker,
		)

		if dry_run:
			logger.info("Dry run: PR description not updated")
		else:
			self.persist(pr, final_description)

		return GenerationResult(
			description=final_description,
			generated=True,
			model=self.model,
			reason=decision.reason,
		)

	def close(self) -> None:
		"""Close the agent and cleanup resources."""
		self.fetcher.close()


def _pr_ref_from_args(args) -> Optional[PRRef]:
	given = [args.owner, args.repo, args.pr]
	if not any(v is not None for v in given):
		return None
	if not all(v is not None for v in given):
		raise ConfigurationError("--owner, --repo and --pr must be given together")
	return args.owner, args.repo, int(args.pr)


def main():
	"""CLI entry point; inside GitHub Actions inputs come from INPUT_* variables."""
	import argparse

	parser = argparse.ArgumentParser(
		description="Generate a pull request description with an LLM and merge it into the PR body",
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  python -m agents.pr_description_agent                      # inside a pull_request workflow
  python -m agents.pr_description_agent --owner o --repo r --pr 12 --dry-run
  python -m agents.pr_description_agent --owner o --repo r --pr 12 --update-mode replace
		"""
	)
	parser.add_argument("--owner", required=False, help="Repository owner (defaults to the event payload)")
	parser.add_argument("--repo", required=False, help="Repository name")
	parser.add_argument("--pr", type=int, required=False, help="Pull request number")
	parser.add_argument("--update-mode", dest="update_mode", required=False, help="Override the update_mode input")
	parser.add_argument("--model", required=False, help="Override the model input")
	parser.add_argument("--provider", required=False, help="Override the provider input (gemini, bedrock)")
	parser.add_argument("--dry-run", action="store_true", help="Generate and print, but do not update the PR")
	parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

	args = parser.parse_args()

	# Set up logging
	log_level = logging.DEBUG if args.verbose else logging.INFO
	logging.basicConfig(
		level=log_level,
		format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
	)

	# Suppress verbose logs from libraries unless in debug mode
	if not args.verbose:
		logging.getLogger("utils.github_client").setLevel(logging.WARNING)
		logging.getLogger("urllib3").setLevel(logging.WARNING)
		logging.getLogger("httpx").setLevel(logging.WARNING)

	if Config.get_langsmith_config()["api_key"]:
		logger.debug(f"LangSmith tracing project: {Config.LANGSMITH_PROJECT}")

	agent = None
	try:
		logger.info("🚀 Starting PR description action")
		pr_ref = _pr_ref_from_args(args)
		inputs = ActionInputs.from_env(
			update_mode=args.update_mode,
			model=args.model,
			provider=args.provider,
		)
		agent = PRDescriptionAgent(inputs)
		result = agent.run(pr_ref, dry_run=args.dry_run)

		action_io.write_result(result)
		if result.generated and not args.dry_run:
			logger.info("✅ PR description updated successfully!")
		if args.dry_run:
			print(result.description)
		sys.exit(0)

	except ActionError as e:
		action_io.error(f"❌ Action failed: {e}")
		if args.verbose:
			logger.exception("Detailed error information:")
		sys.exit(1)

	except KeyboardInterrupt:
		print("\nOperation cancelled by user", file=sys.stderr)
		sys.exit(1)

	except Exception as e:
		# Unexpected error
		action_io.error(f"❌ Action failed: {e}")
		if args.verbose:
			logger.exception("Detailed error information:")
		else:
			print("Use --verbose for more details", file=sys.stderr)
		sys.exit(1)

	finally:
		if agent:
			agent.close()


if __name__ == "__main__":
	main()
