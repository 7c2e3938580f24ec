#!/usr/bin/env python3
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from utils.diff_models import PRDiff
from utils.pr_models import PRContext


DEFAULT_SYSTEM_PROMPT = """You are an expert software engineer helping generate clear, comprehensive pull request descriptions.

Your task is to analyze the provided code changes and generate a well-structured PR description.

## Output Format

Generate a PR description with the following sections:

### Summary
A concise 2-3 sentence summary of what this PR does and why.

### Changes Made
A bullet-point list of the specific changes made in this PR:
- Group related changes together
- Be specific about what was added, modified, or removed
- Reference file names when helpful

### Type of Change
Indicate the type(s) of change (check all that apply):
- [ ] Bug fix (non-breaking change that fixes an issue)
- [ ] New feature (non-breaking change that adds functionality)
- [ ] Breaking change (fix or feature that would cause existing functionality to not work as expected)
- [ ] Refactoring (code change that neither fixes a bug nor adds a feature)
- [ ] Documentation update
- [ ] Performance improvement
- [ ] Test update

### Testing
Describe how these changes can be tested or verified.

### Additional Notes
Any additional context, screenshots, or information reviewers should know.

## Guidelines
- Be concise but comprehensive
- Use technical terms appropriately
- Focus on WHAT changed and WHY, not HOW (the code shows how)
- If the changes are trivial, keep the description brief
- If breaking changes exist, clearly highlight them
- Use markdown formatting for readability"""

LANGUAGE_INSTRUCTIONS: Dict[str, str] = {
	"en": "Write the description in English.",
	"es": "Escribe la descripción en español.",
	"fr": "Rédigez la description en français.",
	"de": "Schreiben Sie die Beschreibung auf Deutsch.",
	"ja": "説明を日本語で書いてください。",
	"zh": "请用中文写描述。",
	"ko": "설명을 한국어로 작성하세요.",
	"pt": "Escreva a descrição em português.",
	"it": "Scrivi la descrizione in italiano.",
	"ru": "Напишите описание на русском языке.",
}

CLOSING_REQUEST = "Please generate a comprehensive PR description based on the above information."


def get_system_prompt(custom_prompt: Optional[str] = None, language: Optional[str] = None) -> str:
	"""Return the system prompt, with a language instruction for non-English output."""
	base = (custom_prompt or "").strip() or DEFAULT_SYSTEM_PROMPT
	if language and language != "en" and language in LANGUAGE_INSTRUCTIONS:
		return f"{base}\n\n{LANGUAGE_INSTRUCTIONS[language]}"
	return base


def _commit_lines(diff: PRDiff) -> List[str]:
	return [f"- `{c.short_sha}` {c.first_line} ({c.author})" for c in diff.commits]


def _file_lines(diff: PRDiff) -> List[str]:
	return [
		f"- **{f.status}**: `{f.filename}` (+{f.additions} -{f.deletions})"
		for f in diff.files
	]


def build_user_prompt(
	pr: PRContext,
	diff: PRDiff,
	*,
	custom_instructions: str = "",
	include_file_changes: bool = True,
	include_commit_messages: bool = True,
) -> Tuple[str, Dict[str, Any]]:
	"""Build the user prompt describing the PR.

	Returns the prompt text and meta info for logging.
	"""
	parts: List[str] = [
		f"# Pull Request: {pr.title}",
		f"**Base Branch:** {pr.base_branch}",
		f"**Head Branch:** {pr.head_branch}",
		f"**Total Changes:** +{diff.total_additions} -{diff.total_deletions}",
		"",
	]

	existing = pr.current_description.strip()
	if existing:
		parts += ["## Existing Description", existing, ""]

	if include_commit_messages and diff.commits:
		parts += ["## Commits", *_commit_lines(diff), ""]

	with_patches = []
	if include_file_changes and diff.files:
		parts += ["## Changed Files", *_file_lines(diff), ""]
		with_patches = [f for f in diff.files if f.patch]
		if with_patches:
			parts.append("## Code Changes")
			for f in with_patches:
				parts += [f"### {f.filename}", "```diff", f.patch or "", "```", ""]

	if custom_instructions and custom_instructions.strip():
		parts += ["## Additional Instructions", custom_instructions.strip(), ""]

	parts += ["---", CLOSING_REQUEST]
	prompt = "\n".join(parts)

	meta = {
		"repo": pr.full_name,
		"pr": pr.pull_number,
		"files": len(diff.files),
		"files_with_patch": len(with_patches),
		"commits": len(diff.commits),
		"truncated": diff.truncated,
		"prompt_len": len(prompt),
	}
	return prompt, meta
