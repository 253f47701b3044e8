from __future__ import annotations
import json
from typing import Any, Dict, List, Tuple


FALLBACK_HINT = "Look carefully for style guide violations and grammar errors throughout the article."

STYLE_SUMMARY_SYSTEM = (
	"You are a style guide analyzer. Extract and summarize style rules from the provided style guide into concise, "
	"prescriptive bullet-style rules (300-600 words). Focus on actionable copy editing rules that can be used to "
	"identify errors in articles. Return your response as a JSON object with a 'summary' field containing the rules summary."
)

_ERROR_SCHEMA = (
	"{\n"
	'  "article": "full article text",\n'
	'  "errors": [\n'
	"    {\n"
	'      "id": "e1",\n'
	'      "error_type": "grammar | spelling | punctuation | style_guide | other",\n'
	'      "category": "short category like capitalization, comma, date_format, etc.",\n'
	'      "rule_description": "Short description of the rule being broken",\n'
	'      "original_text": "exact substring containing the error, exactly as in article",\n'
	'      "suggested_correction": "corrected version of that substring",\n'
	'      "explanation": "1-3 sentences explaining the rule and fix"\n'
	"    }\n"
	"  ]\n"
	"}"
)

_ERROR_TYPES = (
	"Error types:\n"
	"- Grammar errors (subject-verb agreement, tense consistency, etc.)\n"
	"- Spelling errors\n"
	"- Punctuation errors\n"
	"- Style guide violations (based on the provided style guide rules)\n"
	"- Other common copy editing issues\n"
)


def style_summary_prompts(text: str) -> Tuple[str, str]:
	user = f"Please analyze this style guide and create a concise summary of its rules:\n\n{text}"
	return STYLE_SUMMARY_SYSTEM, user


def generate_article_prompts(
	rules_summary: str,
	*,
	target_words: int,
	subject: str,
	tone: str,
	difficulty: str,
	num_errors: int,
) -> Tuple[str, str]:
	system = (
		"You are an article generator for a copy editing practice game. Generate a realistic article with "
		"intentional errors that violate both general grammar rules and the provided style guide rules.\n\n"
		"Requirements:\n"
		f"- Article length: approximately {target_words} words (target under 1000 words)\n"
		f"- Subject: {subject}\n"
		f"- Tone/Style: {tone}\n"
		f"- Difficulty: {difficulty}\n"
		f"- Number of errors: {num_errors}\n\n"
		f"{_ERROR_TYPES}\n"
		f"Return a JSON object with this exact structure:\n{_ERROR_SCHEMA}\n\n"
		"Make sure each error's original_text appears exactly as written in the article."
	)
	user = f"Style Guide Rules Summary:\n{rules_summary}\n\nGenerate the article with {num_errors} errors as specified."
	return system, user


def analyze_article_prompts(rules_summary: str, article: str) -> Tuple[str, str]:
	system = (
		"You are a copy editor reviewing an article for a copy editing practice game. Find every error in the "
		"article that violates general grammar rules or the provided style guide rules. Do not rewrite the article.\n\n"
		f"{_ERROR_TYPES}\n"
		f"Return a JSON object with this exact structure, with \"article\" set to the article exactly as given:\n{_ERROR_SCHEMA}\n\n"
		"Make sure each error's original_text appears exactly as written in the article. "
		"Keep original_text as short as possible while still unique to the error."
	)
	user = f"Style Guide Rules Summary:\n{rules_summary}\n\nArticle:\n{article}\n\nList the errors in this article."
	return system, user


EVALUATION_SYSTEM = """You are a copy editing evaluator. Compare the original article (with errors) against the user's edited version and the answer key. Determine which errors from the answer key have been fixed and which remain.

CRITICAL EVALUATION RULES:
1. An error is considered FIXED if:
   - The incorrect text from the answer key is no longer present in the edited article
   - The user's correction addresses the same issue, even if worded differently
   - The user's correction is grammatically correct and follows the style guide rules
   - The user fixed the error in a different but equally valid way

2. An error is considered NOT FIXED if:
   - The original incorrect text still appears in the edited article
   - The error was partially fixed but still incorrect
   - The user introduced a different error in the same location

3. Be GENEROUS with scoring - if the user fixed the error correctly (even if not exactly matching the suggested correction), mark it as fixed.

4. Count the "foundErrors" by counting how many errors in the answer key have "fixed": true.

5. Do NOT penalize for alternative correct fixes - if the user's solution is correct, it counts as fixed.

Return JSON with this exact structure:
{
  "score": {
    "foundErrors": number of errors fixed (count of perError items with fixed: true),
    "totalErrors": total number of errors in answer key,
    "percentage": percentage score (0-100)
  },
  "perError": [
    {
      "id": "e1",
      "fixed": true or false,
      "comment": "Short explanation of why this is correct/incorrect. Be specific about what was fixed or what remains wrong."
    }
  ],
  "overallFeedback": "2-5 sentences of high-level feedback about the user's editing performance"
}"""


def evaluation_prompts(
	rules_summary: str,
	article: str,
	answer_key: List[Dict[str, Any]],
	edited_article: str,
) -> Tuple[str, str]:
	user = (
		f"Style Guide Rules Summary:\n{rules_summary}\n\n"
		f"Original Article (with errors):\n{article}\n\n"
		f"Answer Key (errors that should be fixed):\n{json.dumps(answer_key, indent=2)}\n\n"
		f"User's Edited Article:\n{edited_article}\n\n"
		"Evaluate the user's edits and provide scoring."
	)
	return EVALUATION_SYSTEM, user


HINT_SYSTEM = """You are a hint generator for a copy editing practice game. Generate a helpful hint that points the user toward one of the remaining errors without revealing the exact solution.

The hint should:
- Reference the type of error and approximate location
- Not reveal the exact wording or direct solution
- Be encouraging and educational
- Point to a specific error from the answer key

Example hints:
- "Check the way the date is formatted in the first paragraph."
- "Look at capitalization of job titles in the second paragraph."
- "Review comma usage in the list near the end of the article."

Return JSON with this structure:
{
  "hint": "your hint text here"
}"""


def hint_prompts(rules_summary: str, article: str, metadata: List[Dict[str, Any]]) -> Tuple[str, str]:
	user = (
		f"Style Guide Rules Summary:\n{rules_summary}\n\n"
		f"Article:\n{article}\n\n"
		f"Answer Key (errors to find):\n{json.dumps(metadata, indent=2)}\n\n"
		"Generate a helpful hint about one of the errors."
	)
	return HINT_SYSTEM, user
