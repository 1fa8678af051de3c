"""
AI content generation: conversations, questions, characters and avatars.

Each function makes exactly one upstream call. Transport failures propagate
as ``UpstreamError``; output that cannot be parsed into the expected shape
is logged and replaced with an empty result.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, List, Optional, Sequence

from pydantic import ValidationError

from . import openai_client as params
from . import prompts
from .languages import Language
from .openai_client import OpenAIClient
from .schemas import Character, CharacterWithLanguageConfig, Conversation, Question

logger = logging.getLogger(__name__)


def extract_json(text: str) -> Optional[Any]:
	"""
	Extract a JSON value from LLM response text.

	Handles raw JSON, JSON wrapped in markdown code blocks, and a JSON
	object or array embedded in other text.

	Returns:
		The parsed value, or None if nothing parseable was found
	"""
	try:
		return json.loads(text)
	except ValueError:
		pass

	code_block = re.search(r"```(?:json)?\s*([\s\S]*?)\s*```", text)
	if code_block:
		try:
			return json.loads(code_block.group(1))
		except ValueError:
			pass

	# Try whichever bracket opens first so a list of objects stays a list
	candidates = sorted(
		(text.find(opener), opener, closer)
		for opener, closer in (("{", "}"), ("[", "]"))
		if text.find(opener) != -1
	)
	for first, opener, closer in candidates:
		last = text.rfind(closer)
		if last > first:
			try:
				return json.loads(text[first : last + 1])
			except ValueError:
				continue
	return None


async def generate_plaintext_conversation(
	client: OpenAIClient,
	language: Language,
	characters: Sequence[CharacterWithLanguageConfig],
	turn_count: int,
) -> str:
	messages = prompts.build_conversation_messages(language, characters, turn_count)
	response = await client.chat(params.GENERATE_CONVERSATION, messages)
	return response.content


async def parse_conversation(client: OpenAIClient, conversation: str) -> Optional[Conversation]:
	response = await client.chat(params.PARSE_CONVERSATION, [prompts.build_parse_conversation_message(conversation)])
	data = extract_json(response.content)
	if not isinstance(data, dict):
		logger.warning("Failed to parse conversation JSON from response")
		return None
	try:
		return Conversation.model_validate(data)
	except ValidationError as err:
		logger.warning("Parsed conversation had an unexpected shape: %s", err)
		return None


async def generate_questions(
	client: OpenAIClient,
	language: Language,
	conversation: str,
	question_count: int,
) -> List[Question]:
	message = prompts.build_questions_message(language, conversation, question_count)
	response = await client.chat(params.GENERATE_QUESTIONS, [message])
	data = extract_json(response.content)
	# Some responses wrap the list, e.g. {"questions": [...]}
	if isinstance(data, dict) and isinstance(data.get("questions"), list):
		data = data["questions"]
	if not isinstance(data, list):
		logger.warning("Failed to parse questions JSON from response")
		return []

	questions: List[Question] = []
	for item in data:
		try:
			questions.append(Question.model_validate(item))
		except ValidationError as err:
			logger.warning("Dropping malformed question: %s", err)
	if len(questions) != question_count:
		logger.info("Requested %d questions, kept %d", question_count, len(questions))
	return questions


async def generate_characters(client: OpenAIClient, language: Language, count: int = 2) -> List[Character]:
	response = await client.chat(params.GENERATE_CHARACTER, [prompts.build_characters_message(language, count)])
	data = extract_json(response.content)
	if not isinstance(data, dict) or not isinstance(data.get("characters"), list):
		logger.warning("Failed to parse characters JSON from response")
		return []
	try:
		return [Character.model_validate(c) for c in data["characters"]]
	except ValidationError as err:
		logger.warning("Generated characters had an unexpected shape: %s", err)
		return []


async def generate_avatar(client: OpenAIClient, character: Character) -> str:
	"""Return a temporary URL to a generated 256x256 portrait of ``character``."""
	return await client.create_image(prompts.build_avatar_prompt(character), size="256x256")
