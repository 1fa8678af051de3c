"""
Conversation Generation Pipeline

Produces a complete conversation document for a language and length tier:

1. choose two characters that differ in name and voice
2. generate the plaintext dialogue
3. concurrently generate comprehension questions and parse the dialogue
   into structured parts
4. narrate the structured parts and upload the audio
5. persist and return the assembled document

Any failing stage raises and nothing is persisted.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable, List, Optional, Sequence

from sqlalchemy.orm import Session

from . import generation, speech, store
from .errors import NotEnoughCharactersError, UpstreamError
from .languages import Language
from .openai_client import OpenAIClient
from .schemas import CharacterWithLanguageConfig, ConversationDocument, ConversationPart, ConversationType

logger = logging.getLogger(__name__)

AudioGenerator = Callable[[Sequence[CharacterWithLanguageConfig], Sequence[ConversationPart]], Awaitable[str]]


def choose_character_pair(candidates: Sequence[CharacterWithLanguageConfig]) -> List[CharacterWithLanguageConfig]:
	"""
	Pick two characters that share neither a name nor a voice.

	Args:
		candidates: All characters available for the language

	Returns:
		List[CharacterWithLanguageConfig]: the two chosen characters

	Raises:
		NotEnoughCharactersError: If no valid pair exists among ``candidates``
	"""
	firsts = list(candidates)
	random.shuffle(firsts)
	for first in firsts:
		partners = [
			c for c in candidates
			if c.name != first.name and c.language_config.voice != first.language_config.voice
		]
		if partners:
			return [first, random.choice(partners)]
	raise NotEnoughCharactersError("Need at least two characters with distinct names and voices")


async def generate_full_conversation(
	db: Session,
	client: OpenAIClient,
	language: Language,
	conversation_type: ConversationType,
	*,
	audio_generator: Optional[AudioGenerator] = None,
) -> ConversationDocument:
	logger.info("Generating a %s conversation in %s", conversation_type.param, language.readable)

	characters = choose_character_pair(store.get_characters_for_language(db, language))
	logger.info("Chose two characters for the conversation: %s and %s", characters[0].name, characters[1].name)

	plaintext = await generation.generate_plaintext_conversation(client, language, characters, conversation_type.turn_count)
	logger.debug("Generated plaintext conversation:\n%s", plaintext)

	questions, conversation = await asyncio.gather(
		generation.generate_questions(client, language, plaintext, conversation_type.question_count),
		generation.parse_conversation(client, plaintext),
	)
	if conversation is None:
		logger.error("Hit error parsing conversation into JSON")
		raise UpstreamError("Could not parse generated conversation")

	audio_generator = audio_generator or speech.generate_audio_for_conversation
	audio = await audio_generator(characters, conversation.parts)
	logger.info("Generated audio for conversation: %s", audio)

	document = ConversationDocument(
		characters=characters,
		parts=conversation.parts,
		questions=questions,
		audio=audio,
		location=conversation.location,
		title=conversation.title,
		language_code=language.code,
		length=conversation_type.param,
	)
	store.insert_conversation(db, document)
	return document
