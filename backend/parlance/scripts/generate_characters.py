"""
Seed the database with generated characters for one language.

Each character gets a TTS voice matching its gender, random prosody, and a
generated avatar copied into blob storage before it is inserted.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import List, Optional

import asyncclick as click

from .. import generation, storage, store
from ..db import SessionLocal, init_db, session_scope
from ..languages import LANGUAGES, Language, get_language
from ..logging_setup import configure_logging
from ..openai_client import OpenAIClient
from ..schemas import Character, CharacterWithLanguageConfig, LanguageConfig
from ..settings import settings

logger = logging.getLogger(__name__)

PITCHES: List[str] = ["-15%", "-10%", "-5%", "0%", "+5%", "+10%"]
SPEEDS: List[str] = ["-15%", "-10%", "-5%", "0%", "+5%", "+10%", "+15%", "+20%"]


def add_tts_config(character: Character, language: Language) -> CharacterWithLanguageConfig:
	"""Attach a random voice and prosody; raises ValueError for an unsupported gender."""
	return CharacterWithLanguageConfig(
		**character.model_dump(),
		avatar_url=None,
		language_config=LanguageConfig(
			language=language.code,
			voice=language.random_voice_for_gender(character.gender),
			pitch=random.choice(PITCHES),
			speed=random.choice(SPEEDS),
		),
	)


async def finalise_character(client: OpenAIClient, character: Character, language: Language) -> Optional[CharacterWithLanguageConfig]:
	try:
		finalised = add_tts_config(character, language)
	except ValueError as e:
		logger.warning("Skipping %s: %s", character.name, e)
		return None
	url = await generation.generate_avatar(client, character)
	finalised.avatar_url = await storage.upload_image_at_url(url)
	return finalised


async def seed_characters(client: OpenAIClient, language: Language, count: int) -> List[CharacterWithLanguageConfig]:
	characters = await generation.generate_characters(client, language, count)
	logger.info("Generated characters: %s", [c.name for c in characters])
	finalised = await asyncio.gather(*(finalise_character(client, c, language) for c in characters))
	kept = [c for c in finalised if c is not None]

	with session_scope(SessionLocal) as db:
		for character in kept:
			store.insert_character(db, character)
	return kept


@click.command()
@click.option(
	"--language",
	"language_code",
	type=click.Choice([lang.code for lang in LANGUAGES]),
	default="pt-PT",
	show_default=True,
	help="Language code of the characters to generate",
)
@click.option("--count", type=click.IntRange(min=1), default=5, show_default=True, help="Number of characters to generate")
async def main(language_code: str, count: int):
	"""Generate characters with voices and avatars and store them."""
	configure_logging(settings.log_level)
	init_db()
	language = get_language(language_code)
	async with OpenAIClient() as client:
		characters = await seed_characters(client, language, count)
	click.echo(f"Added {len(characters)} {language.readable} characters")


if __name__ == "__main__":
	main()
