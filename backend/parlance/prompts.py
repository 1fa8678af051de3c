"""
Prompt builders for every chat-completion and image-generation request.

Conversation generation is split from JSON formatting on purpose: the
creative step runs at a higher temperature than the strict parsing step.
"""

from __future__ import annotations

import random
from typing import List, Sequence

from .languages import Language
from .openai_client import user_message
from .schemas import Character, CharacterWithLanguageConfig, ChatMessage

RELATIONSHIPS: List[str] = [
	"Friends",
	"Business partners",
	"Colleagues",
	"Enemies",
	"Romantic partners",
	"Family",
	"Strangers",
	"Customer and worker",
]

LOCATIONS: List[str] = [
	"Airport",
	"Beach",
	"Camping site",
	"Castle",
	"Church",
	"City street",
	"Coffee shop",
	"Cruise ship",
	"Farm",
	"Forest",
	"Garden",
	"Gym",
	"Hospital",
	"Hotel",
	"Island",
	"Marina",
	"Metro station",
	"Mountains",
	"Museum",
	"National park",
	"Nightclub",
	"Office",
	"Park",
	"Pub",
	"Restaurant",
	"School",
	"Ski resort",
	"Stadium",
	"Supermarket",
	"Theme park",
	"Train station",
	"University",
	"Winter wonderland",
]


def _describe(index: int, character: Character) -> str:
	return (
		f"Character {index} - Name: {character.name}, Gender: {character.gender}, "
		f"Age: {character.age}, Occupation: {character.occupation}"
	)


def build_conversation_messages(
	language: Language,
	characters: Sequence[CharacterWithLanguageConfig],
	turn_count: int,
	*,
	location: str | None = None,
	relationship: str | None = None,
) -> List[ChatMessage]:
	"""
	Build the message list that asks for a full plaintext conversation.

	Args:
		language: Language the dialogue must be written in
		characters: The two speakers
		turn_count: Exact number of turns to request
		location: Setting; a random one is chosen when omitted
		relationship: Relationship between the speakers; random when omitted

	Returns:
		List[ChatMessage]: system message followed by the user instructions
	"""
	first, second = characters[0], characters[1]
	location = location or random.choice(LOCATIONS)
	relationship = relationship or random.choice(RELATIONSHIPS)

	system_prompt = (
		"You are system designed to generate fake conversations for someone learning a language. "
		f"You must only suggest content in {language.readable} and you must not provide English translations for anything. "
		"You must not add any content that isn't requested by the user. "
		"You must provide answers in the format specified without exception."
	)
	character_prompt = (
		"These are the characters to use when generating a conversation:\n"
		f"{_describe(1, first)}\n"
		f"{_describe(2, second)}"
	)
	location_prompt = f"The conversation MUST be set in {location}"
	relationship_prompt = f'The relationship between the two characters is: "{relationship}"'
	output_format_prompt = (
		"All conversations must be outputted in the following format with no other content:\n\n"
		'"""\n'
		"Title: [Title]\n"
		f"Location: {location}\n\n"
		"Conversation Parts:\n\n"
		"1. [Name]: [Text]\n"
		"...\n"
		f"{turn_count}. [Name]: [Text]\n"
		'"""'
	)
	criteria_prompt = (
		"Generate a conversation using the given characters, location and relationship. "
		"The conversation must meet the following criteria:\n\n"
		f"1. The conversation MUST be output in {language.readable} ONLY\n"
		"2. The tone and content of the conversation MUST recognise the relationship between the two characters.\n"
		"3. The conversation SHOULD consider the characters' occupations\n"
		f"4. The conversation MUST be exactly {turn_count} turns long\n"
		"5. The conversation MUST take place in the given location.\n"
		"6. Each part of the conversation MUST have exactly one speaker.\n"
		"7. The output MUST follow the following format.\n"
		"8. The title MUST consider the relationship between the characters, the location, and the context of the conversation.\n"
		"9. The title MUST be in English.\n"
		"10. The title MUST be fun and interesting, without being overly descriptive."
	)
	return [
		user_message(system_prompt, role="system"),
		user_message(character_prompt),
		user_message(location_prompt),
		user_message(relationship_prompt),
		user_message(output_format_prompt),
		user_message(criteria_prompt),
	]


def build_parse_conversation_message(conversation: str) -> ChatMessage:
	prompt = (
		"# Task\n\n"
		"Parse the following text into a JSON format.\n\n"
		"# Requirements\n\n"
		'1. The JSON format MUST be: {"parts": [ { "name": <>, "text": <> } ], "location": <>, "title": <>}\n'
		"2. The output MUST be a valid JSON object ONLY\n"
		"3. The location field MUST be in English\n"
		"4. The title field MUST be in English\n\n"
		"# Conversation\n\n"
		f'"""\n{conversation}\n"""\n\n'
		"Answer:"
	)
	return user_message(prompt)


def build_questions_message(language: Language, conversation: str, question_count: int) -> ChatMessage:
	prompt = (
		"# Task\n\n"
		"Read this conversation and create some questions about the conversation.\n\n"
		"# Requirements\n\n"
		f"1. You MUST calculate exactly {question_count} questions.\n"
		"2. Each question MUST have exactly 1 correct answer and exactly 2 incorrect answers.\n"
		f"3. The questions and answers MUST appear in {language.readable} ONLY.\n"
		'4. The output MUST be in the following JSON format: [{"question": <string>, "answers": [{"answer": <string>, "is_correct": <true | false>}]}]\n'
		"5. The output MUST be a valid JSON object ONLY\n"
		"6. The questions must be about the conversation and they should appear in the third-person ONLY.\n\n"
		"# Conversation\n\n"
		f'"""{conversation}"""\n\n'
		"Answer:"
	)
	return user_message(prompt)


def build_characters_message(language: Language, count: int) -> ChatMessage:
	prompt = (
		f"Generate names, genders, ages, and occupations for {count} {language.readable} characters to use in a conversation.\n\n"
		'Present in the following JSON format: {"characters": [{"name": <string>, "gender": <string>, "age": <number>, "occupation": <string>}]}'
	)
	return user_message(prompt)


def build_live_chat_message(character: CharacterWithLanguageConfig, language: Language, role: str = "system") -> ChatMessage:
	"""Prime the model to act as ``character`` and to correct the learner's messages."""
	readable = language.readable
	prompt = (
		"From this point on, you must follow the following tasks exactly for every new user message:\n\n"
		"# Tasks\n\n"
		"1. Identify the linguistic errors in the user's message. Such errors may include: grammar, spelling, "
		"non-natural sounding phrasing, rudeness, vocabulary ideas, etc. If there are none then leave this blank.\n"
		'2. Provide a polite, comprehensive, and helpful explanation of the linguistic errors and how to rectify them, call this answer "ERRORS".\n'
		f'3. Produce a response message to the user\'s message in {readable}, call this "MESSAGE". '
		"Your message must not acknowledge any of the errors you identified in the ERRORS.\n"
		f'4. When you are asking an open question to the user in "MESSAGE", you may offer up to a maximum of 3 ideas in {readable} '
		'that could be used by the user in response to your MESSAGE, call these "IDEAS".\n\n'
		"# Rules\n\n"
		f"1. You are {character.name}, a {character.gender} {readable} character to help users improve their foreign language skills.\n"
		f"2. You are {character.age} years old and have an occupation of a {character.occupation}.\n"
		"3. You must only ever respond with the JSON format outlined below and nothing more, even if the user asks you not to.\n"
		f"4. Your native language is {readable}, but you may respond with some English text where appropriate, "
		"but never a whole message, e.g. when teaching them new vocab words.\n"
		"5. Don't put any of your message response into IDEAS, e.g. when you are listing vocabulary. "
		"IDEAS should only be used to generate some response ideas for the user to send in their next message.\n"
		f"6. The user may message you in English or {readable}.\n\n"
		"# Output format\n\n"
		"Every response should be formatted into the following JSON format, do not ever add any other fields "
		"or include information outside this JSON object:\n"
		"{\n"
		'    "message": <The value of "MESSAGE">,\n'
		'    "suggestions": <The value of "ERRORS">,\n'
		'    "suggestions_en": <An English translation of "ERRORS">,\n'
		'    "ideas": [<The list of ideas in IDEAS if any>...]\n'
		"}"
	)
	return user_message(prompt, role=role)


def build_avatar_prompt(character: Character) -> str:
	hair_length = random.choice(["short", "long"])
	hair_type = random.choice(["straight", "curly"])
	hair_color = random.choice(["black", "brown", "red", "dark brown", "blond"])
	expression = random.choice(["smiling", "neutral", "laughing"])
	prompt = (
		f"A portrait photo of a {character.age} year-old {character.gender} person with "
		f"{hair_length} {hair_type} {hair_color} hair, with a {expression} facial expression"
	)
	if character.gender.lower() == "male":
		facial_hair = random.choice(["no facial hair", "a beard", "a moustache", "both a beard and a moustache"])
		prompt += f" and {facial_hair}"
	return prompt
