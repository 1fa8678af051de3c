"""
Pydantic models shared by the generation pipeline, persistence layer and
HTTP routers.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, model_validator


class LanguageConfig(BaseModel):
	"""TTS configuration for a character: language code, voice and prosody."""
	language: str
	voice: str
	speed: str
	pitch: str


class Character(BaseModel):
	name: str
	gender: str
	age: int
	occupation: str


class CharacterWithLanguageConfig(Character):
	avatar_url: Optional[str] = None
	language_config: LanguageConfig


class ConversationPart(BaseModel):
	name: str
	text: str


class Conversation(BaseModel):
	"""Structured form of a generated plaintext conversation."""
	parts: List[ConversationPart]
	location: Optional[str] = None
	title: Optional[str] = None


class Answer(BaseModel):
	answer: str
	is_correct: bool


class Question(BaseModel):
	"""
	A comprehension question with its labelled answers.

	Exactly one answer must be marked correct. Model output sometimes uses
	the singular key ``answer`` for the list, so both spellings are accepted.
	"""
	question: str
	answers: List[Answer] = Field(validation_alias=AliasChoices("answers", "answer"))

	@model_validator(mode="after")
	def _exactly_one_correct(self) -> "Question":
		correct = sum(1 for a in self.answers if a.is_correct)
		if correct != 1:
			raise ValueError(f"question must have exactly one correct answer, got {correct}")
		return self


class ConversationDocument(BaseModel):
	characters: List[CharacterWithLanguageConfig]
	parts: List[ConversationPart]
	questions: List[Question]
	audio: Optional[str] = None
	location: Optional[str] = None
	title: Optional[str] = None
	language_code: str
	length: str


class CompressedConversation(BaseModel):
	id: str
	characters: List[CharacterWithLanguageConfig]
	location: Optional[str] = None
	title: Optional[str] = None
	language: str
	length: str
	audio: Optional[str] = None


class ChatMessage(BaseModel):
	role: str
	content: str


class LiveChatSetup(BaseModel):
	id: str
	character: CharacterWithLanguageConfig


class LiveChatRequest(BaseModel):
	id: str
	text: str


class LiveChatState(BaseModel):
	id: str
	messages: List[ChatMessage]


class ConversationType(BaseModel):
	param: str
	question_count: int
	turn_count: int


CONVERSATION_TYPES: List[ConversationType] = [
	ConversationType(param="short", question_count=3, turn_count=10),
	ConversationType(param="medium", question_count=5, turn_count=20),
	ConversationType(param="long", question_count=7, turn_count=30),
]


def get_conversation_type(param: Optional[str]) -> Optional[ConversationType]:
	for item in CONVERSATION_TYPES:
		if item.param == param:
			return item
	return None
