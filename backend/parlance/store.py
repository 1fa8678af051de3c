from __future__ import annotations
import json
import logging
import random
import uuid
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from .languages import Language
from .models import CharacterRecord, ConversationRecord
from .schemas import (
	CharacterWithLanguageConfig,
	CompressedConversation,
	ConversationDocument,
	ConversationPart,
	LanguageConfig,
	Question,
)

logger = logging.getLogger(__name__)


def _character_from_row(row: CharacterRecord) -> CharacterWithLanguageConfig:
	return CharacterWithLanguageConfig(
		name=row.name,
		gender=row.gender,
		age=row.age,
		occupation=row.occupation,
		avatar_url=row.avatar_url,
		language_config=LanguageConfig.model_validate_json(row.language_config_json),
	)


def _characters_from_json(raw: str) -> List[CharacterWithLanguageConfig]:
	return [CharacterWithLanguageConfig.model_validate(c) for c in json.loads(raw)]


def _document_from_row(row: ConversationRecord) -> ConversationDocument:
	return ConversationDocument(
		characters=_characters_from_json(row.characters_json),
		parts=[ConversationPart.model_validate(p) for p in json.loads(row.parts_json)],
		questions=[Question.model_validate(q) for q in json.loads(row.questions_json)],
		audio=row.audio,
		location=row.location,
		title=row.title,
		language_code=row.language_code,
		length=row.length,
	)


def insert_character(db: Session, character: CharacterWithLanguageConfig) -> str:
	logger.info("Adding %s to the database", character.name)
	row = CharacterRecord(
		id=uuid.uuid4().hex,
		name=character.name,
		gender=character.gender,
		age=character.age,
		occupation=character.occupation,
		avatar_url=character.avatar_url,
		language=character.language_config.language,
		language_config_json=character.language_config.model_dump_json(),
	)
	db.add(row)
	db.commit()
	logger.info("Successfully added %s to the database", character.name)
	return row.id


def get_characters_for_language(db: Session, language: Language) -> List[CharacterWithLanguageConfig]:
	rows = db.query(CharacterRecord).filter(CharacterRecord.language == language.code).all()
	return [_character_from_row(r) for r in rows]


def get_random_character(db: Session, language: Language) -> Optional[CharacterWithLanguageConfig]:
	logger.info("Get random character from database for language: %s", language.readable)
	characters = get_characters_for_language(db, language)
	if not characters:
		return None
	return random.choice(characters)


def insert_conversation(db: Session, document: ConversationDocument) -> str:
	names = " and ".join(c.name for c in document.characters)
	logger.info("Adding conversation between %s to the database", names)
	row = ConversationRecord(
		id=uuid.uuid4().hex,
		title=document.title,
		location=document.location,
		language_code=document.language_code,
		length=document.length,
		audio=document.audio,
		characters_json=json.dumps([c.model_dump() for c in document.characters]),
		parts_json=json.dumps([p.model_dump() for p in document.parts]),
		questions_json=json.dumps([q.model_dump() for q in document.questions]),
	)
	db.add(row)
	db.commit()
	logger.info("Successfully added conversation %s between %s", row.id, names)
	return row.id


def get_random_conversation_id(db: Session) -> Optional[str]:
	row = db.query(ConversationRecord.id).order_by(func.random()).first()
	return row[0] if row else None


def get_conversation(db: Session, conversation_id: str) -> Optional[ConversationDocument]:
	logger.info("Get conversation from database with id: %s", conversation_id)
	row = db.get(ConversationRecord, conversation_id)
	if row is None:
		return None
	return _document_from_row(row)


def list_conversations(db: Session) -> List[CompressedConversation]:
	rows = db.query(ConversationRecord).order_by(ConversationRecord.created_at).all()
	return [
		CompressedConversation(
			id=row.id,
			characters=_characters_from_json(row.characters_json),
			location=row.location,
			title=row.title,
			language=row.language_code,
			length=row.length,
			audio=row.audio,
		)
		for row in rows
	]
