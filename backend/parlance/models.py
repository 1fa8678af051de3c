from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class CharacterRecord(Base):
	__tablename__ = "characters"
	id = Column(String(64), primary_key=True)
	name = Column(String(128), nullable=False)
	gender = Column(String(32), nullable=False)
	age = Column(Integer, nullable=False)
	occupation = Column(String(256), nullable=False)
	avatar_url = Column(Text, nullable=True)
	# Indexed copy of language_config.language for per-language lookups
	language = Column(String(16), nullable=False, index=True)
	language_config_json = Column(Text, nullable=False)  # JSON string snapshot
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class ConversationRecord(Base):
	__tablename__ = "conversations"
	id = Column(String(64), primary_key=True)
	title = Column(String(512), nullable=True)
	location = Column(String(256), nullable=True)
	language_code = Column(String(16), nullable=False, index=True)
	length = Column(String(16), nullable=False)
	audio = Column(Text, nullable=True)
	characters_json = Column(Text, nullable=False)
	parts_json = Column(Text, nullable=False)
	questions_json = Column(Text, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
