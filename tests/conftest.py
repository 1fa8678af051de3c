from __future__ import annotations

import json
import re
from typing import Callable, List, Tuple

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from parlance import models  # noqa: F401  registers tables on Base
from parlance.db import Base, get_db
from parlance.dependencies import get_live_chats, get_openai_client
from parlance.live_chat import LiveChatStore
from parlance.main import app
from parlance import openai_client as params
from parlance.errors import UpstreamError
from parlance.openai_client import ChatParams
from parlance.schemas import ChatMessage, CharacterWithLanguageConfig, LanguageConfig

Responder = Callable[[ChatParams, List[ChatMessage]], str]


class FakeOpenAIClient:
	"""Stands in for OpenAIClient; ``responder`` decides each chat reply."""

	def __init__(self, responder: Responder, image_url: str = "https://images.example/avatar.png") -> None:
		self.responder = responder
		self.image_url = image_url
		self.calls: List[Tuple[ChatParams, List[ChatMessage]]] = []
		self.image_prompts: List[str] = []

	async def chat(self, params: ChatParams, messages):
		messages = list(messages)
		self.calls.append((params, messages))
		return ChatMessage(role="assistant", content=self.responder(params, messages))

	async def create_image(self, prompt: str, *, size: str = "256x256") -> str:
		self.image_prompts.append(prompt)
		return self.image_url

	async def aclose(self) -> None:
		pass


def make_character(name: str, voice: str, *, gender: str = "female", language: str = "it") -> CharacterWithLanguageConfig:
	return CharacterWithLanguageConfig(
		name=name,
		gender=gender,
		age=30,
		occupation="Chef",
		avatar_url=f"https://blob.example/{name}.png",
		language_config=LanguageConfig(language=language, voice=voice, speed="0%", pitch="+5%"),
	)


@pytest.fixture
def session_factory():
	engine = create_engine(
		"sqlite://",
		poolclass=StaticPool,
		connect_args={"check_same_thread": False},
		future=True,
	)
	Base.metadata.create_all(bind=engine)
	factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, future=True)
	yield factory
	engine.dispose()


@pytest.fixture
def db(session_factory):
	session = session_factory()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def live_store():
	return LiveChatStore()


@pytest.fixture
def fake_openai():
	return FakeOpenAIClient(lambda params, messages: "{}")


@pytest.fixture
def api(session_factory, fake_openai, live_store):
	def _get_db():
		session = session_factory()
		try:
			yield session
		finally:
			session.close()

	app.dependency_overrides[get_db] = _get_db
	app.dependency_overrides[get_openai_client] = lambda: fake_openai
	app.dependency_overrides[get_live_chats] = lambda: live_store
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()


def scripted_responder(fail_on=None, parse_output=None):
	"""Answer each preset the way a well-behaved model would."""

	def respond(p, messages):
		if p is fail_on:
			raise UpstreamError("model down")
		if p is params.GENERATE_CONVERSATION:
			return "Title: Al mare\nLocation: Beach\n\nConversation Parts:\n\n1. Giulia: Ciao!\n2. Marco: Ciao Giulia!"
		if p is params.PARSE_CONVERSATION:
			if parse_output is not None:
				return parse_output
			return json.dumps({
				"parts": [{"name": "Giulia", "text": "Ciao!"}, {"name": "Marco", "text": "Ciao Giulia!"}],
				"location": "Beach",
				"title": "At the seaside",
			})
		if p is params.GENERATE_QUESTIONS:
			count = int(re.search(r"exactly (\d+) questions", messages[0].content).group(1))
			return json.dumps([
				{"question": f"Q{i}", "answers": [
					{"answer": "yes", "is_correct": True},
					{"answer": "no", "is_correct": False},
					{"answer": "maybe", "is_correct": False},
				]}
				for i in range(count)
			])
		raise AssertionError(f"unexpected params {p}")

	return respond
