from __future__ import annotations
import logging
import uuid
from typing import Dict, List

from . import openai_client as params
from .errors import SessionNotFoundError
from .languages import Language
from .openai_client import OpenAIClient, user_message
from .prompts import build_live_chat_message
from .schemas import CharacterWithLanguageConfig, ChatMessage

logger = logging.getLogger(__name__)


class LiveChatStore:
	"""
	Message history per live chat session, kept in process memory.

	Sessions are never evicted and do not survive a restart.
	"""

	def __init__(self) -> None:
		self._sessions: Dict[str, List[ChatMessage]] = {}

	def __contains__(self, session_id: str) -> bool:
		return session_id in self._sessions

	def __len__(self) -> int:
		return len(self._sessions)

	def history(self, session_id: str) -> List[ChatMessage]:
		messages = self._sessions.get(session_id)
		if messages is None:
			raise SessionNotFoundError(f"Live chat session {session_id} not found")
		return list(messages)

	def seed(self, character: CharacterWithLanguageConfig, language: Language) -> str:
		session_id = uuid.uuid4().hex
		self._sessions[session_id] = [build_live_chat_message(character, language, role="system")]
		logger.info("Seeded live chat %s with %s in %s", session_id, character.name, language.readable)
		return session_id

	async def next(self, client: OpenAIClient, session_id: str, user_input: str) -> List[ChatMessage]:
		"""
		Send the user's message and record the character's reply.

		The history is only extended once the reply arrives, so a failed
		upstream call leaves the session unchanged. Both messages are appended
		to the current history, which other calls may have grown meanwhile.
		"""
		sent = user_message(user_input)
		reply = await client.chat(params.NEXT_CHAT_MESSAGE, self.history(session_id) + [sent])
		history = self._sessions[session_id]
		history.extend([sent, ChatMessage(role="assistant", content=reply.content)])
		return list(history)


live_chats = LiveChatStore()
