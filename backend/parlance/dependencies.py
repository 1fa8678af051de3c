from __future__ import annotations
from typing import AsyncIterator

from fastapi import HTTPException

from .live_chat import LiveChatStore, live_chats
from .openai_client import OpenAIClient


async def get_openai_client() -> AsyncIterator[OpenAIClient]:
	try:
		client = OpenAIClient()
	except ValueError as e:
		raise HTTPException(status_code=503, detail=str(e))
	try:
		yield client
	finally:
		await client.aclose()


def get_live_chats() -> LiveChatStore:
	return live_chats
