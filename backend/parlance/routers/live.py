from __future__ import annotations

import logging
from typing import Optional
from urllib.parse import unquote

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import store
from ..db import get_db
from ..dependencies import get_live_chats, get_openai_client
from ..errors import ParlanceError, to_http_exception
from ..languages import get_language
from ..live_chat import LiveChatStore
from ..openai_client import OpenAIClient
from ..schemas import LiveChatRequest, LiveChatSetup, LiveChatState

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/live", tags=["live"])


@router.get("/new", response_model=LiveChatSetup)
def new_live_chat(
	language: Optional[str] = None,
	db: Session = Depends(get_db),
	chats: LiveChatStore = Depends(get_live_chats),
):
	"""Start a live chat with a random character speaking ``language``."""
	lang = get_language(language)
	if lang is None:
		raise HTTPException(status_code=400, detail="Error: No language specified")
	character = store.get_random_character(db, lang)
	if character is None:
		raise HTTPException(status_code=404, detail=f"No characters available for {lang.readable}")
	session_id = chats.seed(character, lang)
	return LiveChatSetup(id=session_id, character=character)


@router.post("/next", response_model=LiveChatState)
async def next_live_message(
	req: LiveChatRequest,
	chats: LiveChatStore = Depends(get_live_chats),
	client: OpenAIClient = Depends(get_openai_client),
):
	"""
	Reply to the user's latest message as the session's character.

	The API may be down or the context length exceeded; either way the
	caller gets a 502 and the session history is left as it was.
	"""
	try:
		messages = await chats.next(client, req.id, unquote(req.text))
	except ParlanceError as e:
		logger.error("Live chat %s failed: %s", req.id, e)
		raise to_http_exception(e)
	return LiveChatState(id=req.id, messages=messages)
