"""
Conversation Router

Endpoints for generating new conversations and browsing stored ones.

- GET /conversation/new: run the generation pipeline for a language and length
- GET /conversation/list: compressed listing of every stored conversation
- GET /conversation/random: id of a random stored conversation
- GET /conversation/id/{id}: a full stored conversation document
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from .. import pipeline, store
from ..db import get_db
from ..dependencies import get_openai_client
from ..errors import ParlanceError, to_http_exception
from ..languages import Language, get_language
from ..openai_client import OpenAIClient
from ..schemas import CompressedConversation, ConversationDocument, ConversationType, get_conversation_type

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/conversation", tags=["conversation"])


def requested_conversation(language: Optional[str] = None, length: Optional[str] = None) -> Tuple[Language, ConversationType]:
	"""Resolve the ``language`` and ``length`` query parameters, or respond 400."""
	lang = get_language(language)
	if lang is None:
		raise HTTPException(status_code=400, detail="Error: No language specified")
	conversation_type = get_conversation_type(length)
	if conversation_type is None:
		raise HTTPException(status_code=400, detail="Error: No conversation length specified")
	return lang, conversation_type


@router.get("/new", response_model=ConversationDocument)
async def new_conversation(
	requested: Tuple[Language, ConversationType] = Depends(requested_conversation),
	db: Session = Depends(get_db),
	client: OpenAIClient = Depends(get_openai_client),
):
	"""
	Generate, persist and return a new conversation.

	Query:
		language: Language code, e.g. ``it`` for Italian
		length: One of ``short``, ``medium``, ``long``

	Raises:
		HTTPException: 400 for an unknown language or length, 409 when the
			language lacks two distinct characters, 502 for upstream failures
	"""
	lang, conversation_type = requested

	try:
		return await pipeline.generate_full_conversation(db, client, lang, conversation_type)
	except ParlanceError as e:
		logger.error("Conversation generation failed: %s", e)
		raise to_http_exception(e)


@router.get("/list", response_model=List[CompressedConversation])
def list_conversations(db: Session = Depends(get_db)):
	return store.list_conversations(db)


@router.get("/random", response_class=PlainTextResponse)
def random_conversation(db: Session = Depends(get_db)):
	conversation_id = store.get_random_conversation_id(db)
	if conversation_id is None:
		raise HTTPException(status_code=404, detail="No conversations stored")
	logger.info("Got the following random conversation ID: %s", conversation_id)
	return conversation_id


@router.get("/id/{conversation_id}", response_model=ConversationDocument)
def get_conversation(conversation_id: str, db: Session = Depends(get_db)):
	document = store.get_conversation(db, conversation_id)
	if document is None:
		raise HTTPException(status_code=404, detail="Conversation not found")
	return document
