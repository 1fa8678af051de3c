from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

from ..live_chat import live_chats
from ..settings import settings

router = APIRouter(tags=["health"])


@router.get("/info")
def info():
	return {
		"status": "ok",
		"openai_configured": bool(settings.openai_api_key),
		"speech_configured": bool(settings.azure_speech_key),
		"storage_configured": bool(settings.azure_storage_connection_string),
		"live_sessions": len(live_chats),
	}


@router.get("/robots.txt", response_class=PlainTextResponse, include_in_schema=False)
def robots():
	return "User-agent: *\nDisallow: /"
