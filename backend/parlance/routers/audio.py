import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from .. import speech
from ..errors import ParlanceError, to_http_exception

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audio", tags=["audio"])


@router.get("/new", response_class=PlainTextResponse)
async def new_audio(text: str = ""):
	# Query strings arrive already URL-decoded
	if not text.strip():
		raise HTTPException(status_code=400, detail="text is required")
	try:
		link = await speech.generate_english_audio_for_text(text)
	except ParlanceError as e:
		raise to_http_exception(e)
	logger.info("Generated audio at %s", link)
	return link
