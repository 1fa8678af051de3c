"""
Text-to-speech via the Azure Speech REST API.

Conversations are narrated in a single request: every part becomes a
``<voice>`` element carrying the speaker's voice and prosody settings.
The resulting MP3 is uploaded to blob storage and its URL returned.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence
from xml.sax.saxutils import escape, quoteattr

import httpx

from . import storage
from .errors import UpstreamError
from .languages import ENGLISH_NARRATOR_VOICE
from .schemas import CharacterWithLanguageConfig, ConversationPart
from .settings import settings

logger = logging.getLogger(__name__)

OUTPUT_FORMAT = "audio-16khz-32kbitrate-mono-mp3"
SSML_NAMESPACE = "http://www.w3.org/2001/10/synthesis"


def _voice_locale(voice: str) -> str:
	# "en-GB-AbbiNeural" -> "en-GB"
	parts = voice.split("-")
	return "-".join(parts[:2]) if len(parts) >= 3 else "en-US"


def build_conversation_ssml(characters: Sequence[CharacterWithLanguageConfig], parts: Sequence[ConversationPart]) -> str:
	by_name = {c.name: c for c in characters}
	ssml_parts = []
	for part in parts:
		character = by_name.get(part.name)
		if character is None:
			raise ValueError(f"No character named {part.name!r} in conversation")
		config = character.language_config
		ssml_parts.append(
			f"<voice name={quoteattr(config.voice)}>"
			f"<prosody pitch={quoteattr(config.pitch)} rate={quoteattr(config.speed)}>{escape(part.text)}</prosody>"
			"</voice>"
		)
	body = "\n".join(ssml_parts)
	return f'<speak version="1.0" xmlns="{SSML_NAMESPACE}" xml:lang="en-US">\n{body}\n</speak>'


def build_text_ssml(text: str, voice: str) -> str:
	return (
		f'<speak version="1.0" xmlns="{SSML_NAMESPACE}" xml:lang="{_voice_locale(voice)}">'
		f"<voice name={quoteattr(voice)}>{escape(text)}</voice>"
		"</speak>"
	)


class SpeechSynthesizer:
	def __init__(self, key: Optional[str] = None, region: Optional[str] = None, *, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.key = key or settings.azure_speech_key
		if not self.key:
			raise UpstreamError("AZURE_SPEECH_KEY is not configured")
		self.region = region or settings.azure_speech_region
		self.url = f"https://{self.region}.tts.speech.microsoft.com/cognitiveservices/v1"
		self._transport = transport

	async def synthesize_ssml(self, ssml: str) -> bytes:
		headers = {
			"Ocp-Apim-Subscription-Key": self.key,
			"Content-Type": "application/ssml+xml",
			"X-Microsoft-OutputFormat": OUTPUT_FORMAT,
			"User-Agent": "parlance",
		}
		try:
			async with httpx.AsyncClient(timeout=120, transport=self._transport) as client:
				r = await client.post(self.url, headers=headers, content=ssml.encode("utf-8"))
				r.raise_for_status()
		except httpx.HTTPStatusError as err:
			logger.error("Failed to generate audio: %s %s", err.response.status_code, err.response.text)
			raise UpstreamError(f"Speech synthesis returned {err.response.status_code}") from err
		except httpx.RequestError as err:
			logger.error("Failed to generate audio: %s", err)
			raise UpstreamError("Speech synthesis request failed") from err
		if not r.content:
			raise UpstreamError("Speech synthesis returned empty audio")
		logger.info("Successfully generated audio (%d bytes)", len(r.content))
		return r.content


async def generate_audio_for_conversation(
	characters: Sequence[CharacterWithLanguageConfig],
	parts: Sequence[ConversationPart],
	*,
	synthesizer: Optional[SpeechSynthesizer] = None,
) -> str:
	try:
		ssml = build_conversation_ssml(characters, parts)
	except ValueError as err:
		raise UpstreamError(str(err)) from err
	logger.debug("SSML:\n%s", ssml)
	audio = await (synthesizer or SpeechSynthesizer()).synthesize_ssml(ssml)
	return await storage.upload_audio(audio)


async def generate_audio_for_text(text: str, voice: str, *, synthesizer: Optional[SpeechSynthesizer] = None) -> str:
	logger.info("Generating audio for text %r with voice %r", text, voice)
	audio = await (synthesizer or SpeechSynthesizer()).synthesize_ssml(build_text_ssml(text, voice))
	return await storage.upload_audio(audio)


async def generate_english_audio_for_text(text: str, *, synthesizer: Optional[SpeechSynthesizer] = None) -> str:
	return await generate_audio_for_text(text, ENGLISH_NARRATOR_VOICE, synthesizer=synthesizer)
