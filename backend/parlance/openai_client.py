from __future__ import annotations
import logging
import httpx
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence

from .errors import UpstreamError
from .schemas import ChatMessage
from .settings import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChatParams:
	temperature: float
	max_tokens: int
	# None means settings.openai_model
	model: Optional[str] = None


# Generate conversation.
GENERATE_CONVERSATION = ChatParams(temperature=0.7, max_tokens=2000)
# Parse the plaintext conversation into JSON.
PARSE_CONVERSATION = ChatParams(temperature=0, max_tokens=2000)
# Generate questions for a given conversation.
GENERATE_QUESTIONS = ChatParams(temperature=0.25, max_tokens=2000)
GENERATE_CHARACTER = ChatParams(temperature=0.7, max_tokens=2000)
NEXT_CHAT_MESSAGE = ChatParams(temperature=0.7, max_tokens=1000)


class OpenAIClient:
	def __init__(self, api_key: Optional[str] = None, *, base_url: Optional[str] = None, model: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self.api_key = api_key or settings.openai_api_key
		if not self.api_key:
			raise ValueError("OPENAI_API_KEY is not configured")
		self.model = model or settings.openai_model
		self.base_url = (base_url or settings.openai_base_url).rstrip("/")
		self._headers = {
			"Authorization": f"Bearer {self.api_key}",
			"Content-Type": "application/json",
		}
		self._client = httpx.AsyncClient(timeout=settings.openai_timeout_seconds, transport=transport)

	async def __aenter__(self) -> "OpenAIClient":
		return self

	async def __aexit__(self, *exc_info: Any) -> None:
		await self.aclose()

	async def chat(self, params: ChatParams, messages: Sequence[ChatMessage]) -> ChatMessage:
		payload: Dict[str, Any] = {
			"model": params.model or self.model,
			"messages": [m.model_dump() for m in messages],
			"temperature": params.temperature,
			"max_tokens": params.max_tokens,
		}
		data = await self._post("/chat/completions", payload)
		try:
			message = data["choices"][0]["message"]
			return ChatMessage(role=message.get("role") or "assistant", content=message["content"] or "")
		except (KeyError, IndexError, TypeError) as err:
			raise UpstreamError(f"Unexpected chat completion response: {data}") from err

	async def create_image(self, prompt: str, *, size: str = "256x256") -> str:
		payload: Dict[str, Any] = {"prompt": prompt, "n": 1, "size": size}
		data = await self._post("/images/generations", payload)
		try:
			return data["data"][0]["url"]
		except (KeyError, IndexError, TypeError) as err:
			raise UpstreamError(f"Unexpected image generation response: {data}") from err

	async def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
		url = f"{self.base_url}{path}"
		try:
			r = await self._client.post(url, headers=self._headers, json=payload)
			r.raise_for_status()
		except httpx.HTTPStatusError as http_err:
			logger.error("OpenAI call to %s failed with status %s: %s", path, http_err.response.status_code, http_err.response.text)
			raise UpstreamError(f"OpenAI returned {http_err.response.status_code}") from http_err
		except httpx.RequestError as net_err:
			logger.error("OpenAI call to %s failed: %s", path, net_err)
			raise UpstreamError("OpenAI request failed") from net_err
		try:
			return r.json()
		except ValueError as err:
			raise UpstreamError(f"Unexpected OpenAI response: {r.text}") from err

	async def aclose(self) -> None:
		await self._client.aclose()


def user_message(prompt: str, role: str = "user") -> ChatMessage:
	return ChatMessage(role=role, content=prompt)
