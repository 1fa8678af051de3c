from __future__ import annotations

from fastapi import HTTPException


class ParlanceError(Exception):
	"""Base error; ``status_code`` is what the HTTP layer responds with."""
	status_code: int = 500

	def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
		super().__init__(message)
		if status_code is not None:
			self.status_code = status_code


class UpstreamError(ParlanceError):
	"""A third-party call (chat completion, TTS, storage) failed or returned junk."""
	status_code = 502


class NotEnoughCharactersError(ParlanceError):
	status_code = 409


class SessionNotFoundError(ParlanceError):
	status_code = 404


class StorageNotConfiguredError(UpstreamError):
	pass


def to_http_exception(err: ParlanceError) -> HTTPException:
	return HTTPException(status_code=err.status_code, detail=str(err) or None)
