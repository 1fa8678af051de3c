from __future__ import annotations
import logging
import uuid
from typing import Optional

import httpx
from azure.core.exceptions import AzureError
from azure.storage.blob import BlobServiceClient, ContentSettings
from starlette.concurrency import run_in_threadpool

from .errors import StorageNotConfiguredError, UpstreamError
from .settings import settings

logger = logging.getLogger(__name__)


def _service_client() -> BlobServiceClient:
	conn_str = (settings.azure_storage_connection_string or "").strip()
	if not conn_str:
		raise StorageNotConfiguredError("AZURE_STORAGE_CONNECTION_STRING is not configured")
	try:
		return BlobServiceClient.from_connection_string(conn_str)
	except ValueError as err:
		raise StorageNotConfiguredError("AZURE_STORAGE_CONNECTION_STRING is malformed") from err


def _upload_sync(container_name: Optional[str], blob_name: str, data: bytes, content_type: str) -> str:
	if not container_name:
		raise StorageNotConfiguredError("Azure Storage container name not configured")
	blob_client = _service_client().get_container_client(container_name).get_blob_client(blob_name)
	logger.info("Uploading to Azure storage as blob: %s", blob_client.url)
	try:
		blob_client.upload_blob(data, overwrite=True, content_settings=ContentSettings(content_type=content_type))
	except AzureError as err:
		raise UpstreamError(f"Upload of {blob_name} to {container_name} failed") from err
	logger.info("Blob %s uploaded to container %s", blob_name, container_name)
	return blob_client.url


async def upload_audio(data: bytes) -> str:
	"""Upload an MP3 clip and return its blob URL."""
	blob_name = f"audio-{uuid.uuid4().hex}.mp3"
	return await run_in_threadpool(_upload_sync, settings.azure_storage_audio_container_name, blob_name, data, "audio/mpeg")


async def upload_image_at_url(url: str) -> str:
	"""Copy an image hosted at ``url`` (e.g. a temporary DALL-E link) into the avatar container."""
	try:
		async with httpx.AsyncClient(timeout=60) as client:
			r = await client.get(url)
			r.raise_for_status()
	except httpx.HTTPError as err:
		raise UpstreamError(f"Failed to download image at {url}") from err
	blob_name = f"avatar-{uuid.uuid4().hex}.png"
	return await run_in_threadpool(_upload_sync, settings.azure_storage_avatar_container_name, blob_name, r.content, "image/png")
