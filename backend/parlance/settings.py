from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	openai_api_key: str | None = Field(default=None, validation_alias="OPENAI_API_KEY")
	openai_base_url: str = Field(default="https://api.openai.com/v1", validation_alias="OPENAI_BASE_URL")
	# Model used for every chat completion request
	openai_model: str = Field(default="gpt-4", validation_alias="OPENAI_MODEL")
	openai_timeout_seconds: float = Field(default=120, validation_alias="OPENAI_TIMEOUT_SECONDS")

	# Azure Speech (text-to-speech REST endpoint)
	azure_speech_key: str | None = Field(default=None, validation_alias="AZURE_SPEECH_KEY")
	azure_speech_region: str = Field(default="uksouth", validation_alias="AZURE_SPEECH_REGION")

	# Azure Blob storage for audio clips and avatars
	azure_storage_connection_string: str | None = Field(default=None, validation_alias="AZURE_STORAGE_CONNECTION_STRING")
	azure_storage_audio_container_name: str | None = Field(default="audio", validation_alias="AZURE_STORAGE_AUDIO_CONTAINER_NAME")
	azure_storage_avatar_container_name: str | None = Field(default="avatars", validation_alias="AZURE_STORAGE_AVATAR_CONTAINER_NAME")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
