from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
	gemini_api_key: str | None = Field(default=None, validation_alias="GEMINI_API_KEY")
	# Provider can be "vertex" (Vertex AI Express) or "ai_studio" (Generative Language API)
	gemini_provider: str = Field(default="ai_studio", validation_alias="GEMINI_PROVIDER")
	gemini_model: str = Field(default="gemini-2.0-flash-001", validation_alias="GEMINI_MODEL")
	# Vertex configuration
	vertex_region: str = Field(default="us-central1", validation_alias="GEMINI_VERTEX_REGION")
	vertex_project: str | None = Field(default=None, validation_alias="GEMINI_VERTEX_PROJECT")

	# OpenRouter fallback configuration (optional)
	openrouter_api_key: str | None = Field(default=None, validation_alias="OPENROUTER_API_KEY")
	openrouter_model: str = Field(default="x-ai/grok-4-fast:free", validation_alias="OPENROUTER_MODEL")
	openrouter_base_url: str = Field(default="https://openrouter.ai/api/v1/chat/completions", validation_alias="OPENROUTER_BASE_URL")
	openrouter_referer: str = Field(default="https://localhost", validation_alias="OPENROUTER_HTTP_REFERER")
	openrouter_title: str = Field(default="TutorBot", validation_alias="OPENROUTER_TITLE")

	# Cloud Text-to-Speech ("en-US-Studio-O" professional male, "en-US-Journey-F" expressive female)
	tts_voice: str = Field(default="en-US-Studio-O", validation_alias="TTS_VOICE")
	tts_language: str = Field(default="en-US", validation_alias="TTS_LANGUAGE")
	tts_audio_encoding: str = Field(default="MP3", validation_alias="TTS_AUDIO_ENCODING")

	# Database
	database_url: str | None = Field(default=None, validation_alias="DATABASE_URL")
	app_id: str = Field(default="default-app-id", validation_alias="APP_ID")
	# Transcripts older than this are purged by the background cleanup (0 keeps them forever)
	transcript_retention_days: int = Field(default=0, validation_alias="TRANSCRIPT_RETENTION_DAYS")

	# Web
	cors_origins: List[str] = Field(
		default=["http://127.0.0.1:5500", "http://localhost:5500"],
		validation_alias="CORS_ORIGINS",
	)
	environment: str = Field(default="development", validation_alias="ENVIRONMENT")
	dev_api_base_url: str = Field(default="http://127.0.0.1:8000", validation_alias="DEV_API_BASE_URL")
	prod_api_base_url: str = Field(default="https://api.tutorbot.app", validation_alias="PROD_API_BASE_URL")

	log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

	# pydantic-settings v2 style config
	model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
