from __future__ import annotations
import base64
import logging
from typing import Optional

from google.cloud import texttospeech

from .settings import settings

logger = logging.getLogger("tutorbot.tts")

# Created on first use so a missing credential does not break app startup
_client: Optional[texttospeech.TextToSpeechClient] = None


def get_tts_client() -> texttospeech.TextToSpeechClient:
	global _client
	if _client is None:
		_client = texttospeech.TextToSpeechClient()
		logger.info("Initialized Cloud Text-to-Speech client")
	return _client


def synthesize_base64(text: str, client: Optional[texttospeech.TextToSpeechClient] = None) -> str:
	"""Synthesize `text` with the configured voice and return base64 audio.

	Raises google.api_core.exceptions.GoogleAPIError on service failures.
	"""
	client = client or get_tts_client()
	synthesis_input = texttospeech.SynthesisInput(text=text)
	voice_params = texttospeech.VoiceSelectionParams(
		language_code=settings.tts_language,
		name=settings.tts_voice,
	)
	audio_config = texttospeech.AudioConfig(
		audio_encoding=texttospeech.AudioEncoding[settings.tts_audio_encoding],
	)
	response = client.synthesize_speech(
		input=synthesis_input, voice=voice_params, audio_config=audio_config
	)
	return base64.b64encode(response.audio_content).decode("ascii")
