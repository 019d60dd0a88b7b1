from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from ..codes import normalize_code
from .errors import ProxyError, SessionNotFoundError
from .session import InterviewSession

logger = logging.getLogger("tutorbot.student.proxy")


class BackendClient:
	"""HTTP client for the TutorBot backend functions."""

	def __init__(self, base_url: str, *, timeout: float = 60, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
		self._client = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

	async def aclose(self) -> None:
		await self._client.aclose()

	async def fetch_session(self, raw_code: str) -> InterviewSession:
		code = normalize_code(raw_code)
		try:
			r = await self._client.get(f"/interviews/{code}")
		except httpx.RequestError as e:
			raise ProxyError(f"Could not reach server: {e}") from e
		if r.status_code == 404:
			raise SessionNotFoundError(_detail(r) or "Invalid code. Please check with your teacher.", status_code=404)
		if r.is_error:
			raise ProxyError(f"Server Error: {r.text}", status_code=r.status_code)
		return InterviewSession.from_payload(r.json())

	async def chat(self, history: List[Dict[str, Any]], message: str, system_prompt: str) -> str:
		try:
			r = await self._client.post(
				"/getGeminiResponse",
				json={"history": history, "message": message, "systemPrompt": system_prompt},
			)
		except httpx.RequestError as e:
			raise ProxyError(f"Could not reach server: {e}") from e
		if r.is_error:
			raise ProxyError(f"Server Error: {r.text}", status_code=r.status_code)
		try:
			return r.json()["response"]
		except (ValueError, KeyError, TypeError) as e:
			raise ProxyError(f"Unexpected response: {r.text}", status_code=r.status_code) from e

	async def synthesize(self, text: str) -> Optional[str]:
		"""Return base64 audio for `text`, or None when synthesis is unavailable."""
		try:
			r = await self._client.post("/generateSpeech", json={"text": text})
			r.raise_for_status()
			return r.json()["audioContent"]
		except (httpx.HTTPError, ValueError, KeyError, TypeError) as e:
			logger.warning("Cloud TTS failed: %s", e)
			return None

	async def save_transcript(self, doc_id: str, document: Dict[str, Any]) -> None:
		r = await self._client.put(f"/transcripts/{doc_id}", json=document)
		r.raise_for_status()


def _detail(r: httpx.Response) -> Optional[str]:
	try:
		return r.json().get("detail")
	except (ValueError, AttributeError):
		return None
