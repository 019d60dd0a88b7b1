from __future__ import annotations

import base64
import binascii
import logging
from typing import Callable, Optional, Protocol

logger = logging.getLogger("tutorbot.student.playback")


class AudioPlayer(Protocol):
	async def play(self, audio: bytes, on_started: Callable[[], None]) -> None:
		"""Play encoded audio, returning when playback ends; raises on failure."""
		...


class LocalSynthesizer(Protocol):
	async def speak(self, text: str, on_started: Callable[[], None]) -> None:
		...

	def cancel(self) -> None:
		...


class _Once:
	def __init__(self, fn: Optional[Callable[[], None]]) -> None:
		self._fn = fn
		self.fired = False

	def __call__(self) -> None:
		if self.fired:
			return
		self.fired = True
		if self._fn is not None:
			self._fn()


def _noop() -> None:
	pass


class AudioPlayback:
	"""Plays the interviewer's synthesized reply and reports completion.

	With no audio payload the reply text is spoken by the local synthesizer
	instead. `on_complete` is called exactly once per `play`, whether the audio
	played, the fallback spoke, or playback failed.
	"""

	def __init__(self, player: AudioPlayer, synthesizer: LocalSynthesizer) -> None:
		self._player = player
		self._synthesizer = synthesizer

	async def play(
		self,
		audio_base64: Optional[str],
		text: str,
		on_complete: Optional[Callable[[], None]],
		on_started: Optional[Callable[[], None]] = None,
	) -> None:
		done = _Once(on_complete)
		started = on_started or _noop
		try:
			self._synthesizer.cancel()
			if not audio_base64:
				await self._speak_fallback(text, started)
				return
			try:
				audio = base64.b64decode(audio_base64, validate=True)
			except (binascii.Error, ValueError) as e:
				logger.warning("Synthesized audio could not be decoded, using local voice: %s", e)
				await self._speak_fallback(text, started)
				return
			try:
				await self._player.play(audio, started)
			except Exception as e:
				logger.error("Audio playback failed: %s", e)
		finally:
			done()

	async def _speak_fallback(self, text: str, on_started: Callable[[], None]) -> None:
		try:
			await self._synthesizer.speak(text, on_started)
		except Exception as e:
			logger.error("Local speech synthesis failed: %s", e)
