"""
Speech capture adapter.

Wraps a continuous, interim-enabled speech recognizer. The recognizer backend
reports lifecycle and results by calling `handle_start`, `handle_result` and
`handle_end`; the adapter keeps the draft buffer and forwards events to the
callbacks installed by the interview machine.
"""
from __future__ import annotations

import logging
import re
from typing import Callable, Optional, Protocol

from .errors import CaptureError, CaptureUnavailableError

logger = logging.getLogger("tutorbot.student.speech")

_MULTI_SPACE = re.compile(r"\s{2,}")
_LONE_I = re.compile(r"(?<=\s)i(?=\s|[.,!?]|$)")
_SENTENCE_START = re.compile(r"([.?!]\s+)([a-z])")
_TERMINAL = re.compile(r"[.?!]$")


def normalize_draft(raw: str) -> str:
	"""Tidy raw recognizer output into a reviewable answer.

	Runs of whitespace (left behind by pauses between final chunks) become
	sentence breaks, the first letter and every sentence start are
	capitalized, a lone "i" becomes "I", and a full stop is added when the
	text has no terminal punctuation. Blank input yields "".
	"""
	text = raw.strip()
	if not text:
		return ""
	text = _MULTI_SPACE.sub(". ", text)
	text = text[0].upper() + text[1:]
	text = _LONE_I.sub("I", text)
	text = _SENTENCE_START.sub(lambda m: m.group(1) + m.group(2).upper(), text)
	if not _TERMINAL.search(text):
		text += "."
	return text


class Recognizer(Protocol):
	available: bool

	def start(self) -> None:
		...

	def stop(self) -> None:
		...


class SpeechCapture:
	def __init__(self, recognizer: Optional[Recognizer]) -> None:
		self._recognizer = recognizer
		self.listening = False
		self.draft = ""
		self.on_start: Optional[Callable[[], None]] = None
		self.on_interim: Optional[Callable[[str], None]] = None
		self.on_end: Optional[Callable[[str], None]] = None

	@property
	def available(self) -> bool:
		return self._recognizer is not None and bool(getattr(self._recognizer, "available", True))

	def start(self) -> bool:
		"""Ask the recognizer to start; returns False instead of raising."""
		if not self.available:
			logger.warning("Speech recognition is not available; falling back to typed answers")
			return False
		try:
			self._recognizer.start()
		except CaptureUnavailableError as e:
			logger.warning("Speech recognition is not available: %s", e)
			return False
		except CaptureError as e:
			logger.warning("Could not start speech recognition: %s", e)
			return False
		return True

	def stop(self) -> None:
		if not self.listening or self._recognizer is None:
			return
		self._recognizer.stop()

	def clear(self) -> None:
		self.draft = ""

	# -- recognizer events -------------------------------------------------

	def handle_start(self) -> None:
		self.listening = True
		self.draft = ""
		if self.on_start is not None:
			self.on_start()

	def handle_result(self, text: str, is_final: bool) -> None:
		if is_final:
			if text:
				self.draft += text + " "
		elif self.on_interim is not None:
			self.on_interim(text)

	def handle_end(self) -> None:
		if not self.listening:
			return
		self.listening = False
		self.draft = normalize_draft(self.draft)
		if self.on_end is not None:
			self.on_end(self.draft)
