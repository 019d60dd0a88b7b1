"""
Interview Turn-Taking Machine
=============================

Conducts one student interview: the student answers by voice, the answer is
reviewed and submitted, the AI interviewer replies, the reply is synthesized
and played, and listening resumes hands-free.

States:
- IDLE: waiting for the student to tap record (or type an answer)
- LISTENING: speech capture is running
- REVIEWING: a normalized draft is waiting to be submitted or retried
- THINKING: an AI round-trip (and speech synthesis) is in flight
- SPEAKING: the interviewer's reply is playing
- EXPIRED: the time limit elapsed; terminal

Every state change goes through `_transition`, which rejects moves not in
TRANSITIONS. User actions that are not allowed in the current state are
ignored and report False. Each await resume point re-checks the expiry flag
before acting, because the session timer may fire while a call is pending.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, FrozenSet, List, Optional, Protocol

from .errors import ProxyError
from .playback import AudioPlayback
from .prompts import (
	AI_NAME,
	CONNECTION_LOST_MESSAGE,
	EXPIRED_MESSAGE,
	STUDENT_LABEL,
	SYSTEM_LABEL,
	build_history,
	build_system_prompt,
	compose_spoken_text,
	is_error_reprompt,
	latest_message,
)
from .session import ChatMessage, SessionContext, USER, MODEL
from .speech import SpeechCapture
from .timer import SessionTimer

logger = logging.getLogger("tutorbot.student.machine")


class State(str, Enum):
	IDLE = "idle"
	LISTENING = "listening"
	REVIEWING = "reviewing"
	THINKING = "thinking"
	SPEAKING = "speaking"
	EXPIRED = "expired"


TRANSITIONS: Dict[State, FrozenSet[State]] = {
	State.IDLE: frozenset({State.LISTENING, State.THINKING, State.EXPIRED}),
	State.LISTENING: frozenset({State.REVIEWING, State.IDLE, State.EXPIRED}),
	State.REVIEWING: frozenset({State.THINKING, State.LISTENING, State.IDLE, State.EXPIRED}),
	State.THINKING: frozenset({State.SPEAKING, State.IDLE, State.EXPIRED}),
	State.SPEAKING: frozenset({State.LISTENING, State.IDLE, State.EXPIRED}),
	State.EXPIRED: frozenset(),
}

# States in which the student may hand in an answer
SUBMITTABLE = frozenset({State.IDLE, State.REVIEWING})

# States from which the student may open the microphone
CAPTURABLE = frozenset({State.IDLE, State.REVIEWING})


class InvalidTransition(RuntimeError):
	pass


class InterviewBackend(Protocol):
	async def chat(self, history: List[Dict[str, object]], message: str, system_prompt: str) -> str:
		...

	async def synthesize(self, text: str) -> Optional[str]:
		...


class InterviewMachine:
	def __init__(
		self,
		context: SessionContext,
		backend: InterviewBackend,
		capture: SpeechCapture,
		playback: AudioPlayback,
		on_change: Optional[Callable[["InterviewMachine"], None]] = None,
		on_notice: Optional[Callable[[str, str], None]] = None,
	) -> None:
		self.context = context
		self.backend = backend
		self.capture = capture
		self.playback = playback
		self.state = State.IDLE
		self.draft = ""
		self.interim = ""
		self._on_change = on_change
		self._on_notice = on_notice
		self._playing = False
		self.system_prompt = build_system_prompt(context.session)
		self.timer = SessionTimer(context.session.time_limit, on_expire=self.expire, on_tick=self._on_tick)

		capture.on_start = self._on_capture_start
		capture.on_interim = self._on_capture_interim
		capture.on_end = self._on_capture_end

		if not capture.available:
			self._notice("Speech Not Supported", "Voice answers are unavailable in this browser. Type your answers instead.")

	# -- dispatch ----------------------------------------------------------

	@property
	def expired(self) -> bool:
		return self.context.expired

	@property
	def record_enabled(self) -> bool:
		return self.state in (State.IDLE, State.LISTENING) and not self.expired

	def _transition(self, new_state: State) -> None:
		if new_state == self.state:
			return
		if new_state not in TRANSITIONS[self.state]:
			raise InvalidTransition(f"{self.state.value} -> {new_state.value}")
		logger.debug("%s -> %s", self.state.value, new_state.value)
		self.state = new_state
		self._changed()

	def _changed(self) -> None:
		if self._on_change is not None:
			self._on_change(self)

	def _notice(self, title: str, message: str) -> None:
		logger.warning("%s: %s", title, message)
		if self._on_notice is not None:
			self._on_notice(title, message)

	def _say(self, speaker: str, text: str) -> None:
		self.context.chat.append(ChatMessage(speaker=speaker, text=text))
		self._changed()

	# -- user actions ------------------------------------------------------

	async def begin(self, start_timer: bool = True) -> None:
		"""Start the interview: the interviewer speaks first."""
		if start_timer:
			self.timer.start()
		if self.state != State.IDLE or self.expired:
			return
		await self._request_reply()

	def tap_record(self) -> bool:
		if self.expired:
			return False
		if self.state == State.LISTENING:
			self.capture.stop()
			return True
		if self.state == State.IDLE:
			return self.start_capture()
		return False

	def start_capture(self) -> bool:
		if self.expired or self.state not in CAPTURABLE:
			return False
		return self._resume_capture()

	def _resume_capture(self) -> bool:
		if not self.capture.start():
			self._transition(State.IDLE)
			return False
		return True

	def retry(self) -> bool:
		if self.state != State.REVIEWING or self.expired:
			return False
		self.draft = ""
		self.capture.clear()
		return self.start_capture()

	async def submit(self, text: Optional[str] = None) -> bool:
		if self.expired or self.state not in SUBMITTABLE:
			return False
		answer = (self.draft if text is None else text).strip()
		if not answer:
			return False
		self.draft = ""
		self._say(STUDENT_LABEL, answer)
		self.context.recorder.append(USER, answer)
		await self._request_reply()
		return True

	def conclude(self) -> None:
		"""Mark the interview as finished; listening will not auto-resume."""
		self.context.concluded = True
		self.timer.cancel()

	def expire(self) -> None:
		if not self.context.mark_expired():
			return
		self.timer.cancel()
		self.capture.stop()
		self.draft = ""
		self._transition(State.EXPIRED)
		self._say(SYSTEM_LABEL, EXPIRED_MESSAGE)

	# -- AI round-trip -----------------------------------------------------

	async def _request_reply(self) -> None:
		self._transition(State.THINKING)
		transcript = self.context.transcript
		try:
			reply = await self.backend.chat(
				build_history(transcript),
				latest_message(transcript),
				self.system_prompt,
			)
		except ProxyError as e:
			logger.error("AI error: %s", e)
			if self.expired:
				return
			self._say(SYSTEM_LABEL, CONNECTION_LOST_MESSAGE)
			self._transition(State.IDLE)
			return
		if self.expired:
			logger.info("Reply arrived after the session expired; discarding")
			return

		self.context.turn_count += 1
		transition = "" if is_error_reprompt(reply) else self.context.phrases.phrase_for_turn(self.context.turn_count)
		spoken = compose_spoken_text(reply, transition)

		audio = await self.backend.synthesize(spoken)
		if self.expired:
			return

		self._say(AI_NAME, spoken)
		self.context.recorder.append(MODEL, reply)
		# no capture while the reply plays
		self.capture.stop()
		self._playing = True
		self._transition(State.SPEAKING)
		await self.playback.play(audio, spoken, on_complete=self._on_playback_complete)

	def _on_playback_complete(self) -> None:
		self._playing = False
		if self.expired or self.state != State.SPEAKING:
			return
		if self.context.concluded:
			self._transition(State.IDLE)
			return
		logger.info("Audio ended. Auto-starting mic...")
		if not self._resume_capture():
			logger.warning("Auto-start blocked. User must tap record manually.")

	# -- capture events ----------------------------------------------------

	def _on_capture_start(self) -> None:
		if self.expired or self._playing:
			self.capture.stop()
			return
		if self.state == State.THINKING:
			# late start event; capture is stopped again before the reply plays
			logger.debug("Recognizer started while waiting for a reply")
			return
		self.interim = ""
		self._transition(State.LISTENING)

	def _on_capture_interim(self, text: str) -> None:
		self.interim = text
		self._changed()

	def _on_capture_end(self, draft: str) -> None:
		self.interim = ""
		if self.expired or self.state != State.LISTENING:
			return
		if draft:
			self.draft = draft
			self._transition(State.REVIEWING)
		else:
			self._transition(State.IDLE)

	def _on_tick(self, remaining: int) -> None:
		self._changed()
