from __future__ import annotations

import logging
import random
from typing import Callable, Optional

from .machine import InterviewMachine
from .phrases import TransitionPhraseSupplier
from .playback import AudioPlayback
from .proxy import BackendClient
from .session import SessionContext, StudentIdentity
from .speech import SpeechCapture
from .transcript import TranscriptRecorder

logger = logging.getLogger("tutorbot.student.join")


async def join_interview(
	backend: BackendClient,
	raw_code: str,
	student: StudentIdentity,
	capture: SpeechCapture,
	playback: AudioPlayback,
	*,
	rng: Optional[random.Random] = None,
	on_change: Optional[Callable[[InterviewMachine], None]] = None,
	on_notice: Optional[Callable[[str, str], None]] = None,
) -> InterviewMachine:
	"""Load the interview for `raw_code` and build a machine ready to `begin()`.

	Raises InvalidCodeError for a malformed code and SessionNotFoundError when
	no interview uses it.
	"""
	session = await backend.fetch_session(raw_code)
	logger.info("Student %s joined interview %s", student.student_id, session.code)
	context = SessionContext(
		session=session,
		student=student,
		recorder=TranscriptRecorder(backend, session, student),
		phrases=TransitionPhraseSupplier(rng=rng),
	)
	return InterviewMachine(context, backend, capture, playback, on_change=on_change, on_notice=on_notice)
