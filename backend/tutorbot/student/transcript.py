from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any, Dict, List, Optional, Protocol, Set

from .session import InterviewSession, StudentIdentity, Turn

logger = logging.getLogger("tutorbot.student.transcript")


class TranscriptStore(Protocol):
	async def save_transcript(self, doc_id: str, document: Dict[str, Any]) -> None:
		...


class TranscriptRecorder:
	"""Append-only turn log mirrored to the transcript store.

	Each append schedules one merge write carrying the whole turn array as it
	stood at that append. Writes are fire-and-forget: failures are logged and
	never reach the interview flow.
	"""

	def __init__(
		self,
		store: Optional[TranscriptStore],
		session: InterviewSession,
		student: StudentIdentity,
		doc_id: Optional[str] = None,
	) -> None:
		self._store = store
		self.session = session
		self.student = student
		self.doc_id = doc_id or uuid.uuid4().hex
		self._turns: List[Turn] = []
		self._pending: Set[asyncio.Task] = set()

	@property
	def turns(self) -> List[Turn]:
		return list(self._turns)

	def __len__(self) -> int:
		return len(self._turns)

	def append(self, role: str, text: str) -> Optional[Turn]:
		if not text:
			return None
		turn = Turn.create(role, text)
		self._turns.append(turn)
		self._persist()
		return turn

	def document(self) -> Dict[str, Any]:
		return {
			"fullTranscript": [turn.to_dict() for turn in self._turns],
			"interviewCode": self.session.code,
			"studentId": self.student.student_id,
			"studentName": self.student.display_name,
			"studentEmail": self.student.email,
			"topic": self.session.title,
		}

	def _persist(self) -> None:
		if self._store is None:
			return
		try:
			loop = asyncio.get_running_loop()
		except RuntimeError:
			logger.warning("No event loop running; transcript %s not saved", self.doc_id)
			return
		task = loop.create_task(self._write(self.document()))
		self._pending.add(task)
		task.add_done_callback(self._pending.discard)

	async def _write(self, document: Dict[str, Any]) -> None:
		try:
			await self._store.save_transcript(self.doc_id, document)
		except Exception as e:
			logger.error("Transcript write for %s failed: %s", self.doc_id, e)

	async def flush(self) -> None:
		"""Wait for every write scheduled so far."""
		if self._pending:
			await asyncio.gather(*list(self._pending))
