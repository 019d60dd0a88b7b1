"""
Client-held interview session state.

Everything the turn-taking machine mutates lives on one SessionContext
instance: the immutable InterviewSession loaded at join time, the visible
chat log, the transcript recorder, the turn counter and the expiry flag.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from .phrases import TransitionPhraseSupplier

if TYPE_CHECKING:
	from .transcript import TranscriptRecorder

USER = "user"
MODEL = "model"

# Turn counts at which the progress indicator advances
PROGRESS_THRESHOLDS = (2, 5, 8)


@dataclass(frozen=True)
class Turn:
	role: str
	text: str
	timestamp: str

	@classmethod
	def create(cls, role: str, text: str) -> "Turn":
		return cls(role=role.lower(), text=text, timestamp=datetime.now(timezone.utc).isoformat())

	def to_dict(self) -> Dict[str, str]:
		return {"role": self.role, "text": self.text, "timestamp": self.timestamp}


@dataclass(frozen=True)
class InterviewSession:
	code: str
	title: str
	interviewer_name: str
	curriculum_text: str
	time_limit: int = 0
	record_audio: bool = False

	@classmethod
	def from_payload(cls, data: Dict[str, Any]) -> "InterviewSession":
		try:
			time_limit = int(data.get("timeLimit") or 0)
		except (TypeError, ValueError):
			time_limit = 0
		return cls(
			code=str(data["code"]).upper(),
			title=data.get("title") or "",
			interviewer_name=data.get("teacherName") or "Teacher",
			curriculum_text=data.get("curriculumText") or "",
			time_limit=max(time_limit, 0),
			record_audio=bool(data.get("recordAudio")),
		)


@dataclass(frozen=True)
class StudentIdentity:
	student_id: str
	name: Optional[str] = None
	email: Optional[str] = None

	@property
	def display_name(self) -> str:
		return self.name or "Anonymous"


@dataclass
class ChatMessage:
	speaker: str
	text: str


@dataclass
class SessionContext:
	session: InterviewSession
	student: StudentIdentity
	recorder: "TranscriptRecorder"
	phrases: TransitionPhraseSupplier = field(default_factory=TransitionPhraseSupplier)
	chat: List[ChatMessage] = field(default_factory=list)
	turn_count: int = 0
	concluded: bool = False
	_expired: bool = field(default=False, init=False, repr=False)

	@property
	def expired(self) -> bool:
		return self._expired

	def mark_expired(self) -> bool:
		"""Set the expiry flag; returns False if it was already set."""
		if self._expired:
			return False
		self._expired = True
		return True

	@property
	def transcript(self) -> List[Turn]:
		return self.recorder.turns

	def progress_stage(self) -> int:
		return sum(1 for threshold in PROGRESS_THRESHOLDS if self.turn_count >= threshold)
