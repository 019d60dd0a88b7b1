from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from sqlalchemy import delete
from sqlalchemy.orm import Session

from .models import Interview, InterviewTranscript

logger = logging.getLogger("tutorbot.cleanup")


class InterviewOwnershipError(PermissionError):
	pass


@dataclass
class CleanupResult:
	interview_deleted: bool
	transcripts_deleted: int


def delete_interview_and_transcripts(db: Session, interview_id: str, teacher_id: str) -> CleanupResult:
	"""Delete an interview and every transcript recorded against its code.

	A missing interview is not an error: any transcripts still pointing at the
	code are treated as orphans and removed anyway, so repeating the call is safe.
	Raises InterviewOwnershipError when the interview belongs to another teacher.
	"""
	interview = db.get(Interview, interview_id)
	if interview is not None and interview.teacher_id != teacher_id:
		raise InterviewOwnershipError("Permission denied. You do not own this interview.")

	res = db.execute(delete(InterviewTranscript).where(InterviewTranscript.interview_code == interview_id))
	transcripts_deleted = res.rowcount or 0
	if interview is not None:
		db.delete(interview)
	db.commit()

	if interview is None:
		logger.info("Interview %s already gone; removed %d orphan transcripts", interview_id, transcripts_deleted)
	else:
		logger.info("Deleted interview %s and %d transcripts for teacher %s", interview_id, transcripts_deleted, teacher_id)
	return CleanupResult(interview_deleted=interview is not None, transcripts_deleted=transcripts_deleted)


def purge_stale_transcripts(db: Session, retention_days: int) -> int:
	if retention_days <= 0:
		return 0
	threshold = datetime.utcnow() - timedelta(days=retention_days)
	res = db.execute(delete(InterviewTranscript).where(InterviewTranscript.updated_at < threshold))
	db.commit()
	removed = res.rowcount or 0
	if removed:
		logger.info("Purged %d transcripts older than %d days", removed, retention_days)
	return removed
